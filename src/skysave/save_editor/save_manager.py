"""
Save model for Pokémon Mystery Dungeon: Explorers of Sky.

Provides the high-level API for reading and editing a save:
- Team metadata (name, money, adventure count, explorer rank)
- The stored roster (720 recruited creatures)
- The active party (4 creatures)

Edits go into the typed views and are serialized on save. Serialization
writes every catalogued field at the active block's offsets, mirrors the
active block onto the inactive one and recomputes all checksums.
"""

import logging
import shutil
import struct
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import SaveIoError
from ..formats.active import ActiveCreature
from ..formats.base import BitRecord
from ..formats.stored import StoredCreature
from ..formats.offsets import ActiveLayout, GeneralLayout, IQ_MAP_LEN, StoredLayout
from ..formats.text import EncodedString, decode_string, encode_string
from ..utils.binary import copy_bits, extract_bits, load_uint_le, store_uint_le
from .container import (
    SaveBlock, block_bits, block_slice, check_size, fix_checksums,
    mirror_active_block, select_active_block, verify_checksums,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

RESERVED_4_BYTES = (len(ActiveLayout.RESERVED_4) + 7) // 8


# ============================================================================
# Data Classes for Save Data
# ============================================================================

@dataclass
class GeneralData:
    """Team-wide values from the active block."""
    team_name: EncodedString = field(default_factory=EncodedString)
    held_money: int = 0
    sp_episode_held_money: int = 0
    stored_money: int = 0
    number_of_adventures: int = 0
    explorer_rank: int = 0

    @classmethod
    def load(cls, data: bytearray, block: SaveBlock) -> 'GeneralData':
        return cls(
            team_name=decode_string(block_slice(data, block, GeneralLayout.TEAM_NAME)),
            held_money=load_uint_le(data, block_bits(block, GeneralLayout.HELD_MONEY_BITS)),
            sp_episode_held_money=load_uint_le(
                data, block_bits(block, GeneralLayout.SP_EPISODE_HELD_MONEY_BITS)),
            stored_money=load_uint_le(data, block_bits(block, GeneralLayout.STORED_MONEY_BITS)),
            number_of_adventures=struct.unpack(
                '<i', block_slice(data, block, GeneralLayout.NUMBER_OF_ADVENTURES))[0],
            explorer_rank=struct.unpack(
                '<I', block_slice(data, block, GeneralLayout.EXPLORER_RANK))[0],
        )

    def save(self, buf: bytearray, block: SaveBlock):
        name = block.bytes_at(GeneralLayout.TEAM_NAME)
        buf[name.start:name.stop] = self.team_name.to_save_bytes()
        store_uint_le(buf, block_bits(block, GeneralLayout.HELD_MONEY_BITS), self.held_money)
        store_uint_le(buf, block_bits(block, GeneralLayout.SP_EPISODE_HELD_MONEY_BITS),
                      self.sp_episode_held_money)
        store_uint_le(buf, block_bits(block, GeneralLayout.STORED_MONEY_BITS), self.stored_money)
        adventures = block.bytes_at(GeneralLayout.NUMBER_OF_ADVENTURES)
        buf[adventures.start:adventures.stop] = struct.pack(
            '<I', int(self.number_of_adventures) & 0xFFFFFFFF)
        rank = block.bytes_at(GeneralLayout.EXPLORER_RANK)
        buf[rank.start:rank.stop] = struct.pack('<I', int(self.explorer_rank) & 0xFFFFFFFF)


class SaveState(Enum):
    """Lifecycle of a loaded save."""
    LOADED = "loaded"
    MUTATED = "mutated"


def _record_bits(array_bits: range, bit_len: int, index: int) -> range:
    start = array_bits.start + index * bit_len
    return range(start, start + bit_len)


def _editable_fields(record) -> List[str]:
    return [f.name for f in fields(record) if f.name not in ('raw', 'moves')]


def _as_encoded(value: Union[str, EncodedString]) -> EncodedString:
    if isinstance(value, EncodedString):
        return value
    return encode_string(value)


def _coerce(record, field_name: str, value: Any) -> Any:
    """Validate ``field_name`` for ``record`` and convert ``value`` to its stored type."""
    if field_name not in _editable_fields(record):
        raise AttributeError(f"{type(record).__name__} has no editable field {field_name!r}")
    if field_name == 'name':
        return _as_encoded(value)
    if field_name == 'iq_map':
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"IQ map must be a sequence of {IQ_MAP_LEN} flags, got {value!r}")
        flags = [bool(v) for v in value]
        if len(flags) != IQ_MAP_LEN:
            raise ValueError(f"IQ map needs {IQ_MAP_LEN} flags, got {len(flags)}")
        return flags
    if field_name == 'reserved_4':
        if not isinstance(value, (bytes, bytearray)) or len(value) != RESERVED_4_BYTES:
            raise ValueError(f"reserved_4 must be exactly {RESERVED_4_BYTES} bytes, got {value!r}")
        return bytes(value)
    current = getattr(record, field_name)
    if isinstance(current, bool):
        return bool(value)
    return _as_int(field_name, value)


def _as_int(field_name: str, value: Any) -> int:
    try:
        return int(value)
    except TypeError:
        raise ValueError(f"{field_name} needs an integer, got {value!r}") from None


def _check_index(index: int, count: int, kind: str) -> int:
    if not 0 <= index < count:
        raise IndexError(f"{kind} index {index} out of range 0..{count - 1}")
    return index


def _coerce_general(field_name: str, value: Any) -> Any:
    if field_name not in [f.name for f in fields(GeneralData)]:
        raise AttributeError(f"GeneralData has no field {field_name!r}")
    if field_name == 'team_name':
        return _as_encoded(value)
    return _as_int(field_name, value)


# ============================================================================
# Save Model
# ============================================================================

class SkySave:
    """
    An Explorers of Sky save held in memory.

    Build one with ``SkySave.open(path)`` or ``SkySave.from_bytes(data)``.
    The model owns its byte buffer; nothing is written back until
    ``to_bytes()`` or ``save()``.
    """

    def __init__(self, data: bytearray, active_block: SaveBlock, quicksave_valid: bool,
                 general: GeneralData, stored: List[StoredCreature], active: List[ActiveCreature],
                 path: Optional[Path] = None):
        self.data = data
        self.active_block = active_block
        self.quicksave_valid = quicksave_valid
        self.general = general
        self.stored = stored
        self.active = active
        self.path = path
        self.state = SaveState.LOADED

    # ------------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------------

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview],
                   path: Optional[PathLike] = None) -> 'SkySave':
        """Parse a save from memory. The buffer is copied."""
        buf = bytearray(data)
        check_size(buf)
        report = verify_checksums(buf)
        block = select_active_block(report)
        if not report.quicksave_valid:
            logger.info("Quicksave checksum mismatch (stored %s, computed %s)",
                        report.quicksave_stored.hex(), report.quicksave_computed.hex())

        general = GeneralData.load(buf, block)
        stored = [
            StoredCreature.from_bits(extract_bits(
                buf, block_bits(block, _record_bits(StoredLayout.ARRAY_BITS, StoredLayout.BIT_LEN, i))))
            for i in range(StoredLayout.COUNT)
        ]
        active = [
            ActiveCreature.from_bits(extract_bits(
                buf, block_bits(block, _record_bits(ActiveLayout.ARRAY_BITS, ActiveLayout.BIT_LEN, i))))
            for i in range(ActiveLayout.COUNT)
        ]
        logger.info("Loaded save (%s block active, quicksave %s)",
                    block.name.lower(), "valid" if report.quicksave_valid else "invalid")
        return cls(buf, block, report.quicksave_valid, general, stored, active,
                   Path(path) if path is not None else None)

    @classmethod
    def open(cls, path: PathLike) -> 'SkySave':
        """Read and parse a save file."""
        path = Path(path)
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise SaveIoError(path, e) from e
        logger.debug("Read %d bytes from %s", len(data), path)
        return cls.from_bytes(data, path)

    # ------------------------------------------------------------------------
    # Getters
    # ------------------------------------------------------------------------

    def get_stored(self, index: int) -> StoredCreature:
        return self.stored[_check_index(index, StoredLayout.COUNT, "stored")]

    def get_active(self, index: int) -> ActiveCreature:
        return self.active[_check_index(index, ActiveLayout.COUNT, "active")]

    @property
    def team_name(self) -> EncodedString:
        return self.general.team_name

    @property
    def is_dirty(self) -> bool:
        return self.state is SaveState.MUTATED

    # ------------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------------

    def _mark_mutated(self):
        self.state = SaveState.MUTATED

    def set_team_name(self, text: Union[str, EncodedString]):
        self.general.team_name = _as_encoded(text)
        self._mark_mutated()

    def set_general(self, field_name: str, value: Any):
        """Set one of the general fields by name."""
        setattr(self.general, field_name, _coerce_general(field_name, value))
        self._mark_mutated()

    def _set_record(self, record: BitRecord, field_name: str, value: Any):
        setattr(record, field_name, _coerce(record, field_name, value))
        self._mark_mutated()

    def set_stored(self, index: int, field_name: str, value: Any):
        self._set_record(self.get_stored(index), field_name, value)

    def set_active(self, index: int, field_name: str, value: Any):
        self._set_record(self.get_active(index), field_name, value)

    def set_stored_move(self, index: int, slot: int, field_name: str, value: Any):
        record = self.get_stored(index)
        move = record.moves[_check_index(slot, len(record.moves), "move slot")]
        self._set_record(move, field_name, value)

    def set_active_move(self, index: int, slot: int, field_name: str, value: Any):
        record = self.get_active(index)
        move = record.moves[_check_index(slot, len(record.moves), "move slot")]
        self._set_record(move, field_name, value)

    def _set_iq_skill(self, record: BitRecord, skill: int, enabled: bool):
        if not 0 <= skill < IQ_MAP_LEN:
            raise IndexError(f"IQ skill index {skill} out of range 0..{IQ_MAP_LEN - 1}")
        record.iq_map[skill] = bool(enabled)
        self._mark_mutated()

    def set_stored_iq_skill(self, index: int, skill: int, enabled: bool):
        self._set_iq_skill(self.get_stored(index), skill, enabled)

    def set_active_iq_skill(self, index: int, skill: int, enabled: bool):
        self._set_iq_skill(self.get_active(index), skill, enabled)

    def set_stored_name(self, index: int, text: Union[str, EncodedString]):
        self.set_stored(index, 'name', text)

    def set_active_name(self, index: int, text: Union[str, EncodedString]):
        self.set_active(index, 'name', text)

    # ------------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------------

    def _write_into(self, buf: bytearray):
        block = self.active_block
        self.general.save(buf, block)
        for i, creature in enumerate(self.stored):
            copy_bits(buf, block_bits(block, _record_bits(StoredLayout.ARRAY_BITS, StoredLayout.BIT_LEN, i)),
                      creature.to_bits(), range(0, StoredLayout.BIT_LEN))
        for i, creature in enumerate(self.active):
            copy_bits(buf, block_bits(block, _record_bits(ActiveLayout.ARRAY_BITS, ActiveLayout.BIT_LEN, i)),
                      creature.to_bits(), range(0, ActiveLayout.BIT_LEN))
        mirror_active_block(buf, block)
        fix_checksums(buf)

    def to_bytes(self) -> bytes:
        """Serialize the whole container without touching the model."""
        buf = bytearray(self.data)
        self._write_into(buf)
        return bytes(buf)

    def save(self, path: Optional[PathLike] = None, backup: bool = False):
        """
        Serialize and write the save.

        Writes to ``path`` or, when omitted, to the file the save was opened
        from. With ``backup`` an existing target is first copied to
        ``<name>.bak``. The model adopts the written bytes only after the
        write succeeds.
        """
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("No target path: save was not opened from a file")

        data = self.to_bytes()

        if backup and target.exists():
            backup_path = target.with_name(target.name + '.bak')
            try:
                shutil.copy2(target, backup_path)
            except OSError as e:
                raise SaveIoError(backup_path, e) from e
            logger.info("Backup saved to %s", backup_path)

        try:
            with open(target, 'wb') as f:
                f.write(data)
        except OSError as e:
            raise SaveIoError(target, e) from e

        self.data = bytearray(data)
        for record in (*self.stored, *self.active):
            record.raw = record.to_bits()
        self.path = target
        self.state = SaveState.LOADED
        logger.info("Saved %s", target)

    def fix_checksums(self):
        """Recompute the three checksums in the model's own buffer."""
        fix_checksums(self.data)

    # ------------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------------

    def summary(self) -> Dict[str, Any]:
        return {
            'path': str(self.path) if self.path else None,
            'active_block': self.active_block.name.lower(),
            'quicksave_valid': self.quicksave_valid,
            'dirty': self.is_dirty,
            'team_name': self.general.team_name.until_nul(),
            'held_money': self.general.held_money,
            'sp_episode_held_money': self.general.sp_episode_held_money,
            'stored_money': self.general.stored_money,
            'number_of_adventures': self.general.number_of_adventures,
            'explorer_rank': self.general.explorer_rank,
            'stored_count': sum(1 for c in self.stored if c.valid),
            'active_count': sum(1 for c in self.active if c.valid),
        }


# ============================================================================
# Module-level API
# ============================================================================

def open_save(path: PathLike) -> SkySave:
    return SkySave.open(path)


def from_bytes(data: Union[bytes, bytearray, memoryview]) -> SkySave:
    return SkySave.from_bytes(data)


def save(model: SkySave, path: PathLike, backup: bool = False):
    model.save(path, backup=backup)
