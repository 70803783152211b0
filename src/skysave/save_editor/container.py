"""
Container-level handling of the 128 KiB save file.

The file holds two mirrored save blocks (primary and backup) and a quicksave
block. Each block starts with a 4-byte checksum of the rest of the block:

- Read the payload as little-endian unsigned 32-bit words, front to back.
- Sum them, keep the low 32 bits.
- Store the result little-endian in the block's first four bytes.

Loading picks the primary block when its checksum matches, otherwise the
backup. Saving mirrors the active block onto the other one and refreshes
all three checksums.
"""

import logging
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..errors import InvalidChecksumError, InvalidSizeError
from ..formats.offsets import SaveLayout

logger = logging.getLogger(__name__)

ByteSource = Union[bytes, bytearray, memoryview]


class SaveBlock(Enum):
    """The authoritative save block. The value is the block's start offset."""
    PRIMARY = SaveLayout.PRIMARY.start
    BACKUP = SaveLayout.BACKUP.start

    @property
    def byte_range(self) -> range:
        return SaveLayout.PRIMARY if self is SaveBlock.PRIMARY else SaveLayout.BACKUP

    @property
    def other(self) -> 'SaveBlock':
        return SaveBlock.BACKUP if self is SaveBlock.PRIMARY else SaveBlock.PRIMARY

    def bytes_at(self, byte_range: range) -> range:
        """Shift a block-relative byte range to an absolute one."""
        return range(byte_range.start + self.value, byte_range.stop + self.value)

    def bits_at(self, bit_range: range) -> range:
        """Shift a block-relative bit range to an absolute one."""
        return range(bit_range.start + self.value * 8, bit_range.stop + self.value * 8)


def block_slice(data: ByteSource, block: SaveBlock, byte_range: range) -> bytes:
    """Bytes at a block-relative range."""
    r = block.bytes_at(byte_range)
    return bytes(data[r.start:r.stop])


def block_bits(block: SaveBlock, bit_range: range) -> range:
    return block.bits_at(bit_range)


def checksum(data: ByteSource, data_range: range) -> bytes:
    """
    Fold ``data_range`` into a 4-byte little-endian checksum.

    A trailing partial word (1-3 bytes) is ignored.
    """
    end = data_range.start + (len(data_range) // 4) * 4
    total = sum(word for (word,) in struct.iter_unpack('<I', bytes(data[data_range.start:end])))
    return struct.pack('<I', total & 0xFFFFFFFF)


def _stored(data: ByteSource, slot: range) -> bytes:
    return bytes(data[slot.start:slot.stop])


@dataclass(frozen=True)
class ChecksumReport:
    """Stored and computed checksums for all three blocks."""
    primary_stored: bytes
    primary_computed: bytes
    backup_stored: bytes
    backup_computed: bytes
    quicksave_stored: bytes
    quicksave_computed: bytes

    @property
    def primary_valid(self) -> bool:
        return self.primary_stored == self.primary_computed

    @property
    def backup_valid(self) -> bool:
        return self.backup_stored == self.backup_computed

    @property
    def quicksave_valid(self) -> bool:
        return self.quicksave_stored == self.quicksave_computed


def check_size(data: ByteSource):
    if len(data) < SaveLayout.MIN_SAVE_LEN:
        raise InvalidSizeError(len(data), SaveLayout.MIN_SAVE_LEN)


def verify_checksums(data: ByteSource) -> ChecksumReport:
    """Read and recompute the checksum of every block."""
    check_size(data)
    return ChecksumReport(
        primary_stored=_stored(data, SaveLayout.PRIMARY_STORED_CHECKSUM),
        primary_computed=checksum(data, SaveLayout.PRIMARY_PAYLOAD),
        backup_stored=_stored(data, SaveLayout.BACKUP_STORED_CHECKSUM),
        backup_computed=checksum(data, SaveLayout.BACKUP_PAYLOAD),
        quicksave_stored=_stored(data, SaveLayout.QUICKSAVE_STORED_CHECKSUM),
        quicksave_computed=checksum(data, SaveLayout.QUICKSAVE_PAYLOAD),
    )


def select_active_block(report: ChecksumReport) -> SaveBlock:
    """Primary when it verifies, else backup; neither is an error."""
    if report.primary_valid:
        return SaveBlock.PRIMARY
    if report.backup_valid:
        logger.warning(
            "Primary block checksum mismatch (stored %s, computed %s); using backup block",
            report.primary_stored.hex(), report.primary_computed.hex(),
        )
        return SaveBlock.BACKUP
    raise InvalidChecksumError(
        primary_expected=report.primary_stored,
        primary_found=report.primary_computed,
        backup_expected=report.backup_stored,
        backup_found=report.backup_computed,
    )


def fix_checksums(buf: bytearray):
    """Recompute all three checksums and write them to their slots."""
    for slot, payload in (
        (SaveLayout.PRIMARY_STORED_CHECKSUM, SaveLayout.PRIMARY_PAYLOAD),
        (SaveLayout.BACKUP_STORED_CHECKSUM, SaveLayout.BACKUP_PAYLOAD),
        (SaveLayout.QUICKSAVE_STORED_CHECKSUM, SaveLayout.QUICKSAVE_PAYLOAD),
    ):
        buf[slot.start:slot.stop] = checksum(buf, payload)


def mirror_active_block(buf: bytearray, active: SaveBlock):
    """Copy the whole active block over the inactive one."""
    src = active.byte_range
    dst = active.other.byte_range
    buf[dst.start:dst.start + len(src)] = buf[src.start:src.stop]
    logger.debug("Mirrored %s block onto %s block", active.name, active.other.name)
