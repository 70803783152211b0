"""
Stored creatures: the recruited roster kept at the team base.

720 records of 362 bits each, packed back to back. A record holds the data
that matters outside dungeons (level, stats, moves, IQ skills and nickname).
"""

from dataclasses import dataclass, field
from typing import List

from ..utils.binary import (
    bits_to_bools, bools_to_bits, copy_bits, extract_bits,
    load_bit, load_uint_le, store_bit, store_uint_le,
)
from .base import BitRecord, register_record
from .moves import StoredMove
from .offsets import IQ_MAP_LEN, NAME_BYTES, StoredLayout, StoredMoveLayout
from .text import EncodedString, decode_string

NAME_SLOT_BITS = range(0, NAME_BYTES * 8)
MOVE_SLOT_BITS = range(0, StoredMoveLayout.BIT_LEN)


def _blank_moves() -> List[StoredMove]:
    return [StoredMove() for _ in StoredLayout.MOVES]


@register_record("stored")
@dataclass
class StoredCreature(BitRecord):
    """A recruited creature in storage (362 bits)."""
    BIT_LEN = StoredLayout.BIT_LEN

    valid: bool = False
    level: int = 0
    id: int = 0
    met_at: int = 0
    met_floor: int = 0
    reserved: bool = False
    evolved_at_1: int = 0
    evolved_at_2: int = 0
    iq: int = 0
    hp: int = 0
    attack: int = 0
    sp_attack: int = 0
    defense: int = 0
    sp_defense: int = 0
    exp: int = 0
    iq_map: List[bool] = field(default_factory=lambda: [False] * IQ_MAP_LEN)
    tactic: int = 0
    moves: List[StoredMove] = field(default_factory=_blank_moves)
    name: EncodedString = field(default_factory=EncodedString)

    def read(self, bits):
        self.valid = load_bit(bits, StoredLayout.VALID)
        self.level = load_uint_le(bits, StoredLayout.LEVEL)
        self.id = load_uint_le(bits, StoredLayout.ID)
        self.met_at = load_uint_le(bits, StoredLayout.MET_AT)
        self.met_floor = load_uint_le(bits, StoredLayout.MET_FLOOR)
        self.reserved = load_bit(bits, StoredLayout.RESERVED)
        self.evolved_at_1 = load_uint_le(bits, StoredLayout.EVOLVED_AT_1)
        self.evolved_at_2 = load_uint_le(bits, StoredLayout.EVOLVED_AT_2)
        self.iq = load_uint_le(bits, StoredLayout.IQ)
        self.hp = load_uint_le(bits, StoredLayout.HP)
        self.attack = load_uint_le(bits, StoredLayout.ATTACK)
        self.sp_attack = load_uint_le(bits, StoredLayout.SP_ATTACK)
        self.defense = load_uint_le(bits, StoredLayout.DEFENSE)
        self.sp_defense = load_uint_le(bits, StoredLayout.SP_DEFENSE)
        self.exp = load_uint_le(bits, StoredLayout.EXP)
        self.iq_map = bits_to_bools(bits, StoredLayout.IQ_MAP)
        self.tactic = load_uint_le(bits, StoredLayout.TACTIC)
        self.moves = [StoredMove.from_bits(extract_bits(bits, r)) for r in StoredLayout.MOVES]
        self.name = decode_string(extract_bits(bits, StoredLayout.NAME))

    def write(self, bits):
        store_bit(bits, StoredLayout.VALID, self.valid)
        store_uint_le(bits, StoredLayout.LEVEL, self.level)
        store_uint_le(bits, StoredLayout.ID, self.id)
        store_uint_le(bits, StoredLayout.MET_AT, self.met_at)
        store_uint_le(bits, StoredLayout.MET_FLOOR, self.met_floor)
        store_bit(bits, StoredLayout.RESERVED, self.reserved)
        store_uint_le(bits, StoredLayout.EVOLVED_AT_1, self.evolved_at_1)
        store_uint_le(bits, StoredLayout.EVOLVED_AT_2, self.evolved_at_2)
        store_uint_le(bits, StoredLayout.IQ, self.iq)
        store_uint_le(bits, StoredLayout.HP, self.hp)
        store_uint_le(bits, StoredLayout.ATTACK, self.attack)
        store_uint_le(bits, StoredLayout.SP_ATTACK, self.sp_attack)
        store_uint_le(bits, StoredLayout.DEFENSE, self.defense)
        store_uint_le(bits, StoredLayout.SP_DEFENSE, self.sp_defense)
        store_uint_le(bits, StoredLayout.EXP, self.exp)
        bools_to_bits(bits, StoredLayout.IQ_MAP, self.iq_map)
        store_uint_le(bits, StoredLayout.TACTIC, self.tactic)
        for slot, move in zip(StoredLayout.MOVES, self.moves):
            copy_bits(bits, slot, move.to_bits(), MOVE_SLOT_BITS)
        copy_bits(bits, StoredLayout.NAME, self.name.to_save_bytes(), NAME_SLOT_BITS)
