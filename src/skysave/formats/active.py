"""
Active creatures: the four party members.

Each record is 546 bits and starts one bit into byte 0x83D9 of the block.
Besides the stored-roster fields it carries current HP, a roster number,
per-move PP and seal flags, and several ranges whose meaning is unknown.
The unknown ranges are kept as opaque values and written back as read.
"""

from dataclasses import dataclass, field
from typing import List

from ..utils.binary import (
    bits_to_bools, bools_to_bits, copy_bits, extract_bits,
    load_bit, load_uint_le, store_bit, store_uint_le,
)
from .base import BitRecord, register_record
from .moves import ActiveMove
from .offsets import ActiveLayout, ActiveMoveLayout, IQ_MAP_LEN, NAME_BYTES
from .text import EncodedString, decode_string

NAME_SLOT_BITS = range(0, NAME_BYTES * 8)
MOVE_SLOT_BITS = range(0, ActiveMoveLayout.BIT_LEN)
RESERVED_4_BITS = range(0, len(ActiveLayout.RESERVED_4))


def _blank_moves() -> List[ActiveMove]:
    return [ActiveMove() for _ in ActiveLayout.MOVES]


def _blank_reserved_4() -> bytes:
    return bytes((len(ActiveLayout.RESERVED_4) + 7) // 8)


@register_record("active")
@dataclass
class ActiveCreature(BitRecord):
    """A party member (546 bits)."""
    BIT_LEN = ActiveLayout.BIT_LEN

    valid: bool = False
    reserved_1: int = 0
    level: int = 0
    met_at: int = 0
    met_floor: int = 0
    reserved_2: bool = False
    iq: int = 0
    roster_number: int = 0
    reserved_3: int = 0
    id: int = 0
    current_hp: int = 0
    max_hp: int = 0
    attack: int = 0
    sp_attack: int = 0
    defense: int = 0
    sp_defense: int = 0
    exp: int = 0
    moves: List[ActiveMove] = field(default_factory=_blank_moves)
    # 105 bits, LSB-aligned
    reserved_4: bytes = field(default_factory=_blank_reserved_4)
    iq_map: List[bool] = field(default_factory=lambda: [False] * IQ_MAP_LEN)
    tactic: int = 0
    reserved_5: int = 0
    name: EncodedString = field(default_factory=EncodedString)

    def read(self, bits):
        self.valid = load_bit(bits, ActiveLayout.VALID)
        self.reserved_1 = load_uint_le(bits, ActiveLayout.RESERVED_1)
        self.level = load_uint_le(bits, ActiveLayout.LEVEL)
        self.met_at = load_uint_le(bits, ActiveLayout.MET_AT)
        self.met_floor = load_uint_le(bits, ActiveLayout.MET_FLOOR)
        self.reserved_2 = load_bit(bits, ActiveLayout.RESERVED_2)
        self.iq = load_uint_le(bits, ActiveLayout.IQ)
        self.roster_number = load_uint_le(bits, ActiveLayout.ROSTER_NUMBER)
        self.reserved_3 = load_uint_le(bits, ActiveLayout.RESERVED_3)
        self.id = load_uint_le(bits, ActiveLayout.ID)
        self.current_hp = load_uint_le(bits, ActiveLayout.CURRENT_HP)
        self.max_hp = load_uint_le(bits, ActiveLayout.MAX_HP)
        self.attack = load_uint_le(bits, ActiveLayout.ATTACK)
        self.sp_attack = load_uint_le(bits, ActiveLayout.SP_ATTACK)
        self.defense = load_uint_le(bits, ActiveLayout.DEFENSE)
        self.sp_defense = load_uint_le(bits, ActiveLayout.SP_DEFENSE)
        self.exp = load_uint_le(bits, ActiveLayout.EXP)
        self.moves = [ActiveMove.from_bits(extract_bits(bits, r)) for r in ActiveLayout.MOVES]
        self.reserved_4 = bytes(extract_bits(bits, ActiveLayout.RESERVED_4))
        self.iq_map = bits_to_bools(bits, ActiveLayout.IQ_MAP)
        self.tactic = load_uint_le(bits, ActiveLayout.TACTIC)
        self.reserved_5 = load_uint_le(bits, ActiveLayout.RESERVED_5)
        self.name = decode_string(extract_bits(bits, ActiveLayout.NAME))

    def write(self, bits):
        store_bit(bits, ActiveLayout.VALID, self.valid)
        store_uint_le(bits, ActiveLayout.RESERVED_1, self.reserved_1)
        store_uint_le(bits, ActiveLayout.LEVEL, self.level)
        store_uint_le(bits, ActiveLayout.MET_AT, self.met_at)
        store_uint_le(bits, ActiveLayout.MET_FLOOR, self.met_floor)
        store_bit(bits, ActiveLayout.RESERVED_2, self.reserved_2)
        store_uint_le(bits, ActiveLayout.IQ, self.iq)
        store_uint_le(bits, ActiveLayout.ROSTER_NUMBER, self.roster_number)
        store_uint_le(bits, ActiveLayout.RESERVED_3, self.reserved_3)
        store_uint_le(bits, ActiveLayout.ID, self.id)
        store_uint_le(bits, ActiveLayout.CURRENT_HP, self.current_hp)
        store_uint_le(bits, ActiveLayout.MAX_HP, self.max_hp)
        store_uint_le(bits, ActiveLayout.ATTACK, self.attack)
        store_uint_le(bits, ActiveLayout.SP_ATTACK, self.sp_attack)
        store_uint_le(bits, ActiveLayout.DEFENSE, self.defense)
        store_uint_le(bits, ActiveLayout.SP_DEFENSE, self.sp_defense)
        store_uint_le(bits, ActiveLayout.EXP, self.exp)
        for slot, move in zip(ActiveLayout.MOVES, self.moves):
            copy_bits(bits, slot, move.to_bits(), MOVE_SLOT_BITS)
        copy_bits(bits, ActiveLayout.RESERVED_4, self.reserved_4, RESERVED_4_BITS)
        bools_to_bits(bits, ActiveLayout.IQ_MAP, self.iq_map)
        store_uint_le(bits, ActiveLayout.TACTIC, self.tactic)
        store_uint_le(bits, ActiveLayout.RESERVED_5, self.reserved_5)
        copy_bits(bits, ActiveLayout.NAME, self.name.to_save_bytes(), NAME_SLOT_BITS)
