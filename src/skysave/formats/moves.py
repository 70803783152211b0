"""Move slots embedded in creature records."""

from dataclasses import dataclass

from ..utils.binary import load_bit, load_uint_le, store_bit, store_uint_le
from .base import BitRecord, register_record
from .offsets import ActiveMoveLayout, StoredMoveLayout


@register_record("stored_move")
@dataclass
class StoredMove(BitRecord):
    """One of the four moves of a stored creature (21 bits)."""
    BIT_LEN = StoredMoveLayout.BIT_LEN

    valid: bool = False
    linked: bool = False
    switched: bool = False
    set: bool = False
    id: int = 0
    power_boost: int = 0

    def read(self, bits):
        self.valid = load_bit(bits, StoredMoveLayout.VALID)
        self.linked = load_bit(bits, StoredMoveLayout.LINKED)
        self.switched = load_bit(bits, StoredMoveLayout.SWITCHED)
        self.set = load_bit(bits, StoredMoveLayout.SET)
        self.id = load_uint_le(bits, StoredMoveLayout.ID)
        self.power_boost = load_uint_le(bits, StoredMoveLayout.POWER_BOOST)

    def write(self, bits):
        store_bit(bits, StoredMoveLayout.VALID, self.valid)
        store_bit(bits, StoredMoveLayout.LINKED, self.linked)
        store_bit(bits, StoredMoveLayout.SWITCHED, self.switched)
        store_bit(bits, StoredMoveLayout.SET, self.set)
        store_uint_le(bits, StoredMoveLayout.ID, self.id)
        store_uint_le(bits, StoredMoveLayout.POWER_BOOST, self.power_boost)


@register_record("active_move")
@dataclass
class ActiveMove(BitRecord):
    """One of the four moves of a party member (29 bits), with PP and seal state."""
    BIT_LEN = ActiveMoveLayout.BIT_LEN

    valid: bool = False
    linked: bool = False
    switched: bool = False
    set: bool = False
    sealed: bool = False
    id: int = 0
    pp: int = 0
    power_boost: int = 0

    def read(self, bits):
        self.valid = load_bit(bits, ActiveMoveLayout.VALID)
        self.linked = load_bit(bits, ActiveMoveLayout.LINKED)
        self.switched = load_bit(bits, ActiveMoveLayout.SWITCHED)
        self.set = load_bit(bits, ActiveMoveLayout.SET)
        self.sealed = load_bit(bits, ActiveMoveLayout.SEALED)
        self.id = load_uint_le(bits, ActiveMoveLayout.ID)
        self.pp = load_uint_le(bits, ActiveMoveLayout.PP)
        self.power_boost = load_uint_le(bits, ActiveMoveLayout.POWER_BOOST)

    def write(self, bits):
        store_bit(bits, ActiveMoveLayout.VALID, self.valid)
        store_bit(bits, ActiveMoveLayout.LINKED, self.linked)
        store_bit(bits, ActiveMoveLayout.SWITCHED, self.switched)
        store_bit(bits, ActiveMoveLayout.SET, self.set)
        store_bit(bits, ActiveMoveLayout.SEALED, self.sealed)
        store_uint_le(bits, ActiveMoveLayout.ID, self.id)
        store_uint_le(bits, ActiveMoveLayout.PP, self.pp)
        store_uint_le(bits, ActiveMoveLayout.POWER_BOOST, self.power_boost)
