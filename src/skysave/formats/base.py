"""
Packed record base class.

Records are decoded into dataclasses and encoded back on save. Each record
keeps the bits it was parsed from; encoding starts from those bits and
overwrites only the catalogued fields, so anything the catalog does not
describe survives a round trip untouched.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional, Union

from ..utils.binary import BitRangeError, extract_bits

ByteSource = Union[bytes, bytearray, memoryview]


@dataclass
class BitRecord(ABC):
    """
    Base class for all bit-packed records.

    Subclasses set ``BIT_LEN`` and implement ``read``/``write`` against a
    buffer whose bit 0 is the record's first bit.
    """
    BIT_LEN: ClassVar[int] = 0

    raw: Optional[bytearray] = field(default=None, repr=False, compare=False)

    @classmethod
    def byte_len(cls) -> int:
        return (cls.BIT_LEN + 7) // 8

    @classmethod
    def from_bits(cls, bits: ByteSource) -> 'BitRecord':
        """Decode a record from a buffer holding at least ``BIT_LEN`` bits."""
        if len(bits) * 8 < cls.BIT_LEN:
            raise BitRangeError(
                f"{cls.__name__} needs {cls.BIT_LEN} bits, got {len(bits) * 8}"
            )
        record = cls()
        record.raw = extract_bits(bits, range(0, cls.BIT_LEN))
        record.read(record.raw)
        return record

    def to_bits(self) -> bytearray:
        """Encode the record into a fresh ``byte_len()`` buffer."""
        if self.raw is not None:
            bits = bytearray(self.raw)
        else:
            bits = bytearray(self.byte_len())
        self.write(bits)
        return bits

    @abstractmethod
    def read(self, bits: ByteSource):
        """Populate fields from ``bits``."""

    @abstractmethod
    def write(self, bits: bytearray):
        """Store fields into ``bits``, leaving uncatalogued bits alone."""


# Record type registry - maps short names to record classes
RECORD_TYPES: Dict[str, type] = {}


def register_record(type_name: str):
    """Decorator to register a record type."""
    def decorator(cls):
        RECORD_TYPES[type_name] = cls
        return cls
    return decorator


def get_record_class(type_name: str) -> type:
    """Get the record class registered under ``type_name``."""
    try:
        return RECORD_TYPES[type_name]
    except KeyError:
        raise KeyError(f"Unknown record type {type_name!r}; known: {', '.join(sorted(RECORD_TYPES))}") from None
