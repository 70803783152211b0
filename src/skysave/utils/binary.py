"""Bit-level I/O utilities for packed save records.

Bits are numbered LSB-first: bit 0 is the least-significant bit of byte 0,
bit 8 the least-significant bit of byte 1, and so on. All ranges are plain
half-open ``range`` objects with a step of 1.
"""

from typing import List, Sequence, Union

ByteSource = Union[bytes, bytearray, memoryview]

MAX_UINT_BITS = 64


class BitRangeError(ValueError):
    """A bit range is malformed, too wide, or outside the buffer."""


def _check_range(buf: ByteSource, bit_range: range, max_bits: int = 0) -> None:
    if bit_range.step != 1:
        raise BitRangeError(f"Bit range must be contiguous, got step {bit_range.step}")
    if bit_range.start < 0 or bit_range.stop < bit_range.start:
        raise BitRangeError(f"Malformed bit range {bit_range.start}..{bit_range.stop}")
    if bit_range.stop > len(buf) * 8:
        raise BitRangeError(
            f"Bit range {bit_range.start}..{bit_range.stop} exceeds buffer of {len(buf) * 8} bits"
        )
    if max_bits and len(bit_range) > max_bits:
        raise BitRangeError(f"Bit range of {len(bit_range)} bits exceeds {max_bits}-bit limit")


def _check_writable(buf) -> None:
    if not isinstance(buf, (bytearray, memoryview)) or (isinstance(buf, memoryview) and buf.readonly):
        raise BitRangeError(f"Destination buffer must be writable, got {type(buf).__name__}")


def _load(buf: ByteSource, bit_range: range) -> int:
    """Read an arbitrary-width little-endian field."""
    width = len(bit_range)
    if width == 0:
        return 0
    first = bit_range.start // 8
    last = (bit_range.stop + 7) // 8
    chunk = int.from_bytes(bytes(buf[first:last]), 'little')
    return (chunk >> (bit_range.start % 8)) & ((1 << width) - 1)


def _store(buf, bit_range: range, value: int) -> None:
    """Write an arbitrary-width little-endian field, keeping neighbouring bits."""
    width = len(bit_range)
    if width == 0:
        return
    first = bit_range.start // 8
    last = (bit_range.stop + 7) // 8
    shift = bit_range.start % 8
    mask = ((1 << width) - 1) << shift
    chunk = int.from_bytes(bytes(buf[first:last]), 'little')
    chunk = (chunk & ~mask) | ((value << shift) & mask)
    buf[first:last] = chunk.to_bytes(last - first, 'little')


# ============================================================================
# Field access
# ============================================================================

def load_uint_le(buf: ByteSource, bit_range: range) -> int:
    """Read an unsigned integer of at most 64 bits."""
    _check_range(buf, bit_range, MAX_UINT_BITS)
    return _load(buf, bit_range)


def store_uint_le(buf: bytearray, bit_range: range, value: int) -> None:
    """
    Write an unsigned integer of at most 64 bits.

    Narrower values are zero-extended. Values wider than the range keep
    only their low ``len(bit_range)`` bits.
    """
    _check_range(buf, bit_range, MAX_UINT_BITS)
    _check_writable(buf)
    _store(buf, bit_range, int(value))


def load_bit(buf: ByteSource, bit_index: int) -> bool:
    """Read a single bit."""
    _check_range(buf, range(bit_index, bit_index + 1))
    return bool((buf[bit_index // 8] >> (bit_index % 8)) & 1)


def store_bit(buf: bytearray, bit_index: int, flag: bool) -> None:
    """Write a single bit."""
    _check_range(buf, range(bit_index, bit_index + 1))
    _check_writable(buf)
    if flag:
        buf[bit_index // 8] |= 1 << (bit_index % 8)
    else:
        buf[bit_index // 8] &= ~(1 << (bit_index % 8)) & 0xFF


# ============================================================================
# Slices
# ============================================================================

def copy_bits(dst: bytearray, dst_range: range, src: ByteSource, src_range: range) -> None:
    """Copy a bit slice from ``src`` into ``dst``. Both ranges must be the same length."""
    if len(dst_range) != len(src_range):
        raise BitRangeError(
            f"Bit slice lengths differ: destination {len(dst_range)}, source {len(src_range)}"
        )
    _check_range(src, src_range)
    _check_range(dst, dst_range)
    _check_writable(dst)
    _store(dst, dst_range, _load(src, src_range))


def extract_bits(buf: ByteSource, bit_range: range) -> bytearray:
    """Return a new buffer holding ``bit_range`` realigned to bit 0."""
    _check_range(buf, bit_range)
    out = bytearray((len(bit_range) + 7) // 8)
    _store(out, range(0, len(bit_range)), _load(buf, bit_range))
    return out


def bits_to_bools(buf: ByteSource, bit_range: range) -> List[bool]:
    """Unpack a bitmap into a list of flags, one per bit."""
    _check_range(buf, bit_range)
    value = _load(buf, bit_range)
    return [bool((value >> i) & 1) for i in range(len(bit_range))]


def bools_to_bits(buf: bytearray, bit_range: range, flags: Sequence[bool]) -> None:
    """Pack a list of flags into a bitmap. The list length must match the range."""
    if len(flags) != len(bit_range):
        raise BitRangeError(f"Expected {len(bit_range)} flags, got {len(flags)}")
    _check_range(buf, bit_range)
    _check_writable(buf)
    value = 0
    for i, flag in enumerate(flags):
        if flag:
            value |= 1 << i
    _store(buf, bit_range, value)
