"""
Explorers of Sky text encoding.

Save file strings (team name, creature nicknames) use one byte per character
in a custom character set: mostly ASCII and Latin-1, a few Windows-1252
symbols, and bytes without a printable glyph. Those are shown as bracketed
escapes such as ``[END]`` (0x00), ``[$7E]`` or ``[er]``. ``[`` itself is not
a game character, so a bracket always starts an escape.

Example: the display text ``Abcd[END]`` encodes to ``41 62 63 64 00``.

Each name occupies a 10-byte slot. The game stops drawing at the first zero
byte but the whole slot is kept.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Tuple, Union

from ..errors import InvalidCharacterError, InvalidLengthError

MAX_STRING_LEN = 10

# Bytes 0x80-0x9F. Everything from 0xA1 up is Latin-1 apart from the
# overrides in _HIGH_OVERRIDES.
_WINDOWS_BLOCK = (
    "€", "[$81]", "[$82]", "[$83]", "[$84]", "…", "†", "[$87]",
    "ˆ", "‰", "Š", "‹", "Œ", "[e]", "Ž", "[è]",
    "•", "‘", "’", "“", "”", "•", "[er]", "[re]",
    "~", "™", "š", "›", "œ", "•", "ž", "Ÿ",
)

_HIGH_OVERRIDES = {
    0xA0: " ",
    0xB7: "„",
    0xB8: "‚",
    0xBC: "←",
    0xBD: "♂",
    0xBE: "♀",
}

_ASCII_ESCAPES = (0x5B, 0x7E, 0x7F)


def _build_display_table() -> Tuple[str, ...]:
    table = []
    for byte in range(256):
        if byte == 0x00:
            display = "[END]"
        elif byte < 0x20 or byte in _ASCII_ESCAPES:
            display = f"[${byte:02X}]"
        elif byte < 0x80:
            display = chr(byte)
        elif byte < 0xA0:
            display = _WINDOWS_BLOCK[byte - 0x80]
        else:
            display = _HIGH_OVERRIDES.get(byte, chr(byte))
        table.append(display)
    return tuple(table)


# The forward table: total over all 256 bytes.
DISPLAY_TABLE: Tuple[str, ...] = _build_display_table()

# Display forms shared by more than one byte, and the byte each one encodes
# back to. This is the only place that decides the reverse direction for
# duplicates; the other bytes stay reachable only by decoding.
CANONICAL_DUPLICATES: Dict[str, int] = {
    "•": 0x9D,  # also 0x90, 0x95
    " ": 0x20,  # also 0xA0
}


def _build_reverse_table() -> Dict[str, int]:
    reverse: Dict[str, int] = {}
    for byte, display in enumerate(DISPLAY_TABLE):
        if display in CANONICAL_DUPLICATES:
            reverse[display] = CANONICAL_DUPLICATES[display]
        else:
            reverse[display] = byte
    return reverse


DISPLAY_TO_BYTE: Dict[str, int] = _build_reverse_table()


# ============================================================================
# Characters
# ============================================================================

@dataclass(frozen=True)
class EncodedChar:
    """One game character: the on-disk byte and its display form."""
    byte: int
    display: str

    @property
    def is_escape(self) -> bool:
        return self.display.startswith("[")

    @property
    def glyph(self) -> str:
        """Single-character rendering; escapes fall back to the raw code point."""
        return chr(self.byte) if self.is_escape else self.display

    @classmethod
    def from_byte(cls, byte: int) -> 'EncodedChar':
        return cls(byte, decode_char(byte))


def decode_char(byte: int) -> str:
    """Display form of a game byte. Total over 0-255."""
    return DISPLAY_TABLE[byte & 0xFF]


def encode_char(display: str) -> int:
    """Game byte for a single display character or bracketed escape."""
    try:
        return DISPLAY_TO_BYTE[display]
    except KeyError:
        raise InvalidCharacterError(display) from None


# ============================================================================
# Strings
# ============================================================================

class EncodedString:
    """
    Up to 10 game characters.

    ``to_bytes()`` gives exactly the encoded characters; ``to_save_bytes()``
    pads with zeros to the 10-byte slot used on disk.
    """

    __slots__ = ("_chars",)

    def __init__(self, chars: Iterable[EncodedChar] = ()):
        chars = tuple(chars)
        if len(chars) > MAX_STRING_LEN:
            raise InvalidLengthError(len(chars), MAX_STRING_LEN)
        self._chars: Tuple[EncodedChar, ...] = chars

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, Iterable[int]]) -> 'EncodedString':
        return decode_string(data)

    @classmethod
    def from_text(cls, text: str) -> 'EncodedString':
        return encode_string(text)

    @property
    def chars(self) -> Tuple[EncodedChar, ...]:
        return self._chars

    def to_bytes(self) -> bytes:
        return bytes(c.byte for c in self._chars)

    def to_save_bytes(self) -> bytes:
        return self.to_bytes().ljust(MAX_STRING_LEN, b"\x00")

    def to_sequence(self) -> str:
        """Display form of every character, zero bytes included."""
        return "".join(c.display for c in self._chars)

    def until_nul(self) -> str:
        return truncate_for_display(self)

    def __len__(self) -> int:
        return len(self._chars)

    def __iter__(self) -> Iterator[EncodedChar]:
        return iter(self._chars)

    def __getitem__(self, index):
        return self._chars[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, EncodedString):
            return self.to_bytes() == other.to_bytes()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __str__(self) -> str:
        return "".join(c.glyph for c in self._chars)

    def __repr__(self) -> str:
        return f"EncodedString({self.to_sequence()!r})"


def decode_string(data: Union[bytes, bytearray, Iterable[int]]) -> EncodedString:
    """Decode a name slot, one character per byte, trailing zeros kept."""
    data = bytes(data)
    if len(data) > MAX_STRING_LEN:
        raise InvalidLengthError(len(data), MAX_STRING_LEN)
    return EncodedString(EncodedChar.from_byte(b) for b in data)


def _tokenize(text: str) -> Iterator[str]:
    i = 0
    while i < len(text):
        if text[i] == "[":
            close = text.find("]", i + 1)
            if close == -1:
                raise InvalidCharacterError(text[i:])
            yield text[i:close + 1]
            i = close + 1
        else:
            yield text[i]
            i += 1


def encode_string(text: str) -> EncodedString:
    """
    Parse display text into game characters.

    A ``[`` starts an escape that runs to the next ``]``; anything else is
    one code point. Producing more than 10 characters raises
    InvalidLengthError. The result is not padded.
    """
    tokens = list(_tokenize(text))
    if len(tokens) > MAX_STRING_LEN:
        raise InvalidLengthError(len(tokens), MAX_STRING_LEN)
    chars = []
    for token in tokens:
        byte = encode_char(token)
        chars.append(EncodedChar(byte, DISPLAY_TABLE[byte]))
    return EncodedString(chars)


def truncate_for_display(encoded: EncodedString) -> str:
    """Text up to the first zero byte, the way the game draws it."""
    out = []
    for c in encoded:
        if c.byte == 0:
            break
        out.append(c.glyph)
    return "".join(out)


__all__ = [
    "MAX_STRING_LEN", "DISPLAY_TABLE", "DISPLAY_TO_BYTE", "CANONICAL_DUPLICATES",
    "EncodedChar", "EncodedString",
    "decode_char", "encode_char", "decode_string", "encode_string", "truncate_for_display",
]
