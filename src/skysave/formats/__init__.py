"""Record and text codecs for the Explorers of Sky save format."""
from .base import BitRecord, register_record, get_record_class, RECORD_TYPES
from .moves import StoredMove, ActiveMove
from .stored import StoredCreature
from .active import ActiveCreature
from .text import (
    EncodedChar, EncodedString,
    decode_char, encode_char, decode_string, encode_string, truncate_for_display,
)

__all__ = [
    'BitRecord', 'register_record', 'get_record_class', 'RECORD_TYPES',
    'StoredMove', 'ActiveMove', 'StoredCreature', 'ActiveCreature',
    'EncodedChar', 'EncodedString',
    'decode_char', 'encode_char', 'decode_string', 'encode_string', 'truncate_for_display',
]
