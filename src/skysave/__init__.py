"""
Sky Save Suite: read and edit Pokémon Mystery Dungeon: Explorers of Sky saves.

    from skysave import open_save

    sky = open_save("game.sav")
    sky.set_stored(0, "level", 50)
    sky.save("game.sav")
"""

from .errors import (
    SaveError, InvalidSizeError, InvalidChecksumError, SaveIoError,
    EncodingError, InvalidCharacterError, InvalidLengthError,
)
from .formats import (
    StoredMove, ActiveMove, StoredCreature, ActiveCreature,
    EncodedChar, EncodedString,
    decode_char, encode_char, decode_string, encode_string, truncate_for_display,
)
from .save_editor import SaveBlock, SaveState, GeneralData, SkySave, open_save, from_bytes, save
from .utils.binary import BitRangeError

__version__ = "1.0.0"

SAVE_EXTENSIONS = (".sav", ".dsv")

__all__ = [
    'open_save', 'from_bytes', 'save',
    'SkySave', 'SaveBlock', 'SaveState', 'GeneralData',
    'StoredMove', 'ActiveMove', 'StoredCreature', 'ActiveCreature',
    'EncodedChar', 'EncodedString',
    'decode_char', 'encode_char', 'decode_string', 'encode_string', 'truncate_for_display',
    'SaveError', 'InvalidSizeError', 'InvalidChecksumError', 'SaveIoError',
    'EncodingError', 'InvalidCharacterError', 'InvalidLengthError', 'BitRangeError',
    'SAVE_EXTENSIONS',
]
