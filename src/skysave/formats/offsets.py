"""
Field-offset catalog for the Explorers of Sky save file.

Every location the codecs touch is defined here as a half-open ``range``.
Byte ranges are relative to the start of a save block; bit ranges inside a
record are relative to the record's first bit. Add new fields here only.

Reference: Project Pokémon "Explorers of Sky save structure" notes.
"""

from typing import Tuple


def _bits(byte_offset: int, bit_offset: int, width: int) -> range:
    start = byte_offset * 8 + bit_offset
    return range(start, start + width)


# ============================================================================
# Container
# ============================================================================

class SaveLayout:
    """Block boundaries within the 128 KiB container (absolute byte offsets)."""
    MIN_SAVE_LEN = 0x20000

    PRIMARY = range(0x00000, 0x0B65C)
    BACKUP = range(0x0C800, 0x17E5C)
    QUICKSAVE = range(0x19000, 0x1E800)

    CHECKSUM_LEN = 4

    PRIMARY_STORED_CHECKSUM = range(PRIMARY.start, PRIMARY.start + 4)
    PRIMARY_PAYLOAD = range(PRIMARY.start + 4, PRIMARY.stop)

    BACKUP_STORED_CHECKSUM = range(BACKUP.start, BACKUP.start + 4)
    BACKUP_PAYLOAD = range(BACKUP.start + 4, BACKUP.stop)

    QUICKSAVE_STORED_CHECKSUM = range(QUICKSAVE.start, QUICKSAVE.start + 4)
    QUICKSAVE_PAYLOAD = range(QUICKSAVE.start + 4, QUICKSAVE.stop)


# ============================================================================
# General record (byte offsets within the active block)
# ============================================================================

class GeneralLayout:
    TEAM_NAME = range(0x994E, 0x9958)
    HELD_MONEY_BITS = _bits(0x990C, 6, 24)
    SP_EPISODE_HELD_MONEY_BITS = _bits(0x990F, 6, 24)
    STORED_MONEY_BITS = _bits(0x9915, 6, 24)
    NUMBER_OF_ADVENTURES = range(0x8B70, 0x8B74)
    EXPLORER_RANK = range(0x9958, 0x995C)


# ============================================================================
# Stored creatures (the recruited roster)
# ============================================================================

class StoredMoveLayout:
    BIT_LEN = 21

    VALID = 0
    LINKED = 1
    SWITCHED = 2
    SET = 3
    ID = range(4, 14)
    POWER_BOOST = range(14, 21)


class StoredLayout:
    BIT_LEN = 362
    COUNT = 720
    # Bit range of the whole array within the active block.
    ARRAY_BITS = range(0x464 * 8, 0x464 * 8 + BIT_LEN * COUNT)

    VALID = 0
    LEVEL = range(1, 8)
    ID = range(8, 19)
    MET_AT = range(19, 27)
    MET_FLOOR = range(27, 34)
    RESERVED = 34
    EVOLVED_AT_1 = range(35, 42)
    EVOLVED_AT_2 = range(42, 49)
    IQ = range(49, 59)
    HP = range(59, 69)
    ATTACK = range(69, 77)
    SP_ATTACK = range(77, 85)
    DEFENSE = range(85, 93)
    SP_DEFENSE = range(93, 101)
    EXP = range(101, 125)
    IQ_MAP = range(125, 194)
    TACTIC = range(194, 198)
    MOVES: Tuple[range, ...] = (
        range(198, 219),
        range(219, 240),
        range(240, 261),
        range(261, 282),
    )
    NAME = range(282, 362)

    RESERVED_RANGES: Tuple[range, ...] = (range(34, 35),)


# ============================================================================
# Active creatures (the current party)
# ============================================================================

class ActiveMoveLayout:
    BIT_LEN = 29

    VALID = 0
    LINKED = 1
    SWITCHED = 2
    SET = 3
    SEALED = 4
    ID = range(5, 15)
    PP = range(15, 22)
    POWER_BOOST = range(22, 29)


class ActiveLayout:
    BIT_LEN = 546
    COUNT = 4
    ARRAY_BITS = range(0x83D9 * 8 + 1, 0x83D9 * 8 + 1 + BIT_LEN * COUNT)

    VALID = 0
    RESERVED_1 = range(1, 5)
    LEVEL = range(5, 12)
    MET_AT = range(12, 20)
    MET_FLOOR = range(20, 27)
    RESERVED_2 = 27
    IQ = range(28, 38)
    ROSTER_NUMBER = range(38, 48)
    RESERVED_3 = range(48, 70)
    ID = range(70, 81)
    CURRENT_HP = range(81, 91)
    MAX_HP = range(91, 101)
    ATTACK = range(101, 109)
    SP_ATTACK = range(109, 117)
    DEFENSE = range(117, 125)
    SP_DEFENSE = range(125, 133)
    EXP = range(133, 157)
    MOVES: Tuple[range, ...] = (
        range(157, 186),
        range(186, 215),
        range(215, 244),
        range(244, 273),
    )
    RESERVED_4 = range(273, 378)
    IQ_MAP = range(378, 447)
    TACTIC = range(447, 451)
    RESERVED_5 = range(451, 466)
    NAME = range(466, 546)

    RESERVED_RANGES: Tuple[range, ...] = (
        RESERVED_1,
        range(27, 28),
        RESERVED_3,
        RESERVED_4,
        RESERVED_5,
    )


IQ_MAP_LEN = 69
NAME_BYTES = 10
