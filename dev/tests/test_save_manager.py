"""
Sky Save Suite - save model tests

Load, edit and save cycles against synthetic containers.
"""

import pytest

from conftest import build_container, corrupt
from skysave import (
    InvalidCharacterError, InvalidLengthError, SaveBlock, SaveIoError, SaveState,
    SkySave, from_bytes, open_save, save,
)
from skysave.formats.offsets import SaveLayout, StoredLayout
from skysave.save_editor.container import verify_checksums

PRIMARY = slice(SaveLayout.PRIMARY.start, SaveLayout.PRIMARY.stop)
BACKUP = slice(SaveLayout.BACKUP.start, SaveLayout.BACKUP.stop)


def changed_offsets(a: bytes, b: bytes, region: slice):
    return [i for i in range(region.start, region.stop) if a[i] != b[i]]


# ═══════════════════════════════════════════════════════════════════════════════
# LOAD
# ═══════════════════════════════════════════════════════════════════════════════

def test_load_shapes(container):
    sky = from_bytes(container)
    assert sky.active_block is SaveBlock.PRIMARY
    assert sky.quicksave_valid
    assert len(sky.stored) == 720
    assert len(sky.active) == 4
    assert sky.state is SaveState.LOADED
    assert not sky.is_dirty


def test_from_bytes_copies_input(container):
    sky = from_bytes(container)
    container[0x500] ^= 0xFF
    assert sky.data[0x500] != container[0x500]


def test_invalid_quicksave_still_loads(container):
    corrupt(container, 0x19100)
    sky = from_bytes(container)
    assert sky.active_block is SaveBlock.PRIMARY
    assert not sky.quicksave_valid


def test_open_missing_file_raises_io_error(tmp_path):
    with pytest.raises(SaveIoError) as exc:
        open_save(tmp_path / "missing.sav")
    assert isinstance(exc.value.error, OSError)
    assert isinstance(exc.value.__cause__, OSError)


def test_getters_index_errors(container):
    sky = from_bytes(container)
    assert sky.get_stored(719) is sky.stored[719]
    with pytest.raises(IndexError):
        sky.get_stored(720)
    with pytest.raises(IndexError):
        sky.get_active(4)


# ═══════════════════════════════════════════════════════════════════════════════
# ROUND TRIP
# ═══════════════════════════════════════════════════════════════════════════════

def test_unmodified_round_trip_is_identical(container):
    assert from_bytes(container).to_bytes() == bytes(container)


def test_round_trip_from_backup_mirrors_into_primary():
    data = build_container(mirrored=False)
    corrupt(data, 0x200)
    sky = from_bytes(data)
    assert sky.active_block is SaveBlock.BACKUP

    out = sky.to_bytes()
    assert out[PRIMARY] == data[BACKUP]
    assert out[BACKUP] == data[BACKUP]
    reloaded = from_bytes(out)
    assert reloaded.active_block is SaveBlock.PRIMARY


def test_level_edit_changes_one_byte(container):
    sky = from_bytes(container)
    original_level = sky.get_stored(0).level
    sky.set_stored(0, "level", 50 if original_level != 50 else 51)
    out = sky.to_bytes()

    # Record 0 starts at byte 0x464; level is bits 1-7 of that byte
    assert set(changed_offsets(container, out, PRIMARY)) - {0, 1, 2, 3} == {0x464}
    assert out[0x464] & 0x01 == container[0x464] & 0x01
    assert out[PRIMARY][4:] == out[BACKUP][4:]

    report = verify_checksums(out)
    assert report.primary_valid and report.backup_valid and report.quicksave_valid
    assert from_bytes(out).get_stored(0).level == sky.get_stored(0).level


def test_edits_across_all_views_survive_reload(container):
    sky = from_bytes(container)
    sky.set_team_name("Sky[END]")
    sky.set_general("held_money", 123456)
    sky.set_general("stored_money", 9999999)
    sky.set_general("number_of_adventures", -5)
    sky.set_general("explorer_rank", 4)
    sky.set_stored_name(719, "Riolu")
    sky.set_stored(719, "valid", True)
    sky.set_stored_move(719, 1, "id", 0x1F0)
    sky.set_stored_iq_skill(719, 68, True)
    sky.set_active(3, "roster_number", 719)
    sky.set_active_move(3, 0, "sealed", True)
    sky.set_active_move(3, 0, "pp", 15)
    sky.set_active_iq_skill(3, 0, False)
    sky.set_active_name(3, "Lucario")

    back = from_bytes(sky.to_bytes())
    assert back.general.team_name.to_bytes() == b"Sky" + bytes(7)
    assert back.general.held_money == 123456
    assert back.general.stored_money == 9999999
    assert back.general.number_of_adventures == -5
    assert back.general.explorer_rank == 4
    stored = back.get_stored(719)
    assert stored.name.until_nul() == "Riolu"
    assert stored.valid
    assert stored.moves[1].id == 0x1F0
    assert stored.iq_map[68]
    active = back.get_active(3)
    assert active.roster_number == 719
    assert active.moves[0].sealed
    assert active.moves[0].pp == 15
    assert not active.iq_map[0]
    assert active.name.until_nul() == "Lucario"


def test_wide_value_is_truncated(container):
    sky = from_bytes(container)
    sky.set_general("held_money", (1 << 24) + 1)
    assert from_bytes(sky.to_bytes()).general.held_money == 1


def test_last_stored_record_stays_inside_block():
    end_bit = StoredLayout.ARRAY_BITS.stop
    assert end_bit <= len(SaveLayout.PRIMARY) * 8


# ═══════════════════════════════════════════════════════════════════════════════
# SETTERS
# ═══════════════════════════════════════════════════════════════════════════════

def test_setter_marks_mutated(container):
    sky = from_bytes(container)
    sky.set_stored(0, "iq", 100)
    assert sky.state is SaveState.MUTATED
    assert sky.is_dirty


def test_unknown_field_raises_attribute_error(container):
    sky = from_bytes(container)
    with pytest.raises(AttributeError):
        sky.set_stored(0, "charisma", 1)
    with pytest.raises(AttributeError):
        sky.set_general("gold", 1)
    with pytest.raises(AttributeError):
        sky.set_active_move(0, 0, "sealed_forever", True)
    assert not sky.is_dirty


def test_bad_name_leaves_model_untouched(container):
    sky = from_bytes(container)
    before = sky.get_stored(5).name
    with pytest.raises(InvalidLengthError):
        sky.set_stored_name(5, "Supercalifragilistic")
    with pytest.raises(InvalidCharacterError):
        sky.set_stored_name(5, "字")
    assert sky.get_stored(5).name == before
    assert sky.state is SaveState.LOADED
    assert sky.to_bytes() == bytes(container)


def test_iq_skill_index_checked(container):
    sky = from_bytes(container)
    with pytest.raises(IndexError):
        sky.set_stored_iq_skill(0, 69, True)


def test_reserved_block_rejects_wrong_values(container):
    sky = from_bytes(container)
    before = sky.get_active(0).reserved_4
    for value in (0x1234, b"\x01", "abc", bytes(15)):
        with pytest.raises(ValueError):
            sky.set_active(0, "reserved_4", value)
    assert sky.get_active(0).reserved_4 == before
    assert sky.state is SaveState.LOADED
    assert sky.to_bytes() == bytes(container)


def test_reserved_block_accepts_exact_bytes(container):
    sky = from_bytes(container)
    sky.set_active(0, "reserved_4", bytes(range(14)))
    back = from_bytes(sky.to_bytes()).get_active(0).reserved_4
    assert back[:13] == bytes(range(13))


def test_iq_map_needs_a_sequence(container):
    sky = from_bytes(container)
    with pytest.raises(ValueError):
        sky.set_stored(0, "iq_map", 5)
    with pytest.raises(ValueError):
        sky.set_stored(0, "iq_map", [True] * 68)
    sky.set_stored(0, "iq_map", [False] * 69)
    assert not any(from_bytes(sky.to_bytes()).get_stored(0).iq_map)


def test_non_numeric_value_raises_value_error(container):
    sky = from_bytes(container)
    with pytest.raises(ValueError):
        sky.set_stored(0, "level", None)
    with pytest.raises(ValueError):
        sky.set_general("held_money", [1])
    assert not sky.is_dirty


def test_negative_indices_are_rejected(container):
    sky = from_bytes(container)
    with pytest.raises(IndexError):
        sky.get_stored(-1)
    with pytest.raises(IndexError):
        sky.set_stored(-1, "level", 5)
    with pytest.raises(IndexError):
        sky.set_active(-1, "level", 5)
    with pytest.raises(IndexError):
        sky.set_active_move(0, -1, "pp", 5)
    with pytest.raises(IndexError):
        sky.set_stored_iq_skill(-1, 0, True)
    assert sky.state is SaveState.LOADED
    assert sky.to_bytes() == bytes(container)


def test_moves_are_edited_through_move_setters(container):
    sky = from_bytes(container)
    with pytest.raises(AttributeError):
        sky.set_stored(0, "moves", [])


# ═══════════════════════════════════════════════════════════════════════════════
# SAVE
# ═══════════════════════════════════════════════════════════════════════════════

def test_save_writes_and_returns_to_loaded(save_file, container):
    sky = open_save(save_file)
    sky.set_stored(0, "exp", 1234)
    sky.save()
    assert sky.state is SaveState.LOADED
    assert sky.data == bytearray(save_file.read_bytes())
    assert open_save(save_file).get_stored(0).exp == 1234


def test_save_with_backup_copies_previous_file(save_file, container):
    sky = open_save(save_file)
    sky.set_stored(1, "hp", 42)
    sky.save(backup=True)
    backup = save_file.with_name("game.sav.bak")
    assert backup.read_bytes() == bytes(container)


def test_module_level_save(tmp_path, container):
    sky = from_bytes(container)
    target = tmp_path / "copy.sav"
    save(sky, target)
    assert target.read_bytes() == bytes(container)
    assert sky.path == target


def test_failed_save_keeps_model(tmp_path, container):
    sky = from_bytes(container)
    sky.set_stored(0, "attack", 77)
    before = bytes(sky.data)
    with pytest.raises(SaveIoError):
        sky.save(tmp_path / "no-such-dir" / "game.sav")
    assert bytes(sky.data) == before
    assert sky.state is SaveState.MUTATED
    assert sky.path is None


def test_save_without_path_needs_target(container):
    with pytest.raises(ValueError):
        from_bytes(container).save()


def test_reload_after_save_reflects_mutations(save_file):
    sky = open_save(save_file)
    sky.set_active(0, "level", 33)
    sky.save()
    sky.set_active(1, "level", 34)
    sky.save()
    back = open_save(save_file)
    assert back.get_active(0).level == 33
    assert back.get_active(1).level == 34


def test_fix_checksums_on_model(container):
    sky = from_bytes(container)
    sky.data[0x19004] ^= 0xFF
    sky.fix_checksums()
    assert verify_checksums(sky.data).quicksave_valid


def test_summary(container):
    summary = from_bytes(container).summary()
    assert summary["active_block"] == "primary"
    assert 0 <= summary["stored_count"] <= 720
    assert 0 <= summary["active_count"] <= 4
    assert not summary["dirty"]


def test_open_records_path(save_file):
    sky = SkySave.open(save_file)
    assert sky.path == save_file
