"""
Sky Save Suite - container tests

Checksums, block selection, size limits and mirroring.
"""

import struct

import pytest

from conftest import build_container, corrupt
from skysave import InvalidChecksumError, InvalidSizeError, SaveBlock, from_bytes
from skysave.formats.offsets import SaveLayout
from skysave.save_editor.container import (
    block_bits, block_slice, checksum, fix_checksums, mirror_active_block,
    select_active_block, verify_checksums,
)


# ═══════════════════════════════════════════════════════════════════════════════
# CHECKSUM
# ═══════════════════════════════════════════════════════════════════════════════

def test_checksum_sums_words():
    data = struct.pack("<3I", 1, 2, 0x10)
    assert checksum(data, range(0, 12)) == struct.pack("<I", 0x13)


def test_checksum_wraps_to_32_bits():
    data = b"\xff" * 16
    assert checksum(data, range(0, 16)) == struct.pack("<I", 0xFFFFFFFC)


def test_checksum_ignores_trailing_partial_word():
    data = struct.pack("<2I", 1, 2) + b"\xff\xff\xff"
    assert checksum(data, range(0, 11)) == struct.pack("<I", 3)


def test_checksum_respects_range_start():
    data = b"\xee\xee" + struct.pack("<I", 7)
    assert checksum(data, range(2, 6)) == struct.pack("<I", 7)


def test_fix_checksums_writes_all_slots(container):
    for offset in (0x10, 0xC810, 0x19010):
        corrupt(container, offset)
    report = verify_checksums(container)
    assert not (report.primary_valid or report.backup_valid or report.quicksave_valid)
    fix_checksums(container)
    report = verify_checksums(container)
    assert report.primary_valid and report.backup_valid and report.quicksave_valid


# ═══════════════════════════════════════════════════════════════════════════════
# BLOCK SELECTION
# ═══════════════════════════════════════════════════════════════════════════════

def test_valid_primary_is_selected(container):
    assert select_active_block(verify_checksums(container)) is SaveBlock.PRIMARY


def test_bad_primary_falls_back_to_backup(container):
    corrupt(container, 0x100)
    assert select_active_block(verify_checksums(container)) is SaveBlock.BACKUP


def test_both_blocks_bad_reports_both_pairs(container):
    corrupt(container, 0x100)
    corrupt(container, 0xC900)
    report = verify_checksums(container)
    with pytest.raises(InvalidChecksumError) as exc:
        select_active_block(report)
    err = exc.value
    assert err.primary_expected == bytes(container[0:4])
    assert err.primary_found == report.primary_computed
    assert err.backup_expected == bytes(container[0xC800:0xC804])
    assert err.backup_found == report.backup_computed
    assert len(err.primary_found) == 4


def test_corrupted_stored_checksum_counts_as_mismatch(container):
    corrupt(container, 0)
    assert select_active_block(verify_checksums(container)) is SaveBlock.BACKUP


# ═══════════════════════════════════════════════════════════════════════════════
# SIZE
# ═══════════════════════════════════════════════════════════════════════════════

def test_exact_minimum_size_loads():
    sky = from_bytes(build_container(size=0x20000))
    assert sky.active_block is SaveBlock.PRIMARY


def test_one_byte_short_fails():
    data = build_container()[:0x1FFFF]
    with pytest.raises(InvalidSizeError) as exc:
        from_bytes(data)
    assert exc.value.size == 0x1FFFF


def test_empty_input_fails():
    with pytest.raises(InvalidSizeError):
        from_bytes(b"")


def test_oversized_container_keeps_tail():
    data = build_container(size=0x20010)
    out = from_bytes(data).to_bytes()
    assert len(out) == 0x20010
    assert out[0x20000:] == data[0x20000:]


# ═══════════════════════════════════════════════════════════════════════════════
# MIRRORING / HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def test_mirror_copies_whole_block():
    data = build_container(mirrored=False)
    mirror_active_block(data, SaveBlock.BACKUP)
    assert data[SaveLayout.PRIMARY.start:SaveLayout.PRIMARY.stop] == \
        data[SaveLayout.BACKUP.start:SaveLayout.BACKUP.stop]


def test_block_offsets(container):
    assert block_slice(container, SaveBlock.BACKUP, range(4, 8)) == bytes(container[0xC804:0xC808])
    assert block_bits(SaveBlock.BACKUP, range(1, 3)) == range(0xC800 * 8 + 1, 0xC800 * 8 + 3)
    assert SaveBlock.PRIMARY.other is SaveBlock.BACKUP
