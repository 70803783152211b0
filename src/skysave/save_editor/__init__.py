"""Container codec and the editable save model."""
from .container import (
    SaveBlock, ChecksumReport, checksum, verify_checksums, select_active_block,
    fix_checksums, mirror_active_block, block_slice, block_bits,
)
from .save_manager import GeneralData, SaveState, SkySave, open_save, from_bytes, save

__all__ = [
    'SaveBlock', 'ChecksumReport', 'checksum', 'verify_checksums', 'select_active_block',
    'fix_checksums', 'mirror_active_block', 'block_slice', 'block_bits',
    'GeneralData', 'SaveState', 'SkySave', 'open_save', 'from_bytes', 'save',
]
