"""Error types raised by the save codec and the text codec."""

from pathlib import Path
from typing import Optional, Union


class SaveError(Exception):
    """Base class for container-level failures."""


class InvalidSizeError(SaveError):
    """The container is smaller than 128 KiB."""

    def __init__(self, size: int, minimum: int = 0x20000):
        self.size = size
        self.minimum = minimum
        super().__init__(f"File size must be at least 128KiB ({minimum} bytes), got {size} bytes.")


class InvalidChecksumError(SaveError):
    """Neither the primary nor the backup block passed checksum verification."""

    def __init__(self, primary_expected: bytes, primary_found: bytes,
                 backup_expected: bytes, backup_found: bytes):
        self.primary_expected = bytes(primary_expected)
        self.primary_found = bytes(primary_found)
        self.backup_expected = bytes(backup_expected)
        self.backup_found = bytes(backup_found)
        super().__init__(
            "Invalid save checksum in neither primary or backup save blocks:\n"
            f"Primary: expected {self.primary_expected.hex(' ')}, found {self.primary_found.hex(' ')}\n"
            f"Backup: expected {self.backup_expected.hex(' ')}, found {self.backup_found.hex(' ')}"
        )


class SaveIoError(SaveError):
    """Reading or writing the save file failed at the OS level."""

    def __init__(self, path: Optional[Union[str, Path]], error: OSError):
        self.path = Path(path) if path is not None else None
        self.error = error
        super().__init__(f"Error accessing save file {self.path}: {error}")


class EncodingError(ValueError):
    """Base class for text codec failures."""


class InvalidCharacterError(EncodingError):
    """A display character or escape sequence has no in-game byte."""

    def __init__(self, sequence: str):
        self.sequence = sequence
        super().__init__(f"Invalid game character: {sequence!r}")


class InvalidLengthError(EncodingError):
    """Encoded text would exceed the 10 character slot."""

    def __init__(self, length: int, limit: int = 10):
        self.length = length
        self.limit = limit
        super().__init__(f"Game strings must not exceed {limit} characters (got {length})")


__all__ = [
    "SaveError", "InvalidSizeError", "InvalidChecksumError", "SaveIoError",
    "EncodingError", "InvalidCharacterError", "InvalidLengthError",
]
