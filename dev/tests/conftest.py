"""
Sky Save Suite - shared test fixtures

Synthetic save containers: random payloads with valid checksums, so every
test runs without a real game file.
"""

import random
import sys
from pathlib import Path

import pytest

# Path setup for running from a source checkout
TESTS_DIR = Path(__file__).parent
SUITE_DIR = TESTS_DIR.parent.parent
SRC_DIR = SUITE_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from skysave.formats.offsets import SaveLayout  # noqa: E402
from skysave.gui.events import EventBus  # noqa: E402
from skysave.save_editor.container import fix_checksums  # noqa: E402


def build_container(seed: int = 1, size: int = SaveLayout.MIN_SAVE_LEN, mirrored: bool = True) -> bytearray:
    """
    Random container with all three checksums valid.

    With ``mirrored`` the backup block is a copy of the primary block, as it
    is in a save the game itself wrote.
    """
    rng = random.Random(seed)
    data = bytearray(rng.getrandbits(8) for _ in range(size))
    if mirrored:
        src = SaveLayout.PRIMARY
        dst = SaveLayout.BACKUP
        data[dst.start:dst.stop] = data[src.start:src.stop]
    fix_checksums(data)
    return data


def corrupt(data: bytearray, offset: int):
    data[offset] ^= 0x01


@pytest.fixture
def container() -> bytearray:
    return build_container()


@pytest.fixture
def make_container():
    return build_container


@pytest.fixture
def save_file(tmp_path, container) -> Path:
    path = tmp_path / "game.sav"
    path.write_bytes(bytes(container))
    return path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the user's real config file."""
    path = tmp_path / "config" / "config.json"
    monkeypatch.setenv("SKYSAVE_CONFIG", str(path))
    return path


@pytest.fixture(autouse=True)
def clean_event_bus():
    EventBus.clear()
    yield
    EventBus.clear()
