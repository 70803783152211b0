"""
Sky Save Suite - editor state tests

Exercises the open/write lifecycle and event flow without a display.
"""

import logging

import pytest

from conftest import build_container
from skysave.config import load_config
from skysave.gui.events import EventBus, Events
from skysave.config import EditorConfig
from skysave.gui.state import AppState, StateLogHandler, install_log_handler


@pytest.fixture
def state():
    return AppState()


@pytest.fixture
def received():
    seen = []
    for name in (Events.SAVE_OPENED, Events.SAVE_WRITTEN, Events.SAVE_FAILED,
                 Events.SAVE_MODIFIED, Events.STATUS_UPDATE):
        EventBus.subscribe(name, lambda data, name=name: seen.append((name, data)))
    return seen


def event_names(received):
    return [name for name, _ in received]


def test_open_publishes_opened(state, received, save_file):
    assert state.open_save(save_file)
    assert state.current_path == save_file
    assert event_names(received) == [Events.SAVE_OPENED, Events.STATUS_UPDATE]
    assert received[0][1] is state.current_save
    assert "primary block" in received[1][1]


def test_open_remembers_recent_file(state, save_file):
    state.open_save(save_file)
    assert load_config().recent_files == [str(save_file)]


def test_failed_open_keeps_current_save(state, received, save_file, tmp_path):
    state.open_save(save_file)
    current = state.current_save
    received.clear()

    bad = tmp_path / "short.sav"
    bad.write_bytes(bytes(64))
    assert not state.open_save(bad)
    assert state.current_save is current
    assert event_names(received) == [Events.SAVE_FAILED, Events.STATUS_UPDATE]
    assert "128KiB" in received[0][1]


def test_write_without_save(state, received):
    assert not state.write_save()
    assert received == [(Events.STATUS_UPDATE, "No save loaded")]


def test_write_round_trip(state, received, save_file):
    state.open_save(save_file)
    state.current_save.set_stored(2, "level", 42)
    state.mark_modified()
    received.clear()

    assert state.write_save()
    assert event_names(received) == [Events.SAVE_WRITTEN, Events.STATUS_UPDATE]
    assert save_file.with_name("game.sav.bak").exists()
    assert state.open_save(save_file)
    assert state.current_save.get_stored(2).level == 42


def test_write_as_updates_path(state, save_file, tmp_path):
    state.config.make_backup = False
    state.open_save(save_file)
    target = tmp_path / "copy.sav"
    assert state.write_save(target)
    assert state.current_path == target
    assert target.read_bytes() == save_file.read_bytes()
    assert not target.with_name("copy.sav.bak").exists()


def test_failed_write_publishes_failure(state, received, save_file, tmp_path):
    state.open_save(save_file)
    received.clear()
    assert not state.write_save(tmp_path / "missing" / "out.sav")
    assert event_names(received) == [Events.SAVE_FAILED, Events.STATUS_UPDATE]
    assert state.current_path == save_file


def test_mark_modified_sends_save(state, received):
    from skysave import from_bytes
    state.current_save = from_bytes(build_container())
    state.mark_modified()
    assert received == [(Events.SAVE_MODIFIED, state.current_save)]


def test_broken_subscriber_does_not_block_others(received, caplog):
    def broken(_):
        raise RuntimeError("boom")

    EventBus.subscribe(Events.STATUS_UPDATE, broken)
    EventBus.publish(Events.STATUS_UPDATE, "hello")
    assert received == [(Events.STATUS_UPDATE, "hello")]
    assert "EventBus error" in caplog.text


def test_unsubscribe_and_clear(received):
    EventBus.unsubscribe(Events.STATUS_UPDATE, lambda _: None)
    EventBus.publish(Events.STATUS_UPDATE, "kept")
    assert received == [(Events.STATUS_UPDATE, "kept")]
    received.clear()
    EventBus.clear()
    EventBus.publish(Events.STATUS_UPDATE, "ignored")
    assert received == []


def test_log_handler_mirrors_records(state):
    log = logging.getLogger("skysave.test")
    handler = StateLogHandler(state)
    log.addHandler(handler)
    try:
        log.warning("checksum mismatch")
    finally:
        log.removeHandler(handler)
    assert state.logs[-1]["level"] == "WARNING"
    assert state.logs[-1]["message"] == "checksum mismatch"


def test_clear(state, save_file):
    state.open_save(save_file)
    state.clear()
    assert state.current_save is None and state.current_path is None


def test_installed_handler_uses_configured_level(save_file):
    state = AppState(config=EditorConfig(log_level="INFO"))
    package_logger = logging.getLogger("skysave")
    previous = package_logger.level
    handler = install_log_handler(state)
    try:
        state.open_save(save_file)
        logging.getLogger("skysave.test").debug("not mirrored")
    finally:
        package_logger.removeHandler(handler)
        package_logger.setLevel(previous)
    messages = [entry["message"] for entry in state.logs]
    assert any(m.startswith("Loaded save") for m in messages)
    assert "not mirrored" not in messages
