"""
Sky Save Suite - config persistence tests
"""

import json

from skysave.config import (
    DEFAULT_CONFIG_PATH, MAX_RECENT, EditorConfig, config_path, load_config, save_config,
)


def test_missing_file_gives_defaults(isolated_config):
    assert not isolated_config.exists()
    config = load_config()
    assert config == EditorConfig()
    assert config.make_backup


def test_env_var_selects_path(isolated_config):
    assert config_path() == isolated_config


def test_default_path_without_env(monkeypatch):
    monkeypatch.delenv("SKYSAVE_CONFIG")
    assert config_path() == DEFAULT_CONFIG_PATH


def test_save_then_load(isolated_config):
    config = EditorConfig(make_backup=False, log_level="DEBUG")
    config.add_recent_file("/saves/a.sav")
    save_config(config)
    assert isolated_config.exists()
    assert load_config() == config


def test_unknown_keys_are_ignored(isolated_config):
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text(json.dumps({"make_backup": False, "theme": "dark"}))
    config = load_config()
    assert config.make_backup is False


def test_corrupt_file_falls_back(isolated_config, caplog):
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text("{not json")
    assert load_config() == EditorConfig()
    assert "Could not read config" in caplog.text


def test_non_object_falls_back(isolated_config):
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text("[1, 2]")
    assert load_config() == EditorConfig()


def test_recent_files_dedupe_and_cap():
    config = EditorConfig()
    for i in range(MAX_RECENT + 3):
        config.add_recent_file(f"/saves/{i}.sav")
    config.add_recent_file("/saves/5.sav")
    assert len(config.recent_files) == MAX_RECENT
    assert config.recent_files[0] == "/saves/5.sav"
    assert config.recent_files.count("/saves/5.sav") == 1
    assert config.last_directory == "/saves"


def test_unknown_log_level_falls_back(isolated_config, caplog):
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text(json.dumps({"log_level": "LOUD"}))
    assert load_config().log_level == "WARNING"
    assert "Unknown log level" in caplog.text


def test_log_level_is_normalised():
    assert EditorConfig(log_level="debug").log_level == "DEBUG"
