"""Tests for configuration management."""

import json

from taskseal.config import Config, ConfigManager, get_config_manager


def test_default_config():
    """Test default configuration."""
    config = Config()
    assert config.encryption.fail_closed is False
    assert config.encryption.cache_derived_keys is False
    assert config.storage.db_path is None
    assert config.logging.level == "INFO"


def test_config_save_load(isolated_dirs):
    """Test saving and loading configuration."""
    manager = ConfigManager(profile="test")
    manager.set("encryption.fail_closed", True)

    reloaded = ConfigManager(profile="test")
    assert reloaded.config.encryption.fail_closed is True
    assert json.loads((isolated_dirs / "test.json").read_text())["encryption"][
        "fail_closed"
    ] is True


def test_get_dot_key():
    manager = ConfigManager()
    assert manager.get("logging.level") == "INFO"
    assert manager.get("logging.level.nope") is None


def test_reset_single_key():
    manager = ConfigManager()
    manager.set("logging.level", "DEBUG")
    manager.reset("logging.level")
    assert manager.config.logging.level == "INFO"


def test_corrupt_config_falls_back_to_defaults(isolated_dirs):
    (isolated_dirs / "broken.json").write_text("{not json")
    manager = ConfigManager(profile="broken")
    assert manager.config == Config()


def test_db_path_defaults_to_data_dir(isolated_dirs):
    manager = ConfigManager()
    assert manager.db_path == isolated_dirs / "tasks.db"


def test_db_path_from_config(isolated_dirs):
    manager = ConfigManager()
    manager.set("storage.db_path", str(isolated_dirs / "custom.db"))
    assert manager.db_path == isolated_dirs / "custom.db"


def test_get_config_manager_is_cached_per_profile():
    assert get_config_manager() is get_config_manager()
    assert get_config_manager("other").profile == "other"
