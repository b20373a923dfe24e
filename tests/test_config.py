"""
Tests for configuration loading.
"""
from pathlib import Path

import pytest

from cmdguard.config import AppConfig, ConfigManager
from cmdguard.constants import DEFAULT_KEEP_COUNT, ENV_BACKUP_DIR, ENV_KEEP_COUNT


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv(ENV_BACKUP_DIR, raising=False)
    monkeypatch.delenv(ENV_KEEP_COUNT, raising=False)
    # Keep a stray .env file in the working directory out of the picture
    monkeypatch.setattr("cmdguard.config.load_dotenv", lambda *args, **kwargs: False)


def test_defaults_without_file(tmp_path):
    manager = ConfigManager(tmp_path / "missing.toml")
    manager.load_config()

    assert manager.config == AppConfig()
    assert manager.config.backup.keep_count == DEFAULT_KEEP_COUNT
    assert manager.config.backup.backup_dir is None
    assert not manager.config.backup.verify_on_restore


def test_load_from_toml(tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text(
        'debug = true\n'
        '[backup]\n'
        f'backup_dir = "{tmp_path / "store"}"\n'
        'keep_count = 7\n'
        'auto_cleanup = true\n'
    )

    manager = ConfigManager(config_file)
    manager.load_config()

    assert manager.config.debug is True
    assert manager.config.backup.backup_dir == tmp_path / "store"
    assert manager.config.backup.keep_count == 7
    assert manager.config.backup.auto_cleanup is True


def test_save_then_load(tmp_path):
    config_file = tmp_path / "nested" / "config.toml"
    manager = ConfigManager(config_file)
    manager.config.backup.keep_count = 3
    manager.config.backup.backup_dir = tmp_path / "store"
    manager.save_config()

    reloaded = ConfigManager(config_file)
    reloaded.load_config()

    assert reloaded.config.backup.keep_count == 3
    assert reloaded.config.backup.backup_dir == tmp_path / "store"


@pytest.mark.parametrize("content", ["not = [valid", "[backup]\nkeep_count = -4\n"])
def test_bad_file_falls_back_to_defaults(tmp_path, content):
    config_file = tmp_path / "config.toml"
    config_file.write_text(content)

    manager = ConfigManager(config_file)
    manager.load_config()

    assert manager.config == AppConfig()


def test_wrong_debug_type_is_ignored(tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text('debug = "yes"\n')

    manager = ConfigManager(config_file)
    manager.load_config()

    assert manager.config.debug is False


def test_environment_overrides_file(tmp_path, monkeypatch):
    config_file = tmp_path / "config.toml"
    config_file.write_text('[backup]\nkeep_count = 7\n')
    monkeypatch.setenv(ENV_BACKUP_DIR, str(tmp_path / "env-store"))
    monkeypatch.setenv(ENV_KEEP_COUNT, "12")

    manager = ConfigManager(config_file)
    manager.load_config()

    assert manager.config.backup.backup_dir == Path(tmp_path / "env-store")
    assert manager.config.backup.keep_count == 12


def test_bad_keep_count_override_is_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv(ENV_KEEP_COUNT, "lots")

    manager = ConfigManager(tmp_path / "missing.toml")

    assert manager.config.backup.keep_count == DEFAULT_KEEP_COUNT
