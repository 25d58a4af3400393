"""
Tests for settings loading from defaults, environment and config.yaml.
"""

import os
from pathlib import Path

import pytest

from src.logshelf.config import (
    Settings,
    StorageSettings,
    get_settings,
    load_config_file,
    reload_settings,
)

MIB = 1024 * 1024


ENV_VARS = (
    "PORT",
    "LOGSHELF_PORT",
    "LOGSHELF_HOST",
    "LOGSHELF_DEBUG",
    "LOGSHELF_LOG_LEVEL",
    "LOGSHELF_CORS_ORIGINS",
    "LOGSHELF_STORAGE_ROOT_PATH",
    "LOGSHELF_STORAGE_QUOTA_BYTES",
    "LOGSHELF_STORAGE_MIN_FREE_BYTES",
    "LOGSHELF_STORAGE_LOG_EXTENSION",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield
    # config.yaml loading writes os.environ directly
    for var in ENV_VARS:
        os.environ.pop(var, None)
    get_settings.cache_clear()


class TestDefaults:
    """Test built-in defaults."""

    def test_storage_defaults(self) -> None:
        storage = StorageSettings()

        assert storage.quota_bytes == 500 * MIB
        assert storage.min_free_bytes == 10 * MIB
        assert storage.log_extension == ".txt"
        assert storage.root_path == Path("./storage/client-logs")

    def test_server_defaults(self) -> None:
        settings = Settings()

        assert settings.port == 3000
        assert settings.cors_origins == ["*"]


class TestEnvironment:
    """Test environment variable overrides."""

    def test_plain_port_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "8081")
        assert Settings().port == 8081

    def test_prefixed_port_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOGSHELF_PORT", "9090")
        assert Settings().port == 9090

    def test_storage_variables(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("LOGSHELF_STORAGE_ROOT_PATH", str(tmp_path))
        monkeypatch.setenv("LOGSHELF_STORAGE_QUOTA_BYTES", str(20 * MIB))
        monkeypatch.setenv("LOGSHELF_STORAGE_LOG_EXTENSION", "log")

        storage = Settings().storage

        assert storage.root_path == tmp_path
        assert storage.quota_bytes == 20 * MIB
        assert storage.log_extension == ".log"

    def test_invalid_extension_rejected(self) -> None:
        with pytest.raises(ValueError):
            StorageSettings(log_extension="../txt")


class TestConfigFile:
    """Test config.yaml defaults."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_config_file(str(tmp_path / "absent.yaml")) == {}

    def test_config_file_values_used(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "server:\n"
            "  port: 4000\n"
            "storage:\n"
            f"  root_path: {tmp_path / 'logs'}\n"
            "  min_free_bytes: 1024\n"
        )
        monkeypatch.chdir(tmp_path)

        settings = reload_settings()

        assert settings.port == 4000
        assert settings.storage.root_path == tmp_path / "logs"
        assert settings.storage.min_free_bytes == 1024

    def test_environment_beats_config_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("server:\n  port: 4000\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LOGSHELF_PORT", "5000")

        assert reload_settings().port == 5000
