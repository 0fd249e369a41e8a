"""Tests for configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from readtrack.config import AppConfig, load_config

_ENV_VARS = (
    "READTRACK_STORAGE_KEY",
    "READTRACK_RECENT_SESSIONS",
    "READTRACK_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        # setenv first so values loaded from .env files are undone afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.chdir(tmp_path)


class TestAppConfig:
    def test_defaults(self, tmp_path: Path):
        config = AppConfig(data_dir=tmp_path / "data", config_dir=tmp_path / "config")
        assert config.storage_key == "reading-tracker-state-v1"
        assert config.recent_sessions_limit == 6
        assert config.log_level == "DEBUG"
        assert config.db_path == tmp_path / "data" / "readtrack.db"
        assert config.log_path == tmp_path / "data" / "readtrack.log"

    def test_dirs_created(self, tmp_path: Path):
        data = tmp_path / "data"
        conf = tmp_path / "config"
        AppConfig(data_dir=data, config_dir=conf)
        assert data.exists()
        assert conf.exists()

    def test_xdg_default_dirs(self, tmp_path: Path):
        config = AppConfig()
        assert config.data_dir == tmp_path / "xdg-data" / "readtrack"
        assert config.config_dir == tmp_path / "xdg-config" / "readtrack"


class TestLoadConfig:
    def test_load_from_env_file(self, tmp_path: Path):
        env_file = tmp_path / "custom.env"
        env_file.write_text(
            "READTRACK_STORAGE_KEY=my-state\n"
            "READTRACK_RECENT_SESSIONS=10\n"
            "READTRACK_LOG_LEVEL=info\n"
        )
        config = load_config(env_path=env_file)
        assert config.storage_key == "my-state"
        assert config.recent_sessions_limit == 10
        assert config.log_level == "INFO"

    def test_defaults_without_env(self, tmp_path: Path):
        config = load_config(env_path=tmp_path / "missing.env")
        assert config.storage_key == "reading-tracker-state-v1"
        assert config.recent_sessions_limit == 6

    @pytest.mark.parametrize("value", ["abc", "0", "-2"])
    def test_invalid_recent_sessions(self, tmp_path: Path, value: str):
        env_file = tmp_path / "custom.env"
        env_file.write_text(f"READTRACK_RECENT_SESSIONS={value}\n")
        config = load_config(env_path=env_file)
        assert config.recent_sessions_limit == 6
