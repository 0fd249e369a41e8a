"""Configuration management via .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from readtrack.tracker.storage import STORAGE_KEY


def _xdg_data_home() -> Path:
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def _env_int(name: str, default: int) -> int:
    try:
        value = int(os.getenv(name, ""))
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass
class AppConfig:
    # Paths
    data_dir: Path = field(default_factory=lambda: _xdg_data_home() / "readtrack")
    config_dir: Path = field(default_factory=lambda: _xdg_config_home() / "readtrack")
    db_path: Path = field(init=False)

    # Storage
    storage_key: str = STORAGE_KEY

    # Dashboard
    recent_sessions_limit: int = 6

    log_level: str = "DEBUG"
    log_path: Path = field(init=False)

    def __post_init__(self) -> None:
        self.db_path = self.data_dir / "readtrack.db"
        self.log_path = self.data_dir / "readtrack.log"
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)


def load_config(env_path: Optional[Path] = None) -> AppConfig:
    """Load config from .env file. Searches CWD then config dir."""
    search_paths = [
        env_path,
        Path.cwd() / ".env",
        _xdg_config_home() / "readtrack" / ".env",
        Path.home() / ".env",
    ]
    for p in search_paths:
        if p and p.exists():
            load_dotenv(p)
            break

    defaults = AppConfig()
    return AppConfig(
        storage_key=os.getenv("READTRACK_STORAGE_KEY", defaults.storage_key),
        recent_sessions_limit=_env_int(
            "READTRACK_RECENT_SESSIONS", defaults.recent_sessions_limit
        ),
        log_level=os.getenv("READTRACK_LOG_LEVEL", defaults.log_level).upper(),
    )
