"""Shared fixtures for tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from readtrack.config import AppConfig
from readtrack.tracker.engine import TrackerEngine
from readtrack.tracker.storage import Database, MemoryStore

TODAY = date(2026, 10, 19)


@pytest.fixture
def db(tmp_path: Path) -> Database:
    db_path = tmp_path / "test.db"
    database = Database(db_path)
    yield database
    database.close()


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def engine(store: MemoryStore) -> TrackerEngine:
    return TrackerEngine(store=store, today=lambda: TODAY)


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        data_dir=tmp_path / "data",
        config_dir=tmp_path / "config",
    )
