"""Key-value persistence for the tracker state blob.

The whole ``TrackerState`` is stored as one JSON document under a fixed key,
using the camelCase layout the web client wrote to browser storage.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from readtrack.tracker.models import (
    Book,
    Preferences,
    ReadingSession,
    TrackerState,
    clamp,
)

log = logging.getLogger(__name__)

STORAGE_KEY = "reading-tracker-state-v1"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


class KeyValueStore(ABC):
    """Minimal string key-value store, shaped like browser localStorage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is missing."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``. Missing keys are ignored."""


class MemoryStore(KeyValueStore):
    def __init__(self, items: Optional[dict[str, str]] = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class Database(KeyValueStore):
    """SQLite-backed key-value store."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_schema()

    def _init_schema(self) -> None:
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def get_item(self, key: str) -> Optional[str]:
        row = self._conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
            (key, value),
        )
        self._conn.commit()

    def remove_item(self, key: str) -> None:
        self._conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        self._conn.commit()

    def keys(self) -> list[str]:
        rows = self._conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [r["key"] for r in rows]


# ── Codec ──────────────────────────────────────────────


def sort_sessions(sessions: list[ReadingSession]) -> list[ReadingSession]:
    """Newest date first. Stable, so equal dates keep their relative order."""
    return sorted(
        sessions,
        key=lambda s: s.day.toordinal() if s.day is not None else 0,
        reverse=True,
    )


def book_to_dict(book: Book) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": book.id,
        "title": book.title,
        "author": book.author,
        "totalPages": book.total_pages,
        "currentPage": book.current_page,
        "status": book.status.value,
        "startedAt": book.started_at,
    }
    if book.target_date:
        data["targetDate"] = book.target_date
    if book.notes:
        data["notes"] = book.notes
    return data


def session_to_dict(session: ReadingSession) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": session.id,
        "bookId": session.book_id,
        "date": session.date,
        "pagesRead": session.pages_read,
        "minutes": session.minutes,
    }
    if session.note:
        data["note"] = session.note
    return data


def state_to_dict(state: TrackerState) -> dict[str, Any]:
    prefs = state.preferences
    return {
        "books": [book_to_dict(b) for b in state.books],
        "sessions": [session_to_dict(s) for s in state.sessions],
        "preferences": {
            "weeklyMinutesGoal": prefs.weekly_minutes_goal,
            "dailyPagesGoal": prefs.daily_pages_goal,
            "showCompleted": prefs.show_completed,
        },
    }


def _int_field(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return default


def _optional_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def book_from_dict(data: Any) -> Optional[Book]:
    if not isinstance(data, dict):
        return None
    book_id = data.get("id")
    title = data.get("title")
    total = _int_field(data.get("totalPages"), 0)
    if not isinstance(book_id, str) or not isinstance(title, str) or total <= 0:
        return None
    current = _int_field(data.get("currentPage"), 0)
    started_at = data.get("startedAt")
    return Book(
        id=book_id,
        title=title,
        author=data.get("author") if isinstance(data.get("author"), str) else "",
        total_pages=total,
        current_page=clamp(current, 0, total),
        started_at=started_at if isinstance(started_at, str) else "",
        target_date=_optional_text(data.get("targetDate")),
        notes=_optional_text(data.get("notes")),
    )


def session_from_dict(data: Any) -> Optional[ReadingSession]:
    if not isinstance(data, dict):
        return None
    session_id = data.get("id")
    book_id = data.get("bookId")
    if not isinstance(session_id, str) or not isinstance(book_id, str):
        return None
    day = data.get("date")
    return ReadingSession(
        id=session_id,
        book_id=book_id,
        date=day if isinstance(day, str) else "",
        pages_read=_int_field(data.get("pagesRead"), 0),
        minutes=_int_field(data.get("minutes"), 0),
        note=_optional_text(data.get("note")),
    )


def preferences_from_dict(data: Any) -> Preferences:
    prefs = Preferences()
    if not isinstance(data, dict):
        return prefs
    for key, attr in (
        ("weeklyMinutesGoal", "weekly_minutes_goal"),
        ("dailyPagesGoal", "daily_pages_goal"),
    ):
        value = _int_field(data.get(key), 0)
        if value > 0:
            setattr(prefs, attr, value)
    if isinstance(data.get("showCompleted"), bool):
        prefs.show_completed = data["showCompleted"]
    return prefs


def _records(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        log.warning("Ignoring stored %s: expected a list", key)
        return []
    return value


def state_from_dict(data: Any) -> TrackerState:
    """Build a state from a decoded blob, defaulting whatever is missing."""
    if not isinstance(data, dict):
        log.warning("Stored state is not an object, using defaults")
        return TrackerState()

    books = []
    for raw in _records(data, "books"):
        book = book_from_dict(raw)
        if book is None:
            log.warning("Skipping malformed book record: %r", raw)
            continue
        books.append(book)

    sessions = []
    for raw in _records(data, "sessions"):
        session = session_from_dict(raw)
        if session is None:
            log.warning("Skipping malformed session record: %r", raw)
            continue
        sessions.append(session)

    return TrackerState(
        books=books,
        sessions=sort_sessions(sessions),
        preferences=preferences_from_dict(data.get("preferences")),
    )


def dumps_state(state: TrackerState) -> str:
    return json.dumps(state_to_dict(state), ensure_ascii=False)


def loads_state(raw: Optional[str]) -> TrackerState:
    """Decode a stored blob. Missing or unparseable content yields defaults."""
    if raw is None:
        return TrackerState()
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        log.warning("Ignoring unreadable stored state: %s", e)
        return TrackerState()
    return state_from_dict(data)


def load_state(store: KeyValueStore, key: str = STORAGE_KEY) -> TrackerState:
    state = loads_state(store.get_item(key))
    log.debug(
        "Loaded %d books and %d sessions from %s",
        len(state.books),
        len(state.sessions),
        key,
    )
    return state


def save_state(
    store: KeyValueStore, state: TrackerState, key: str = STORAGE_KEY
) -> None:
    store.set_item(key, dumps_state(state))
