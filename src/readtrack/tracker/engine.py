"""Tracker state engine: the mutations behind the reading dashboard.

All operations validate before touching state, apply the change in memory,
then write the whole state through to the key-value store. A failed write is
logged and does not undo the change: memory stays the source of truth.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import Callable, Optional

from readtrack.tracker.models import (
    Book,
    BookStatus,
    ReadingSession,
    TrackerState,
    clamp,
    make_id,
    parse_date,
)
from readtrack.tracker.stats import TrackerStats, compute_stats
from readtrack.tracker.storage import (
    STORAGE_KEY,
    KeyValueStore,
    load_state,
    save_state,
    sort_sessions,
)

log = logging.getLogger(__name__)

UNKNOWN_BOOK_TITLE = "Unknown book"
DEFAULT_RECENT_SESSIONS = 6

_GOAL_FIELDS = {"weekly_minutes_goal", "daily_pages_goal"}
_TOGGLE_FIELDS = {"show_completed"}
_TRUE_WORDS = {"true", "1", "yes", "on"}
_FALSE_WORDS = {"false", "0", "no", "off"}


class ValidationError(ValueError):
    """Rejected input. ``message`` is meant to be shown to the user as-is."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _positive_int(value: object) -> Optional[int]:
    """Accept ints and numeric strings; None for anything else or <= 0."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if not isinstance(value, int) or value <= 0:
        return None
    return value


def _page_number(value: object) -> Optional[int]:
    """Like _positive_int, but zero and negatives pass (the caller clamps)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return value if isinstance(value, int) else None


def _flag(value: object) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class TrackerEngine:
    def __init__(
        self,
        state: Optional[TrackerState] = None,
        store: Optional[KeyValueStore] = None,
        storage_key: str = STORAGE_KEY,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._state = state or TrackerState()
        self._store = store
        self._storage_key = storage_key
        self._today = today

    @classmethod
    def load(
        cls,
        store: KeyValueStore,
        storage_key: str = STORAGE_KEY,
        today: Callable[[], date] = date.today,
    ) -> TrackerEngine:
        state = load_state(store, storage_key)
        return cls(state=state, store=store, storage_key=storage_key, today=today)

    @property
    def state(self) -> TrackerState:
        return self._state

    def today(self) -> date:
        return self._today()

    def stats(self) -> TrackerStats:
        return compute_stats(self._state, self.today())

    def _persist(self) -> None:
        if self._store is None:
            return
        try:
            save_state(self._store, self._state, self._storage_key)
        except (sqlite3.Error, OSError):
            log.exception("Failed to save tracker state under %s", self._storage_key)

    # ── Books ──────────────────────────────────────────────

    def get_book(self, book_id: str) -> Optional[Book]:
        for book in self._state.books:
            if book.id == book_id:
                return book
        return None

    def visible_books(self) -> list[Book]:
        if self._state.preferences.show_completed:
            return list(self._state.books)
        return [b for b in self._state.books if b.status is not BookStatus.COMPLETED]

    def add_book(
        self,
        title: str,
        author: str,
        total_pages: object,
        target_date: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Book:
        title = (title or "").strip()
        author = (author or "").strip()
        if not title or not author:
            raise ValidationError("Title and author are both required.")
        pages = _positive_int(total_pages)
        if pages is None:
            raise ValidationError("Total pages must be a positive number.")

        book = Book(
            id=make_id(),
            title=title,
            author=author,
            total_pages=pages,
            started_at=self.today().isoformat(),
            target_date=_optional_text(target_date),
            notes=_optional_text(notes),
        )
        self._state.books.insert(0, book)
        self._persist()
        log.info("Added book %s (%r, %d pages)", book.id, book.title, pages)
        return book

    def set_book_progress(self, book_id: str, new_page: object) -> None:
        """Manually override a book's current page.

        This does not touch the session history, so afterwards the book's
        session pages may no longer add up to ``current_page``.
        """
        page = _page_number(new_page)
        if page is None:
            raise ValidationError("Current page must be a whole number.")
        book = self.get_book(book_id)
        if book is None:
            log.debug("Progress update for unknown book %s ignored", book_id)
            return
        book.current_page = clamp(page, 0, book.total_pages)
        self._persist()
        log.info(
            "Set progress of %s to %d/%d", book.id, book.current_page, book.total_pages
        )

    # ── Sessions ───────────────────────────────────────────

    def log_session(
        self,
        book_id: str,
        pages_read: object,
        minutes: object,
        day: object = None,
        note: Optional[str] = None,
    ) -> ReadingSession:
        if not book_id:
            raise ValidationError("Please pick a book before logging a session.")
        book = self.get_book(book_id)
        if book is None:
            raise ValidationError("Selected book no longer exists.")
        pages = _positive_int(pages_read)
        if pages is None:
            raise ValidationError("Pages read must be a positive number.")
        mins = _positive_int(minutes)
        if mins is None:
            raise ValidationError("Minutes must be a positive number.")
        session_day = self.today() if day is None or day == "" else parse_date(day)
        if session_day is None:
            raise ValidationError("Session date must be a YYYY-MM-DD date.")

        # Capped at the pages left; a full book still records the raw value.
        remaining = book.remaining_pages
        effective = clamp(pages, 1, remaining) if remaining > 0 else pages
        session = ReadingSession(
            id=make_id(),
            book_id=book.id,
            date=session_day.isoformat(),
            pages_read=effective,
            minutes=mins,
            note=_optional_text(note),
        )
        self._state.sessions = sort_sessions([session, *self._state.sessions])
        book.current_page = clamp(book.current_page + effective, 0, book.total_pages)
        self._persist()
        log.info(
            "Logged %d pages / %d min on %s for %s",
            effective,
            mins,
            session.date,
            book.id,
        )
        return session

    def remove_session(self, session_id: str) -> None:
        session = next((s for s in self._state.sessions if s.id == session_id), None)
        if session is None:
            log.debug("Removal of unknown session %s ignored", session_id)
            return
        self._state.sessions = [s for s in self._state.sessions if s.id != session_id]
        book = self.get_book(session.book_id)
        if book is not None:
            book.current_page = clamp(
                book.current_page - session.pages_read, 0, book.total_pages
            )
        self._persist()
        log.info("Removed session %s (%d pages)", session.id, session.pages_read)

    def recent_sessions(
        self, limit: int = DEFAULT_RECENT_SESSIONS
    ) -> list[ReadingSession]:
        return self._state.sessions[:limit]

    def book_title_for(self, session: ReadingSession) -> str:
        book = self.get_book(session.book_id)
        return book.title if book else UNKNOWN_BOOK_TITLE

    # ── Preferences ────────────────────────────────────────

    def set_preference(self, name: str, value: object) -> None:
        prefs = self._state.preferences
        if name in _TOGGLE_FIELDS:
            flag = _flag(value)
            if flag is None:
                log.debug("Ignoring non-boolean %s: %r", name, value)
                return
            setattr(prefs, name, flag)
        elif name in _GOAL_FIELDS:
            goal = _positive_int(value)
            if goal is None:
                log.debug("Ignoring non-positive %s: %r", name, value)
                return
            setattr(prefs, name, goal)
        else:
            raise ValidationError(f"Unknown preference: {name}")
        self._persist()

    def toggle_show_completed(self) -> bool:
        prefs = self._state.preferences
        self.set_preference("show_completed", not prefs.show_completed)
        return prefs.show_completed
