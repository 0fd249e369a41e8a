"""Data models for books, reading sessions, and tracker preferences."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

DEFAULT_WEEKLY_MINUTES_GOAL = 420
DEFAULT_DAILY_PAGES_GOAL = 30
DEFAULT_SHOW_COMPLETED = True


class BookStatus(str, Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ")


def make_id() -> str:
    return str(uuid.uuid4())


def clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def status_for(current_page: int, total_pages: int) -> BookStatus:
    if current_page >= total_pages:
        return BookStatus.COMPLETED
    if current_page == 0:
        return BookStatus.NOT_STARTED
    return BookStatus.IN_PROGRESS


def parse_date(value: object) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string (or pass through a date). None if invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


@dataclass
class Book:
    id: str
    title: str
    author: str
    total_pages: int
    current_page: int = 0
    started_at: str = field(default_factory=lambda: date.today().isoformat())
    target_date: Optional[str] = None
    notes: Optional[str] = None

    @property
    def status(self) -> BookStatus:
        return status_for(self.current_page, self.total_pages)

    @property
    def remaining_pages(self) -> int:
        return max(self.total_pages - self.current_page, 0)


@dataclass
class ReadingSession:
    id: str
    book_id: str
    date: str  # YYYY-MM-DD
    pages_read: int
    minutes: int
    note: Optional[str] = None

    @property
    def day(self) -> Optional[date]:
        return parse_date(self.date)


@dataclass
class Preferences:
    weekly_minutes_goal: int = DEFAULT_WEEKLY_MINUTES_GOAL
    daily_pages_goal: int = DEFAULT_DAILY_PAGES_GOAL
    show_completed: bool = DEFAULT_SHOW_COMPLETED


@dataclass
class TrackerState:
    """Everything the tracker persists.

    ``books`` is newest first; ``sessions`` is kept sorted by date, newest first.
    """

    books: list[Book] = field(default_factory=list)
    sessions: list[ReadingSession] = field(default_factory=list)
    preferences: Preferences = field(default_factory=Preferences)
