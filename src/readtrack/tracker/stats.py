"""Derived reading statistics: totals, pace, weekly window, and streaks.

Everything here is a pure function of a ``TrackerState`` and the current date.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional

from readtrack.tracker.models import Book, BookStatus, ReadingSession, TrackerState

WEEK_DAYS = 7


@dataclass
class TrackerStats:
    completed_books: list[Book] = field(default_factory=list)
    active_books: list[Book] = field(default_factory=list)
    total_pages_read: int = 0
    total_minutes: int = 0
    minutes_per_page: float = 0
    total_days: int = 0
    average_daily_pages: float = 0
    unique_days: int = 0
    week_start: Optional[date] = None
    minutes_this_week: int = 0
    pages_this_week: int = 0
    streak: int = 0


def round1(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def week_window(today: date) -> tuple[date, date]:
    return today - timedelta(days=WEEK_DAYS - 1), today


def session_days(sessions: Iterable[ReadingSession]) -> list[date]:
    return [d for d in (s.day for s in sessions) if d is not None]


def count_total_days(sessions: Iterable[ReadingSession]) -> int:
    days = session_days(sessions)
    if not days:
        return 0
    return max(1, (max(days) - min(days)).days + 1)


def count_unique_days(sessions: Iterable[ReadingSession]) -> int:
    keys: set[object] = set()
    for session in sessions:
        day = session.day
        keys.add(day if day is not None else session.date)
    return len(keys)


def reading_streak(sessions: Iterable[ReadingSession], today: date) -> int:
    """Consecutive days with a session, ending today.

    If nothing is logged today yet but yesterday has a session, the walk
    starts from yesterday instead. That grace applies only to the first step.
    """
    days = set(session_days(sessions))
    if not days:
        return 0
    current = today
    if current not in days and current - timedelta(days=1) in days:
        current -= timedelta(days=1)
    streak = 0
    while current in days:
        streak += 1
        current -= timedelta(days=1)
    return streak


def compute_stats(state: TrackerState, today: date) -> TrackerStats:
    sessions = state.sessions
    completed = [b for b in state.books if b.status is BookStatus.COMPLETED]
    active = [b for b in state.books if b.status is not BookStatus.COMPLETED]

    total_pages = sum(s.pages_read for s in sessions)
    total_minutes = sum(s.minutes for s in sessions)
    minutes_per_page = 0 if total_pages == 0 else round1(total_minutes / total_pages)

    total_days = count_total_days(sessions)
    if total_pages == 0 or total_days == 0:
        average_daily = 0
    else:
        average_daily = round1(total_pages / total_days)

    start, end = week_window(today)
    this_week = [s for s in sessions if s.day is not None and start <= s.day <= end]

    return TrackerStats(
        completed_books=completed,
        active_books=active,
        total_pages_read=total_pages,
        total_minutes=total_minutes,
        minutes_per_page=minutes_per_page,
        total_days=total_days,
        average_daily_pages=average_daily,
        unique_days=count_unique_days(sessions),
        week_start=start,
        minutes_this_week=sum(s.minutes for s in this_week),
        pages_this_week=sum(s.pages_read for s in this_week),
        streak=reading_streak(sessions, today),
    )


# ── Goal and progress helpers ──────────────────────────


def weekly_goal_percent(minutes_this_week: int, weekly_goal: int) -> int:
    if not weekly_goal:
        return 0
    return min(100, math.floor(minutes_this_week / weekly_goal * 100 + 0.5))


def book_progress_percent(book: Book) -> int:
    if book.total_pages == 0:
        return 0
    return math.floor(book.current_page / book.total_pages * 100 + 0.5)


def sessions_to_daily_goal(
    daily_pages_goal: int, average_daily_pages: float
) -> Optional[int]:
    """Sessions at the current pace needed to cover the daily target."""
    if not daily_pages_goal or not average_daily_pages:
        return None
    return math.ceil(daily_pages_goal / average_daily_pages)
