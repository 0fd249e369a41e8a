"""Tests for derived statistics."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from readtrack.tracker.models import Book, ReadingSession, TrackerState
from readtrack.tracker.stats import (
    book_progress_percent,
    compute_stats,
    reading_streak,
    round1,
    sessions_to_daily_goal,
    week_window,
    weekly_goal_percent,
)


def _session(day, pages: int = 10, minutes: int = 20, book_id: str = "b1"):
    if isinstance(day, date):
        day = day.isoformat()
    return ReadingSession(
        id=f"s-{day}-{pages}-{minutes}",
        book_id=book_id,
        date=day,
        pages_read=pages,
        minutes=minutes,
    )


def _ago(today: date, days: int) -> date:
    return today - timedelta(days=days)


class TestStreak:
    def test_three_days_ending_today(self, today: date):
        sessions = [_session(_ago(today, n)) for n in (0, 1, 2)]
        assert reading_streak(sessions, today) == 3

    def test_grace_day_when_today_not_logged(self, today: date):
        sessions = [_session(_ago(today, n)) for n in (1, 2)]
        assert reading_streak(sessions, today) == 2

    def test_broken_streak(self, today: date):
        assert reading_streak([_session(_ago(today, 3))], today) == 0

    def test_no_grace_for_earlier_gaps(self, today: date):
        sessions = [_session(_ago(today, n)) for n in (0, 1, 3, 4)]
        assert reading_streak(sessions, today) == 2

    def test_grace_only_one_day(self, today: date):
        sessions = [_session(_ago(today, n)) for n in (2, 3)]
        assert reading_streak(sessions, today) == 0

    def test_duplicate_days_counted_once(self, today: date):
        sessions = [_session(today, pages=p) for p in (1, 2, 3)]
        assert reading_streak(sessions, today) == 1

    def test_empty(self, today: date):
        assert reading_streak([], today) == 0

    def test_unparseable_dates_ignored(self, today: date):
        sessions = [_session("not-a-date"), _session(today)]
        assert reading_streak(sessions, today) == 1


class TestTotals:
    def test_empty_state(self, today: date):
        stats = compute_stats(TrackerState(), today)
        assert stats.total_pages_read == 0
        assert stats.total_minutes == 0
        assert stats.minutes_per_page == 0
        assert stats.average_daily_pages == 0
        assert stats.total_days == 0
        assert stats.unique_days == 0
        assert stats.streak == 0

    def test_sums_and_pace(self, today: date):
        state = TrackerState(
            sessions=[
                _session(today, pages=30, minutes=40),
                _session(_ago(today, 2), pages=20, minutes=35),
            ]
        )
        stats = compute_stats(state, today)
        assert stats.total_pages_read == 50
        assert stats.total_minutes == 75
        assert stats.minutes_per_page == 1.5
        assert stats.total_days == 3
        assert stats.average_daily_pages == 16.7
        assert stats.unique_days == 2

    def test_zero_pages_no_division(self, today: date):
        state = TrackerState(sessions=[_session(today, pages=0, minutes=30)])
        stats = compute_stats(state, today)
        assert stats.minutes_per_page == 0
        assert stats.average_daily_pages == 0

    def test_single_day_spans_one_day(self, today: date):
        state = TrackerState(sessions=[_session(today), _session(today, pages=5)])
        stats = compute_stats(state, today)
        assert stats.total_days == 1
        assert stats.unique_days == 1
        assert stats.average_daily_pages == 15

    def test_total_days_ignores_bad_dates(self, today: date):
        state = TrackerState(sessions=[_session("???"), _session(_ago(today, 4))])
        assert compute_stats(state, today).total_days == 1

    def test_only_bad_dates(self, today: date):
        state = TrackerState(sessions=[_session("???")])
        stats = compute_stats(state, today)
        assert stats.total_days == 0
        assert stats.average_daily_pages == 0

    def test_book_partition(self, today: date):
        state = TrackerState(
            books=[
                Book(id="a", title="A", author="X", total_pages=10, current_page=10),
                Book(id="b", title="B", author="X", total_pages=10, current_page=3),
                Book(id="c", title="C", author="X", total_pages=10),
            ]
        )
        stats = compute_stats(state, today)
        assert [b.id for b in stats.completed_books] == ["a"]
        assert [b.id for b in stats.active_books] == ["b", "c"]


class TestWeek:
    def test_window_bounds(self, today: date):
        start, end = week_window(today)
        assert start == _ago(today, 6)
        assert end == today

    def test_weekly_sums(self, today: date):
        state = TrackerState(
            sessions=[
                _session(today, pages=10, minutes=15),
                _session(_ago(today, 6), pages=5, minutes=25),
                _session(_ago(today, 7), pages=100, minutes=100),
                _session(today + timedelta(days=1), pages=100, minutes=100),
            ]
        )
        stats = compute_stats(state, today)
        assert stats.week_start == _ago(today, 6)
        assert stats.minutes_this_week == 40
        assert stats.pages_this_week == 15


class TestHelpers:
    @pytest.mark.parametrize(
        "value,expected", [(1.25, 1.3), (1.24, 1.2), (16.666, 16.7), (0, 0)]
    )
    def test_round1(self, value, expected):
        assert round1(value) == expected

    def test_weekly_goal_percent(self):
        assert weekly_goal_percent(210, 420) == 50
        assert weekly_goal_percent(1000, 420) == 100
        assert weekly_goal_percent(10, 0) == 0

    def test_book_progress_percent(self):
        book = Book(id="a", title="A", author="X", total_pages=3, current_page=1)
        assert book_progress_percent(book) == 33
        book.current_page = 3
        assert book_progress_percent(book) == 100

    def test_sessions_to_daily_goal(self):
        assert sessions_to_daily_goal(30, 12.5) == 3
        assert sessions_to_daily_goal(30, 0) is None
        assert sessions_to_daily_goal(0, 10) is None
