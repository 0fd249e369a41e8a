from __future__ import annotations

from typing import TYPE_CHECKING

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Static

from readtrack.tracker.engine import TrackerEngine, ValidationError
from readtrack.tracker.models import BookStatus
from readtrack.tracker.stats import (
    TrackerStats,
    book_progress_percent,
    sessions_to_daily_goal,
    weekly_goal_percent,
)
from readtrack.ui.screens.forms import (
    AddBookScreen,
    ConfirmRemoveScreen,
    FormResult,
    GoalsScreen,
    LogSessionScreen,
    ProgressScreen,
)

if TYPE_CHECKING:
    from readtrack.app import TrackerApp


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def _or_dash(value: float) -> str:
    return f"{value:g}" if value else "-"


def session_target_after_add(
    engine: TrackerEngine, current: str | None, added_id: str
) -> str:
    """Keep a still-valid selection; otherwise target the book just added."""
    if current and engine.get_book(current) is not None:
        return current
    return added_id


class DashboardScreen(Screen):
    BINDINGS = [
        Binding("a", "add_book", "Add book"),
        Binding("l", "log_session", "Log"),
        Binding("p", "set_progress", "Progress"),
        Binding("g", "edit_goals", "Goals"),
        Binding("c", "toggle_completed", "Completed"),
        Binding("x", "remove_session", "Remove"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        # Book preselected in the session form. A new book takes over only if
        # nothing valid is selected yet.
        self._session_book_id: str | None = None

    @property
    def rt(self) -> TrackerApp:
        return self.app  # type: ignore[return-value]

    @property
    def engine(self) -> TrackerEngine:
        return self.rt.engine

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="dashboard-header")
        with Horizontal(id="stat-cards"):
            yield Static("", id="card-completed", classes="stat-card")
            yield Static("", id="card-pages", classes="stat-card")
            yield Static("", id="card-streak", classes="stat-card")
        yield Static("", id="weekly-progress")
        yield Static("", id="pace-hint")
        with Horizontal(id="tables"):
            with Vertical(id="books-panel"):
                yield Static("Your books", classes="panel-title")
                yield DataTable(id="book-table")
            with Vertical(id="sessions-panel"):
                yield Static("Session history", classes="panel-title")
                yield DataTable(id="session-table")
        yield Footer()

    def on_mount(self) -> None:
        books = self.query_one("#book-table", DataTable)
        books.cursor_type = "row"
        books.add_columns("Title", "Author", "Status", "Pages", "Progress", "Started")
        sessions = self.query_one("#session-table", DataTable)
        sessions.cursor_type = "row"
        sessions.add_columns("Date", "Book", "Pages", "Minutes", "Note")
        self.refresh_dashboard()
        books.focus()

    # ── Rendering ───────────────────────────────

    def refresh_dashboard(self) -> None:
        stats = self.engine.stats()
        self._render_header(stats)
        self._render_books()
        self._render_sessions()

    def _render_header(self, stats: TrackerStats) -> None:
        prefs = self.engine.state.preferences
        self.query_one("#dashboard-header", Static).update(
            f" Reading Tracker   Weekly goal: {prefs.weekly_minutes_goal} min"
            f"   Daily goal: {prefs.daily_pages_goal} pages"
            f"   Completed: {'shown' if prefs.show_completed else 'hidden'}"
        )
        self.query_one("#card-completed", Static).update(
            f"Books completed\n{len(stats.completed_books)}\n"
            f"{len(stats.active_books)} active"
        )
        self.query_one("#card-pages", Static).update(
            f"Pages read\n{stats.total_pages_read:,}\n"
            f"{_or_dash(stats.average_daily_pages)} pages / day on average"
        )
        self.query_one("#card-streak", Static).update(
            f"Current streak\n{_plural(stats.streak, 'day')}\n"
            f"Logged activity on {_plural(stats.unique_days, 'day')}"
        )
        pct = weekly_goal_percent(stats.minutes_this_week, prefs.weekly_minutes_goal)
        since = stats.week_start.isoformat() if stats.week_start else ""
        self.query_one("#weekly-progress", Static).update(
            f"Weekly progress: {stats.minutes_this_week} / "
            f"{prefs.weekly_minutes_goal} minutes ({pct}%)\n"
            f"{stats.pages_this_week} pages logged since {since}"
            f"   Pace: {_or_dash(stats.minutes_per_page)} min / page"
        )
        sessions = sessions_to_daily_goal(
            prefs.daily_pages_goal, stats.average_daily_pages
        )
        target = (
            _plural(sessions, "session")
            if sessions is not None
            else "a few focused sessions"
        )
        self.query_one("#pace-hint", Static).update(
            f"At your current pace of {_or_dash(stats.average_daily_pages)} pages/day, "
            f"you'll meet your daily target in {target}."
        )

    def _render_books(self) -> None:
        table = self.query_one("#book-table", DataTable)
        table.clear()
        for book in self.engine.visible_books():
            table.add_row(
                book.title,
                book.author,
                book.status.label,
                f"{book.current_page:,} / {book.total_pages:,}",
                f"{book_progress_percent(book)}%",
                book.started_at,
                key=book.id,
            )

    def _render_sessions(self) -> None:
        table = self.query_one("#session-table", DataTable)
        table.clear()
        for session in self.engine.recent_sessions(self.rt.config.recent_sessions_limit):
            table.add_row(
                session.date,
                self.engine.book_title_for(session),
                str(session.pages_read),
                str(session.minutes),
                session.note or "",
                key=session.id,
            )

    def _selected_key(self, table_id: str) -> str | None:
        table = self.query_one(table_id, DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return str(row_key.value)

    # ── Add Book ────────────────────────────────

    def action_add_book(self) -> None:
        self.app.push_screen(AddBookScreen(), callback=self._on_book_form)

    def _on_book_form(self, result: FormResult | None) -> None:
        if not result:
            return
        try:
            book = self.engine.add_book(
                result.get("title", ""),
                result.get("author", ""),
                result.get("total_pages", ""),
                target_date=result.get("target_date"),
                notes=result.get("notes"),
            )
        except ValidationError as e:
            self.notify(e.message, severity="error")
            return
        self._session_book_id = session_target_after_add(
            self.engine, self._session_book_id, book.id
        )
        self.refresh_dashboard()
        self.notify(f"Added: {book.title}")

    # ── Log / Remove Session ────────────────────

    def _default_session_book(self) -> str | None:
        if self._session_book_id and self.engine.get_book(self._session_book_id):
            return self._session_book_id
        books = self.engine.state.books
        return books[0].id if books else None

    def action_log_session(self) -> None:
        choices = [
            (
                f"{b.title} - "
                + (
                    "Completed"
                    if b.status is BookStatus.COMPLETED
                    else f"{b.current_page}/{b.total_pages} pages"
                ),
                b.id,
            )
            for b in self.engine.state.books
        ]
        self.app.push_screen(
            LogSessionScreen(
                choices, self._default_session_book(), self.engine.today().isoformat()
            ),
            callback=self._on_session_form,
        )

    def _on_session_form(self, result: FormResult | None) -> None:
        if not result:
            return
        try:
            session = self.engine.log_session(
                result.get("book_id", ""),
                result.get("pages_read", ""),
                result.get("minutes", ""),
                day=result.get("date"),
                note=result.get("note"),
            )
        except ValidationError as e:
            self.notify(e.message, severity="error")
            return
        self._session_book_id = session.book_id
        self.refresh_dashboard()
        self.notify(f"Logged {_plural(session.pages_read, 'page')}")

    def action_remove_session(self) -> None:
        session_id = self._selected_key("#session-table")
        if session_id is None:
            return
        session = next(
            (s for s in self.engine.state.sessions if s.id == session_id), None
        )
        if session is None:
            return
        description = (
            f"{session.date}, {self.engine.book_title_for(session)}, "
            f"{_plural(session.pages_read, 'page')}"
        )
        self.app.push_screen(
            ConfirmRemoveScreen(description),
            callback=lambda confirmed: self._on_remove_confirmed(confirmed, session_id),
        )

    def _on_remove_confirmed(self, confirmed: bool | None, session_id: str) -> None:
        if not confirmed:
            return
        self.engine.remove_session(session_id)
        self.refresh_dashboard()
        self.notify("Session removed")

    # ── Progress / Goals / Filter ───────────────

    def action_set_progress(self) -> None:
        book_id = self._selected_key("#book-table")
        book = self.engine.get_book(book_id) if book_id else None
        if book is None:
            return
        self.app.push_screen(
            ProgressScreen(book.title, book.current_page, book.total_pages),
            callback=lambda result: self._on_progress_form(result, book.id),
        )

    def _on_progress_form(self, result: FormResult | None, book_id: str) -> None:
        if not result:
            return
        try:
            self.engine.set_book_progress(book_id, result.get("current_page", ""))
        except ValidationError as e:
            self.notify(e.message, severity="error")
            return
        self.refresh_dashboard()

    @on(DataTable.RowSelected, "#book-table")
    def on_book_selected(self, event: DataTable.RowSelected) -> None:
        self._session_book_id = str(event.row_key.value)
        self.action_set_progress()

    def action_edit_goals(self) -> None:
        prefs = self.engine.state.preferences
        self.app.push_screen(
            GoalsScreen(prefs.weekly_minutes_goal, prefs.daily_pages_goal),
            callback=self._on_goals_form,
        )

    def _on_goals_form(self, result: FormResult | None) -> None:
        if not result:
            return
        for name in ("weekly_minutes_goal", "daily_pages_goal"):
            self.engine.set_preference(name, result.get(name, ""))
        self.refresh_dashboard()

    def action_toggle_completed(self) -> None:
        self.engine.toggle_show_completed()
        self.refresh_dashboard()

    async def action_quit_app(self) -> None:
        await self.rt.action_quit()
