"""Modal forms for adding books, logging sessions, and adjusting goals.

Each form dismisses with a dict of raw field values (or None on cancel);
validation happens in the engine so its messages reach the user verbatim.
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select

FormResult = dict[str, str]


class FormScreen(ModalScreen[FormResult | None]):
    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = """
    FormScreen {
        align: center middle;
    }
    """

    TITLE_TEXT = ""
    SUBMIT_LABEL = "Save"
    FOCUS_ID: str | None = None

    def compose_fields(self) -> ComposeResult:
        raise NotImplementedError

    def compose(self) -> ComposeResult:
        with Vertical(classes="form-dialog"):
            yield Label(self.TITLE_TEXT, classes="form-title")
            yield from self.compose_fields()
            with Horizontal(classes="form-buttons"):
                yield Button(self.SUBMIT_LABEL, variant="primary", id="form-submit")
                yield Button("Cancel [Esc]", variant="default", id="form-cancel")

    def on_mount(self) -> None:
        if self.FOCUS_ID:
            self.query_one(f"#{self.FOCUS_ID}", Input).focus()
            return
        for inp in self.query(Input):
            inp.focus()
            break

    def collect(self) -> FormResult:
        return {inp.id or "": inp.value for inp in self.query(Input)}

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(self.collect())

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "form-submit":
            self.dismiss(self.collect())
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class AddBookScreen(FormScreen):
    TITLE_TEXT = "Add a book"
    SUBMIT_LABEL = "Add book"

    def compose_fields(self) -> ComposeResult:
        yield Input(placeholder="Title", id="title")
        yield Input(placeholder="Author", id="author")
        yield Input(placeholder="Total pages", id="total_pages", type="integer")
        yield Input(placeholder="Target date (YYYY-MM-DD, optional)", id="target_date")
        yield Input(placeholder="Notes (optional)", id="notes")


class LogSessionScreen(FormScreen):
    TITLE_TEXT = "Log a reading session"
    SUBMIT_LABEL = "Log session"
    FOCUS_ID = "pages_read"

    def __init__(
        self,
        books: list[tuple[str, str]],
        book_id: str | None,
        today: str,
    ) -> None:
        super().__init__()
        self._books = books
        self._book_id = book_id
        self._today = today

    def compose_fields(self) -> ComposeResult:
        yield Select(
            self._books,
            prompt="Pick a book",
            value=self._book_id if self._book_id else Select.BLANK,
            id="book_id",
        )
        yield Input(value=self._today, placeholder="Date (YYYY-MM-DD)", id="date")
        yield Input(placeholder="Pages read", id="pages_read", type="integer")
        yield Input(placeholder="Minutes", id="minutes", type="integer")
        yield Input(placeholder="Note (optional)", id="note")

    def collect(self) -> FormResult:
        result = super().collect()
        value = self.query_one("#book_id", Select).value
        result["book_id"] = value if isinstance(value, str) else ""
        return result


class ProgressScreen(FormScreen):
    SUBMIT_LABEL = "Update"

    def __init__(self, title: str, current_page: int, total_pages: int) -> None:
        super().__init__()
        self.TITLE_TEXT = f'Progress for "{title}" (0-{total_pages})'
        self._current_page = current_page

    def compose_fields(self) -> ComposeResult:
        yield Input(
            value=str(self._current_page),
            placeholder="Current page",
            id="current_page",
            type="integer",
        )


class GoalsScreen(FormScreen):
    TITLE_TEXT = "Reading goals"

    def __init__(self, weekly_minutes_goal: int, daily_pages_goal: int) -> None:
        super().__init__()
        self._weekly = weekly_minutes_goal
        self._daily = daily_pages_goal

    def compose_fields(self) -> ComposeResult:
        yield Label("Weekly minutes goal")
        yield Input(value=str(self._weekly), id="weekly_minutes_goal", type="integer")
        yield Label("Daily pages goal")
        yield Input(value=str(self._daily), id="daily_pages_goal", type="integer")


class ConfirmRemoveScreen(ModalScreen[bool]):
    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
    ]

    DEFAULT_CSS = """
    ConfirmRemoveScreen {
        align: center middle;
    }
    #confirm-remove-dialog {
        width: 60;
        height: 9;
        background: $surface;
        border: solid $error;
        padding: 1 2;
    }
    #confirm-remove-msg {
        text-align: center;
        margin: 1 0;
    }
    #confirm-remove-buttons {
        align: center middle;
        height: 3;
    }
    #confirm-remove-buttons Button {
        margin: 0 2;
    }
    """

    def __init__(self, description: str) -> None:
        super().__init__()
        self._description = description

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-remove-dialog"):
            yield Label(f"Remove session: {self._description}?", id="confirm-remove-msg")
            with Horizontal(id="confirm-remove-buttons"):
                yield Button("Remove (y)", variant="error", id="cr-yes")
                yield Button("Cancel (n)", variant="default", id="cr-no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "cr-yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
