"""Readtrack - personal reading habit tracker."""

from __future__ import annotations

import logging

from textual.app import App

from readtrack.config import AppConfig, load_config
from readtrack.tracker.engine import TrackerEngine
from readtrack.tracker.storage import Database
from readtrack.ui.screens.dashboard_screen import DashboardScreen
from readtrack.ui.themes import APP_CSS


class TrackerApp(App):
    """Track books, reading sessions, streaks, and weekly goals."""

    TITLE = "Readtrack"
    CSS = APP_CSS

    def __init__(self, config: AppConfig | None = None) -> None:
        super().__init__()
        self.config = config or load_config()
        self.db = Database(self.config.db_path)
        self.engine = TrackerEngine.load(self.db, storage_key=self.config.storage_key)

    def on_mount(self) -> None:
        self.push_screen(DashboardScreen())

    async def action_quit(self) -> None:
        self.db.close()
        self.exit()


def _setup_logging(config: AppConfig) -> None:
    handler = logging.FileHandler(config.log_path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger("readtrack")
    root.setLevel(config.log_level)
    root.addHandler(handler)


def main() -> None:
    config = load_config()
    _setup_logging(config)

    app = TrackerApp(config=config)
    app.run()


if __name__ == "__main__":
    main()
