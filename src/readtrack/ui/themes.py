"""Textual CSS themes for readtrack."""

APP_CSS = """
/* ── Global ────────────────────────────────── */
Screen {
    background: $surface;
}

/* ── Dashboard ─────────────────────────────── */
#dashboard-header {
    dock: top;
    height: 3;
    padding: 1 2;
    background: $primary;
    color: $text;
    text-style: bold;
}

#stat-cards {
    height: 5;
    padding: 0 1;
}

.stat-card {
    width: 1fr;
    height: 5;
    padding: 0 1;
    margin: 0 1;
    border: round $primary-darken-1;
}

#weekly-progress {
    height: 3;
    padding: 0 2;
    color: $secondary;
}

#pace-hint {
    height: 1;
    padding: 0 2;
    color: $text-muted;
    text-style: italic;
}

#tables {
    height: 1fr;
}

.panel-title {
    padding: 0 1;
    height: 1;
    text-style: bold;
    background: $primary-darken-1;
    color: $text;
}

#books-panel {
    width: 3fr;
}

#sessions-panel {
    width: 2fr;
    border-left: solid $primary;
}

#book-table, #session-table {
    height: 1fr;
}

/* ── Forms ─────────────────────────────────── */
.form-dialog {
    width: 64;
    height: auto;
    background: $surface;
    border: solid $primary;
    padding: 1 2;
}

.form-title {
    text-align: center;
    text-style: bold;
    margin-bottom: 1;
}

.form-dialog Input {
    margin-bottom: 1;
}

.form-buttons {
    align: center middle;
    height: 3;
}

.form-buttons Button {
    margin: 0 2;
}
"""
