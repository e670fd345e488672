"""SQLite schema for the shell history store.

Two append-only tables. Timestamps are UTC ISO-8601 text, so lexical
ordering matches chronological ordering; ``id`` breaks ties in
insertion order.
"""

from __future__ import annotations

SCHEMA = """
CREATE TABLE IF NOT EXISTS directory_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    path TEXT NOT NULL CHECK (length(path) > 0),
    timestamp TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_directory_history_timestamp
    ON directory_history(timestamp DESC, id DESC);
CREATE INDEX IF NOT EXISTS idx_directory_history_path
    ON directory_history(path);

CREATE TABLE IF NOT EXISTS file_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    path TEXT NOT NULL CHECK (length(path) > 0),
    file_type TEXT NOT NULL,
    action TEXT NOT NULL,
    timestamp TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_file_history_timestamp
    ON file_history(timestamp DESC, id DESC);
CREATE INDEX IF NOT EXISTS idx_file_history_path
    ON file_history(path);
CREATE INDEX IF NOT EXISTS idx_file_history_file_type
    ON file_history(file_type);
"""

# Tables the cleanup pass walks; names are fixed, never user input.
HISTORY_TABLES: tuple[str, ...] = ("directory_history", "file_history")
