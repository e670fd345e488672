"""Persistent history storage."""

from fzf_nav.storage.sqlite_store import MEMORY_DB, SQLiteHistoryStore

__all__ = ["MEMORY_DB", "SQLiteHistoryStore"]
