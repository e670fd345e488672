"""SQLite-backed history store.

The write path appends single rows; reads are executed on behalf of the
ranking engine, which owns all query construction. Many short-lived shell
processes may write at once, so the connection runs in WAL mode with a
busy timeout, and transient lock conflicts are retried a bounded number
of times with exponential backoff.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sqlite3
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Any

import aiosqlite

from fzf_nav.config import NavConfig, StoreSettings
from fzf_nav.core.classifier import classify
from fzf_nav.core.errors import (
    InvalidArgumentError,
    StoreCorruptError,
    StoreError,
    StoreUnavailableError,
)
from fzf_nav.core.events import DirectoryVisit, FileOpen
from fzf_nav.storage.sqlite_schema import HISTORY_TABLES, SCHEMA
from fzf_nav.utils.timeutils import to_storage, utcnow

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

_TRANSIENT_MARKERS = ("database is locked", "database is busy", "database table is locked")


def _casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


def _is_transient(exc: sqlite3.Error) -> bool:
    """Whether an error is a lock conflict worth retrying."""
    if not isinstance(exc, sqlite3.OperationalError):
        return False
    message = str(exc).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


class SQLiteHistoryStore:
    """Append-only event store for directory visits and file opens.

    Usage:
        async with SQLiteHistoryStore(db_path) as store:
            await store.record_directory_visit("/home/me/src")
    """

    def __init__(
        self,
        db_path: str | Path,
        settings: StoreSettings | None = None,
    ) -> None:
        self._in_memory = str(db_path) == MEMORY_DB
        self._db_path = Path(db_path) if not self._in_memory else Path(MEMORY_DB)
        self._settings = settings or StoreSettings()
        self._conn: aiosqlite.Connection | None = None

    @classmethod
    def from_config(cls, config: NavConfig) -> SQLiteHistoryStore:
        return cls(config.db_path, config.store)

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def __aenter__(self) -> SQLiteHistoryStore:
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def initialize(self) -> None:
        """Open the connection, apply pragmas and create the schema.

        Raises:
            StoreUnavailableError: The file cannot be created or opened
            StoreCorruptError: The file is not a SQLite database
        """
        if self._conn is not None:
            return

        database = MEMORY_DB if self._in_memory else str(self._db_path)
        if not self._in_memory:
            try:
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StoreUnavailableError(
                    f"Cannot create directory for history database: {e}", str(self._db_path)
                ) from e

        try:
            conn = await aiosqlite.connect(
                database, timeout=self._settings.busy_timeout_ms / 1000
            )
        except sqlite3.Error as e:
            raise self._translate(e) from e

        conn.row_factory = aiosqlite.Row
        self._conn = conn
        try:
            await conn.execute(f"PRAGMA busy_timeout = {int(self._settings.busy_timeout_ms)}")
            if not self._in_memory:
                await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA synchronous=NORMAL")
            await conn.create_function("casefold", 1, _casefold, deterministic=True)
            await self._with_retry(self._create_schema)
        except (sqlite3.Error, StoreError) as e:
            await self.close()
            if isinstance(e, StoreError):
                raise
            raise self._translate(e) from e

        logger.debug("Opened history store at %s", database)

    async def _create_schema(self, conn: aiosqlite.Connection) -> None:
        await conn.executescript(SCHEMA)

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._conn is not None:
            conn, self._conn = self._conn, None
            try:
                await conn.close()
            except sqlite3.Error:
                logger.debug("Error closing history store", exc_info=True)

    def _ensure_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("History store not initialized. Call initialize() first.")
        return self._conn

    def _translate(self, exc: sqlite3.Error) -> StoreError:
        """Map a sqlite3 error onto the store error taxonomy."""
        db_path = str(self._db_path)
        if isinstance(exc, sqlite3.OperationalError):
            return StoreUnavailableError(f"History database unavailable: {exc}", db_path)
        if isinstance(exc, sqlite3.DatabaseError):
            return StoreCorruptError(f"History database is corrupt: {exc}", db_path)
        return StoreUnavailableError(f"History database error: {exc}", db_path)

    async def _with_retry(
        self,
        operation: Callable[[aiosqlite.Connection], Any],
    ) -> Any:
        """Run a write operation and commit, retrying on lock conflicts.

        The operation is attempted at most ``write_retries + 1`` times,
        sleeping ``retry_backoff * 2**attempt`` seconds between attempts.
        """
        conn = self._ensure_conn()
        retries = self._settings.write_retries
        for attempt in range(retries + 1):
            try:
                result = await operation(conn)
                await conn.commit()
                return result
            except sqlite3.Error as e:
                try:
                    await conn.rollback()
                except sqlite3.Error:
                    logger.debug("Rollback failed after write error", exc_info=True)
                if _is_transient(e) and attempt < retries:
                    delay = self._settings.retry_backoff * (2**attempt)
                    logger.debug(
                        "History store locked (attempt %d/%d), retrying in %.3fs",
                        attempt + 1,
                        retries + 1,
                        delay,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise self._translate(e) from e
        raise StoreUnavailableError("History database stayed locked", str(self._db_path))

    # ========== Write path ==========

    async def record_directory_visit(
        self,
        path: str,
        occurred_at: datetime | None = None,
    ) -> DirectoryVisit:
        """Append one directory visit.

        Args:
            path: Directory path, stored exactly as given
            occurred_at: Visit time; defaults to now (UTC)

        Returns:
            The stored event

        Raises:
            InvalidArgumentError: If path is empty
            StoreError: If the row could not be written
        """
        if not path:
            raise InvalidArgumentError("Directory path must not be empty")
        when = occurred_at or utcnow()

        async def _insert(conn: aiosqlite.Connection) -> int:
            cursor = await conn.execute(
                "INSERT INTO directory_history (path, timestamp) VALUES (?, ?)",
                (path, to_storage(when)),
            )
            return cursor.lastrowid or 0

        row_id = await self._with_retry(_insert)
        return DirectoryVisit(id=row_id, path=path, occurred_at=when)

    async def record_file_open(
        self,
        path: str,
        action: str = "open",
        occurred_at: datetime | None = None,
    ) -> FileOpen:
        """Classify a file and append one open event.

        Args:
            path: File path, stored exactly as given
            action: How the file was opened (e.g. "open", "edit")
            occurred_at: Open time; defaults to now (UTC)

        Returns:
            The stored event, including its derived category

        Raises:
            InvalidArgumentError: If path or action is empty
            StoreError: If the row could not be written
        """
        if not path:
            raise InvalidArgumentError("File path must not be empty")
        if not action:
            raise InvalidArgumentError("File action must not be empty")
        category = classify(path)
        when = occurred_at or utcnow()

        async def _insert(conn: aiosqlite.Connection) -> int:
            cursor = await conn.execute(
                """INSERT INTO file_history (path, file_type, action, timestamp)
                   VALUES (?, ?, ?, ?)""",
                (path, category.value, action, to_storage(when)),
            )
            return cursor.lastrowid or 0

        row_id = await self._with_retry(_insert)
        return FileOpen(
            id=row_id, path=path, category=category, action=action, occurred_at=when
        )

    # ========== Read primitive ==========

    async def fetch_all(
        self,
        sql: str,
        params: Sequence[Any] = (),
    ) -> list[aiosqlite.Row]:
        """Execute a read query built by the ranking engine."""
        conn = self._ensure_conn()
        try:
            async with conn.execute(sql, params) as cursor:
                return list(await cursor.fetchall())
        except sqlite3.Error as e:
            raise self._translate(e) from e

    # ========== Administration ==========

    async def prune_missing(
        self,
        exists: Callable[[str], bool] = os.path.exists,
    ) -> dict[str, int]:
        """Delete history rows whose path no longer exists.

        This is a retention action, not part of normal recording. Each
        table is cleaned inside the same transaction.

        Returns:
            Rows deleted per table name
        """

        async def _prune(conn: aiosqlite.Connection) -> dict[str, int]:
            removed: dict[str, int] = {}
            for table in HISTORY_TABLES:
                # Table names come from a hardcoded tuple.
                async with conn.execute(f"SELECT DISTINCT path FROM {table}") as cursor:
                    paths = [row["path"] async for row in cursor]
                missing = [(p,) for p in paths if not exists(p)]
                deleted = 0
                if missing:
                    before = conn.total_changes
                    await conn.executemany(f"DELETE FROM {table} WHERE path = ?", missing)
                    deleted = conn.total_changes - before
                removed[table] = deleted
            return removed

        removed = await self._with_retry(_prune)
        logger.info(
            "Pruned %d directory rows and %d file rows",
            removed["directory_history"],
            removed["file_history"],
        )
        return removed
