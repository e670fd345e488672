"""Query facade: one entry point from command name to formatted rows.

Shell functions and the CLI call ``QueryFacade.execute`` with a command
name plus an optional limit, query string or path. The facade validates
arguments, dispatches to the ranking engine or the store's writers, and
renders each row as a single picker-friendly line. Coloring is left to
the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from fzf_nav.config import NavConfig
from fzf_nav.core.errors import InvalidArgumentError
from fzf_nav.core.events import (
    CategoryCount,
    DirectoryVisit,
    FileOpen,
    PathCount,
    SearchHit,
)
from fzf_nav.engine.ranking import RankingEngine
from fzf_nav.storage.sqlite_store import SQLiteHistoryStore

logger = logging.getLogger(__name__)

Row = DirectoryVisit | FileOpen | PathCount | CategoryCount | SearchHit


@dataclass(frozen=True)
class CommandSpec:
    """Dispatch-table entry for one facade command.

    Attributes:
        name: Command name as typed on the command line
        handler: QueryFacade method implementing it
        summary: One-line description for help output
        limit_key: LimitSettings field holding the default limit, if any
        argument: What the positional argument means ("limit", "query", "path")
        writes: Whether the command appends to the store
    """

    name: str
    handler: str
    summary: str
    limit_key: str | None = None
    argument: str | None = None
    writes: bool = False


COMMANDS: dict[str, CommandSpec] = {
    spec.name: spec
    for spec in (
        CommandSpec(
            "recent-dirs", "_recent_dirs", "Recent directory visits", "recent", "limit"
        ),
        CommandSpec("recent-files", "_recent_files", "Recent file opens", "recent", "limit"),
        CommandSpec(
            "popular-dirs", "_popular_dirs", "Most visited directories", "popular", "limit"
        ),
        CommandSpec("file-stats", "_file_stats", "File opens per category"),
        CommandSpec("search", "_search", "Search history paths", "search", "query"),
        CommandSpec(
            "record-dir", "_record_dir", "Record a directory visit", argument="path", writes=True
        ),
        CommandSpec(
            "record-file", "_record_file", "Record a file open", argument="path", writes=True
        ),
    )
}


def parse_limit(raw: str | int | None, default: int) -> int:
    """Validate a caller-supplied row limit.

    ``None`` selects the command default. Anything else must be a
    positive integer; bad input is an error, never a silent default.
    """
    if raw is None:
        return default
    if isinstance(raw, bool):
        raise InvalidArgumentError(f"Invalid limit {raw!r}: expected a positive integer")
    if isinstance(raw, int):
        value = raw
    else:
        text = raw.strip()
        try:
            value = int(text, 10)
        except ValueError:
            raise InvalidArgumentError(
                f"Invalid limit {raw!r}: expected a positive integer"
            ) from None
    if value < 1:
        raise InvalidArgumentError(f"Invalid limit {raw!r}: must be at least 1")
    return value


def format_row(row: Row) -> str:
    """Render one result row as a single line."""
    if isinstance(row, PathCount):
        return f"{row.count}\t{row.path}"
    if isinstance(row, CategoryCount):
        return f"{row.category.value}\t{row.count}"
    return row.path


@dataclass(frozen=True)
class CommandResult:
    """Rows produced by one facade command."""

    spec: CommandSpec
    rows: list[Row] = field(default_factory=list)

    @property
    def command(self) -> str:
        return self.spec.name

    def lines(self) -> list[str]:
        """One line per row; writers produce no output lines."""
        if self.spec.writes:
            return []
        return [format_row(row) for row in self.rows]

    def to_data(self) -> list[dict[str, Any]]:
        """JSON-ready representation of the rows."""
        return [row.to_dict() for row in self.rows]


class QueryFacade:
    """Dispatches named commands to the ranking engine and the store."""

    def __init__(
        self,
        store: SQLiteHistoryStore,
        config: NavConfig | None = None,
        engine: RankingEngine | None = None,
    ) -> None:
        self._store = store
        self._config = config or NavConfig()
        self._engine = engine or RankingEngine(store)

    @property
    def engine(self) -> RankingEngine:
        return self._engine

    async def execute(
        self,
        command: str,
        argument: str | None = None,
        *,
        limit: str | int | None = None,
        action: str | None = None,
    ) -> CommandResult:
        """Run one command.

        Args:
            command: A name from ``COMMANDS``
            argument: Limit for recent/popular, query for search, path for writers
            limit: Row limit for search (other queries take it as ``argument``)
            action: Open action tag for record-file

        Raises:
            InvalidArgumentError: Unknown command or bad argument
            StoreError: The store could not be read or written
        """
        spec = COMMANDS.get(command)
        if spec is None:
            known = ", ".join(COMMANDS)
            raise InvalidArgumentError(f"Unknown command {command!r}. Known commands: {known}")

        handler = getattr(self, spec.handler)
        rows = await handler(spec, argument, limit, action)
        logger.debug("%s returned %d rows", command, len(rows))
        return CommandResult(spec=spec, rows=rows)

    def _default_limit(self, spec: CommandSpec) -> int:
        assert spec.limit_key is not None
        return int(getattr(self._config.limits, spec.limit_key))

    def _row_limit(
        self, spec: CommandSpec, argument: str | None, limit: str | int | None
    ) -> int:
        """Limit given positionally or as ``limit=``, but not both."""
        if argument is not None and limit is not None:
            raise InvalidArgumentError(
                f"{spec.name} takes one limit, got {argument!r} and {limit!r}"
            )
        raw = argument if argument is not None else limit
        return parse_limit(raw, self._default_limit(spec))

    async def _recent_dirs(
        self, spec: CommandSpec, argument: str | None, limit: str | int | None, action: Any
    ) -> list[Row]:
        return list(await self._engine.recent_dirs(self._row_limit(spec, argument, limit)))

    async def _recent_files(
        self, spec: CommandSpec, argument: str | None, limit: str | int | None, action: Any
    ) -> list[Row]:
        return list(await self._engine.recent_files(self._row_limit(spec, argument, limit)))

    async def _popular_dirs(
        self, spec: CommandSpec, argument: str | None, limit: str | int | None, action: Any
    ) -> list[Row]:
        return list(await self._engine.popular_dirs(self._row_limit(spec, argument, limit)))

    async def _file_stats(
        self, spec: CommandSpec, argument: str | None, limit: Any, action: Any
    ) -> list[Row]:
        if argument is not None or limit is not None:
            raise InvalidArgumentError("file-stats takes no argument")
        return list(await self._engine.file_stats())

    async def _search(
        self, spec: CommandSpec, argument: str | None, limit: str | int | None, action: Any
    ) -> list[Row]:
        if not argument:
            raise InvalidArgumentError("search requires a non-empty query string")
        count = parse_limit(limit, self._default_limit(spec))
        return list(await self._engine.search(argument, count))

    async def _record_dir(
        self, spec: CommandSpec, argument: str | None, limit: Any, action: Any
    ) -> list[Row]:
        if not argument:
            raise InvalidArgumentError("record-dir requires a directory path")
        return [await self._store.record_directory_visit(argument)]

    async def _record_file(
        self, spec: CommandSpec, argument: str | None, limit: Any, action: str | None
    ) -> list[Row]:
        if not argument:
            raise InvalidArgumentError("record-file requires a file path")
        return [
            await self._store.record_file_open(
                argument, action if action is not None else "open"
            )
        ]
