"""Ranking engine: read-only queries over the history store.

Recency and frequency are separate query shapes; there is no blended
score. Every aggregate is recomputed from raw rows on each call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fzf_nav.core.errors import InvalidArgumentError
from fzf_nav.core.events import (
    CategoryCount,
    DirectoryVisit,
    FileCategory,
    FileOpen,
    PathCount,
    PathKind,
    SearchHit,
)
from fzf_nav.utils.timeutils import from_storage

if TYPE_CHECKING:
    from fzf_nav.storage.sqlite_store import SQLiteHistoryStore

logger = logging.getLogger(__name__)

_RECENT_DIRS_SQL = """
    SELECT id, path, timestamp
    FROM directory_history
    ORDER BY timestamp DESC, id DESC
    LIMIT ?
"""

_RECENT_FILES_SQL = """
    SELECT id, path, file_type, action, timestamp
    FROM file_history
    ORDER BY timestamp DESC, id DESC
    LIMIT ?
"""

_POPULAR_DIRS_SQL = """
    SELECT path, COUNT(*) AS visits, MAX(timestamp) AS last_visited, MAX(id) AS last_id
    FROM directory_history
    GROUP BY path
    ORDER BY visits DESC, last_visited DESC, last_id DESC
    LIMIT ?
"""

# instr() rather than LIKE: '%' and '_' in a query are literal characters.
# Both sides are casefolded by a Python function registered on the connection.
_SEARCH_SQL = """
    SELECT kind, path, hits, last_seen
    FROM (
        SELECT 'dir' AS kind, path, COUNT(*) AS hits,
               MAX(timestamp) AS last_seen, MAX(id) AS last_id
        FROM directory_history
        WHERE instr(casefold(path), ?) > 0
        GROUP BY path
        UNION ALL
        SELECT 'file' AS kind, path, COUNT(*) AS hits,
               MAX(timestamp) AS last_seen, MAX(id) AS last_id
        FROM file_history
        WHERE instr(casefold(path), ?) > 0
        GROUP BY path
    )
    ORDER BY last_seen DESC, last_id DESC, kind ASC
    LIMIT ?
"""

_FILE_STATS_SQL = """
    SELECT file_type, action, COUNT(*) AS opens
    FROM file_history
    GROUP BY file_type, action
"""


def _check_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidArgumentError(f"Limit must be a positive integer, got {limit!r}")
    return limit


def _parse_category(raw: str) -> FileCategory:
    """Read a stored file_type, folding labels from older writers into OTHER."""
    try:
        return FileCategory(raw)
    except ValueError:
        logger.debug("Unknown stored file_type %r, counting as other", raw)
        return FileCategory.OTHER


class RankingEngine:
    """Recent, popular, search and file-type queries over a history store."""

    def __init__(self, store: SQLiteHistoryStore) -> None:
        self._store = store

    async def recent_dirs(self, limit: int) -> list[DirectoryVisit]:
        """Most recent directory visits, newest first, duplicates kept."""
        rows = await self._store.fetch_all(_RECENT_DIRS_SQL, (_check_limit(limit),))
        return [
            DirectoryVisit(
                id=row["id"],
                path=row["path"],
                occurred_at=from_storage(row["timestamp"]),
            )
            for row in rows
        ]

    async def recent_files(self, limit: int) -> list[FileOpen]:
        """Most recent file opens, newest first, duplicates kept."""
        rows = await self._store.fetch_all(_RECENT_FILES_SQL, (_check_limit(limit),))
        return [
            FileOpen(
                id=row["id"],
                path=row["path"],
                category=_parse_category(row["file_type"]),
                action=row["action"],
                occurred_at=from_storage(row["timestamp"]),
            )
            for row in rows
        ]

    async def popular_dirs(self, limit: int) -> list[PathCount]:
        """Directories ranked by visit count.

        Ties on count go to the path visited most recently.
        """
        rows = await self._store.fetch_all(_POPULAR_DIRS_SQL, (_check_limit(limit),))
        return [
            PathCount(
                path=row["path"],
                count=row["visits"],
                last_seen=from_storage(row["last_visited"]),
            )
            for row in rows
        ]

    async def search(self, query: str, limit: int) -> list[SearchHit]:
        """Distinct directory and file paths containing ``query``.

        Matching is case-insensitive substring containment; fuzzy
        ranking is left to the picker. Hits are ordered by their most
        recent occurrence.

        Raises:
            InvalidArgumentError: If query is empty
        """
        if not query:
            raise InvalidArgumentError("Search query must not be empty")
        needle = query.casefold()
        rows = await self._store.fetch_all(_SEARCH_SQL, (needle, needle, _check_limit(limit)))
        return [
            SearchHit(
                kind=PathKind(row["kind"]),
                path=row["path"],
                count=row["hits"],
                last_seen=from_storage(row["last_seen"]),
            )
            for row in rows
        ]

    async def file_stats(self) -> list[CategoryCount]:
        """Open counts per file category, largest first.

        Categories with no opens are absent. Equal counts are ordered by
        category name so output is stable. Each entry also carries its
        per-action breakdown, largest first.
        """
        rows = await self._store.fetch_all(_FILE_STATS_SQL)
        counts: dict[FileCategory, int] = {}
        actions: dict[FileCategory, dict[str, int]] = {}
        for row in rows:
            category = _parse_category(row["file_type"])
            counts[category] = counts.get(category, 0) + row["opens"]
            per_action = actions.setdefault(category, {})
            per_action[row["action"]] = per_action.get(row["action"], 0) + row["opens"]
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0].value))
        return [
            CategoryCount(
                category=category,
                count=count,
                actions=tuple(
                    sorted(actions[category].items(), key=lambda item: (-item[1], item[0]))
                ),
            )
            for category, count in ranked
        ]
