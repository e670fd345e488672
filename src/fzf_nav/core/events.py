"""History event and aggregate row types.

Events are immutable once written. Aggregates are computed on every
query and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class FileCategory(StrEnum):
    """Closed set of file-type labels assigned at write time."""

    MEDIA = "media"
    IMAGE = "image"
    DOCUMENT = "document"
    OTHER = "other"


class PathKind(StrEnum):
    """Which history table a search hit came from."""

    DIRECTORY = "dir"
    FILE = "file"


@dataclass(frozen=True)
class DirectoryVisit:
    """A single `cd` into a directory.

    Attributes:
        id: Row id, increases with insertion order
        path: Directory path exactly as the shell reported it
        occurred_at: When the visit happened (UTC)
    """

    id: int
    path: str
    occurred_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "timestamp": self.occurred_at.isoformat()}


@dataclass(frozen=True)
class FileOpen:
    """A single file opened from the shell.

    Attributes:
        id: Row id, increases with insertion order
        path: File path exactly as the shell reported it
        category: Classifier label derived from the extension
        action: How the file was opened (e.g. "open", "edit", "play")
        occurred_at: When the file was opened (UTC)
    """

    id: int
    path: str
    category: FileCategory
    action: str
    occurred_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "file_type": self.category.value,
            "action": self.action,
            "timestamp": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class PathCount:
    """A path with its visit count and most recent visit."""

    path: str
    count: int
    last_seen: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "visits": self.count,
            "timestamp": self.last_seen.isoformat(),
        }


@dataclass(frozen=True)
class CategoryCount:
    """Number of file opens recorded for one category.

    ``actions`` holds ``(action, count)`` pairs summing to ``count``.
    """

    category: FileCategory
    count: int
    actions: tuple[tuple[str, int], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_type": self.category.value,
            "opens": self.count,
            "actions": dict(self.actions),
        }


@dataclass(frozen=True)
class SearchHit:
    """A distinct history path matching a search query."""

    kind: PathKind
    path: str
    count: int
    last_seen: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "path": self.path,
            "hits": self.count,
            "timestamp": self.last_seen.isoformat(),
        }
