"""Core data model, classification and errors."""

from fzf_nav.core.classifier import classify
from fzf_nav.core.errors import (
    InvalidArgumentError,
    NavError,
    PickerError,
    StoreCorruptError,
    StoreError,
    StoreUnavailableError,
)
from fzf_nav.core.events import (
    CategoryCount,
    DirectoryVisit,
    FileCategory,
    FileOpen,
    PathCount,
    PathKind,
    SearchHit,
)

__all__ = [
    "CategoryCount",
    "DirectoryVisit",
    "FileCategory",
    "FileOpen",
    "InvalidArgumentError",
    "NavError",
    "PathCount",
    "PathKind",
    "PickerError",
    "SearchHit",
    "StoreCorruptError",
    "StoreError",
    "StoreUnavailableError",
    "classify",
]
