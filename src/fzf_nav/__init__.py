"""fzf-nav - shell navigation history with ranked queries for fuzzy pickers."""

from fzf_nav.config import NavConfig
from fzf_nav.core.classifier import classify
from fzf_nav.core.errors import (
    InvalidArgumentError,
    NavError,
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
    SearchHit,
)
from fzf_nav.engine.facade import QueryFacade
from fzf_nav.engine.ranking import RankingEngine
from fzf_nav.storage.sqlite_store import SQLiteHistoryStore

__version__ = "0.1.0"

__all__ = [
    # Models
    "CategoryCount",
    "DirectoryVisit",
    "FileCategory",
    "FileOpen",
    "PathCount",
    "SearchHit",
    "classify",
    # Errors
    "InvalidArgumentError",
    "NavError",
    "StoreCorruptError",
    "StoreError",
    "StoreUnavailableError",
    # Store and queries
    "NavConfig",
    "QueryFacade",
    "RankingEngine",
    "SQLiteHistoryStore",
    # Version
    "__version__",
]
