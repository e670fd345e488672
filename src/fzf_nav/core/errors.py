"""Error taxonomy for fzf-nav.

An empty result set is never an error: queries that match nothing
return an empty list.
"""

from __future__ import annotations


class NavError(Exception):
    """Base class for all fzf-nav errors."""


class StoreError(NavError):
    """The history store could not complete an operation."""

    def __init__(self, message: str, db_path: str | None = None) -> None:
        super().__init__(message)
        self.db_path = db_path


class StoreUnavailableError(StoreError):
    """The store cannot be opened or written (missing, read-only, full, locked)."""


class StoreCorruptError(StoreError):
    """The store file exists but is not a readable history database."""


class InvalidArgumentError(NavError, ValueError):
    """A caller supplied a bad limit, an empty query, or an unknown command."""


class PickerError(NavError):
    """The external fuzzy picker could not be started."""
