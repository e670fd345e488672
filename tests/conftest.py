"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio

from fzf_nav.config import NavConfig, StoreSettings
from fzf_nav.engine.facade import QueryFacade
from fzf_nav.engine.ranking import RankingEngine
from fzf_nav.storage.sqlite_store import MEMORY_DB, SQLiteHistoryStore


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Location for a throwaway history database."""
    return tmp_path / "history" / "fzf.db"


@pytest.fixture
def config(db_path: Path) -> NavConfig:
    """Configuration pointing at the temporary database, colors off."""
    return NavConfig(db_path=db_path, color=False)


@pytest_asyncio.fixture
async def store(config: NavConfig) -> AsyncGenerator[SQLiteHistoryStore, None]:
    """An initialized on-disk store, closed after the test."""
    history = SQLiteHistoryStore.from_config(config)
    await history.initialize()
    yield history
    await history.close()


@pytest_asyncio.fixture
async def memory_store() -> AsyncGenerator[SQLiteHistoryStore, None]:
    """An initialized in-memory store."""
    history = SQLiteHistoryStore(MEMORY_DB, StoreSettings(write_retries=0))
    await history.initialize()
    yield history
    await history.close()


@pytest.fixture
def engine(store: SQLiteHistoryStore) -> RankingEngine:
    return RankingEngine(store)


@pytest.fixture
def facade(store: SQLiteHistoryStore, config: NavConfig) -> QueryFacade:
    return QueryFacade(store, config)


@pytest.fixture
def reference_time() -> datetime:
    """Standard reference time for tests."""
    return datetime(2024, 2, 4, 14, 30, 0, tzinfo=UTC)


@pytest.fixture
def at(reference_time: datetime):
    """Build timestamps as ``reference_time + seconds``."""

    def _at(seconds: float) -> datetime:
        return reference_time + timedelta(seconds=seconds)

    return _at
