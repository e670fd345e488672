"""Tests for recent, popular, search and file-type ranking queries."""

from __future__ import annotations

import pytest

from fzf_nav.core.errors import InvalidArgumentError
from fzf_nav.core.events import FileCategory, PathKind
from fzf_nav.engine.ranking import RankingEngine
from fzf_nav.storage.sqlite_store import SQLiteHistoryStore


class TestRecent:
    """Most-recent-first raw events."""

    async def test_scenario_recent_dirs(
        self, store: SQLiteHistoryStore, engine: RankingEngine, at
    ) -> None:
        await store.record_directory_visit("/a", occurred_at=at(1))
        await store.record_directory_visit("/b", occurred_at=at(2))
        await store.record_directory_visit("/a", occurred_at=at(3))

        visits = await engine.recent_dirs(2)

        assert [(v.path, v.occurred_at) for v in visits] == [("/a", at(3)), ("/b", at(2))]

    async def test_duplicates_are_kept(
        self, store: SQLiteHistoryStore, engine: RankingEngine, at
    ) -> None:
        for i in range(3):
            await store.record_directory_visit("/same", occurred_at=at(i))

        visits = await engine.recent_dirs(10)
        assert [v.path for v in visits] == ["/same", "/same", "/same"]

    async def test_never_orders_earlier_before_later(
        self, store: SQLiteHistoryStore, engine: RankingEngine, at
    ) -> None:
        # Out-of-order writers: insertion order differs from timestamp order.
        for seconds, path in [(5, "/e"), (1, "/a"), (4, "/d"), (2, "/b"), (3, "/c")]:
            await store.record_directory_visit(path, occurred_at=at(seconds))

        visits = await engine.recent_dirs(10)

        stamps = [v.occurred_at for v in visits]
        assert stamps == sorted(stamps, reverse=True)
        assert [v.path for v in visits] == ["/e", "/d", "/c", "/b", "/a"]

    async def test_timestamp_ties_go_to_latest_insert(
        self, store: SQLiteHistoryStore, engine: RankingEngine, at
    ) -> None:
        await store.record_directory_visit("/first", occurred_at=at(0))
        await store.record_directory_visit("/second", occurred_at=at(0))

        visits = await engine.recent_dirs(2)
        assert [v.path for v in visits] == ["/second", "/first"]

    async def test_recent_files(
        self, store: SQLiteHistoryStore, engine: RankingEngine, at
    ) -> None:
        await store.record_file_open("/m/song.mp3", occurred_at=at(1))
        await store.record_file_open("/d/doc.pdf", action="edit", occurred_at=at(2))

        opens = await engine.recent_files(5)

        assert [o.path for o in opens] == ["/d/doc.pdf", "/m/song.mp3"]
        assert opens[0].category is FileCategory.DOCUMENT
        assert opens[0].action == "edit"

    async def test_limit_larger_than_history_returns_everything(
        self, store: SQLiteHistoryStore, engine: RankingEngine
    ) -> None:
        await store.record_directory_visit("/only")
        assert len(await engine.recent_dirs(10_000)) == 1

    async def test_empty_history_is_empty_result(self, engine: RankingEngine) -> None:
        assert await engine.recent_dirs(5) == []
        assert await engine.recent_files(5) == []

    @pytest.mark.parametrize("limit", [0, -1, -100])
    async def test_non_positive_limit_rejected(self, engine: RankingEngine, limit: int) -> None:
        with pytest.raises(InvalidArgumentError):
            await engine.recent_dirs(limit)


class TestPopular:
    """Visit-count ranking."""

    async def test_scenario_popular_dirs(
        self, store: SQLiteHistoryStore, engine: RankingEngine, at
    ) -> None:
        await store.record_directory_visit("/a", occurred_at=at(1))
        await store.record_directory_visit("/b", occurred_at=at(2))
        await store.record_directory_visit("/a", occurred_at=at(3))

        ranked = await engine.popular_dirs(2)

        assert [(p.path, p.count) for p in ranked] == [("/a", 2), ("/b", 1)]
        assert ranked[0].last_seen == at(3)

    @pytest.mark.parametrize("visits", [1, 2, 7, 40])
    async def test_count_equals_number_of_visits(
        self, memory_store: SQLiteHistoryStore, visits: int
    ) -> None:
        for _ in range(visits):
            await memory_store.record_directory_visit("/repeat")

        ranked = await RankingEngine(memory_store).popular_dirs(1)
        assert [(p.path, p.count) for p in ranked] == [("/repeat", visits)]

    async def test_frequency_beats_recency(
        self, store: SQLiteHistoryStore, engine: RankingEngine, at
    ) -> None:
        await store.record_directory_visit("/often", occurred_at=at(1))
        await store.record_directory_visit("/often", occurred_at=at(2))
        await store.record_directory_visit("/lately", occurred_at=at(100))

        ranked = await engine.popular_dirs(2)
        assert [p.path for p in ranked] == ["/often", "/lately"]

    async def test_equal_counts_broken_by_recency(
        self, store: SQLiteHistoryStore, engine: RankingEngine, at
    ) -> None:
        await store.record_directory_visit("/old", occurred_at=at(1))
        await store.record_directory_visit("/new", occurred_at=at(5))
        await store.record_directory_visit("/mid", occurred_at=at(3))

        ranked = await engine.popular_dirs(3)
        assert [p.path for p in ranked] == ["/new", "/mid", "/old"]

    async def test_spellings_are_distinct_paths(
        self, store: SQLiteHistoryStore, engine: RankingEngine
    ) -> None:
        await store.record_directory_visit("/home/me")
        await store.record_directory_visit("/home/me/")

        ranked = await engine.popular_dirs(5)
        assert sorted(p.path for p in ranked) == ["/home/me", "/home/me/"]
        assert all(p.count == 1 for p in ranked)


class TestSearch:
    """Case-insensitive substring search."""

    async def test_returns_exactly_matching_paths(
        self, store: SQLiteHistoryStore, engine: RankingEngine, at
    ) -> None:
        await store.record_directory_visit("/home/me/Projects", occurred_at=at(1))
        await store.record_directory_visit("/var/log", occurred_at=at(2))
        await store.record_file_open("/home/me/PROJECT-notes.md", occurred_at=at(3))
        await store.record_file_open("/tmp/other.txt", occurred_at=at(4))

        hits = await engine.search("project", 50)

        assert {(h.kind, h.path) for h in hits} == {
            (PathKind.DIRECTORY, "/home/me/Projects"),
            (PathKind.FILE, "/home/me/PROJECT-notes.md"),
        }

    async def test_most_recent_first_and_distinct(
        self, store: SQLiteHistoryStore, engine: RankingEngine, at
    ) -> None:
        await store.record_directory_visit("/src/alpha", occurred_at=at(1))
        await store.record_directory_visit("/src/beta", occurred_at=at(2))
        await store.record_directory_visit("/src/alpha", occurred_at=at(3))

        hits = await engine.search("src", 10)

        assert [(h.path, h.count) for h in hits] == [("/src/alpha", 2), ("/src/beta", 1)]
        assert hits[0].last_seen == at(3)

    async def test_limit_caps_results(
        self, store: SQLiteHistoryStore, engine: RankingEngine, at
    ) -> None:
        for i in range(5):
            await store.record_directory_visit(f"/data/{i}", occurred_at=at(i))

        hits = await engine.search("data", 2)
        assert [h.path for h in hits] == ["/data/4", "/data/3"]

    async def test_wildcard_characters_are_literal(
        self, store: SQLiteHistoryStore, engine: RankingEngine
    ) -> None:
        await store.record_directory_visit("/tmp/100%_done")
        await store.record_directory_visit("/tmp/100 done")

        assert [h.path for h in await engine.search("%", 10)] == ["/tmp/100%_done"]
        assert [h.path for h in await engine.search("_", 10)] == ["/tmp/100%_done"]

    async def test_non_ascii_case_folding(
        self, store: SQLiteHistoryStore, engine: RankingEngine
    ) -> None:
        await store.record_directory_visit("/home/me/Übungen")

        assert [h.path for h in await engine.search("übung", 10)] == ["/home/me/Übungen"]

    async def test_no_match_is_empty(
        self, store: SQLiteHistoryStore, engine: RankingEngine
    ) -> None:
        await store.record_directory_visit("/a")
        assert await engine.search("zzz", 10) == []

    async def test_empty_query_rejected(self, engine: RankingEngine) -> None:
        with pytest.raises(InvalidArgumentError):
            await engine.search("", 10)


class TestFileStats:
    """Per-category open counts."""

    async def test_scenario_song_and_document(
        self, store: SQLiteHistoryStore, engine: RankingEngine
    ) -> None:
        await store.record_file_open("song.mp3")
        await store.record_file_open("doc.pdf")

        stats = await engine.file_stats()

        assert {(s.category, s.count) for s in stats} == {
            (FileCategory.MEDIA, 1),
            (FileCategory.DOCUMENT, 1),
        }
        # Equal counts are ordered by category name, repeatably.
        assert [s.category for s in stats] == [FileCategory.DOCUMENT, FileCategory.MEDIA]
        assert await engine.file_stats() == stats

    async def test_counts_sum_to_total_and_unseen_absent(
        self, store: SQLiteHistoryStore, engine: RankingEngine
    ) -> None:
        paths = ["a.png", "b.png", "c.jpg", "d.mp4", "e", "f.rs"]
        for path in paths:
            await store.record_file_open(path)

        stats = await engine.file_stats()

        assert sum(s.count for s in stats) == len(paths)
        assert [(s.category, s.count) for s in stats] == [
            (FileCategory.IMAGE, 3),
            (FileCategory.OTHER, 2),
            (FileCategory.MEDIA, 1),
        ]
        assert FileCategory.DOCUMENT not in {s.category for s in stats}

    async def test_unknown_stored_labels_count_as_other(
        self, store: SQLiteHistoryStore, engine: RankingEngine
    ) -> None:
        await store.record_file_open("x.bin")
        conn = store._ensure_conn()
        await conn.execute(
            "INSERT INTO file_history (path, file_type, action, timestamp) VALUES (?, ?, ?, ?)",
            ("/legacy", "video", "open", "2023-01-01T00:00:00+00:00"),
        )
        await conn.commit()

        stats = await engine.file_stats()
        assert [(s.category, s.count) for s in stats] == [(FileCategory.OTHER, 2)]

    async def test_per_action_breakdown(
        self, store: SQLiteHistoryStore, engine: RankingEngine
    ) -> None:
        await store.record_file_open("a.mp3", action="play")
        await store.record_file_open("b.mp3", action="play")
        await store.record_file_open("c.mp3")

        stats = await engine.file_stats()

        assert len(stats) == 1
        assert stats[0].count == 3
        assert stats[0].actions == (("play", 2), ("open", 1))
        assert stats[0].to_dict()["actions"] == {"play": 2, "open": 1}

    async def test_empty_history(self, engine: RankingEngine) -> None:
        assert await engine.file_stats() == []
