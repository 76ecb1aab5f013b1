from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from matchrelay._constants import MATCHES_KEY
from matchrelay.ingestion.merge import EntityMerger, dedupe_by_key, merge_entities
from matchrelay.models.match import Match
from matchrelay.state.backend import MemoryBackend
from matchrelay.state.store import Store

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _match(match_id: int, status: str = "not_started", *, hours: float | None = 0.0) -> Match:
    begin_at = None if hours is None else T0 + timedelta(hours=hours)
    return Match(id=match_id, status=status, begin_at=begin_at)


def test_dedupe_last_write_wins_first_position_kept() -> None:
    items = [("a", 1), ("b", 1), ("a", 2)]
    assert dedupe_by_key(items, key=lambda item: item[0]) == [("a", 2), ("b", 1)]


def test_merge_entities_keeps_previous_and_overwrites_by_key() -> None:
    merged = merge_entities(
        [_match(1, hours=1), _match(2, hours=2)],
        [_match(2, "running", hours=2), _match(3, hours=0)],
        key=lambda match: match.id,
        sort_key=lambda match: match.begin_at,
    )

    assert [match.id for match in merged] == [3, 1, 2]
    assert merged[2].status == "running"


@pytest.mark.asyncio
async def test_merge_accumulates_history_across_snapshots() -> None:
    store = Store(MemoryBackend())
    merger = EntityMerger(store, clock=lambda: T0)

    await merger.merge([_match(1, hours=-48), _match(2, hours=1)])
    snapshot = await merger.merge([_match(2, "running", hours=1), _match(3, hours=5)])

    assert [match.id for match in snapshot.matches] == [1, 2, 3]
    assert snapshot.count == 3
    assert snapshot.matches[1].status == "running"

    stored = await store.get(MATCHES_KEY)
    assert stored["count"] == 3
    assert stored["lastUpdate"].startswith("2026-03-01T12:00:00")


@pytest.mark.asyncio
async def test_empty_fetch_never_clears_history() -> None:
    store = Store(MemoryBackend())
    merger = EntityMerger(store, clock=lambda: T0)
    await merger.merge([_match(1)])

    snapshot = await merger.merge([])

    assert [match.id for match in snapshot.matches] == [1]
    loaded = await merger.load()
    assert loaded is not None and loaded.count == 1


@pytest.mark.asyncio
async def test_empty_fetch_on_empty_store_writes_nothing() -> None:
    store = Store(MemoryBackend())
    merger = EntityMerger(store, clock=lambda: T0)

    snapshot = await merger.merge([])

    assert snapshot.matches == []
    assert await store.get(MATCHES_KEY) is None


@pytest.mark.asyncio
async def test_duplicates_within_a_fetch_keep_the_last_record() -> None:
    merger = EntityMerger(Store(MemoryBackend()), clock=lambda: T0)

    snapshot = await merger.merge([_match(5, "not_started"), _match(5, "running")])

    assert snapshot.count == 1
    assert snapshot.matches[0].status == "running"


@pytest.mark.asyncio
async def test_undated_matches_sort_last() -> None:
    merger = EntityMerger(Store(MemoryBackend()), clock=lambda: T0)

    snapshot = await merger.merge([_match(1, hours=None), _match(2, hours=3), _match(3, hours=-3)])

    assert [match.id for match in snapshot.matches] == [3, 2, 1]


@pytest.mark.asyncio
async def test_merge_without_backend_serves_local_copy() -> None:
    store = Store(None)
    merger = EntityMerger(store, clock=lambda: T0)

    await merger.merge([_match(1), _match(2, hours=1)])
    loaded = await merger.load()

    assert loaded is not None
    assert [match.id for match in loaded.matches] == [1, 2]


@pytest.mark.asyncio
async def test_unreadable_stored_records_are_skipped() -> None:
    store = Store(MemoryBackend())
    await store.set(MATCHES_KEY, {"matches": [{"id": 1}, {"name": "no id"}], "lastUpdate": T0.isoformat()})

    loaded = await EntityMerger(store).load()

    assert loaded is not None
    assert [match.id for match in loaded.matches] == [1]
    assert loaded.count == 1


@pytest.mark.asyncio
async def test_merging_the_same_fetch_twice_is_idempotent() -> None:
    merger = EntityMerger(Store(MemoryBackend()), clock=lambda: T0)
    fetched = [_match(2, hours=2), _match(1, hours=1)]

    first = await merger.merge(fetched)
    second = await merger.merge(fetched)

    assert second.matches == first.matches
    assert second.count == 2


class FlakyReadBackend(MemoryBackend):
    """Backend whose next ``get_failures`` reads raise; writes always succeed."""

    def __init__(self) -> None:
        super().__init__()
        self.get_failures = 0

    async def get(self, name: str) -> str | None:
        if self.get_failures:
            self.get_failures -= 1
            raise ConnectionError("connection reset")
        return await super().get(name)


@pytest.mark.asyncio
async def test_failed_history_read_never_overwrites_persisted_history() -> None:
    backend = FlakyReadBackend()
    await EntityMerger(Store(backend), clock=lambda: T0).merge([_match(1), _match(2, hours=1), _match(3, hours=2)])

    store = Store(backend)
    merger = EntityMerger(store, clock=lambda: T0)
    backend.get_failures = 1
    degraded = await merger.merge([_match(4, hours=3)])

    assert [match.id for match in degraded.matches] == [4]
    assert [match["id"] for match in (await Store(backend).get(MATCHES_KEY))["matches"]] == [1, 2, 3]

    recovered = await merger.merge([_match(4, hours=3)])
    assert [match.id for match in recovered.matches] == [1, 2, 3, 4]
