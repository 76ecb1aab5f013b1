from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from matchrelay._constants import MATCH_SCORE_KEY, MATCH_STATUS_KEY
from matchrelay.models.match import Match
from matchrelay.notifications.detector import EventDetector
from matchrelay.state.backend import MemoryBackend
from matchrelay.state.events import NotificationKind
from matchrelay.state.store import Store

NOW = datetime(2026, 3, 1, 18, 0, tzinfo=UTC)


def _match(
    match_id: int = 1,
    status: str = "not_started",
    *,
    score: tuple[int, int] = (0, 0),
    begin_at: datetime | None = None,
) -> Match:
    return Match.model_validate(
        {
            "id": match_id,
            "status": status,
            "begin_at": begin_at or NOW + timedelta(hours=2),
            "opponents": [{"opponent": {"id": 10, "name": "NAVI"}}, {"opponent": {"id": 20, "name": "FaZe"}}],
            "results": [{"team_id": 10, "score": score[0]}, {"team_id": 20, "score": score[1]}],
        }
    )


def _detector(store: Store | None = None, *, now: datetime = NOW) -> EventDetector:
    return EventDetector(store if store is not None else Store(MemoryBackend()), clock=lambda: now)


def _kinds(events) -> list[NotificationKind]:
    return [event.kind for event in events]


@pytest.mark.asyncio
async def test_first_observation_records_baseline_without_events() -> None:
    store = Store(MemoryBackend())
    detector = _detector(store)

    events = await detector.detect([_match(1, "running", score=(1, 0))])

    assert events == []
    assert await store.hget(MATCH_STATUS_KEY, "1") == "running"
    assert await store.hget(MATCH_SCORE_KEY, "1") == "1-0"


@pytest.mark.asyncio
async def test_start_then_finish_each_fire_once() -> None:
    detector = _detector()

    assert await detector.detect([_match(1, "not_started")]) == []

    started = await detector.detect([_match(1, "running")])
    assert _kinds(started) == [NotificationKind.MATCH_STARTING]
    assert await detector.detect([_match(1, "running")]) == []

    finished = await detector.detect([_match(1, "finished", score=(2, 1))])
    assert _kinds(finished) == [NotificationKind.MATCH_FINISHED]
    assert finished[0].winner == "NAVI"
    assert finished[0].loser == "FaZe"
    assert await detector.detect([_match(1, "finished", score=(2, 1))]) == []


@pytest.mark.asyncio
async def test_finished_draw_has_no_winner() -> None:
    detector = _detector()
    await detector.detect([_match(1, "running", score=(1, 1))])

    events = await detector.detect([_match(1, "finished", score=(1, 1))])

    assert _kinds(events) == [NotificationKind.MATCH_FINISHED]
    assert events[0].winner is None
    assert events[0].is_draw


@pytest.mark.asyncio
async def test_score_updates_fire_once_per_change() -> None:
    detector = _detector()
    await detector.detect([_match(1, "running", score=(0, 0))])

    assert _kinds(await detector.detect([_match(1, "running", score=(1, 0))])) == [NotificationKind.SCORE_UPDATE]
    assert await detector.detect([_match(1, "running", score=(1, 0))]) == []
    assert _kinds(await detector.detect([_match(1, "running", score=(1, 1))])) == [NotificationKind.SCORE_UPDATE]


@pytest.mark.asyncio
async def test_status_change_takes_precedence_over_score_change() -> None:
    detector = _detector()
    await detector.detect([_match(1, "not_started", score=(0, 0))])

    events = await detector.detect([_match(1, "running", score=(1, 0))])

    assert _kinds(events) == [NotificationKind.MATCH_STARTING]


@pytest.mark.asyncio
async def test_unannounced_transitions_are_silent() -> None:
    detector = _detector()
    await detector.detect([_match(1, "not_started"), _match(2, "running")])

    events = await detector.detect([_match(1, "canceled"), _match(2, "canceled")])

    assert events == []


@pytest.mark.asyncio
async def test_reminder_fires_at_most_once() -> None:
    store = Store(MemoryBackend())
    begin_at = NOW + timedelta(minutes=10)

    first = await _detector(store).detect([_match(1, begin_at=begin_at)])
    assert _kinds(first) == [NotificationKind.MATCH_REMINDER]
    assert first[0].minutes_until == 10

    later = await _detector(store, now=NOW + timedelta(minutes=5)).detect([_match(1, begin_at=begin_at)])
    assert later == []


@pytest.mark.asyncio
async def test_reminder_not_sent_outside_window() -> None:
    detector = _detector()

    assert await detector.detect([_match(1, begin_at=NOW + timedelta(minutes=30))]) == []
    assert await detector.detect([_match(2, begin_at=NOW - timedelta(minutes=1))]) == []


@pytest.mark.asyncio
async def test_concurrent_passes_send_one_reminder() -> None:
    store = Store(MemoryBackend())
    match = _match(1, begin_at=NOW + timedelta(minutes=5))

    results = await asyncio.gather(_detector(store).detect([match]), _detector(store).detect([match]))

    reminders = [event for events in results for event in events if event.kind is NotificationKind.MATCH_REMINDER]
    assert len(reminders) == 1


@pytest.mark.asyncio
async def test_degraded_store_skips_detection() -> None:
    store = Store(None)

    events = await _detector(store).detect([_match(1, "running", begin_at=NOW + timedelta(minutes=5))])

    assert events == []


@pytest.mark.asyncio
async def test_event_payload_is_all_strings() -> None:
    detector = _detector()
    await detector.detect([_match(7, "running", score=(0, 0))])

    events = await detector.detect([_match(7, "finished", score=(0, 2))])

    data = events[0].data()
    assert data["match_id"] == "7"
    assert data["type"] == "match_finished"
    assert data["score"] == "0-2"
    assert data["winner"] == "FaZe"
    assert all(isinstance(value, str) for value in data.values())
