from __future__ import annotations

from datetime import UTC, datetime, timedelta

from matchrelay.state.events import NotificationKind
from matchrelay.state.policy import is_score_update, minutes_until, reminder_due, status_event

NOW = datetime(2026, 3, 1, 18, 0, tzinfo=UTC)
WINDOW = timedelta(minutes=15)


def test_first_observation_is_a_baseline() -> None:
    assert status_event(None, "running") is None
    assert status_event(None, "finished") is None


def test_status_transitions_with_events() -> None:
    assert status_event("not_started", "running") is NotificationKind.MATCH_STARTING
    assert status_event("running", "finished") is NotificationKind.MATCH_FINISHED


def test_status_transitions_without_events() -> None:
    assert status_event("running", "running") is None
    assert status_event("not_started", "finished") is None
    assert status_event("not_started", "canceled") is None
    assert status_event("finished", "running") is None


def test_score_update_only_while_running() -> None:
    assert is_score_update(previous_status="running", current_status="running", previous_score="0-0", current_score="1-0")
    assert not is_score_update(
        previous_status="running", current_status="running", previous_score="1-0", current_score="1-0"
    )
    assert not is_score_update(
        previous_status="not_started", current_status="running", previous_score="0-0", current_score="1-0"
    )
    assert not is_score_update(
        previous_status="running", current_status="running", previous_score=None, current_score="1-0"
    )


def test_reminder_window_bounds() -> None:
    assert reminder_due("not_started", NOW + timedelta(minutes=10), NOW, WINDOW)
    assert reminder_due("not_started", NOW + WINDOW, NOW, WINDOW)
    assert reminder_due("not_started", NOW, NOW, WINDOW)
    assert not reminder_due("not_started", NOW + WINDOW + timedelta(seconds=1), NOW, WINDOW)
    assert not reminder_due("not_started", NOW - timedelta(seconds=1), NOW, WINDOW)
    assert not reminder_due("running", NOW + timedelta(minutes=5), NOW, WINDOW)
    assert not reminder_due("not_started", None, NOW, WINDOW)


def test_minutes_until_rounds_up() -> None:
    assert minutes_until(NOW + timedelta(minutes=9, seconds=1), NOW) == 10
    assert minutes_until(NOW + timedelta(minutes=10), NOW) == 10
    assert minutes_until(NOW - timedelta(minutes=1), NOW) == 0
