"""Deterministic marker transition policy.

Pure functions only: the detector reads markers, asks these rules what the
diff means, then writes markers back.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from matchrelay.models.match import MatchStatus
from matchrelay.state.events import NotificationKind

_STATUS_TRANSITIONS: dict[tuple[str, str], NotificationKind] = {
    (MatchStatus.NOT_STARTED.value, MatchStatus.RUNNING.value): NotificationKind.MATCH_STARTING,
    (MatchStatus.RUNNING.value, MatchStatus.FINISHED.value): NotificationKind.MATCH_FINISHED,
}


def status_event(previous: str | None, current: str) -> NotificationKind | None:
    """Event for a status change, if the change has one.

    ``previous is None`` means the match was never seen: that first
    observation is a baseline and never an event.
    """
    if previous is None or previous == current:
        return None
    return _STATUS_TRANSITIONS.get((str(previous), str(current)))


def is_score_update(
    *,
    previous_status: str | None,
    current_status: str,
    previous_score: str | None,
    current_score: str,
) -> bool:
    """A score change counts only while the match stays running."""
    if previous_status != MatchStatus.RUNNING or current_status != MatchStatus.RUNNING:
        return False
    return previous_score is not None and previous_score != current_score


def reminder_due(status: str, begin_at: datetime | None, now: datetime, window: timedelta) -> bool:
    """Whether *now* lies in ``[begin_at - window, begin_at]`` for a not-started match."""
    if status != MatchStatus.NOT_STARTED or begin_at is None:
        return False
    return now <= begin_at <= now + window


def minutes_until(begin_at: datetime, now: datetime) -> int:
    """Whole minutes to start, rounded up so a reminder never says 0 too early."""
    seconds = (begin_at - now).total_seconds()
    return max(0, math.ceil(seconds / 60))
