"""Event detector: diffs each match against its persisted markers.

Markers per match id:

* status, in the ``match:statuses`` hash;
* score string (``"1-0"``), in the ``match:scores`` hash;
* reminder-sent flag, as membership of the ``match:reminders`` set.

Markers are read then written without a transaction. Two overlapping passes
over the same match can double-fire or miss a status event; reminders use the
set-add result as a test-and-set and fire at most once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta

from matchrelay._constants import MATCH_SCORE_KEY, MATCH_STATUS_KEY, REMINDER_WINDOW, REMINDERS_SENT_KEY
from matchrelay.models.match import Match
from matchrelay.state.events import MatchEvent, NotificationKind
from matchrelay.state.policy import is_score_update, minutes_until, reminder_due, status_event
from matchrelay.state.store import Store

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class EventDetector:
    """Stateless over store reads/writes; all memory lives in the markers."""

    def __init__(
        self,
        store: Store,
        *,
        reminder_window: timedelta = REMINDER_WINDOW,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._reminder_window = reminder_window
        self._clock = clock

    async def detect(self, matches: Sequence[Match]) -> list[MatchEvent]:
        """Return the events of this pass, in match order.

        While the store is degraded nothing is read or written: missing
        markers would otherwise look like never-seen matches.
        """
        if not self._store.is_connected:
            _logger.warning("Store degraded; skipping event detection for %d match(es)", len(matches))
            return []

        now = self._clock()
        events: list[MatchEvent] = []
        for match in matches:
            events.extend(await self._detect_one(match, now))

        if events:
            _logger.info("Detected %d event(s) across %d match(es)", len(events), len(matches))
        return events

    async def _detect_one(self, match: Match, now: datetime) -> list[MatchEvent]:
        match_id = str(match.id)
        current_status = str(match.status)
        current_score = match.score_string
        events: list[MatchEvent] = []

        previous_status = await self._store.hget(MATCH_STATUS_KEY, match_id)
        previous_score = await self._store.hget(MATCH_SCORE_KEY, match_id)

        kind = status_event(previous_status, current_status)
        if kind is not None:
            events.append(MatchEvent.from_match(kind, match))
        elif is_score_update(
            previous_status=previous_status,
            current_status=current_status,
            previous_score=previous_score,
            current_score=current_score,
        ):
            events.append(MatchEvent.from_match(NotificationKind.SCORE_UPDATE, match))

        if previous_status != current_status:
            await self._store.hset(MATCH_STATUS_KEY, match_id, current_status)
        if previous_score != current_score:
            await self._store.hset(MATCH_SCORE_KEY, match_id, current_score)

        if reminder_due(current_status, match.begin_at, now, self._reminder_window):
            if await self._store.sadd(REMINDERS_SENT_KEY, match_id):
                assert match.begin_at is not None  # noqa: S101
                events.append(
                    MatchEvent.from_match(
                        NotificationKind.MATCH_REMINDER,
                        match,
                        minutes_until=minutes_until(match.begin_at, now),
                    )
                )

        for event in events:
            _logger.debug("Match %s: %s (%s -> %s)", match_id, event.kind.value, previous_status, current_status)
        return events
