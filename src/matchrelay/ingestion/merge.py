"""Accumulate-and-overwrite merge of provider snapshots.

The provider only answers for a bounded time window per request. Merging
every fetch into the stored history keeps matches that scrolled out of the
window, so the history only grows.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Sequence
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import ValidationError

from matchrelay._constants import MATCHES_KEY, MATCHES_TTL_SECONDS
from matchrelay.models.match import Match
from matchrelay.models.snapshots import MatchesSnapshot
from matchrelay.state.store import Store

_logger = logging.getLogger(__name__)

E = TypeVar("E")

_FAR_FUTURE = datetime.max.replace(tzinfo=UTC)


def dedupe_by_key(items: Iterable[E], key: Callable[[E], Hashable]) -> list[E]:
    """Drop repeated identities, last write wins, first-seen position kept."""
    by_key: dict[Hashable, E] = {}
    for item in items:
        by_key[key(item)] = item
    return list(by_key.values())


def merge_entities(
    previous: Iterable[E],
    incoming: Iterable[E],
    *,
    key: Callable[[E], Hashable],
    sort_key: Callable[[E], Any] | None = None,
) -> list[E]:
    """Seed an identity map from *previous*, overwrite it with *incoming*.

    Entities missing from *incoming* are kept. The result is sorted with a
    stable sort when *sort_key* is given.
    """
    by_key: dict[Hashable, E] = {key(item): item for item in previous}
    for item in dedupe_by_key(incoming, key):
        by_key[key(item)] = item
    merged = list(by_key.values())
    if sort_key is not None:
        merged.sort(key=sort_key)
    return merged


def match_sort_key(match: Match) -> datetime:
    """Ascending start time; undated matches go last."""
    return match.begin_at if match.begin_at is not None else _FAR_FUTURE


def parse_match_records(records: Sequence[Any]) -> list[Match]:
    """Validate raw match dicts, skipping records without a usable id."""
    matches: list[Match] = []
    for record in records:
        if isinstance(record, Match):
            matches.append(record)
            continue
        try:
            matches.append(Match.model_validate(record))
        except ValidationError:
            _logger.debug("Skipping malformed match record: %r", record, exc_info=True)
    return matches


class EntityMerger:
    """Reconciles fetched matches with the persisted history."""

    def __init__(
        self,
        store: Store,
        *,
        ttl_seconds: int = MATCHES_TTL_SECONDS,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._store = store
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    async def load(self) -> MatchesSnapshot | None:
        """Read the persisted history (or the local fallback copy)."""
        cached = await self._store.get(MATCHES_KEY)
        if not isinstance(cached, dict):
            return None
        try:
            return MatchesSnapshot.model_validate(
                {**cached, "matches": parse_match_records(cached.get("matches") or [])}
            )
        except ValidationError:
            _logger.warning("Stored match history is unreadable; starting a new one", exc_info=True)
            return None

    async def merge(self, fetched: Sequence[Match]) -> MatchesSnapshot:
        """Merge *fetched* into the history and persist the result.

        An empty fetch never clears history: the previous snapshot is
        returned untouched and nothing is written.

        When the history could not be read because the store is degraded,
        the result is kept in the local copy only, so a failed read never
        overwrites the persisted history.
        """
        previous = await self.load()
        if not fetched:
            return previous if previous is not None else MatchesSnapshot(last_update=self._clock())

        merged = merge_entities(
            previous.matches if previous is not None else [],
            fetched,
            key=lambda match: match.id,
            sort_key=match_sort_key,
        )
        snapshot = MatchesSnapshot(matches=merged, last_update=self._clock(), count=len(merged))

        if previous is None and not self._store.is_connected:
            self._store.remember(MATCHES_KEY, snapshot.payload())
            _logger.warning("History unreadable while the store is degraded; kept %d matches locally", len(merged))
            return snapshot

        persisted = await self._store.set(MATCHES_KEY, snapshot.payload(), self._ttl_seconds)
        _logger.info(
            "Merged %d fetched matches into history of %d (%s)",
            len(fetched),
            len(merged),
            "persisted" if persisted else "local fallback only",
        )
        return snapshot
