"""Read-API snapshot payloads."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import Field, model_validator

from matchrelay.models._base import ApiModel
from matchrelay.models.match import Match
from matchrelay.models.standings import StandingEntry
from matchrelay.models.tournament import Tournament


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _fill_count(values: Any, items_key: str) -> Any:
    if isinstance(values, dict) and values.get("count") is None:
        items = values.get(items_key)
        values = {**values, "count": len(items) if isinstance(items, list) else 0}
    return values


class MatchesSnapshot(ApiModel):
    """The reconciled match history: ``{matches, lastUpdate, count}``."""

    matches: list[Match] = Field(default_factory=list)
    last_update: datetime = Field(default_factory=_utcnow)
    count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _default_count(cls, values: Any) -> Any:
        return _fill_count(values, "matches")


class TournamentsSnapshot(ApiModel):
    """Qualifying tournaments: ``{tournaments, lastUpdate, count}``."""

    tournaments: list[Tournament] = Field(default_factory=list)
    last_update: datetime = Field(default_factory=_utcnow)
    count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _default_count(cls, values: Any) -> Any:
        return _fill_count(values, "tournaments")


class StandingsSnapshot(ApiModel):
    """Tournament table: ``{tournament, standings, matches, lastUpdate}``.

    ``tournament`` is ``None`` when the tournament itself could not be fetched.
    """

    tournament: Tournament | None = None
    standings: list[StandingEntry] = Field(default_factory=list)
    matches: list[Match] = Field(default_factory=list)
    last_update: datetime = Field(default_factory=_utcnow)
