"""Match model."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field, field_validator

from matchrelay.ingestion.normalize import safe_int
from matchrelay.models._base import ProviderRecord, ProviderTimestamp
from matchrelay.models.team import Team


class MatchStatus(StrEnum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINISHED = "finished"
    CANCELED = "canceled"


class Opponent(ProviderRecord):
    """One side of a match."""

    opponent: Team | None = None
    """Team reference; ``None`` while the slot is still to be decided."""
    type: str | None = None
    """Opponent kind reported by the provider (``"Team"``)."""


class MatchResult(ProviderRecord):
    """Score of one opponent."""

    score: int = 0
    team_id: int | None = None

    @field_validator("score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> int:
        parsed = safe_int(value)
        return parsed if parsed is not None else 0


class Match(ProviderRecord):
    """A match record.

    ``id`` is the only merge key. Everything else is replaced wholesale by
    the newest snapshot that mentions the id.
    """

    id: int
    """Provider match id, stable across snapshots."""
    name: str | None = None
    """Provider label (e.g. ``"Grand final: NAVI vs FaZe"``)."""
    status: MatchStatus | str = MatchStatus.NOT_STARTED
    """Lifecycle status. Values outside :class:`MatchStatus` are kept verbatim."""
    begin_at: ProviderTimestamp = None
    """Scheduled or actual start time."""
    opponents: list[Opponent] = Field(default_factory=list)
    results: list[MatchResult] = Field(default_factory=list)
    tournament_id: int | None = None

    @field_validator("opponents", "results", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("status", mode="after")
    @classmethod
    def _known_status(cls, value: MatchStatus | str) -> MatchStatus | str:
        try:
            return MatchStatus(value)
        except ValueError:
            return value

    def team(self, index: int) -> Team | None:
        if index < len(self.opponents):
            return self.opponents[index].opponent
        return None

    @property
    def team_names(self) -> tuple[str, str]:
        """Both team names, with placeholders for undecided slots."""
        names: list[str] = []
        for index in range(2):
            team = self.team(index)
            names.append(team.name if team is not None and team.name else f"Team {index + 1}")
        return names[0], names[1]

    @property
    def score_pair(self) -> tuple[int, int]:
        """Scores in opponent order; a missing score counts as 0."""
        by_team = {result.team_id: result.score for result in self.results if result.team_id is not None}
        scores = [0, 0]
        for index in range(2):
            team = self.team(index)
            if team is not None and team.id is not None and team.id in by_team:
                scores[index] = by_team[team.id]
            elif index < len(self.results):
                scores[index] = self.results[index].score
        return scores[0], scores[1]

    @property
    def score_string(self) -> str:
        score1, score2 = self.score_pair
        return f"{score1}-{score2}"

    @property
    def winner_index(self) -> int | None:
        """Index of the higher-scoring opponent, ``None`` on equal scores."""
        score1, score2 = self.score_pair
        if score1 > score2:
            return 0
        if score2 > score1:
            return 1
        return None
