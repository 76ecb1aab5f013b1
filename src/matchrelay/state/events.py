"""Notification-worthy match events.

The detector turns marker diffs into these events. Only the dispatcher
renders and sends them.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from matchrelay.models.match import Match


class NotificationKind(StrEnum):
    MATCH_STARTING = "match_starting"
    SCORE_UPDATE = "score_update"
    MATCH_FINISHED = "match_finished"
    MATCH_REMINDER = "match_reminder"


class MatchEvent(BaseModel):
    """A detected transition for one match."""

    model_config = ConfigDict(frozen=True)

    kind: NotificationKind
    match_id: int
    team1: str
    team2: str
    status: str
    score1: int = 0
    score2: int = 0
    winner: str | None = Field(default=None, description="Winning team name; None on a draw or when not finished.")
    loser: str | None = None
    begin_at: datetime | None = None
    minutes_until: int | None = Field(default=None, description="Whole minutes to start, reminders only.")

    @classmethod
    def from_match(
        cls,
        kind: NotificationKind,
        match: Match,
        *,
        minutes_until: int | None = None,
    ) -> MatchEvent:
        team1, team2 = match.team_names
        score1, score2 = match.score_pair
        winner: str | None = None
        loser: str | None = None
        if kind == NotificationKind.MATCH_FINISHED:
            index = match.winner_index
            if index is not None:
                winner = (team1, team2)[index]
                loser = (team1, team2)[1 - index]
        return cls(
            kind=kind,
            match_id=match.id,
            team1=team1,
            team2=team2,
            status=str(match.status),
            score1=score1,
            score2=score2,
            winner=winner,
            loser=loser,
            begin_at=match.begin_at,
            minutes_until=minutes_until,
        )

    @property
    def team_names(self) -> tuple[str, str]:
        return self.team1, self.team2

    @property
    def is_draw(self) -> bool:
        return self.kind == NotificationKind.MATCH_FINISHED and self.winner is None

    def template_args(self) -> dict[str, Any]:
        """Arguments available to message templates."""
        return {
            "team1": self.team1,
            "team2": self.team2,
            "score1": self.score1,
            "score2": self.score2,
            "winner": self.winner or "",
            "loser": self.loser or "",
            "minutes": self.minutes_until if self.minutes_until is not None else "",
        }

    def data(self) -> dict[str, str]:
        """Structured push payload. Push transports only accept string values."""
        payload = {
            "match_id": str(self.match_id),
            "team1": self.team1,
            "team2": self.team2,
            "type": self.kind.value,
            "status": self.status,
            "score": f"{self.score1}-{self.score2}",
        }
        if self.winner is not None:
            payload["winner"] = self.winner
        if self.begin_at is not None:
            payload["begin_at"] = self.begin_at.isoformat()
        return payload
