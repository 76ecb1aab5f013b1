"""Standings table entry."""

from __future__ import annotations

from matchrelay.models._base import ApiModel
from matchrelay.models.team import Team


class StandingEntry(ApiModel):
    """One row of a tournament table.

    Serialized as ``{rank, team, wins, losses, points, matchesPlayed}``.
    Entries from the provider's standings endpoint carry fewer counters; the
    missing ones default to ``0``.
    """

    rank: int = 0
    team: Team
    wins: int = 0
    losses: int = 0
    points: int = 0
    matches_played: int = 0
