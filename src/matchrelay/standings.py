"""Standings derived from finished matches.

Used when the provider has no standings for a tournament.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from matchrelay.models.match import Match, MatchStatus
from matchrelay.models.standings import StandingEntry
from matchrelay.models.team import Team

WIN_POINTS = 3
DRAW_POINTS = 1


@dataclass
class _TeamTally:
    team: Team
    wins: int = 0
    losses: int = 0
    points: int = 0
    matches_played: int = 0


def compute_standings(matches: Iterable[Match]) -> list[StandingEntry]:
    """Rank teams by (points desc, wins desc); ties keep first-seen order."""
    tallies: dict[int | str, _TeamTally] = {}

    def _tally(team: Team) -> _TeamTally:
        key: int | str = team.id if team.id is not None else team.name
        entry = tallies.get(key)
        if entry is None:
            entry = _TeamTally(team=team)
            tallies[key] = entry
        return entry

    for match in matches:
        if match.status != MatchStatus.FINISHED:
            continue
        team1, team2 = match.team(0), match.team(1)
        if team1 is None or team2 is None:
            continue

        first, second = _tally(team1), _tally(team2)
        first.matches_played += 1
        second.matches_played += 1

        score1, score2 = match.score_pair
        if score1 > score2:
            first.wins += 1
            first.points += WIN_POINTS
            second.losses += 1
        elif score2 > score1:
            second.wins += 1
            second.points += WIN_POINTS
            first.losses += 1
        else:
            first.points += DRAW_POINTS
            second.points += DRAW_POINTS

    ranked = sorted(tallies.values(), key=lambda t: (-t.points, -t.wins))
    return [
        StandingEntry(
            rank=position,
            team=tally.team,
            wins=tally.wins,
            losses=tally.losses,
            points=tally.points,
            matches_played=tally.matches_played,
        )
        for position, tally in enumerate(ranked, start=1)
    ]
