from __future__ import annotations

from matchrelay.models.match import Match
from matchrelay.standings import compute_standings

TEAMS = {"A": 1, "B": 2, "C": 3}


def _match(match_id: int, first: str, second: str, score: tuple[int, int], status: str = "finished") -> Match:
    return Match.model_validate(
        {
            "id": match_id,
            "status": status,
            "opponents": [
                {"opponent": {"id": TEAMS[first], "name": first}},
                {"opponent": {"id": TEAMS[second], "name": second}},
            ],
            "results": [
                {"team_id": TEAMS[first], "score": score[0]},
                {"team_id": TEAMS[second], "score": score[1]},
            ],
        }
    )


def _row(entries, name: str):
    return next(entry for entry in entries if entry.team.name == name)


def test_standings_from_finished_matches() -> None:
    entries = compute_standings(
        [
            _match(1, "A", "B", (2, 1)),
            _match(2, "B", "C", (1, 1)),
            _match(3, "A", "C", (0, 2)),
        ]
    )

    assert [entry.rank for entry in entries] == [1, 2, 3]
    a, b, c = _row(entries, "A"), _row(entries, "B"), _row(entries, "C")
    assert (a.wins, a.losses, a.points, a.matches_played) == (1, 1, 3, 2)
    assert (b.wins, b.losses, b.points, b.matches_played) == (0, 1, 1, 2)
    assert (c.wins, c.losses, c.points, c.matches_played) == (1, 0, 4, 2)
    assert [entry.team.name for entry in entries] == ["C", "A", "B"]


def test_wins_break_points_ties_and_stable_order_breaks_the_rest() -> None:
    entries = compute_standings(
        [
            _match(1, "A", "B", (1, 1)),
            _match(2, "A", "C", (1, 1)),
            _match(3, "B", "C", (1, 0)),
        ]
    )

    # A: 2 pts, B: 4 pts (1 win), C: 1 pt
    assert [entry.team.name for entry in entries] == ["B", "A", "C"]

    tied = compute_standings([_match(1, "A", "B", (0, 0)), _match(2, "C", "A", (3, 3))])
    assert [entry.team.name for entry in tied] == ["A", "B", "C"]


def test_unfinished_and_one_sided_matches_are_ignored() -> None:
    one_sided = Match.model_validate(
        {"id": 9, "status": "finished", "opponents": [{"opponent": {"id": 1, "name": "A"}}], "results": []}
    )

    entries = compute_standings([_match(1, "A", "B", (1, 0), status="running"), one_sided])

    assert entries == []


def test_standing_payload_shape() -> None:
    entries = compute_standings([_match(1, "A", "B", (1, 0))])

    assert entries[0].payload() == {
        "rank": 1,
        "team": {"id": 1, "name": "A", "acronym": None, "image_url": None, "slug": None, "location": None},
        "wins": 1,
        "losses": 0,
        "points": 3,
        "matchesPlayed": 1,
    }


def test_points_and_wins_tie_keeps_first_seen_order() -> None:
    entries = compute_standings([_match(1, "A", "B", (2, 0)), _match(2, "B", "C", (2, 1))])

    assert [(entry.team.name, entry.points, entry.wins, entry.losses) for entry in entries] == [
        ("A", 3, 1, 0),
        ("B", 3, 1, 1),
        ("C", 0, 0, 1),
    ]
