from datetime import datetime

import pytest

from leaguestats.aggregator import (
    compute_standings,
    format_points_pct,
    league_standings,
    prior_totals,
    rank_standings,
    scoring_leaders,
)
from leaguestats.models import Event, Game, Player, Snapshot, StandingsRow, Team

TEAMS = [Team("H", "Hawks"), Team("A", "Aces"), Team("X", "Idle")]
PLAYERS = [
    Player("p1", "Alice", team_id="H", number=9),
    Player("p2", "Bob", team_id="H", number=4),
    Player("p3", "Cid", team_id="A", number=8),
    Player("p4", "Dee", team_id="A", number=2),
]


def make_event(game, kind, player_id, team="H", period=1, time="01:00"):
    return Event(game, team, period, time, kind, player_id)


def test_leaders_collapse_multiple_games():
    events = [
        make_event("G1", "goal", "p1"),
        make_event("G1", "assist", "p2"),
        make_event("G1", "shot", "p1"),
        make_event("G2", "goal", "p1"),
        make_event("G2", "shot", "p2"),
        make_event("G2", "goal", "p3", team="A"),
        make_event("G2", "goal", "ghost", team="A"),
        make_event("G2", "goal", None, team="A"),
    ]

    leaders = scoring_leaders(events, PLAYERS, TEAMS)

    alice = next(row for row in leaders if row.player == "Alice")
    assert alice.team == "Hawks"
    assert alice.games_played == 2
    assert (alice.goals, alice.assists, alice.shots) == (2, 0, 1)
    assert alice.points_per_game == pytest.approx(1.0)

    bob = next(row for row in leaders if row.player == "Bob")
    assert bob.games_played == 2
    assert bob.points_per_game == pytest.approx(0.5)

    # Bob and Cid tie on points; Cid has more goals.
    assert [row.player for row in leaders] == ["Alice", "Cid", "Bob", "Dee"]


def test_players_without_events_have_zero_rate():
    [row] = scoring_leaders([], [Player("p9", "Zed")])

    assert row.games_played == 0
    assert row.points == 0
    assert row.points_per_game == 0
    assert row.team is None


def test_rank_standings_by_points_then_goal_differential():
    rows = [
        StandingsRow("Low", points=4, goals_for=10, goals_against=12),
        StandingsRow("TopTight", points=8, goals_for=20, goals_against=19),
        StandingsRow("TopWide", points=8, goals_for=25, goals_against=10),
        StandingsRow("LowTwin", points=4, goals_for=9, goals_against=11),
    ]

    ranked = rank_standings(rows)

    assert [row.team for row in ranked] == ["TopWide", "TopTight", "Low", "LowTwin"]


def test_points_pct_display():
    assert format_points_pct(None) == "-"
    assert format_points_pct(0.6666) == "0.667"
    assert format_points_pct(1) == "1.000"


def test_compute_standings_from_final_games():
    games = [
        Game("G1", "H", "A", status="final"),
        Game("G2", "A", "H", status="final"),
        Game("G3", "H", "A", status="final", home_score=2, away_score=2),
        Game("G4", "H", "A", status="scheduled"),
    ]
    events = [
        make_event("G1", "goal", "p1"),
        make_event("G1", "goal", "p1", period=2),
        make_event("G1", "goal", "p3", team="A"),
        make_event("G2", "goal", "p3", team="A"),
        make_event("G2", "goal", "p2", period=3),
        make_event("G2", "goal", "p4", team="A", period=4),
        make_event("G4", "goal", "p1"),
    ]

    standings = compute_standings(games, events, TEAMS)
    by_team = {row.team: row for row in standings}

    hawks = by_team["Hawks"]
    assert (hawks.games_played, hawks.wins, hawks.losses, hawks.overtime_losses, hawks.ties) == (3, 1, 0, 1, 1)
    assert (hawks.goals_for, hawks.goals_against, hawks.points) == (5, 5, 4)
    assert hawks.points_pct == pytest.approx(0.667)

    aces = by_team["Aces"]
    assert (aces.wins, aces.losses, aces.ties, aces.points) == (1, 1, 1, 3)

    idle = by_team["Idle"]
    assert idle.games_played == 0
    assert idle.points_pct is None

    assert [row.team for row in standings] == ["Hawks", "Aces", "Idle"]


def test_prior_totals_only_count_earlier_games():
    games = [
        Game("G1", "H", "A", date=datetime(2024, 1, 1)),
        Game("G2", "H", "A", date=datetime(2024, 1, 8)),
        Game("G3", "H", "A", date=datetime(2024, 1, 15)),
        Game("G0", "H", "A"),
    ]
    events = [
        make_event("G1", "goal", "p1"),
        make_event("G1", "assist", "p2"),
        make_event("G2", "goal", "p1"),
        make_event("G2", "shot", "p2"),
        make_event("G3", "goal", "p1"),
        make_event("G0", "goal", "p2"),
    ]

    totals = prior_totals(events, games, games[2])

    assert totals["p1"].goals == 2
    assert totals["p2"].goals == 0
    assert totals["p2"].assists == 1
    assert prior_totals(events, games, games[3]) == {}


def test_league_standings_prefers_the_view():
    games = [Game("G1", "H", "A", status="final")]
    events = [make_event("G1", "goal", "p1")]
    view = [
        StandingsRow("Hawks", games_played=1, losses=1, points=0, goals_against=1),
        StandingsRow("Aces", games_played=1, overtime_losses=0, wins=1, points=2, goals_for=1, points_pct=1.0),
    ]

    computed = league_standings(Snapshot(teams=TEAMS, games=games, events=events))
    from_view = league_standings(Snapshot(teams=TEAMS, games=games, events=events, standings=view))

    assert computed[0].team == "Hawks"
    assert [row.team for row in from_view] == ["Aces", "Hawks"]
    assert from_view[0].points_pct == 1.0
