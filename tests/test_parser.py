from datetime import datetime

import pytest

from leaguestats.parser import (
    ParsingError,
    parse_date,
    parse_event,
    parse_game,
    parse_player,
    parse_snapshot,
    parse_standings_row,
)


def test_parses_event_row():
    event = parse_event(
        {
            "id": "e1",
            "game_id": "G1",
            "team_id": "T1",
            "player_id": None,
            "period": "2",
            "time_mmss": "05:12",
            "event": "Goal",
        }
    )

    assert event.kind == "goal"
    assert event.period == 2
    assert event.player_id is None
    assert event.play_id is None
    assert event.identifier == "e1"


@pytest.mark.parametrize(
    "row",
    [
        {"game_id": "G1", "team_id": "T1", "period": 1, "event": "penalty"},
        {"game_id": "G1", "team_id": "T1", "period": "x", "event": "goal"},
        {"game_id": "G1", "team_id": "T1", "period": 0, "event": "goal"},
        {"team_id": "T1", "period": 1, "event": "goal"},
        "not a row",
    ],
)
def test_invalid_event_rows_raise(row):
    with pytest.raises(ParsingError):
        parse_event(row)


def test_player_accepts_jersey_alias():
    player = parse_player({"id": "p1", "name": "Alice", "team_id": "T1", "jersey": "31", "position": "G"})

    assert player.number == 31
    assert player.position == "G"


def test_game_dates_and_legacy_scores():
    game = parse_game(
        {
            "id": "G1",
            "slug": "RDL_vs_BLU_2024-10-01_game_1",
            "game_date": "2024-10-01T19:30:00+02:00",
            "status": "final",
            "home_team_id": "T1",
            "away_team_id": "T2",
            "home_score": 3,
            "away_score": None,
        }
    )

    assert game.date == datetime(2024, 10, 1, 17, 30)
    assert game.is_final
    assert game.home_score == 3
    assert game.away_score is None


def test_parse_date_formats():
    assert parse_date("2024-10-01") == datetime(2024, 10, 1)
    assert parse_date("2024-10-01 18:45") == datetime(2024, 10, 1, 18, 45)
    assert parse_date("not a date") is None
    assert parse_date(None) is None


def test_standings_row_nulls_become_zero():
    row = parse_standings_row({"name": "Hawks", "gp": 3, "w": None, "gf": 9, "ga": 4, "pts": 6, "pts_pct": None})

    assert row.wins == 0
    assert row.goal_differential == 5
    assert row.points_pct is None


def test_snapshot_skips_bad_events_but_not_bad_teams(caplog):
    payload = {
        "teams": [{"id": "T1", "name": "Hawks"}],
        "players": [],
        "games": [],
        "events": [
            {"game_id": "G1", "team_id": "T1", "period": 1, "time_mmss": "01:00", "event": "goal"},
            {"id": "bad", "game_id": "G1", "team_id": "T1", "period": 1, "event": "fight"},
        ],
    }

    snapshot = parse_snapshot(payload)

    assert len(snapshot.events) == 1
    assert "Skipping event row bad" in caplog.text

    payload["teams"].append({"id": "T2"})
    with pytest.raises(ParsingError):
        parse_snapshot(payload)


def test_snapshot_requires_every_table():
    with pytest.raises(ParsingError, match="events"):
        parse_snapshot({"teams": [], "players": [], "games": []})


def test_snapshot_reads_optional_standings_view():
    payload = {"teams": [], "players": [], "games": [], "events": []}
    assert parse_snapshot(payload).standings is None

    payload["standings"] = [{"name": "Hawks", "gp": 2, "w": 1, "t": 1, "pts": 3, "pts_pct": "0.75"}]
    [row] = parse_snapshot(payload).standings
    assert (row.team, row.ties, row.points) == ("Hawks", 1, 3)
    assert row.points_pct == pytest.approx(0.75)

    payload["standings"] = {"name": "Hawks"}
    with pytest.raises(ParsingError, match="standings"):
        parse_snapshot(payload)
