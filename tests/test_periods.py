from leaguestats.models import Event, Game, GoalLine, ScoreLine
from leaguestats.periods import game_score, period_totals


def make_line(period, team):
    return GoalLine(period=period, time_mmss="01:00", team_id=team)


def test_period_totals_per_side():
    lines = [make_line(1, "H"), make_line(1, "A"), make_line(2, "H")]

    summary = period_totals(lines, home_team_id="H", away_team_id="A")

    assert summary.periods == {1: ScoreLine(home=1, away=1), 2: ScoreLine(home=1, away=0)}
    assert summary.total == ScoreLine(home=2, away=1)


def test_scoreless_periods_are_omitted():
    summary = period_totals([make_line(3, "A")], home_team_id="H", away_team_id="A")

    assert list(summary.periods) == [3]


def test_no_goals_means_no_total_row():
    summary = period_totals([], home_team_id="H", away_team_id="A")

    assert summary.periods == {}
    assert summary.total is None


def test_game_score_counts_goal_events():
    game = Game("G1", home_team_id="H", away_team_id="A", home_score=9, away_score=9)
    events = [
        Event("G1", "H", 1, "01:00", "goal", "p1"),
        Event("G1", "H", 1, "01:00", "assist", "p2"),
        Event("G1", "A", 2, "04:00", "goal", "p3"),
        Event("G1", "H", 3, "05:00", "shot", "p1"),
        Event("G2", "H", 1, "01:00", "goal", "p1"),
    ]

    assert game_score(game, events) == ScoreLine(home=1, away=1)


def test_game_score_falls_back_to_legacy_scores():
    legacy = Game("G1", home_team_id="H", away_team_id="A", home_score=4, away_score=2)
    blank = Game("G2", home_team_id="H", away_team_id="A")

    assert game_score(legacy, []) == ScoreLine(home=4, away=2)
    assert game_score(blank, []) == ScoreLine(home=0, away=0)
