"""Toolkit for rebuilding scoring plays and league statistics from event rows."""

from .models import Event, Game, GoalLine, LeaderRow, Player, Snapshot, StandingsRow, Team
from .clock import format_clock, increment_clock, parse_clock
from .parser import ParsingError, parse_snapshot
from .plays import group_plays, season_tallies
from .periods import game_score, period_totals
from .roster import appeared_roster, game_rosters, primary_goalie
from .aggregator import compute_standings, league_standings, prior_totals, rank_standings, scoring_leaders
from .scoring import EntryError, build_goal_events

__all__ = [
    "EntryError",
    "Event",
    "Game",
    "GoalLine",
    "LeaderRow",
    "ParsingError",
    "Player",
    "Snapshot",
    "StandingsRow",
    "Team",
    "appeared_roster",
    "build_goal_events",
    "compute_standings",
    "format_clock",
    "game_rosters",
    "game_score",
    "group_plays",
    "increment_clock",
    "league_standings",
    "parse_clock",
    "parse_snapshot",
    "period_totals",
    "primary_goalie",
    "prior_totals",
    "rank_standings",
    "scoring_leaders",
    "season_tallies",
]
