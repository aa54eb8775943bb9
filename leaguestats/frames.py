"""Tabular output helpers: DataFrames, Excel workbook and points timeline."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

import pandas as pd

from .aggregator import format_points_pct, league_standings, scoring_leaders
from .models import ASSIST, GOAL, Event, GoalLine, LeaderRow, Snapshot, StandingsRow
from .plays import group_plays

logger = logging.getLogger(__name__)

LEADER_COLUMNS = ["player", "team", "number", "gp", "g", "a", "pts", "shots", "pts_per_game"]
STANDINGS_COLUMNS = ["team", "gp", "w", "l", "otl", "t", "gf", "ga", "gd", "pts", "pts_pct"]
GOAL_COLUMNS = ["game_id", "period", "time_mmss", "team", "scorer", "assists"]


def leader_records(rows: Iterable[LeaderRow]) -> List[Dict[str, Any]]:
    return [
        {
            "player": row.player,
            "team": row.team,
            "number": row.number,
            "gp": row.games_played,
            "g": row.goals,
            "a": row.assists,
            "pts": row.points,
            "shots": row.shots,
            "pts_per_game": round(row.points_per_game, 2),
        }
        for row in rows
    ]


def leaders_to_frame(rows: Iterable[LeaderRow]) -> pd.DataFrame:
    return pd.DataFrame.from_records(leader_records(rows), columns=LEADER_COLUMNS)


def standings_records(rows: Iterable[StandingsRow]) -> List[Dict[str, Any]]:
    return [
        {
            "team": row.team,
            "gp": row.games_played,
            "w": row.wins,
            "l": row.losses,
            "otl": row.overtime_losses,
            "t": row.ties,
            "gf": row.goals_for,
            "ga": row.goals_against,
            "gd": row.goal_differential,
            "pts": row.points,
            "pts_pct": format_points_pct(row.points_pct),
        }
        for row in rows
    ]


def standings_to_frame(rows: Iterable[StandingsRow]) -> pd.DataFrame:
    return pd.DataFrame.from_records(standings_records(rows), columns=STANDINGS_COLUMNS)


def goal_lines_to_frame(game_id: str, lines: Iterable[GoalLine]) -> pd.DataFrame:
    records = [
        {
            "game_id": game_id,
            "period": line.period,
            "time_mmss": line.time_mmss,
            "team": line.team_short,
            "scorer": line.scorer_name,
            "assists": ", ".join(ref.name for ref in line.assists),
        }
        for line in lines
    ]
    return pd.DataFrame.from_records(records, columns=GOAL_COLUMNS)


def events_to_frame(events: Iterable[Event]) -> pd.DataFrame:
    records = [
        {
            "game_id": event.game_id,
            "team_id": event.team_id,
            "player_id": event.player_id,
            "period": event.period,
            "time_mmss": event.time_mmss,
            "event": event.kind,
            "play_id": event.play_id,
        }
        for event in events
    ]
    return pd.DataFrame.from_records(
        records,
        columns=["game_id", "team_id", "player_id", "period", "time_mmss", "event", "play_id"],
    )


def write_excel(snapshot: Snapshot, path: Path) -> None:
    goal_frames = [
        goal_lines_to_frame(
            game.identifier,
            group_plays(snapshot.events_for(game.identifier), snapshot.players, snapshot.teams),
        )
        for game in snapshot.games
    ]
    goals = pd.concat(goal_frames, ignore_index=True) if goal_frames else pd.DataFrame(columns=GOAL_COLUMNS)

    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        standings_to_frame(league_standings(snapshot)).to_excel(writer, sheet_name="standings", index=False)
        leaders_to_frame(
            scoring_leaders(snapshot.events, snapshot.players, snapshot.teams)
        ).to_excel(writer, sheet_name="leaders", index=False)
        goals.to_excel(writer, sheet_name="goals", index=False)


def prepare_cumulative_points(snapshot: Snapshot) -> pd.DataFrame:
    """Running season points per player, one row per player and game.

    Games are ordered by date; undated games keep their snapshot order after
    the dated ones.
    """

    events = events_to_frame(snapshot.events)
    events = events[events["event"].isin([GOAL, ASSIST]) & events["player_id"].notna()]
    if events.empty:
        return pd.DataFrame(columns=["player", "game_id", "date", "points", "cumulative_points"])

    games = pd.DataFrame.from_records(
        [{"game_id": game.identifier, "date": game.date} for game in snapshot.games],
        columns=["game_id", "date"],
    )
    games["__order"] = range(len(games))
    games["date"] = pd.to_datetime(games["date"])

    per_game = events.groupby(["player_id", "game_id"]).size().rename("points").reset_index()
    merged = per_game.merge(games, on="game_id", how="inner", validate="many_to_one")

    names = {player.identifier: player.name for player in snapshot.players}
    merged["player"] = merged["player_id"].map(names)
    dropped = merged["player"].isna()
    if dropped.any():
        logger.debug("Ignoring points of %d unknown player(s)", merged.loc[dropped, "player_id"].nunique())
    merged = merged[~dropped]

    merged = merged.sort_values(["date", "__order"], na_position="last", kind="stable")
    merged["cumulative_points"] = merged.groupby("player_id")["points"].cumsum()
    return merged[["player", "game_id", "date", "points", "cumulative_points"]].reset_index(drop=True)


def create_plot(cumulative: pd.DataFrame, output_path: Path) -> None:
    try:
        import matplotlib.pyplot as plt
    except ImportError:  # pragma: no cover - optional dependency
        logger.info("matplotlib not installed; skipping plot generation")
        return

    if cumulative.empty:
        logger.info("No scoring data found; skipping plot generation")
        return
    pivot = cumulative.pivot_table(
        index="game_id",
        columns="player",
        values="cumulative_points",
        aggfunc="max",
        sort=False,
    ).ffill()

    plt.figure(figsize=(12, 6))
    pivot.plot(marker="o", ax=plt.gca())
    plt.ylabel("Points")
    plt.grid(True, linestyle="--", alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_path)
    plt.close()
