"""Season aggregation: scoring leaders, standings and prior totals."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from .models import (
    ASSIST,
    GOAL,
    SHOT,
    Event,
    Game,
    LeaderRow,
    Player,
    Snapshot,
    StandingsRow,
    Tally,
    Team,
)
from .periods import game_score

logger = logging.getLogger(__name__)

REGULATION_PERIODS = 3
WIN_POINTS = 2
TIE_POINT = 1
OTL_POINT = 1


def scoring_leaders(
    events: Iterable[Event],
    players: Iterable[Player],
    teams: Optional[Iterable[Team]] = None,
) -> List[LeaderRow]:
    """Season totals for every rostered player, best scorers first."""

    team_names = {team.identifier: team.name for team in teams or ()}
    roster = {player.identifier: player for player in players}

    counts: defaultdict[str, Dict[str, int]] = defaultdict(lambda: {GOAL: 0, ASSIST: 0, SHOT: 0})
    games: defaultdict[str, set[str]] = defaultdict(set)
    skipped = 0
    for event in events:
        if not event.player_id:
            continue
        if event.player_id not in roster:
            skipped += 1
            continue
        games[event.player_id].add(event.game_id)
        if event.kind in (GOAL, ASSIST, SHOT):
            counts[event.player_id][event.kind] += 1
    if skipped:
        logger.debug("Skipped %d event(s) for players missing from the roster", skipped)

    rows = [
        LeaderRow(
            player_id=player.identifier,
            player=player.name,
            team=team_names.get(player.team_id) if player.team_id else None,
            number=player.number,
            games_played=len(games.get(player.identifier, ())),
            goals=counts[player.identifier][GOAL],
            assists=counts[player.identifier][ASSIST],
            shots=counts[player.identifier][SHOT],
        )
        for player in roster.values()
    ]
    return sorted(rows, key=lambda row: (-row.points, -row.goals, row.player.lower()))


def rank_standings(rows: Iterable[StandingsRow]) -> List[StandingsRow]:
    return sorted(rows, key=lambda row: (row.points, row.goal_differential), reverse=True)


def format_points_pct(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{round(value, 3):.3f}"


def _deciding_period(game: Game, events: Iterable[Event]) -> int:
    periods = [e.period for e in events if e.game_id == game.identifier and e.kind == GOAL]
    return max(periods, default=REGULATION_PERIODS)


def compute_standings(
    games: Iterable[Game], events: Iterable[Event], teams: Iterable[Team]
) -> List[StandingsRow]:
    """Derive standings from final games.

    A win is worth two points. A loss after regulation (the last goal came in a
    period past the third) is an overtime loss worth one point, and a game
    finishing level gives each side one point as a tie.
    """

    events = list(events)
    record: Dict[str, Dict[str, int]] = {}
    names: Dict[str, str] = {}
    for team in teams:
        names[team.identifier] = team.name
        record[team.identifier] = defaultdict(int)

    for game in games:
        if not game.is_final:
            continue
        score = game_score(game, events)
        overtime = _deciding_period(game, events) > REGULATION_PERIODS
        sides = (
            (game.home_team_id, score.home, score.away),
            (game.away_team_id, score.away, score.home),
        )
        for team_id, scored, conceded in sides:
            tally = record.setdefault(team_id, defaultdict(int))
            names.setdefault(team_id, team_id)
            tally["gp"] += 1
            tally["gf"] += scored
            tally["ga"] += conceded
            if scored > conceded:
                tally["w"] += 1
                tally["pts"] += WIN_POINTS
            elif scored == conceded:
                tally["t"] += 1
                tally["pts"] += TIE_POINT
            elif overtime:
                tally["otl"] += 1
                tally["pts"] += OTL_POINT
            else:
                tally["l"] += 1

    rows = []
    for team_id, tally in record.items():
        played = tally["gp"]
        rows.append(
            StandingsRow(
                team=names[team_id],
                team_id=team_id,
                games_played=played,
                wins=tally["w"],
                losses=tally["l"],
                overtime_losses=tally["otl"],
                ties=tally["t"],
                goals_for=tally["gf"],
                goals_against=tally["ga"],
                points=tally["pts"],
                points_pct=round(tally["pts"] / (WIN_POINTS * played), 3) if played else None,
            )
        )
    return rank_standings(rows)


def league_standings(snapshot: Snapshot) -> List[StandingsRow]:
    """Ranked standings for *snapshot*.

    The league's precomputed standings view wins when the snapshot carries
    one; otherwise standings are derived from the final games.
    """

    if snapshot.standings is not None:
        return rank_standings(snapshot.standings)
    return compute_standings(snapshot.games, snapshot.events, snapshot.teams)


def prior_totals(events: Iterable[Event], games: Iterable[Game], before: Game) -> Dict[str, Tally]:
    """Goals and assists per player over games dated strictly before *before*."""

    if before.date is None:
        return {}
    earlier = {
        game.identifier
        for game in games
        if game.date is not None and game.date < before.date
    }
    counts: defaultdict[str, List[int]] = defaultdict(lambda: [0, 0])
    for event in events:
        if not event.player_id or event.game_id not in earlier:
            continue
        if event.kind == GOAL:
            counts[event.player_id][0] += 1
        elif event.kind == ASSIST:
            counts[event.player_id][1] += 1
    return {player_id: Tally(goals=g, assists=a) for player_id, (g, a) in counts.items()}
