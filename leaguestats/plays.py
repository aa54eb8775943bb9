"""Rebuild scoring plays (a goal plus its assists) from raw event rows."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .clock import parse_clock
from .models import (
    ASSIST,
    GOAL,
    BoxScoreRow,
    Event,
    GoalLine,
    GoalSummary,
    Player,
    PlayerRef,
    Tally,
    Team,
)
from .roster import team_short_name

logger = logging.getLogger(__name__)

MAX_ASSISTS = 2

PlayKey = Tuple[int, str, str]


def _play_key(event: Event) -> PlayKey:
    return event.period, event.time_mmss, event.team_id


def _order_key(item) -> Tuple[int, int]:
    return item.period, parse_clock(item.time_mmss)


def _player_ref(player_id: Optional[str], lookup: Mapping[str, Player]) -> Optional[PlayerRef]:
    if not player_id:
        return None
    player = lookup.get(player_id)
    if player is None:
        logger.debug("Unknown player %s referenced by an event", player_id)
        return None
    return PlayerRef(identifier=player.identifier, name=player.name, number=player.number)


def _linked_assists(goal: Event, assists: List[Event]) -> List[Event]:
    """Assists belonging to *goal*, in event-list order.

    Rows sharing the goal's play id come first. Rows without a play id are
    matched on (period, time, team); rows tagged with another play never are.
    """

    key = _play_key(goal)
    legacy = [a for a in assists if a.play_id is None and _play_key(a) == key]
    if goal.play_id is None:
        return legacy
    tagged = [a for a in assists if a.play_id == goal.play_id]
    return tagged + legacy


def group_plays(
    events: Iterable[Event],
    players: Iterable[Player],
    teams: Optional[Iterable[Team]] = None,
    *,
    game_id: Optional[str] = None,
) -> List[GoalLine]:
    """Group the events of one game into goal-lines ordered by period and clock.

    Each goal keeps at most two assisters; extra matching assists and assists
    with no matching goal are dropped without error. Lines at the same period
    and time keep their input order.
    """

    rows = [e for e in events if game_id is None or e.game_id == game_id]
    goals = [e for e in rows if e.kind == GOAL]
    assists = [e for e in rows if e.kind == ASSIST]
    player_lookup = {player.identifier: player for player in players}
    team_lookup = {team.identifier: team for team in teams or ()}

    claimed: set[int] = set()
    lines: List[GoalLine] = []
    for goal in goals:
        linked = _linked_assists(goal, assists)
        claimed.update(id(a) for a in linked)
        if len(linked) > MAX_ASSISTS:
            logger.debug(
                "Goal at P%s %s has %d assists; keeping the first %d",
                goal.period,
                goal.time_mmss,
                len(linked),
                MAX_ASSISTS,
            )
        refs = [_player_ref(a.player_id, player_lookup) for a in linked[:MAX_ASSISTS]]
        lines.append(
            GoalLine(
                period=goal.period,
                time_mmss=goal.time_mmss,
                team_id=goal.team_id,
                team_short=team_short_name(team_lookup.get(goal.team_id)),
                scorer=_player_ref(goal.player_id, player_lookup),
                assists=tuple(ref for ref in refs if ref is not None),
                play_id=goal.play_id,
            )
        )

    orphans = sum(1 for a in assists if id(a) not in claimed)
    if orphans:
        logger.debug("Ignoring %d assist(s) with no matching goal", orphans)

    return sorted(lines, key=_order_key)


def plays_by_period(goal_lines: Iterable[GoalLine]) -> List[Tuple[int, List[GoalLine]]]:
    buckets: Dict[int, List[GoalLine]] = {}
    for line in goal_lines:
        buckets.setdefault(line.period, []).append(line)
    return sorted(buckets.items(), key=lambda entry: entry[0])


def period_label(period: int) -> str:
    if period == 1:
        return "1st period"
    if period == 2:
        return "2nd period"
    if period == 3:
        return "3rd period"
    return f"Overtime (P{period})"


def season_tallies(
    goal_lines: Iterable[GoalLine], prior: Optional[Mapping[str, Tally]] = None
) -> List[GoalSummary]:
    """Attach season-to-date goal/assist counts to each ordered goal-line.

    *prior* holds each player's totals before this game; counts then grow as
    the game's lines are walked, so a player's second goal of the night shows
    one more than the first.
    """

    goals: Dict[str, int] = {}
    assists: Dict[str, int] = {}
    for player_id, tally in (prior or {}).items():
        goals[player_id] = tally.goals
        assists[player_id] = tally.assists

    summaries: List[GoalSummary] = []
    for line in goal_lines:
        scorer_goals = None
        if line.scorer is not None:
            scorer_goals = goals.get(line.scorer.identifier, 0) + 1
            goals[line.scorer.identifier] = scorer_goals
        counts = []
        for ref in line.assists:
            assists[ref.identifier] = assists.get(ref.identifier, 0) + 1
            counts.append(assists[ref.identifier])
        summaries.append(
            GoalSummary(line=line, scorer_goals=scorer_goals, assist_counts=tuple(counts))
        )
    return summaries


def box_score(
    events: Iterable[Event],
    players: Iterable[Player],
    teams: Iterable[Team],
) -> List[BoxScoreRow]:
    """Flat event log of a game in period/clock order."""

    player_lookup = {player.identifier: player for player in players}
    team_lookup = {team.identifier: team for team in teams}
    rows = []
    for event in events:
        player = player_lookup.get(event.player_id) if event.player_id else None
        team = team_lookup.get(event.team_id)
        rows.append(
            BoxScoreRow(
                period=event.period,
                time_mmss=event.time_mmss,
                kind=event.kind,
                player_name=player.name if player else None,
                team_name=team.name if team else None,
            )
        )
    return sorted(rows, key=_order_key)
