"""Per-period and whole-game goal totals."""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from .models import GOAL, Event, Game, GoalLine, PeriodSummary, ScoreLine


def period_totals(
    goal_lines: Iterable[GoalLine], home_team_id: str, away_team_id: str
) -> PeriodSummary:
    counts: defaultdict[int, List[int]] = defaultdict(lambda: [0, 0])
    for line in goal_lines:
        if line.team_id == home_team_id:
            counts[line.period][0] += 1
        elif line.team_id == away_team_id:
            counts[line.period][1] += 1

    periods: Dict[int, ScoreLine] = {
        period: ScoreLine(home=home, away=away)
        for period, (home, away) in sorted(counts.items())
    }
    if not periods:
        return PeriodSummary()
    total = ScoreLine(
        home=sum(line.home for line in periods.values()),
        away=sum(line.away for line in periods.values()),
    )
    return PeriodSummary(periods=periods, total=total)


def game_score(game: Game, events: Iterable[Event]) -> ScoreLine:
    """Score of *game* counted from its goal events.

    Games entered before event logging carry their score on the game row, so
    those values are used when no goal event exists.
    """

    goals = [e for e in events if e.game_id == game.identifier and e.kind == GOAL]
    if not goals:
        return ScoreLine(home=game.home_score or 0, away=game.away_score or 0)
    return ScoreLine(
        home=sum(1 for e in goals if e.team_id == game.home_team_id),
        away=sum(1 for e in goals if e.team_id == game.away_team_id),
    )
