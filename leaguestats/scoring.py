"""Build event rows for live goal entry and slugs for new games."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional, Sequence

from .clock import is_clock_text
from .models import ASSIST, GOAL, Event, Game, Team
from .roster import team_short_name


class EntryError(ValueError):
    """Raised when a goal entry cannot be turned into event rows."""


def build_goal_events(
    game: Game,
    side: str,
    period: int,
    time_mmss: str,
    scorer_id: Optional[str],
    assist_ids: Sequence[str] = (),
    *,
    play_id: Optional[str] = None,
) -> List[Event]:
    """Return the goal row followed by its assist rows.

    All rows share one play id so the goal and its assists stay linked even
    when another goal is logged at the same second.
    """

    if side not in ("home", "away"):
        raise EntryError(f"Side must be 'home' or 'away', got {side!r}")
    if period < 1:
        raise EntryError(f"Period must be 1 or later, got {period}")
    if not is_clock_text(time_mmss):
        raise EntryError(f"Time must be MM:SS, got {time_mmss!r}")
    if not scorer_id:
        raise EntryError("A goal needs a scorer")
    assisters = [a for a in assist_ids if a]
    if len(assisters) > 2:
        raise EntryError("A goal has at most two assists")
    if scorer_id in assisters or len(set(assisters)) != len(assisters):
        raise EntryError("Scorer and assisters must be different players")

    team_id = game.home_team_id if side == "home" else game.away_team_id
    play_id = play_id or uuid.uuid4().hex
    time_mmss = time_mmss.strip()

    def make(kind: str, player_id: str) -> Event:
        return Event(
            game_id=game.identifier,
            team_id=team_id,
            period=period,
            time_mmss=time_mmss,
            kind=kind,
            player_id=player_id,
            play_id=play_id,
        )

    return [make(GOAL, scorer_id)] + [make(ASSIST, pid) for pid in assisters]


def make_game_slug(game_date: datetime, away: Team, home: Team, sequence: int = 1) -> str:
    away_label = team_short_name(away) or "AWY"
    home_label = team_short_name(home) or "HOM"
    return f"{away_label}_vs_{home_label}_{game_date:%Y-%m-%d}_game_{sequence}"
