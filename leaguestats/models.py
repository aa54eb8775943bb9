"""Data models for league scoring statistics."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

GOAL = "goal"
ASSIST = "assist"
SHOT = "shot"
EVENT_KINDS = (GOAL, ASSIST, SHOT)

UNKNOWN_PLAYER = "Unknown"


@dataclass(frozen=True)
class Team:
    identifier: str
    name: str
    short_name: Optional[str] = None


@dataclass(frozen=True)
class Player:
    """A rostered player. ``position`` starting with "G" marks a goaltender."""

    identifier: str
    name: str
    team_id: Optional[str] = None
    number: Optional[int] = None
    position: Optional[str] = None


@dataclass(frozen=True)
class Game:
    """Minimal representation of a scheduled or played game."""

    identifier: str
    home_team_id: str
    away_team_id: str
    slug: Optional[str] = None
    date: Optional[datetime] = None
    status: Optional[str] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None

    @property
    def is_final(self) -> bool:
        return (self.status or "").strip().lower() == "final"


@dataclass(frozen=True)
class Event:
    """Single goal, assist or shot row as entered by the scorekeeper."""

    game_id: str
    team_id: str
    period: int
    time_mmss: str
    kind: str
    player_id: Optional[str] = None
    play_id: Optional[str] = None
    identifier: Optional[str] = None


@dataclass(frozen=True)
class PlayerRef:
    identifier: str
    name: str
    number: Optional[int] = None


@dataclass(frozen=True)
class GoalLine:
    """One reconstructed scoring play: a goal and its 0-2 assisters."""

    period: int
    time_mmss: str
    team_id: str
    team_short: str = ""
    scorer: Optional[PlayerRef] = None
    assists: tuple[PlayerRef, ...] = ()
    play_id: Optional[str] = None

    @property
    def scorer_name(self) -> str:
        return self.scorer.name if self.scorer else UNKNOWN_PLAYER


@dataclass(frozen=True)
class ScoreLine:
    home: int = 0
    away: int = 0


@dataclass(frozen=True)
class PeriodSummary:
    """Goals per period for each side.

    ``periods`` only holds periods where at least one goal was scored, and
    ``total`` is ``None`` when there are no such periods.
    """

    periods: Dict[int, ScoreLine] = field(default_factory=dict)
    total: Optional[ScoreLine] = None


@dataclass(frozen=True)
class GameRosters:
    home: List[Player]
    away: List[Player]
    home_goalie: Optional[Player] = None
    away_goalie: Optional[Player] = None


@dataclass(frozen=True)
class Tally:
    goals: int = 0
    assists: int = 0


@dataclass(frozen=True)
class GoalSummary:
    """A goal-line annotated with season-to-date counts after the play."""

    line: GoalLine
    scorer_goals: Optional[int] = None
    assist_counts: tuple[int, ...] = ()


@dataclass(frozen=True)
class BoxScoreRow:
    period: int
    time_mmss: str
    kind: str
    player_name: Optional[str] = None
    team_name: Optional[str] = None


@dataclass(frozen=True)
class LeaderRow:
    """Season scoring totals for one player."""

    player_id: str
    player: str
    team: Optional[str]
    number: Optional[int]
    games_played: int
    goals: int
    assists: int
    shots: int

    @property
    def points(self) -> int:
        return self.goals + self.assists

    @property
    def points_per_game(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.points / self.games_played


@dataclass(frozen=True)
class StandingsRow:
    """Season record for one team."""

    team: str
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    overtime_losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0
    points_pct: Optional[float] = None
    ties: int = 0
    team_id: Optional[str] = None

    @property
    def goal_differential(self) -> int:
        return self.goals_for - self.goals_against


@dataclass(frozen=True)
class Snapshot:
    """One in-memory copy of the league tables."""

    teams: List[Team] = field(default_factory=list)
    players: List[Player] = field(default_factory=list)
    games: List[Game] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    # Precomputed standings view rows, when the source provides them.
    standings: Optional[List[StandingsRow]] = None

    def teams_by_id(self) -> Dict[str, Team]:
        return {team.identifier: team for team in self.teams}

    def players_by_id(self) -> Dict[str, Player]:
        return {player.identifier: player for player in self.players}

    def events_for(self, game_id: str) -> List[Event]:
        return [event for event in self.events if event.game_id == game_id]

    def game_by_slug(self, slug: str) -> Optional[Game]:
        return next((game for game in self.games if game.slug == slug), None)
