"""Roster, goaltender and team label helpers for a single game."""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

from .models import Event, Game, GameRosters, Player, Team

# Sort key for players without a jersey so they land after everybody else.
NO_JERSEY = 9999


def _roster_key(player: Player) -> tuple[int, str]:
    number = player.number if player.number is not None else NO_JERSEY
    return number, player.name.lower()


def is_goalie(player: Player) -> bool:
    return (player.position or "").strip().upper().startswith("G")


def team_short_name(team: Optional[Team]) -> str:
    """Return the compact label for *team*.

    Teams without a ``short_name`` get an abbreviation built from the initials
    of their name ("Red Lions" -> "RL"), or the first three letters for a
    single-word name ("Falcons" -> "FAL").
    """

    if team is None:
        return ""
    if team.short_name and team.short_name.strip():
        return team.short_name.strip()
    words = re.findall(r"[^\W_]+", team.name)
    if not words:
        return ""
    if len(words) == 1:
        return words[0][:3].upper()
    return "".join(word[0] for word in words).upper()


def appeared_roster(
    events: Iterable[Event], players: Iterable[Player], team_id: str
) -> List[Player]:
    """Players of *team_id* referenced by at least one event, in jersey order."""

    lookup: Dict[str, Player] = {player.identifier: player for player in players}
    seen: Dict[str, Player] = {}
    for event in events:
        if event.team_id != team_id or not event.player_id:
            continue
        player = lookup.get(event.player_id)
        if player is not None:
            seen.setdefault(player.identifier, player)
    return sorted(seen.values(), key=_roster_key)


def primary_goalie(players: Iterable[Player], team_id: str) -> Optional[Player]:
    """Lowest-numbered goaltender on the full roster of *team_id*."""

    goalies = [p for p in players if p.team_id == team_id and is_goalie(p)]
    if not goalies:
        return None
    return min(goalies, key=_roster_key)


def game_rosters(game: Game, events: Iterable[Event], players: Iterable[Player]) -> GameRosters:
    events = list(events)
    players = list(players)
    return GameRosters(
        home=appeared_roster(events, players, game.home_team_id),
        away=appeared_roster(events, players, game.away_team_id),
        home_goalie=primary_goalie(players, game.home_team_id),
        away_goalie=primary_goalie(players, game.away_team_id),
    )
