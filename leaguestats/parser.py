"""Turn raw table rows (dicts) into league models."""
from __future__ import annotations

import contextlib
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

from dateutil import parser as date_parser

from .models import EVENT_KINDS, Event, Game, Player, Snapshot, StandingsRow, Team

logger = logging.getLogger(__name__)

TABLES = ("teams", "players", "games", "events")
STANDINGS_TABLE = "standings"


class ParsingError(ValueError):
    """Raised when a row cannot be interpreted as a league record."""


def _mapping(row: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(row, Mapping):
        raise ParsingError(f"{kind} row must be an object, got {row!r}")
    return row


def _text(row: Mapping[str, Any], key: str, *, required: bool = False) -> Optional[str]:
    value = row.get(key)
    text = str(value).strip() if value is not None else ""
    if not text:
        if required:
            raise ParsingError(f"Missing required value for '{key}' in {dict(row)!r}")
        return None
    return text


def _parse_int(raw: Any, *, field: str, allow_blank: bool = False) -> Optional[int]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if allow_blank:
            return None
        raise ParsingError(f"Missing required numeric value for '{field}'")
    if isinstance(raw, bool):
        raise ParsingError(f"Could not parse integer for '{field}' from {raw!r}")
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise ParsingError(f"Could not parse integer for '{field}' from {raw!r}") from exc


def _parse_float(raw: Any) -> Optional[float]:
    if raw is None or raw == "":
        return None
    with contextlib.suppress(TypeError, ValueError):
        return float(raw)
    return None


def parse_date(raw: Optional[str]) -> Optional[datetime]:
    """Parse a game date; timezone-aware values are converted to naive UTC."""

    if not raw:
        return None
    value: Optional[datetime] = None
    for fmt in ("%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S"):
        with contextlib.suppress(ValueError):
            value = datetime.strptime(raw, fmt)
            break
    if value is None:
        with contextlib.suppress(ValueError, OverflowError):
            value = date_parser.parse(raw)
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_team(row: Mapping[str, Any]) -> Team:
    row = _mapping(row, "Team")
    return Team(
        identifier=_text(row, "id", required=True),
        name=_text(row, "name", required=True),
        short_name=_text(row, "short_name"),
    )


def parse_player(row: Mapping[str, Any]) -> Player:
    row = _mapping(row, "Player")
    number = row.get("number", row.get("jersey"))
    return Player(
        identifier=_text(row, "id", required=True),
        name=_text(row, "name", required=True),
        team_id=_text(row, "team_id"),
        number=_parse_int(number, field="number", allow_blank=True),
        position=_text(row, "position"),
    )


def parse_game(row: Mapping[str, Any]) -> Game:
    row = _mapping(row, "Game")
    date_value = row.get("game_date")
    if isinstance(date_value, datetime):
        game_date = date_value
    else:
        game_date = parse_date(_text(row, "game_date"))
    return Game(
        identifier=_text(row, "id", required=True),
        home_team_id=_text(row, "home_team_id", required=True),
        away_team_id=_text(row, "away_team_id", required=True),
        slug=_text(row, "slug"),
        date=game_date,
        status=_text(row, "status"),
        home_score=_parse_int(row.get("home_score"), field="home_score", allow_blank=True),
        away_score=_parse_int(row.get("away_score"), field="away_score", allow_blank=True),
    )


def parse_event(row: Mapping[str, Any]) -> Event:
    row = _mapping(row, "Event")
    kind = (_text(row, "event", required=True) or "").lower()
    if kind not in EVENT_KINDS:
        raise ParsingError(f"Unknown event kind {kind!r}")
    period = _parse_int(row.get("period"), field="period")
    if period < 1:
        raise ParsingError(f"Period must be positive, got {period}")
    return Event(
        game_id=_text(row, "game_id", required=True),
        team_id=_text(row, "team_id", required=True),
        period=period,
        time_mmss=_text(row, "time_mmss") or "00:00",
        kind=kind,
        player_id=_text(row, "player_id"),
        play_id=_text(row, "play_id"),
        identifier=_text(row, "id"),
    )


def parse_standings_row(row: Mapping[str, Any]) -> StandingsRow:
    """Read a row of a precomputed standings view; null counters become 0."""

    row = _mapping(row, "Standings")

    def count(key: str) -> int:
        return _parse_int(row.get(key), field=key, allow_blank=True) or 0

    return StandingsRow(
        team=_text(row, "name", required=True),
        team_id=_text(row, "team_id"),
        games_played=count("gp"),
        wins=count("w"),
        losses=count("l"),
        overtime_losses=count("otl"),
        goals_for=count("gf"),
        goals_against=count("ga"),
        points=count("pts"),
        points_pct=_parse_float(row.get("pts_pct")),
        ties=count("t"),
    )


def _parse_events(rows: Iterable[Mapping[str, Any]]) -> List[Event]:
    events: List[Event] = []
    for row in rows:
        try:
            events.append(parse_event(row))
        except ParsingError as exc:
            row_id = row.get("id", "?") if isinstance(row, Mapping) else "?"
            logger.warning("Skipping event row %s: %s", row_id, exc)
    return events


def parse_snapshot(payload: Mapping[str, Any]) -> Snapshot:
    """Build a :class:`Snapshot` from a mapping of table name to rows.

    Malformed event rows are skipped with a warning; problems with teams,
    players or games raise :class:`ParsingError`. An optional ``standings``
    table holds the league's precomputed standings view.
    """

    if not isinstance(payload, Mapping):
        raise ParsingError("Snapshot must be a JSON object")
    missing = [name for name in TABLES if not isinstance(payload.get(name), list)]
    if missing:
        raise ParsingError(f"Snapshot is missing tables: {', '.join(missing)}")
    standings = payload.get(STANDINGS_TABLE)
    if standings is not None and not isinstance(standings, list):
        raise ParsingError("Snapshot standings must be a list")
    return Snapshot(
        teams=[parse_team(row) for row in payload["teams"]],
        players=[parse_player(row) for row in payload["players"]],
        games=[parse_game(row) for row in payload["games"]],
        events=_parse_events(payload["events"]),
        standings=[parse_standings_row(row) for row in standings] if standings is not None else None,
    )
