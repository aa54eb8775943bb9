"""League statistics report.

Reads a snapshot of the league tables (teams, players, games and scoring
events), rebuilds each game's scoring plays, and writes a JSON report with
standings, scoring leaders and a per-game summary (score, goal log, period
totals, rosters and goaltenders). An Excel workbook and a cumulative points
plot can be written alongside.

Usage
-----
python main.py --snapshot league.json --output report.json --excel report.xlsx

Without ``--snapshot`` the tables are fetched from ``--source-url`` (or the
``LEAGUE_API_URL`` environment variable, with ``LEAGUE_API_KEY`` as the key).
"""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from leaguestats.aggregator import league_standings, prior_totals, scoring_leaders
from leaguestats.frames import (
    create_plot,
    leader_records,
    prepare_cumulative_points,
    standings_records,
    write_excel,
)
from leaguestats.models import Game, GoalSummary, Player, Snapshot
from leaguestats.parser import ParsingError
from leaguestats.periods import game_score, period_totals
from leaguestats.plays import group_plays, season_tallies
from leaguestats.roster import game_rosters
from leaguestats.source import fetch_snapshot, load_snapshot, settings_from_env

logger = logging.getLogger(__name__)

# -------------------------
# Configuration defaults
# -------------------------

DEFAULT_OUTPUT = Path("league_report.json")


# -------------------------
# Report helpers
# -------------------------

def _player_record(player: Optional[Player]) -> Optional[Dict[str, Any]]:
    if player is None:
        return None
    return {"id": player.identifier, "name": player.name, "number": player.number}


def _goal_record(summary: GoalSummary) -> Dict[str, Any]:
    line = summary.line
    scorer = asdict(line.scorer) if line.scorer else None
    if scorer is not None:
        scorer["season_goals"] = summary.scorer_goals
    assists = []
    for ref, count in zip(line.assists, summary.assist_counts):
        record = asdict(ref)
        record["season_assists"] = count
        assists.append(record)
    return {
        "period": line.period,
        "time_mmss": line.time_mmss,
        "team_id": line.team_id,
        "team_short": line.team_short,
        "scorer": scorer,
        "assists": assists,
    }


def game_report(snapshot: Snapshot, game: Game) -> Dict[str, Any]:
    events = snapshot.events_for(game.identifier)
    teams = snapshot.teams_by_id()
    lines = group_plays(events, snapshot.players, snapshot.teams)
    prior = prior_totals(snapshot.events, snapshot.games, game)
    summary = period_totals(lines, game.home_team_id, game.away_team_id)
    rosters = game_rosters(game, events, snapshot.players)
    score = game_score(game, events)
    home, away = teams.get(game.home_team_id), teams.get(game.away_team_id)
    return {
        "id": game.identifier,
        "slug": game.slug,
        "date": game.date.isoformat() if game.date else None,
        "status": game.status,
        "home": home.name if home else game.home_team_id,
        "away": away.name if away else game.away_team_id,
        "score": asdict(score),
        "goals": [_goal_record(item) for item in season_tallies(lines, prior)],
        "periods": {str(period): asdict(line) for period, line in summary.periods.items()},
        "total": asdict(summary.total) if summary.total else None,
        "rosters": {
            "home": [_player_record(p) for p in rosters.home],
            "away": [_player_record(p) for p in rosters.away],
        },
        "goalies": {
            "home": _player_record(rosters.home_goalie),
            "away": _player_record(rosters.away_goalie),
        },
    }


def build_report(snapshot: Snapshot) -> Dict[str, Any]:
    standings = league_standings(snapshot)
    leaders = scoring_leaders(snapshot.events, snapshot.players, snapshot.teams)
    return {
        "standings": standings_records(standings),
        "leaders": leader_records(leaders),
        "games": [game_report(snapshot, game) for game in snapshot.games],
    }


def write_report(snapshot: Snapshot, output_path: Path, *, excel_path: Optional[Path] = None) -> Dict[str, Any]:
    payload = build_report(snapshot)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Wrote %s", output_path.resolve())
    if excel_path is not None:
        write_excel(snapshot, excel_path)
        logger.info("Wrote %s", excel_path.resolve())
    return payload


def _load(snapshot_path: Path) -> Snapshot:
    try:
        snapshot = load_snapshot(Path(snapshot_path))
    except (ParsingError, json.JSONDecodeError) as exc:
        raise SystemExit(f"Failed to parse snapshot {snapshot_path}: {exc}") from exc
    except OSError as exc:
        raise SystemExit(f"Failed to read snapshot {snapshot_path}: {exc}") from exc
    logger.info(
        "Loaded %d games and %d events from %s",
        len(snapshot.games),
        len(snapshot.events),
        snapshot_path,
    )
    return snapshot


def run(snapshot_path: Path, output_path: Path, *, excel_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load *snapshot_path*, write the JSON report to *output_path* and return it."""

    return write_report(_load(snapshot_path), Path(output_path), excel_path=excel_path)


# -------------------------
# CLI entry-point
# -------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(
        "--snapshot",
        type=Path,
        help="JSON file holding the teams, players, games and events tables.",
    )
    parser.add_argument(
        "--source-url",
        help="Base URL of the league REST service (defaults to LEAGUE_API_URL).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help="JSON report to write (default: league_report.json)",
    )
    parser.add_argument(
        "--excel",
        type=Path,
        help="Optional Excel workbook with standings, leaders and goals sheets.",
    )
    parser.add_argument(
        "--plot",
        type=Path,
        help="Optional cumulative points plot (PNG).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging for detailed progress information.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output, showing only warnings and errors.",
    )

    args = parser.parse_args()

    if args.verbose and args.quiet:
        parser.error("--verbose and --quiet are mutually exclusive")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.snapshot is not None:
        snapshot = _load(args.snapshot)
        write_report(snapshot, args.output, excel_path=args.excel)
    else:
        settings = settings_from_env()
        source_url = args.source_url or settings.api_url
        if not source_url:
            parser.error("either --snapshot or --source-url (or LEAGUE_API_URL) is required")
        try:
            snapshot = fetch_snapshot(source_url, api_key=settings.api_key)
        except requests.RequestException as exc:
            raise SystemExit(f"Failed to fetch league tables: {exc}") from exc
        except (ParsingError, json.JSONDecodeError) as exc:
            raise SystemExit(f"Failed to parse snapshot from {source_url}: {exc}") from exc
        except OSError as exc:
            raise SystemExit(f"Failed to read snapshot from {source_url}: {exc}") from exc
        write_report(snapshot, args.output, excel_path=args.excel)

    if args.plot is not None:
        try:
            create_plot(prepare_cumulative_points(snapshot), args.plot)
        except (OSError, ValueError) as exc:
            logger.warning("Could not create %s: %s", args.plot, exc)
        else:
            logger.info("Created %s", args.plot.resolve())


if __name__ == "__main__":
    main()
