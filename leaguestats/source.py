"""Load league snapshots from a JSON file or the hosted REST endpoint."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import unquote, urlparse

import requests

from .models import Snapshot
from .parser import STANDINGS_TABLE, TABLES, parse_snapshot

logger = logging.getLogger(__name__)

REST_PATH = "/rest/v1/"
REQUEST_TIMEOUT = 20
PAGE_SIZE = 1000
STANDINGS_VIEW = "standings_current"


@dataclass(frozen=True)
class Settings:
    api_url: Optional[str] = None
    api_key: Optional[str] = None


def settings_from_env() -> Settings:
    return Settings(
        api_url=os.getenv("LEAGUE_API_URL") or None,
        api_key=os.getenv("LEAGUE_API_KEY") or None,
    )


def build_session(api_key: Optional[str] = None) -> requests.Session:
    """Return a requests session carrying the service API key, if any."""

    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    if api_key:
        session.headers.update({"apikey": api_key, "Authorization": f"Bearer {api_key}"})
    return session


def load_snapshot(path: Path) -> Snapshot:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_snapshot(payload)


def _content_total(response: requests.Response) -> Optional[int]:
    # "0-999/1500"; the total is "*" unless the server was asked to count.
    total = (response.headers.get("Content-Range") or "").rpartition("/")[2]
    return int(total) if total.isdigit() else None


def fetch_table(session: requests.Session, base_url: str, table: str) -> List[Dict[str, Any]]:
    """Return every row of *table*, paging with ``Range`` headers.

    The service caps each response, so pages are requested until the reported
    total is reached or a short page comes back.
    """

    url = base_url.rstrip("/") + REST_PATH + table
    rows: List[Dict[str, Any]] = []
    while True:
        headers = {
            "Range-Unit": "items",
            "Range": f"{len(rows)}-{len(rows) + PAGE_SIZE - 1}",
            "Prefer": "count=exact",
        }
        response = session.get(url, params={"select": "*"}, headers=headers, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        page = response.json()
        rows.extend(page)
        total = _content_total(response)
        if not page or (total is not None and len(rows) >= total):
            break
        if total is None and len(page) < PAGE_SIZE:
            break
    logger.debug("Fetched %d rows from %s", len(rows), table)
    return rows


def fetch_standings_view(session: requests.Session, base_url: str) -> Optional[List[Dict[str, Any]]]:
    """Rows of the league's standings view, or ``None`` when it does not exist."""

    try:
        return fetch_table(session, base_url, STANDINGS_VIEW)
    except requests.HTTPError as exc:
        if exc.response is not None and exc.response.status_code == 404:
            logger.info("No %s view at %s; standings will be computed", STANDINGS_VIEW, base_url)
            return None
        raise


def fetch_snapshot(
    base_url: str,
    *,
    api_key: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> Snapshot:
    """Download every league table from *base_url*.

    ``file://`` URLs point at a local JSON snapshot instead. The standings view
    is optional; other request errors are raised to the caller unchanged.
    """

    parsed = urlparse(base_url)
    if parsed.scheme == "file":
        return load_snapshot(Path(unquote(parsed.path)))

    session = session or build_session(api_key)
    logger.info("Fetching league tables from %s", base_url)
    payload = {table: fetch_table(session, base_url, table) for table in TABLES}
    standings = fetch_standings_view(session, base_url)
    if standings is not None:
        payload[STANDINGS_TABLE] = standings
    return parse_snapshot(payload)
