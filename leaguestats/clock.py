"""Game clock helpers for "MM:SS" text."""
from __future__ import annotations

import contextlib
import re
from typing import Optional

CLOCK_PATTERN = re.compile(r"^\d{2}:\d{2}$")


def _component(raw: Optional[str]) -> int:
    if raw is None:
        return 0
    with contextlib.suppress(ValueError):
        return max(int(raw.strip()), 0)
    return 0


def parse_clock(text: Optional[str]) -> int:
    """Return the total seconds of *text*.

    Missing or non-numeric components count as zero, so this never raises:
    ``"08:07"`` is 487, ``"8:xx"`` is 480 and ``None`` is 0.
    """

    if not text:
        return 0
    parts = text.split(":")
    minutes = _component(parts[0])
    seconds = _component(parts[1]) if len(parts) > 1 else 0
    return minutes * 60 + seconds


def format_clock(seconds: int) -> str:
    # Minutes are not rolled over into hours.
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes:02d}:{secs:02d}"


def increment_clock(text: Optional[str]) -> str:
    """Advance the running clock by one second."""

    return format_clock(parse_clock(text) + 1)


def is_clock_text(text: Optional[str]) -> bool:
    if not text or not CLOCK_PATTERN.match(text.strip()):
        return False
    return int(text.strip()[-2:]) < 60
