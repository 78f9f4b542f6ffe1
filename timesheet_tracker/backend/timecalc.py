"""Clock-time arithmetic for the weekly timesheet.

Clock times are ``HH:MM`` strings on a 24-hour clock, or the empty string when a
value has not been entered yet. Durations are expressed in decimal hours.
"""

from __future__ import annotations

import math
import re

WEEKLY_TARGET_HOURS = 36
LUNCH_BREAK_MINUTES = 30
LATEST_SUGGESTION = "20:00"

_CLOCK_TIME_RE = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")


def is_clock_time(value: str | None) -> bool:
    """Return True if ``value`` is a well-formed ``HH:MM`` clock time."""
    return bool(value) and bool(_CLOCK_TIME_RE.fullmatch(value or ""))


def parse_to_minutes(time: str | None) -> float:
    """Return minutes since midnight for a clock time.

    Empty input counts as midnight. Parts that are not numeric give ``nan``
    instead of raising, so the result poisons any arithmetic built on it.
    """
    if not time:
        return 0
    parts = time.split(":")
    hours = _to_number(parts[0])
    minutes = _to_number(parts[1]) if len(parts) > 1 else math.nan
    return hours * 60 + minutes


def format_from_minutes(minutes: float) -> str:
    """Format non-negative minutes since midnight as zero-padded ``HH:MM``."""
    total = _round_half_up(minutes)
    return f"{total // 60:02d}:{total % 60:02d}"


def compute_duration(clock_in: str | None, clock_out: str | None) -> float:
    """Return worked hours between two clock times, net of the lunch break.

    Either time missing, an interval no longer than the break, or an unparsable
    time all give exactly 0.
    """
    if not clock_in or not clock_out:
        return 0
    difference = parse_to_minutes(clock_out) - parse_to_minutes(clock_in)
    net = difference - LUNCH_BREAK_MINUTES
    if math.isnan(net) or net <= 0:
        return 0
    return net / 60


def format_duration(hours: float) -> str:
    """Render decimal hours as ``"8h"`` or ``"7h 30m"``.

    A fractional part that rounds up to a full hour is carried into the hour,
    so 7.999 renders as ``"8h"`` rather than ``"7h 60m"``.
    """
    whole = math.floor(hours)
    minutes = _round_half_up((hours - whole) * 60)
    if minutes == 60:
        whole += 1
        minutes = 0
    if minutes == 0:
        return f"{whole}h"
    return f"{whole}h {minutes}m"


def _to_number(part: str) -> float:
    s = part.strip()
    if not s:
        return 0
    try:
        return float(s)
    except ValueError:
        return math.nan


def _round_half_up(x: float) -> int:
    # Matches the rounding used for displayed clock values (0.5 goes up).
    return int(math.floor(x + 0.5))
