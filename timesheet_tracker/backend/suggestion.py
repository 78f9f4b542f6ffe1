"""Suggest when to clock out so the week reaches its target.

The suggestion applies to the first open day of the week, the first day with
a clock-in but no clock-out. It is recomputed from the schedule every time and
keeps no state between calls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .aggregator import total_hours
from .forms import WeekSchedule
from .timecalc import (
    LATEST_SUGGESTION,
    LUNCH_BREAK_MINUTES,
    WEEKLY_TARGET_HOURS,
    format_from_minutes,
    parse_to_minutes,
)


@dataclass(frozen=True)
class Suggestion:
    weekday: str
    label: str
    time: str


def suggest_clock_out(schedule: WeekSchedule, total: float | None = None) -> Suggestion | None:
    """Return the clock-out time that completes the weekly target, if any.

    No suggestion when the target is already met, when no day is open, or when
    the computed time would fall after ``LATEST_SUGGESTION``.
    """
    if total is None:
        total = total_hours(schedule)
    if total >= WEEKLY_TARGET_HOURS:
        return None

    open_day = next(((day, entry) for day, entry in schedule if entry.is_open), None)
    if open_day is None:
        return None
    day, entry = open_day

    remaining = WEEKLY_TARGET_HOURS - total
    candidate = parse_to_minutes(entry.clock_in) + remaining * 60 + LUNCH_BREAK_MINUTES
    if math.isnan(candidate):
        return None
    # Durations are sums of whole minutes; drop float noise before comparing.
    candidate = round(candidate, 6)
    if candidate > parse_to_minutes(LATEST_SUGGESTION):
        return None
    return Suggestion(weekday=day.key, label=day.label, time=format_from_minutes(candidate))
