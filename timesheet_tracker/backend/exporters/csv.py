"""CSV export utilities for the weekly schedule."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence

from ..aggregator import total_hours
from ..forms import WeekSchedule
from ..timecalc import format_duration

WEEK_FIELDS = ("giorno", "entrata", "uscita", "totale")
EMPTY_CELL = "-"


def render_csv(rows: Iterable[dict[str, object]], fieldnames: Sequence[str]) -> str:
    """Render an iterable of dict rows to a CSV string with given headers.

    - Unknown keys are ignored to keep output stable.
    - Values are stringified via the csv module.
    """
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=list(fieldnames), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row or {})
    return buf.getvalue()


def week_rows(schedule: WeekSchedule) -> list[dict[str, object]]:
    """One row per weekday plus the weekly total; zero hours show as "-"."""
    rows: list[dict[str, object]] = [
        {
            "giorno": day.label,
            "entrata": entry.clock_in,
            "uscita": entry.clock_out,
            "totale": _hours_cell(entry.duration),
        }
        for day, entry in schedule
    ]
    rows.append(
        {
            "giorno": "Totale Settimanale",
            "entrata": "",
            "uscita": "",
            "totale": _hours_cell(total_hours(schedule)),
        }
    )
    return rows


def render_week_csv(schedule: WeekSchedule) -> str:
    return render_csv(week_rows(schedule), WEEK_FIELDS)


def _hours_cell(hours: float) -> str:
    return format_duration(hours) if hours > 0 else EMPTY_CELL
