"""Schemas and validation for the weekly schedule.

A schedule is a fixed, ordered record of five working days. The persisted form
keeps the field names used by the original web tracker (``entrata``, ``uscita``,
``totaleOre``) so existing saved weeks remain readable.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from typing_extensions import TypedDict

from .timecalc import compute_duration, is_clock_time


class ScheduleError(ValueError):
    """Raised when a caller supplies a value the schedule cannot accept."""


class UnknownWeekdayError(ScheduleError):
    pass


class UnknownFieldError(ScheduleError):
    pass


class InvalidClockTimeError(ScheduleError):
    pass


@dataclass(frozen=True)
class Weekday:
    key: str
    label: str


WEEKDAYS: tuple[Weekday, ...] = (
    Weekday("lunedi", "Lunedì"),
    Weekday("martedi", "Martedì"),
    Weekday("mercoledi", "Mercoledì"),
    Weekday("giovedi", "Giovedì"),
    Weekday("venerdi", "Venerdì"),
)
WEEKDAY_KEYS: tuple[str, ...] = tuple(w.key for w in WEEKDAYS)

_ALIASES: dict[str, str] = {
    "monday": "lunedi",
    "mon": "lunedi",
    "lun": "lunedi",
    "tuesday": "martedi",
    "tue": "martedi",
    "tues": "martedi",
    "mar": "martedi",
    "wednesday": "mercoledi",
    "wed": "mercoledi",
    "mer": "mercoledi",
    "thursday": "giovedi",
    "thu": "giovedi",
    "thurs": "giovedi",
    "gio": "giovedi",
    "friday": "venerdi",
    "fri": "venerdi",
    "ven": "venerdi",
}

# Field names accepted by ``set_field``, mapped to the DayEntry attribute.
FIELDS: dict[str, str] = {
    "clock_in": "clock_in",
    "clock_out": "clock_out",
    "entrata": "clock_in",
    "uscita": "clock_out",
    "in": "clock_in",
    "out": "clock_out",
}


class DayPayload(TypedDict):
    """Persisted shape of one day."""

    entrata: str
    uscita: str
    totaleOre: float


@dataclass(frozen=True)
class DayEntry:
    """Clock-in/out times for one day; ``duration`` is always derived."""

    clock_in: str = ""
    clock_out: str = ""
    duration: float = field(init=False, default=0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "duration", compute_duration(self.clock_in, self.clock_out))

    @property
    def is_open(self) -> bool:
        """Clocked in, not yet clocked out."""
        return bool(self.clock_in) and not self.clock_out


@dataclass(frozen=True)
class WeekSchedule:
    """One DayEntry per weekday, always in canonical Monday..Friday order."""

    days: tuple[DayEntry, ...] = field(default_factory=lambda: tuple(DayEntry() for _ in WEEKDAYS))

    def __post_init__(self) -> None:
        if len(self.days) != len(WEEKDAYS):
            raise ScheduleError(f"A week needs exactly {len(WEEKDAYS)} days, got {len(self.days)}.")

    def __getitem__(self, key: str) -> DayEntry:
        return self.days[_index_of(key)]

    def __iter__(self) -> Iterator[tuple[Weekday, DayEntry]]:
        return iter(zip(WEEKDAYS, self.days))

    def with_day(self, key: str, entry: DayEntry) -> WeekSchedule:
        """Return a copy with one day replaced."""
        idx = _index_of(key)
        days = list(self.days)
        days[idx] = entry
        return replace(self, days=tuple(days))


def empty_schedule() -> WeekSchedule:
    """Return the canonical empty week: no times, zero hours."""
    return WeekSchedule()


def resolve_weekday(value: str | None) -> str | None:
    """Map a weekday key, label or alias (English or Italian) to its key."""
    s = _fold(value)
    if not s:
        return None
    if s in WEEKDAY_KEYS:
        return s
    return _ALIASES.get(s)


def weekday_label(key: str) -> str:
    return WEEKDAYS[_index_of(key)].label


def to_dict(schedule: WeekSchedule) -> dict[str, DayPayload]:
    """Convert a schedule to its persisted mapping."""
    return {
        day.key: DayPayload(entrata=entry.clock_in, uscita=entry.clock_out, totaleOre=entry.duration)
        for day, entry in schedule
    }


def from_dict(data: Mapping[str, Any]) -> WeekSchedule:
    """Build a schedule from a persisted mapping.

    Callers should run ``validate_schedule_payload`` first; missing days here
    are filled with empty entries. The stored ``totaleOre`` is ignored and
    recomputed from the times.
    """
    days: list[DayEntry] = []
    for key in WEEKDAY_KEYS:
        raw = data.get(key) or {}
        days.append(
            DayEntry(
                clock_in=str(raw.get("entrata") or ""),
                clock_out=str(raw.get("uscita") or ""),
            )
        )
    return WeekSchedule(days=tuple(days))


def validate_clock_time(value: str) -> list[str]:
    """Return problems with a clock-time value; empty means "not set" and is fine."""
    if value == "" or is_clock_time(value):
        return []
    return [f"Invalid time {value!r}: expected HH:MM (00:00-23:59)."]


def validate_schedule_payload(data: Any) -> list[str]:
    """Return a list of human-readable issues with a persisted schedule."""
    if not isinstance(data, Mapping):
        return ["Schedule must be a JSON object."]
    issues: list[str] = []
    missing = [k for k in WEEKDAY_KEYS if k not in data]
    if missing:
        issues.append(f"Missing days: {', '.join(missing)}.")
    unknown = [str(k) for k in data if k not in WEEKDAY_KEYS]
    if unknown:
        issues.append(f"Unknown days: {', '.join(unknown)}.")
    for key in WEEKDAY_KEYS:
        day = data.get(key)
        if key not in data:
            continue
        if not isinstance(day, Mapping):
            issues.append(f"{key}: expected an object.")
            continue
        for name in ("entrata", "uscita"):
            value = day.get(name)
            if not isinstance(value, str):
                issues.append(f"{key}.{name}: expected a string.")
            else:
                issues.extend(f"{key}.{name}: {p}" for p in validate_clock_time(value))
        hours = day.get("totaleOre")
        if isinstance(hours, bool) or not isinstance(hours, (int, float)):
            issues.append(f"{key}.totaleOre: expected a number.")
    return issues


def _index_of(key: str) -> int:
    try:
        return WEEKDAY_KEYS.index(key)
    except ValueError:
        raise UnknownWeekdayError(f"Unknown weekday: {key!r}.") from None


def _fold(value: str | None) -> str:
    s = unicodedata.normalize("NFKD", (value or "").strip().lower())
    return "".join(ch for ch in s if not unicodedata.combining(ch))
