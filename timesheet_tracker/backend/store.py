"""Owns the current week and keeps the durable copy in sync with it."""

from __future__ import annotations

import json

from loguru import logger

from .forms import (
    FIELDS,
    DayEntry,
    InvalidClockTimeError,
    UnknownFieldError,
    UnknownWeekdayError,
    WeekSchedule,
    empty_schedule,
    from_dict,
    resolve_weekday,
    to_dict,
    validate_clock_time,
    validate_schedule_payload,
)
from .storage import STORAGE_KEY, KeyValueBackend, StorageUnavailableError


class ScheduleStore:
    """Holds the single mutable schedule for a session.

    Every mutation returns a new schedule and persists all of it. Storage
    failures are logged and never interrupt the session.
    """

    def __init__(self, backend: KeyValueBackend, key: str = STORAGE_KEY) -> None:
        self.backend = backend
        self.key = key
        self.schedule: WeekSchedule = empty_schedule()

    def load(self) -> WeekSchedule:
        """Restore the persisted schedule, or start from an empty week."""
        self.schedule = self._read()
        return self.schedule

    def set_field(self, schedule: WeekSchedule, weekday: str, field: str, value: str) -> WeekSchedule:
        """Set clock-in or clock-out for one day and persist the whole week.

        Raises:
            UnknownWeekdayError: ``weekday`` is not one of the five working days.
            UnknownFieldError: ``field`` is neither clock-in nor clock-out.
            InvalidClockTimeError: ``value`` is neither empty nor ``HH:MM``.
        """
        key = resolve_weekday(weekday)
        if key is None:
            raise UnknownWeekdayError(f"Unknown weekday: {weekday!r}.")
        attr = FIELDS.get((field or "").strip().lower())
        if attr is None:
            raise UnknownFieldError(f"Unknown field: {field!r} (expected clock_in or clock_out).")
        value = (value or "").strip()
        problems = validate_clock_time(value)
        if problems:
            raise InvalidClockTimeError(problems[0])

        current = schedule[key]
        times = {"clock_in": current.clock_in, "clock_out": current.clock_out, attr: value}
        updated = schedule.with_day(key, DayEntry(**times))
        self.schedule = updated
        self.save(updated)
        return updated

    def clear(self) -> WeekSchedule:
        """Reset to the empty week and overwrite the persisted copy."""
        self.schedule = empty_schedule()
        if self.save(self.schedule):
            logger.info("Cleared timesheet schedule")
        else:
            logger.warning("Cleared timesheet schedule in memory only; the saved copy is unchanged")
        return self.schedule

    def save(self, schedule: WeekSchedule) -> bool:
        """Persist ``schedule``; returns False if the write failed."""
        try:
            self.backend.set(self.key, json.dumps(to_dict(schedule), ensure_ascii=False))
        except StorageUnavailableError as exc:
            logger.error("Could not save schedule under {!r}: {}", self.key, exc)
            return False
        logger.debug("Saved schedule under {!r}", self.key)
        return True

    def _read(self) -> WeekSchedule:
        try:
            raw = self.backend.get(self.key)
        except StorageUnavailableError as exc:
            logger.warning("Could not load schedule under {!r}: {}", self.key, exc)
            return empty_schedule()
        if raw is None:
            return empty_schedule()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Stored schedule under {!r} is not valid JSON: {}", self.key, exc)
            return empty_schedule()
        problems = validate_schedule_payload(data)
        if problems:
            logger.warning("Discarding stored schedule under {!r}: {}", self.key, "; ".join(problems))
            return empty_schedule()
        return from_dict(data)
