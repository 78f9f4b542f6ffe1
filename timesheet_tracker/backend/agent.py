"""Session orchestration for the weekly timesheet.

This module defines the interaction loop a front end drives:
    mutate → re-derive total and suggestion → report.

Every mutation goes through the ScheduleStore, and the weekly status and
clock-out suggestion are recomputed from the schedule it returns. Clearing the
week is destructive, so it takes two steps: request, then confirm.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .aggregator import describe_status, weekly_status
from .forms import ScheduleError, WeekSchedule, resolve_weekday, to_dict
from .parsers import normalize_clock_time, parse_freeform
from .store import ScheduleStore
from .suggestion import suggest_clock_out


@dataclass
class SessionEvent:
    """A simple event structure suitable for streaming to a UI."""

    type: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass
class SessionState:
    """Holds per-session flags that are not part of the schedule."""

    clear_requested: bool = False


class TimesheetSession:
    """Drives a ScheduleStore and reports the derived weekly figures."""

    def __init__(self, store: ScheduleStore) -> None:
        self.store = store
        self.state = SessionState()

    @property
    def schedule(self) -> WeekSchedule:
        return self.store.schedule

    def start(self) -> SessionEvent:
        """Restore the saved week and report where it stands."""
        self.store.load()
        return SessionEvent(type="started", payload=self.snapshot())

    def snapshot(self) -> dict[str, Any]:
        """Schedule, weekly status and suggestion for the current week."""
        schedule = self.store.schedule
        status = weekly_status(schedule)
        suggestion = suggest_clock_out(schedule, status.total)
        return {
            "schedule": to_dict(schedule),
            "status": status.as_dict(),
            "summary": describe_status(status),
            "suggestion": (
                {"weekday": suggestion.weekday, "label": suggestion.label, "time": suggestion.time}
                if suggestion
                else None
            ),
        }

    def set_time(self, weekday: str, field_name: str, value: str) -> list[SessionEvent]:
        """Set one clock time and report the refreshed week."""
        try:
            normalized = normalize_clock_time(value)
            self.store.set_field(self.store.schedule, weekday, field_name, normalized)
        except ScheduleError as exc:
            return [SessionEvent(type="error", payload={"problems": [str(exc)]})]
        return [
            SessionEvent(
                type="updated",
                payload={"weekday": resolve_weekday(weekday), "field": field_name, "value": normalized},
            ),
            SessionEvent(type="snapshot", payload=self.snapshot()),
        ]

    def provide_input(self, text: str) -> list[SessionEvent]:
        """Handle a freeform line such as "monday in 9:00 out 17:30"."""
        events: list[SessionEvent] = [SessionEvent(type="user_input", payload={"text": text})]
        parsed = parse_freeform(text)
        events.append(SessionEvent(type="parsed", payload={"entry": parsed}))

        problems: list[str] = []
        if not parsed["weekday"]:
            problems.append("Which day? Say a weekday from Monday to Friday.")
        if parsed["clock_in"] is None and parsed["clock_out"] is None:
            problems.append("No time found. Try something like 'in 9:00' or 'out 17:30'.")
        if problems:
            events.append(
                SessionEvent(
                    type="needs_revision",
                    payload={"message": "I need a bit more detail.", "problems": problems},
                )
            )
            return events

        # Nothing is applied unless every time normalizes.
        values: dict[str, str] = {}
        for name in ("clock_in", "clock_out"):
            if parsed[name] is None:
                continue
            try:
                values[name] = normalize_clock_time(parsed[name])
            except ScheduleError as exc:
                problems.append(str(exc))
        if problems:
            events.append(SessionEvent(type="error", payload={"problems": problems}))
            return events

        for name, value in values.items():
            result = self.set_time(parsed["weekday"], name, value)
            events.extend(e for e in result if e.type != "snapshot")
            if result[0].type == "error":
                return events
        events.append(SessionEvent(type="snapshot", payload=self.snapshot()))
        return events

    def request_clear(self) -> SessionEvent:
        """Ask for confirmation before wiping the week."""
        self.state.clear_requested = True
        return SessionEvent(
            type="needs_confirmation",
            payload={
                "message": "Delete all timesheet data? This cannot be undone.",
            },
        )

    def confirm_clear(self) -> list[SessionEvent]:
        """Clear the week, only if a clear was requested first."""
        if not self.state.clear_requested:
            return [SessionEvent(type="error", payload={"problems": ["Nothing to confirm yet."]})]
        self.state.clear_requested = False
        self.store.clear()
        return [
            SessionEvent(type="cleared", payload={"message": "All timesheet data deleted."}),
            SessionEvent(type="snapshot", payload=self.snapshot()),
        ]

    def cancel_clear(self) -> SessionEvent:
        self.state.clear_requested = False
        return SessionEvent(type="clear_cancelled")
