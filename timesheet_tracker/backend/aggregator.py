from __future__ import annotations

from dataclasses import dataclass

from .forms import WeekSchedule
from .timecalc import WEEKLY_TARGET_HOURS, format_duration


@dataclass(frozen=True)
class WeeklyStatus:
    """Weekly totals measured against the target."""

    total: float
    target: float = WEEKLY_TARGET_HOURS

    @property
    def formatted_total(self) -> str:
        return format_duration(self.total)

    @property
    def remaining(self) -> float:
        return max(0.0, self.target - self.total)

    @property
    def formatted_remaining(self) -> str:
        return format_duration(self.remaining)

    @property
    def target_reached(self) -> bool:
        return self.total >= self.target

    @property
    def over_target(self) -> bool:
        return self.total > self.target

    @property
    def overage(self) -> float:
        return max(0.0, self.total - self.target)

    @property
    def progress_percent(self) -> float:
        if self.target <= 0:
            return 100.0
        return min(100.0, self.total / self.target * 100)

    def as_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "formatted_total": self.formatted_total,
            "target": self.target,
            "remaining": self.remaining,
            "formatted_remaining": self.formatted_remaining,
            "target_reached": self.target_reached,
            "over_target": self.over_target,
            "overage": self.overage,
            "progress_percent": round(self.progress_percent, 1),
        }


def total_hours(schedule: WeekSchedule) -> float:
    """Sum of the worked hours of every day in the week."""
    return sum((entry.duration for _, entry in schedule), 0.0)


def weekly_status(schedule: WeekSchedule) -> WeeklyStatus:
    return WeeklyStatus(total=total_hours(schedule))


def describe_status(status: WeeklyStatus) -> str:
    """Return a one-line summary of progress towards the weekly target.

    - Below target: "Xh of 36h, Yh to go".
    - At target: "Xh of 36h, target reached".
    - Above target: also notes the overage to one decimal place.
    """
    head = f"{status.formatted_total} of {status.target:g}h"
    if not status.target_reached:
        return f"{head}, {status.formatted_remaining} to go"
    if status.over_target:
        return f"{head}, over target by {_strip_trailing_zero(status.overage)}h"
    return f"{head}, target reached"


def _strip_trailing_zero(x: float) -> str:
    s = f"{x:.1f}"
    if s.endswith(".0"):
        return s[:-2]
    return s
