import pytest

from timesheet_tracker.backend.aggregator import describe_status, total_hours, weekly_status
from timesheet_tracker.backend.forms import DayEntry, empty_schedule
from timesheet_tracker.backend.suggestion import Suggestion, suggest_clock_out


def _week(**days):
    schedule = empty_schedule()
    for key, (clock_in, clock_out) in days.items():
        schedule = schedule.with_day(key, DayEntry(clock_in, clock_out))
    return schedule


FULL_DAY = ("09:00", "17:30")  # 8h after lunch


def test_total_hours_empty_week():
    assert total_hours(empty_schedule()) == 0


def test_total_hours_sums_days():
    schedule = _week(lunedi=FULL_DAY, mercoledi=("08:00", "12:30"))
    assert total_hours(schedule) == 12


def test_scenario_a_closed_day_gives_no_suggestion():
    schedule = _week(lunedi=FULL_DAY)
    assert total_hours(schedule) == 8
    assert suggest_clock_out(schedule) is None


def test_scenario_b_suggestion_too_late_is_suppressed():
    schedule = _week(lunedi=("09:00", ""))
    assert total_hours(schedule) == 0
    assert suggest_clock_out(schedule) is None


def test_scenario_c_suggests_friday_time():
    schedule = _week(
        lunedi=FULL_DAY,
        martedi=FULL_DAY,
        mercoledi=FULL_DAY,
        giovedi=FULL_DAY,
        venerdi=("09:00", ""),
    )
    assert total_hours(schedule) == 32
    assert suggest_clock_out(schedule) == Suggestion(weekday="venerdi", label="Venerdì", time="13:30")


def test_scenario_d_over_target():
    schedule = _week(
        lunedi=("08:00", "18:30"),  # 10h
        martedi=("08:00", "18:30"),
        mercoledi=("08:00", "18:30"),
        giovedi=("08:00", "18:30"),
        venerdi=("09:00", ""),
    )
    status = weekly_status(schedule)
    assert status.total == 40
    assert status.over_target
    assert status.overage == 4
    assert suggest_clock_out(schedule) is None
    assert describe_status(status) == "40h of 36h, over target by 4h"


def test_suggestion_uses_first_open_day():
    long_day = ("08:00", "18:30")  # 10h
    schedule = _week(
        lunedi=("07:00", ""),
        martedi=long_day,
        mercoledi=long_day,
        giovedi=long_day,
        venerdi=("08:00", ""),
    )
    suggestion = suggest_clock_out(schedule)
    assert suggestion == Suggestion(weekday="lunedi", label="Lunedì", time="13:30")


def test_suggestion_at_latest_allowed_time():
    # 4h remaining, 15:30 + 4h + 30m = 20:00 exactly.
    schedule = _week(
        lunedi=FULL_DAY,
        martedi=FULL_DAY,
        mercoledi=FULL_DAY,
        giovedi=FULL_DAY,
        venerdi=("15:30", ""),
    )
    assert suggest_clock_out(schedule).time == "20:00"
    later = schedule.with_day("venerdi", DayEntry("15:31", ""))
    assert suggest_clock_out(later) is None


def test_suggestion_with_fractional_total():
    schedule = _week(
        lunedi=("09:00", "17:45"),  # 8h15m
        martedi=("09:00", "17:45"),
        mercoledi=("09:00", "17:45"),
        giovedi=("09:00", "17:45"),
        venerdi=("08:00", ""),
    )
    assert total_hours(schedule) == pytest.approx(33)
    assert suggest_clock_out(schedule).time == "11:30"


def test_suggestion_respects_explicit_total():
    schedule = _week(venerdi=("09:00", ""))
    assert suggest_clock_out(schedule, total=36) is None
    assert suggest_clock_out(schedule, total=32).time == "13:30"


def test_weekly_status_below_target():
    status = weekly_status(_week(lunedi=FULL_DAY))
    assert not status.target_reached
    assert status.remaining == 28
    assert status.formatted_total == "8h"
    assert status.progress_percent == pytest.approx(8 / 36 * 100)
    assert describe_status(status) == "8h of 36h, 28h to go"


def test_weekly_status_exactly_on_target():
    status = weekly_status(
        _week(
            lunedi=FULL_DAY,
            martedi=FULL_DAY,
            mercoledi=FULL_DAY,
            giovedi=FULL_DAY,
            venerdi=("09:00", "13:30"),
        )
    )
    assert status.total == 36
    assert status.target_reached and not status.over_target
    assert status.progress_percent == 100
    assert describe_status(status) == "36h of 36h, target reached"
