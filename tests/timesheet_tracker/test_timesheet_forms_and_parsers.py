import pytest

from timesheet_tracker.backend.forms import (
    WEEKDAY_KEYS,
    DayEntry,
    InvalidClockTimeError,
    ScheduleError,
    UnknownWeekdayError,
    WeekSchedule,
    empty_schedule,
    from_dict,
    resolve_weekday,
    to_dict,
    validate_schedule_payload,
)
from timesheet_tracker.backend.parsers import normalize_clock_time, parse_freeform


def test_day_entry_duration_is_derived():
    assert DayEntry("09:00", "17:30").duration == 8
    assert DayEntry("09:00", "").duration == 0
    assert DayEntry("09:00", "").is_open
    assert not DayEntry("09:00", "17:30").is_open
    assert not DayEntry().is_open


def test_empty_schedule_has_every_weekday_in_order():
    schedule = empty_schedule()
    assert [day.key for day, _ in schedule] == list(WEEKDAY_KEYS)
    assert all(entry == DayEntry() for _, entry in schedule)


def test_week_schedule_rejects_wrong_arity():
    with pytest.raises(ScheduleError):
        WeekSchedule(days=(DayEntry(),))


def test_unknown_weekday_lookup():
    with pytest.raises(UnknownWeekdayError):
        empty_schedule()["sabato"]


def test_to_dict_uses_wire_field_names():
    schedule = empty_schedule().with_day("lunedi", DayEntry("09:00", "17:30"))
    data = to_dict(schedule)
    assert list(data) == list(WEEKDAY_KEYS)
    assert data["lunedi"] == {"entrata": "09:00", "uscita": "17:30", "totaleOre": 8}
    assert data["venerdi"] == {"entrata": "", "uscita": "", "totaleOre": 0}


def test_from_dict_recomputes_duration():
    data = to_dict(empty_schedule())
    data["martedi"] = {"entrata": "08:00", "uscita": "12:30", "totaleOre": 99}
    schedule = from_dict(data)
    assert schedule["martedi"].duration == 4


def test_validate_payload_ok():
    assert validate_schedule_payload(to_dict(empty_schedule())) == []


def test_validate_payload_reports_structural_problems():
    data = to_dict(empty_schedule())
    del data["venerdi"]
    data["lunedi"] = {"entrata": 9, "uscita": "", "totaleOre": "x"}
    problems = validate_schedule_payload(data)
    assert any("Missing days: venerdi" in p for p in problems)
    assert any("lunedi.entrata" in p for p in problems)
    assert any("lunedi.totaleOre" in p for p in problems)
    assert validate_schedule_payload([1, 2]) == ["Schedule must be a JSON object."]


def test_resolve_weekday_aliases():
    assert resolve_weekday("Monday") == "lunedi"
    assert resolve_weekday("Lunedì") == "lunedi"
    assert resolve_weekday("fri") == "venerdi"
    assert resolve_weekday("giovedi") == "giovedi"
    assert resolve_weekday("saturday") is None
    assert resolve_weekday("") is None


def test_normalize_clock_time():
    assert normalize_clock_time("9:00") == "09:00"
    assert normalize_clock_time("09:05") == "09:05"
    assert normalize_clock_time("8.45") == "08:45"
    assert normalize_clock_time("1730") == "17:30"
    assert normalize_clock_time("9") == "09:00"
    assert normalize_clock_time("  ") == ""


@pytest.mark.parametrize("text", ["25:00", "12:75", "noon", "9:0"])
def test_normalize_clock_time_rejects(text):
    with pytest.raises(InvalidClockTimeError):
        normalize_clock_time(text)


def test_parse_freeform_markers():
    data = parse_freeform("monday in 9:00 out 17:30")
    assert data == {"weekday": "lunedi", "clock_in": "9:00", "clock_out": "17:30"}


def test_parse_freeform_italian_and_single_marker():
    data = parse_freeform("venerdi uscita 16.15")
    assert data["weekday"] == "venerdi"
    assert data["clock_in"] is None
    assert data["clock_out"] == "16.15"


def test_parse_freeform_range_and_loose_time():
    assert parse_freeform("Tue 8:30-17:00")["clock_out"] == "17:00"
    assert parse_freeform("Tue 8:30-17:00")["clock_in"] == "8:30"
    assert parse_freeform("wednesday 9")["clock_in"] == "9"
    assert parse_freeform("") == {"weekday": None, "clock_in": None, "clock_out": None}


def test_parse_freeform_two_unmarked_times():
    data = parse_freeform("monday 9:00 17:30")
    assert data == {"weekday": "lunedi", "clock_in": "9:00", "clock_out": "17:30"}
    assert parse_freeform("monday in 9:00 17:30")["clock_out"] == "17:30"
