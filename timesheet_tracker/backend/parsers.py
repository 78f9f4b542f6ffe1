"""Natural-language to structured clock-time parsing.

These helpers turn what a person types ("monday in 9 out 17:30",
"venerdi entrata 8.45") into the canonical values the schedule accepts.
"""

from __future__ import annotations

import re
from typing import Any

from .forms import InvalidClockTimeError, resolve_weekday
from .timecalc import is_clock_time

_IN_MARKERS = {"in", "entrata", "start", "clock-in", "clockin", "arrived"}
_OUT_MARKERS = {"out", "uscita", "end", "clock-out", "clockout", "left"}

_TIME_TOKEN = r"\d{1,2}(?:[:.h]\d{2})?|\d{3,4}"


def normalize_clock_time(text: str | None) -> str:
    """Normalize a typed time to ``HH:MM``.

    Accepted: ``H:MM``, ``HH:MM``, ``HH.MM``, ``HHhMM``, ``HHMM``/``HMM`` and a
    bare hour (``9``). Blank input returns ``""`` (clears the value).

    Raises:
        InvalidClockTimeError: the text is not a time, or is out of range.
    """
    s = (text or "").strip().lower()
    if not s:
        return ""

    m = re.fullmatch(r"(\d{1,2})(?:[:.h](\d{2}))?", s)
    if m:
        hours, minutes = int(m.group(1)), int(m.group(2) or 0)
    elif re.fullmatch(r"\d{3,4}", s):
        hours, minutes = int(s[:-2]), int(s[-2:])
    else:
        raise InvalidClockTimeError(f"Not a time: {text!r}.")

    value = f"{hours:02d}:{minutes:02d}"
    if not is_clock_time(value):
        raise InvalidClockTimeError(f"Time out of range: {text!r}.")
    return value


def parse_freeform(text: str) -> dict[str, Any]:
    """Parse a freeform line into weekday and clock times.

    Heuristics:
    - Weekday: first token naming a working day (English or Italian).
    - Clock-in: time following an in-marker (in/entrata/start).
    - Clock-out: time following an out-marker (out/uscita/end).
    - A range like "9:00-17:30" sets both.
    - Times with no marker fill clock-in, then clock-out, in order ("9:00 17:30").

    Missing parts are None. Times are returned as typed; run them through
    ``normalize_clock_time`` before use.
    """
    s = (text or "").strip()
    result: dict[str, Any] = {"weekday": None, "clock_in": None, "clock_out": None}
    if not s:
        return result

    tokens = [t.strip(",;") for t in s.split()]
    for tok in tokens:
        key = resolve_weekday(tok)
        if key:
            result["weekday"] = key
            break

    rng = re.search(rf"\b({_TIME_TOKEN})\s*(?:-|–|to|a)\s*({_TIME_TOKEN})\b", s, flags=re.IGNORECASE)
    if rng:
        result["clock_in"] = rng.group(1)
        result["clock_out"] = rng.group(2)
        return result

    pending: str | None = None
    loose: list[str] = []
    for tok in tokens:
        low = tok.lower().rstrip(":")
        if low in _IN_MARKERS:
            pending = "clock_in"
            continue
        if low in _OUT_MARKERS:
            pending = "clock_out"
            continue
        if re.fullmatch(_TIME_TOKEN, tok):
            if pending:
                result[pending] = tok
                pending = None
            else:
                loose.append(tok)

    for name in ("clock_in", "clock_out"):
        if loose and result[name] is None:
            result[name] = loose.pop(0)
    return result
