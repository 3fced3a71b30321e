# day_time.py
# Parses catalog day codes ("MWF", "TR", "Tu Th") and time ranges ("2:00PM-3:50PM") into normalized values.

import re
from typing import List, NamedTuple, Optional, Tuple

__all__ = [
    "DAY_SYMBOLS",
    "TimeRange",
    "parse_days",
    "parse_time_range",
    "parse_clock",
    "parse_clock_range",
    "to_minutes",
    "format_clock",
]

DAY_SYMBOLS = ("M", "T", "W", "R", "F")

MINUTES_PER_DAY = 24 * 60

# Combined codes tried first, first match wins. "TR" must come before "MWF"
# and before the abbreviation scan, otherwise the lone "T" and "R" entries
# would be read as separate tokens.
DAY_CODE_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("TR", ("T", "R")),
    ("MWF", ("M", "W", "F")),
)

# Scanned in this order; every pattern found as a substring contributes its symbol.
DAY_ABBREVIATIONS: Tuple[Tuple[str, str], ...] = (
    ("M", "M"), ("Mo", "M"), ("Mon", "M"), ("Monday", "M"),
    ("T", "T"), ("Tu", "T"), ("Tue", "T"), ("Tuesday", "T"),
    ("W", "W"), ("We", "W"), ("Wed", "W"), ("Wednesday", "W"),
    ("R", "R"), ("Th", "R"), ("Thu", "R"), ("Thursday", "R"),
    ("F", "F"), ("Fr", "F"), ("Fri", "F"), ("Friday", "F"),
)

TIME_RANGE_RE = re.compile(
    r"(\d{1,2}):(\d{2})\s*(AM|PM)?\s*-\s*(\d{1,2}):(\d{2})\s*(AM|PM)?",
    re.IGNORECASE,
)
CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


class TimeRange(NamedTuple):
    start: str  # "HH:MM"
    end: str  # "HH:MM"
    duration: int  # minutes


EMPTY_RANGE = TimeRange("00:00", "00:00", 0)


def is_tba(text: Optional[str]) -> bool:
    # Missing and non-text fields are treated the same as an explicit "TBA".
    return not isinstance(text, str) or not text or text == "TBA"


def parse_days(text: Optional[str]) -> List[str]:
    # Return the day symbols in a free-text day field, deduplicated; [] for TBA or junk.
    if is_tba(text):
        return []

    cleaned = re.sub(r"[,\s]", "", text)

    for code, days in DAY_CODE_RULES:
        if code in cleaned:
            return list(days)

    found: List[str] = []
    for pattern, day in DAY_ABBREVIATIONS:
        if pattern in cleaned and day not in found:
            found.append(day)
    return found


def format_clock(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def to_minutes(clock: str) -> int:
    hours, minutes = clock.split(":")
    return int(hours) * 60 + int(minutes)


def _to_24_hour(hour: int, minute: int, meridiem: Optional[str]) -> str:
    if meridiem:
        meridiem = meridiem.upper()
        if meridiem == "PM" and hour != 12:
            hour += 12
        elif meridiem == "AM" and hour == 12:
            hour = 0
    return format_clock(hour, minute)


def parse_time_range(text: Optional[str]) -> TimeRange:
    # Never raises: TBA or anything unparsable becomes a zero-length slot at midnight.
    if is_tba(text):
        return EMPTY_RANGE

    match = TIME_RANGE_RE.search(text)
    if not match:
        return EMPTY_RANGE

    sh, sm, s_ampm, eh, em, e_ampm = match.groups()
    start = _to_24_hour(int(sh), int(sm), s_ampm)
    end = _to_24_hour(int(eh), int(em), e_ampm)

    duration = to_minutes(end) - to_minutes(start)
    if duration < 0:
        # Crosses midnight, e.g. 11:00PM-12:30AM.
        duration += MINUTES_PER_DAY
    return TimeRange(start, end, duration)


def parse_clock(text: str) -> int:
    # Strict "H:MM"/"HH:MM" parser for configuration values; raises ValueError.
    match = CLOCK_RE.match(text) if isinstance(text, str) else None
    if not match:
        raise ValueError(f"invalid clock time: {text!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"invalid clock time: {text!r}")
    return hour * 60 + minute


def parse_clock_range(text: str) -> Tuple[int, int]:
    # "12:00-13:00" -> (720, 780); raises ValueError for anything else.
    if not isinstance(text, str) or text.count("-") != 1:
        raise ValueError(f"invalid time range: {text!r}")
    start, end = text.split("-")
    return parse_clock(start), parse_clock(end)
