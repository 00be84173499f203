"""
Schedule formatting utilities.

Converts between 24-hour and 12-hour clock strings and abbreviates day names
for compact schedule display.
"""

import re
from typing import Dict


DAY_ABBREVIATIONS: Dict[str, str] = {
    "Monday": "Mon",
    "Tuesday": "Tue",
    "Wednesday": "Wed",
    "Thursday": "Thu",
    "Friday": "Fri",
    "Saturday": "Sat",
    "Sunday": "Sun",
}

# "18:00", "6:30", "6:30 PM", "6pm", "6 p.m.", "0630"
_TIME_PATTERN = re.compile(
    r"^\s*(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?\s*(?:(?P<period>[ap])\.?\s*m?\.?)?\s*$",
    re.IGNORECASE,
)


def to_12_hour(time_24: str) -> str:
    """
    Convert a 24-hour "HH:MM" time to "h:mm AM/PM".

    Examples:
        >>> to_12_hour("09:00")
        '9:00 AM'
        >>> to_12_hour("00:00")
        '12:00 AM'
        >>> to_12_hour("12:00")
        '12:00 PM'
    """
    hours, minutes = (int(part) for part in time_24.split(":"))
    period = "PM" if hours >= 12 else "AM"
    hours_12 = hours % 12 or 12
    return f"{hours_12}:{minutes:02d} {period}"


def day_abbreviation(day: str) -> str:
    """Three-letter day code; unknown strings fall back to their first three characters."""
    return DAY_ABBREVIATIONS.get(day, day[:3])


def normalize_time(value: str) -> str:
    """
    Normalize a clock time to 24-hour "HH:MM".

    Accepts "18:00", "6:00", "6:30 PM", "6pm", "6 p.m." and "0630".

    Raises:
        ValueError: If the value is not a recognizable clock time
    """
    match = _TIME_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Unrecognized time: {value!r}")

    hours = int(match.group("hours"))
    minutes = int(match.group("minutes") or 0)
    period = (match.group("period") or "").lower()

    if minutes > 59:
        raise ValueError(f"Unrecognized time: {value!r}")

    if period:
        if not 1 <= hours <= 12:
            raise ValueError(f"Unrecognized time: {value!r}")
        hours = hours % 12 + (12 if period == "p" else 0)
    elif hours > 23:
        raise ValueError(f"Unrecognized time: {value!r}")

    return f"{hours:02d}:{minutes:02d}"
