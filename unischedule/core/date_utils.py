# unischedule/core/date_utils.py
import logging
import re
from datetime import date, time
from functools import lru_cache
from typing import Optional

log = logging.getLogger(__name__)

# --- Regular Expressions ---
# Matches H:MM or HH:MM (24-hour clock), optionally surrounded by whitespace
CLOCK_TIME = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")
# Matches YYYY-MM-DD format (ISO standard)
HYPHEN_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


@lru_cache(maxsize=256)
def normalize_clock(value: Optional[str]) -> Optional[str]:
    """
    Normalizes a clock string like "9:00" or " 09:00 " to zero-padded "HH:MM".

    Returns:
        The normalized string, or None if the value is not a valid 24-hour time.
    """
    if not value or not isinstance(value, str):
        return None
    match = CLOCK_TIME.match(value)
    if not match:
        log.debug(f"Value '{value}' is not a clock time.")
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        log.debug(f"Clock time '{value}' is out of range.")
        return None
    return f"{hour:02d}:{minute:02d}"


def clock_to_minutes(value: str) -> int:
    """
    Converts "HH:MM" to minutes after midnight.

    Raises:
        ValueError: If the value is not a valid clock time.
    """
    normalized = normalize_clock(value)
    if normalized is None:
        raise ValueError(f"Invalid clock time: '{value}'")
    hour, minute = normalized.split(":")
    return int(hour) * 60 + int(minute)


def clock_to_time(value: str) -> time:
    minutes = clock_to_minutes(value)
    return time(minutes // 60, minutes % 60)


def parse_date_only(value: str) -> date:
    """
    Parses a YYYY-MM-DD string into a date (no time, no zone).

    Raises:
        ValueError: If the string is not an ISO date or names an impossible day.
    """
    match = HYPHEN_DATE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Date must be in ISO format (YYYY-MM-DD), got '{value}'")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)
