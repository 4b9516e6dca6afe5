# unischedule/core/calendar_encoder.py
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Mapping, Optional

from icalendar import Calendar, Event

from .constants import (CALENDAR_DAY_INDEX, CALENDAR_FALLBACK_DAY_INDEX,
                        CALENDAR_PRODID, CALENDAR_SCALE, CALENDAR_VERSION,
                        UID_DOMAIN)
from .date_utils import clock_to_time
from ..models.models import CalendarEvent, Group

log = logging.getLogger(__name__)

END_OF_DAY = time(23, 59, 59)


class InvalidDateRangeError(ValueError):
    """The requested range ends before it starts."""
    def __init__(self, start: date, end: date):
        super().__init__("End date must be on or after start date.")
        self.start = start
        self.end = end


def validate_date_range(start: date, end: date) -> None:
    if start > end:
        log.warning(f"Rejected date range {start} - {end}: end is before start.")
        raise InvalidDateRangeError(start, end)


def calendar_day_index(day: str, day_index: Mapping[str, int] = CALENDAR_DAY_INDEX) -> int:
    """Maps a weekday name to Sunday=0 ... Saturday=6, unknown names to Monday."""
    if day not in day_index:
        log.warning(f"Unknown weekday '{day}', scheduling it on Monday.")
        return CALENDAR_FALLBACK_DAY_INDEX
    return day_index[day]


def first_occurrence(range_start: date, target_day: int) -> date:
    """
    Finds the first date on or after range_start that falls on target_day
    (Sunday=0 ... Saturday=6).
    """
    current = range_start
    # date.weekday() counts from Monday=0
    while (current.weekday() + 1) % 7 != target_day:
        current += timedelta(days=1)
    return current


def recurrence_until(range_end: date) -> datetime:
    """Last moment of the range end date, so its own occurrence still counts."""
    return datetime.combine(range_end, END_OF_DAY)


def build_calendar_events(
    group: Group, start: date, end: date, uid_domain: str = UID_DOMAIN
) -> List[CalendarEvent]:
    """
    Projects a group's weekly sessions onto a concrete date range.

    Args:
        group: The group whose sessions are exported.
        start: First day of the range (inclusive).
        end: Last day of the range (inclusive).
        uid_domain: Suffix appended to every event UID.

    Returns:
        One CalendarEvent per session, in the group's session order.

    Raises:
        InvalidDateRangeError: If start is after end.
    """
    validate_date_range(start, end)
    until = recurrence_until(end)

    events: List[CalendarEvent] = []
    for index, session in enumerate(group.events):
        first_date = first_occurrence(start, calendar_day_index(session.day))
        event_start = datetime.combine(first_date, clock_to_time(session.start))
        events.append(
            CalendarEvent(
                uid=f"{group.id}-{session.day}-{session.start}-{index}@{uid_domain}",
                start=event_start,
                end=event_start + timedelta(minutes=session.duration_minutes),
                until=until,
                summary=session.title,
                location=session.location or None,
                description=session.description or None,
            )
        )
    return events


def build_ics(
    group: Group,
    start: date,
    end: date,
    generated_at: Optional[datetime] = None,
    uid_domain: str = UID_DOMAIN,
) -> str:
    """
    Renders a group's timetable as an iCalendar document.

    Every session becomes one weekly recurring VEVENT with floating local
    DTSTART/DTEND and an UNTIL at the end of the range's last day. Text
    escaping, CRLF line endings and line folding come from icalendar.

    Args:
        group: The group to export.
        start: First day of the semester (inclusive).
        end: Last day of the semester (inclusive).
        generated_at: DTSTAMP for every event, defaults to now (UTC).
        uid_domain: Suffix appended to every event UID.

    Returns:
        The calendar document text, ending with CRLF.

    Raises:
        InvalidDateRangeError: If start is after end. No text is produced.
    """
    calendar_events = build_calendar_events(group, start, end, uid_domain)
    stamp = generated_at or datetime.now(timezone.utc)

    cal = Calendar()
    cal.add("version", CALENDAR_VERSION)
    cal.add("prodid", CALENDAR_PRODID)
    cal.add("calscale", CALENDAR_SCALE)

    for calendar_event in calendar_events:
        event = Event()
        event.add("uid", calendar_event.uid)
        event.add("dtstamp", stamp)
        event.add("summary", calendar_event.summary)
        event.add("dtstart", calendar_event.start)
        event.add("dtend", calendar_event.end)
        event.add("rrule", {"freq": "weekly", "until": calendar_event.until})
        if calendar_event.location:
            event.add("location", calendar_event.location)
        if calendar_event.description:
            event.add("description", calendar_event.description)
        cal.add_component(event)

    log.info(f"Built calendar for group '{group.id}' with {len(calendar_events)} events ({start} - {end}).")
    return cal.to_ical().decode("utf-8")
