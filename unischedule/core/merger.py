# unischedule/core/merger.py
import logging
from typing import Iterable, List, Sequence

from .constants import DISPLAY_DAY_ORDER
from .date_utils import clock_to_minutes
from ..models.models import Session

log = logging.getLogger(__name__)


def session_sort_key(session: Session, day_order: Sequence[str] = DISPLAY_DAY_ORDER):
    """Orders sessions by weekday (unknown names last), then start time."""
    try:
        day_position = day_order.index(session.day)
    except ValueError:
        day_position = len(day_order)
    return day_position, clock_to_minutes(session.start)


def _continues(last: Session, candidate: Session) -> bool:
    return (
        last.day == candidate.day
        and last.title == candidate.title
        and last.location == candidate.location
        and last.description == candidate.description
        and clock_to_minutes(last.start) + last.duration_minutes == clock_to_minutes(candidate.start)
    )


def merge_sessions(
    sessions: Iterable[Session], day_order: Sequence[str] = DISPLAY_DAY_ORDER
) -> List[Session]:
    """
    Joins back-to-back identical sessions that the grid split across rows.

    Sessions are sorted by (weekday, start) and then walked once; a session
    that starts exactly where the previously accepted one ends, with the same
    day, title, location and description, extends it instead of being added.

    Args:
        sessions: Sessions of one group, in any order.
        day_order: Weekday names in the order used for sorting.

    Returns:
        The merged sessions in sorted order.
    """
    ordered = sorted(sessions, key=lambda session: session_sort_key(session, day_order))
    merged: List[Session] = []

    for candidate in ordered:
        if merged and _continues(merged[-1], candidate):
            last = merged[-1]
            merged[-1] = last.model_copy(
                update={"duration_minutes": last.duration_minutes + candidate.duration_minutes}
            )
            continue
        merged.append(candidate)

    if len(merged) != len(ordered):
        log.debug(f"Merged {len(ordered)} sessions into {len(merged)}.")
    return merged
