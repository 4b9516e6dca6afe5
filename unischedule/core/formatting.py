# unischedule/core/formatting.py
import logging
from functools import lru_cache

from .constants import (DEFAULT_MODE, DEFAULT_SEMESTER, DEFAULT_SPECIALIZATION,
                        MODE_LABELS, UNKNOWN_LABEL)
from ..models.models import Group, GroupMeta

log = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def parse_group_label(base_id: str) -> GroupMeta:
    """
    Splits a dotted group label (e.g. 'Y2.S2.WD.SE') into its parts.

    Args:
        base_id: The parent group label, year.semester.mode.specialization.

    Returns:
        A GroupMeta. Missing parts fall back to 'Unknown', 'S1', 'WE' and
        'GEN' respectively.
    """
    parts = base_id.split(".") if base_id else []

    def part(index: int, default: str) -> str:
        return parts[index] if len(parts) > index and parts[index] else default

    year = part(0, UNKNOWN_LABEL)
    semester = part(1, DEFAULT_SEMESTER)
    if len(parts) < 4:
        log.debug(f"Group label '{base_id}' has only {len(parts)} parts, filling defaults.")
    return GroupMeta(
        year=year,
        semester=semester,
        year_key=f"{year}.{semester}",
        mode=part(2, DEFAULT_MODE),
        specialization=part(3, DEFAULT_SPECIALIZATION),
    )


def parse_group_meta(group: Group) -> GroupMeta:
    return parse_group_label(group.parent_group or group.id)


def mode_label(mode: str) -> str:
    """'WE' -> 'Weekend', 'WD' -> 'Weekday', anything else unchanged."""
    return MODE_LABELS.get(mode, mode)


def compact_label(value: str) -> str:
    """Drops the first dot, so 'Y2.S2' reads 'Y2S2'."""
    return value.replace(".", "", 1)
