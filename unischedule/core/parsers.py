# unischedule/core/parsers.py
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from .cells import interpret_cell
from .constants import (DAY_HEADER_SELECTOR, MAIN_GROUP_HEADER_SELECTOR,
                        SCHEDULE_TABLE_SELECTOR, SLOT_MINUTES,
                        TIME_HEADER_CLASS, UNKNOWN_LABEL)
from .grid import reconstruct_grid
from .merger import merge_sessions
from ..models.models import (DetailEntries, GridCell, Group, Session,
                             SharedEntry, TimetableDataset)

log = logging.getLogger(__name__)


class TimetableParserError(Exception):
    """Raised when a schedule document cannot be parsed at all."""
    def __init__(self, message: str, html_content: Optional[str] = None):
        super().__init__(message)
        # Kept for debugging the offending document
        self.html_content = html_content


# --- Table Structure ---

def read_main_group(table: Tag) -> str:
    header = table.select_one(MAIN_GROUP_HEADER_SELECTOR)
    label = header.get_text(" ", strip=True) if header else ""
    if not label:
        log.warning(f"Table '{table.get('id')}' has no main group header, using '{UNKNOWN_LABEL}'.")
        return UNKNOWN_LABEL
    return label


def read_day_headers(table: Tag) -> List[str]:
    days = [th.get_text(" ", strip=True) for th in table.select(DAY_HEADER_SELECTOR)]
    if not days:
        log.warning(f"Table '{table.get('id')}' has no day headers.")
    return days


def body_rows(table: Tag) -> List[Tag]:
    """Direct body rows of the table, never rows of nested detail tables."""
    rows = table.select(":scope > tbody > tr")
    if not rows:
        # lxml does not insert an implicit <tbody>
        rows = table.find_all("tr", recursive=False)
    return rows


def read_time_rows(table: Tag) -> List[Tuple[str, List[Tag]]]:
    """(slot start, physical <td> cells) for each row that has a time header."""
    time_rows = []
    for row_index, row in enumerate(body_rows(table)):
        time_cell = row.find("th", class_=TIME_HEADER_CLASS, recursive=False)
        if time_cell is None:
            log.debug(f"Table '{table.get('id')}' row {row_index} has no time header, skipping.")
            continue
        time_rows.append((time_cell.get_text(strip=True), row.find_all("td", recursive=False)))
    return time_rows


# --- Session Assembly ---

def _build_session(grid_cell: GridCell, day: str, slot_minutes: int, **fields) -> Optional[Session]:
    try:
        return Session(
            day=day,
            start=grid_cell.start,
            duration_minutes=grid_cell.row_span * slot_minutes,
            **fields,
        )
    except ValidationError as e:
        log.warning(f"Skipping {day} '{grid_cell.start}' cell '{fields.get('title')}': {e.errors()[0]['msg']}")
        return None


def parse_table(table: Tag, slot_minutes: int = SLOT_MINUTES) -> List[Group]:
    """
    Turns one schedule table into its output groups.

    Shared sessions belong to every subgroup of the table. When any cell
    carries a detail table, the table yields one group per subgroup (shared
    sessions plus that subgroup's own); otherwise it yields a single group
    named after the table's main group label.

    Args:
        table: A schedule <table> tag.
        slot_minutes: Length of one grid row in minutes.

    Returns:
        The table's groups with merged sessions. Ids are not yet checked for
        uniqueness across tables.
    """
    main_group = read_main_group(table)
    days = read_day_headers(table)

    shared_sessions: List[Session] = []
    subgroup_sessions: Dict[str, List[Session]] = {}

    for grid_cell in reconstruct_grid(len(days), read_time_rows(table)):
        day = days[grid_cell.day_index]
        entry = interpret_cell(grid_cell.content)

        if isinstance(entry, DetailEntries):
            for detail in entry.entries:
                session = _build_session(
                    grid_cell, day, slot_minutes,
                    title=detail.title, location=detail.location, description=detail.description,
                )
                if session:
                    subgroup_sessions.setdefault(detail.subgroup, []).append(session)
        elif isinstance(entry, SharedEntry):
            session = _build_session(
                grid_cell, day, slot_minutes,
                title=entry.title, location=entry.location, description=entry.lecturers,
            )
            if session:
                shared_sessions.append(session)

    if subgroup_sessions:
        log.debug(f"Table '{main_group}' splits into {len(subgroup_sessions)} subgroups.")
        return [
            Group(
                id=subgroup,
                label=f"{subgroup} ({main_group})",
                parent_group=main_group,
                events=merge_sessions(shared_sessions + own_sessions),
            )
            for subgroup, own_sessions in subgroup_sessions.items()
        ]

    return [
        Group(
            id=main_group,
            label=main_group,
            parent_group=main_group,
            events=merge_sessions(shared_sessions),
        )
    ]


def unique_group_id(group: Group, taken: Set[str]) -> str:
    """
    Returns the group's id, or "{id} ({parentGroup})" with a numeric suffix
    when that id is already in `taken`.
    """
    if group.id not in taken:
        return group.id
    candidate = f"{group.id} ({group.parent_group})"
    suffix = 2
    base = candidate
    while candidate in taken:
        candidate = f"{base}-{suffix}"
        suffix += 1
    log.warning(f"Group id '{group.id}' already used, renamed to '{candidate}'.")
    return candidate


def parse_timetable_html(
    html_content: Optional[str],
    slot_minutes: int = SLOT_MINUTES,
    generated_at: Optional[datetime] = None,
) -> TimetableDataset:
    """
    Parses a whole schedule export into the canonical dataset.

    Args:
        html_content: The exported HTML document.
        slot_minutes: Length of one grid row in minutes.
        generated_at: Timestamp for the dataset, defaults to now (UTC).

    Returns:
        A TimetableDataset with every group of every schedule table.

    Raises:
        TimetableParserError: If the input is empty.
    """
    if not html_content or not html_content.strip():
        log.warning("parse_timetable_html received None or empty HTML content.")
        raise TimetableParserError("Input HTML content is empty or invalid", html_content=html_content)

    soup = BeautifulSoup(html_content, "lxml")
    tables = soup.select(SCHEDULE_TABLE_SELECTOR)
    if not tables:
        log.warning(f"No schedule tables ({SCHEDULE_TABLE_SELECTOR}) found in document.")

    groups: List[Group] = []
    taken: Set[str] = set()
    for table in tables:
        for group in parse_table(table, slot_minutes):
            group_id = unique_group_id(group, taken)
            if group_id != group.id:
                group = group.model_copy(update={"id": group_id})
            taken.add(group_id)
            groups.append(group)

    log.info(f"Parsing finished. Extracted {len(groups)} groups from {len(tables)} tables.")
    return TimetableDataset(
        generated_at=generated_at or datetime.now(timezone.utc),
        groups=groups,
    )
