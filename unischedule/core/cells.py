# unischedule/core/cells.py
import logging
from typing import List, Optional

from bs4 import Comment, NavigableString, Tag

from .constants import DEFAULT_TITLE, DETAIL_TABLE_SELECTOR, EMPTY_CELL_MARKERS, UNKNOWN_LABEL
from ..models.models import CellEntry, DetailEntries, DetailEntry, SharedEntry

log = logging.getLogger(__name__)


def _collapse(text: str) -> str:
    return " ".join(text.split())


def cell_text_lines(cell: Tag) -> List[str]:
    """
    Splits a cell's content into text lines.

    <br> tags become line breaks, every other tag is dropped. Lines are
    trimmed, and empty lines or "no session" placeholders are removed.
    """
    parts: List[str] = []
    for node in cell.descendants:
        if isinstance(node, Tag):
            if node.name == "br":
                parts.append("\n")
        elif isinstance(node, NavigableString) and not isinstance(node, Comment):
            # Source newlines are layout only; <br> carries the real breaks
            parts.append(str(node).replace("\n", " "))

    lines = (_collapse(line) for line in "".join(parts).split("\n"))
    return [line for line in lines if line and line not in EMPTY_CELL_MARKERS]


def parse_shared_cell(cell: Tag) -> Optional[SharedEntry]:
    """
    Reads a plain cell: title, lecturer(s) and location on consecutive lines.

    Returns:
        A SharedEntry, or None if the cell holds no session at all.
    """
    lines = cell_text_lines(cell)
    if not lines:
        return None
    return SharedEntry(
        title=lines[0] or DEFAULT_TITLE,
        lecturers=lines[1] if len(lines) > 1 else "",
        location=lines[2] if len(lines) > 2 else "",
    )


def _direct_cells(row: Tag) -> List[Tag]:
    return row.find_all("td", recursive=False)


def parse_detail_table(table: Tag) -> List[DetailEntry]:
    """
    Reads a nested per-subgroup table.

    The table is authored row by row (identifier row, title row, lecturer
    row, location row) but each column belongs to one subgroup, so the rows
    are transposed into per-column buckets before building entries.

    Args:
        table: The <table class="detailed"> tag.

    Returns:
        One DetailEntry per column, in column order.
    """
    rows = table.find_all("tr")
    if not rows:
        log.debug("Detail table has no rows.")
        return []

    column_count = len(_direct_cells(rows[0]))
    # Row position decides the field, so a short row leaves its gaps empty
    columns: List[List[str]] = [[""] * len(rows) for _ in range(column_count)]

    for row_index, row in enumerate(rows):
        cells = _direct_cells(row)
        if len(cells) > column_count:
            log.warning(
                f"Detail table row {row_index} has {len(cells)} cells, expected {column_count}. Ignoring the extra cells."
            )
        for index, cell in enumerate(cells[:column_count]):
            columns[index][row_index] = _collapse(cell.get_text())

    def field_at(column: List[str], position: int) -> str:
        return column[position] if len(column) > position else ""

    return [
        DetailEntry(
            subgroup=field_at(column, 0) or UNKNOWN_LABEL,
            title=field_at(column, 1) or DEFAULT_TITLE,
            lecturers=field_at(column, 2),
            location=field_at(column, 3),
        )
        for column in columns
    ]


def interpret_cell(cell: Tag) -> Optional[CellEntry]:
    """
    Classifies a grid cell as a shared session or a set of subgroup sessions.

    Returns:
        DetailEntries when the cell wraps a detail table, a SharedEntry for a
        plain cell, or None when the slot is empty.
    """
    detail_table = cell.select_one(DETAIL_TABLE_SELECTOR)
    if detail_table is not None:
        return DetailEntries(entries=parse_detail_table(detail_table))
    return parse_shared_cell(cell)
