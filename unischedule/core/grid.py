# unischedule/core/grid.py
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models.models import GridCell

log = logging.getLogger(__name__)

# Remaining rows each day column is still covered by an earlier rowspan cell
Occupancy = Tuple[int, ...]


def read_row_span(cell) -> int:
    """Reads a cell's rowspan attribute, falling back to 1 for missing or bad values."""
    try:
        row_span = int(cell.get("rowspan", 1))
    except (ValueError, TypeError):
        log.warning(f"Could not parse rowspan '{cell.get('rowspan')}', assuming 1.")
        return 1
    return row_span if row_span > 0 else 1


def advance_row(
    occupancy: Occupancy, cells: Sequence, start: str, rows_left: Optional[int] = None
) -> Tuple[Occupancy, List[GridCell]]:
    """
    Walks one body row and returns the occupancy for the next row plus the
    cells that start in this row.

    The markup only emits a <td> for columns that are not covered by a cell
    from an earlier row, so physical cells are consumed left to right and
    matched against the uncovered day columns.

    Args:
        occupancy: Rows still covered per day column, from the previous row.
        cells: The row's physical <td> tags, in document order.
        start: The row's slot start time as read from its header.
        rows_left: Rows remaining in the table including this one. A rowspan
            reaching past the last row is cut down to it.

    Returns:
        A tuple (next_occupancy, started_cells).
    """
    next_occupancy = list(occupancy)
    started: List[GridCell] = []
    cell_iter = iter(cells)

    for day_index, covered in enumerate(occupancy):
        if covered > 0:
            next_occupancy[day_index] = covered - 1
            continue

        cell = next(cell_iter, None)
        if cell is None:
            # Ragged row near the edge of the schedule, nothing in this slot
            log.debug(f"Row '{start}': no physical cell left for day column {day_index}.")
            continue

        row_span = read_row_span(cell)
        if rows_left is not None and row_span > rows_left:
            log.warning(f"Row '{start}': rowspan {row_span} runs past the table end, cut to {rows_left}.")
            row_span = rows_left
        next_occupancy[day_index] = row_span - 1
        started.append(GridCell(day_index=day_index, start=start, row_span=row_span, content=cell))

    leftover = sum(1 for _ in cell_iter)
    if leftover:
        log.warning(f"Row '{start}': ignored {leftover} cell(s) beyond the {len(occupancy)} day columns.")

    return tuple(next_occupancy), started


def reconstruct_grid(day_count: int, rows: Iterable[Tuple[str, Sequence]]) -> List[GridCell]:
    """
    Recovers every newly starting cell of a rowspan-laid-out table.

    Args:
        day_count: Number of day columns in the table header.
        rows: (start_time, physical_cells) for each body row, top to bottom.

    Returns:
        The started cells in row order, left to right within a row.
    """
    rows = list(rows)
    occupancy: Occupancy = (0,) * day_count
    grid: List[GridCell] = []
    for row_index, (start, cells) in enumerate(rows):
        occupancy, started = advance_row(occupancy, cells, start, rows_left=len(rows) - row_index)
        grid.extend(started)
    return grid
