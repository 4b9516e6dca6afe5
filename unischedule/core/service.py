# unischedule/core/service.py
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from .constants import DISPLAY_DAY_ORDER, SLOT_MINUTES
from .date_utils import clock_to_minutes
from .formatting import parse_group_meta
from .parsers import parse_timetable_html, unique_group_id
from ..models.models import Group, Session, TimetableDataset

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


class DatasetNotFoundError(FileNotFoundError):
    """Raised when a dataset or source document path does not exist."""


# --- Dataset I/O ---

def regenerate_dataset(
    input_path: PathLike, output_path: PathLike, slot_minutes: int = SLOT_MINUTES
) -> TimetableDataset:
    """
    Parses a schedule export and writes the canonical dataset JSON.

    The output file is only written once parsing has succeeded.

    Raises:
        DatasetNotFoundError: If input_path does not exist.
        TimetableParserError: If the document is empty.
    """
    source = Path(input_path)
    if not source.is_file():
        raise DatasetNotFoundError(f"Input document not found: {source}")

    log.info(f"Parsing schedule export {source}...")
    dataset = parse_timetable_html(source.read_text(encoding="utf-8"), slot_minutes=slot_minutes)
    save_dataset(dataset, output_path)
    return dataset


def save_dataset(dataset: TimetableDataset, path: PathLike) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dataset.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    log.info(f"Wrote {len(dataset.groups)} groups to {target}.")


def load_dataset(path: PathLike) -> TimetableDataset:
    """
    Raises:
        DatasetNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the file is not a valid dataset.
    """
    source = Path(path)
    if not source.is_file():
        raise DatasetNotFoundError(f"Dataset not found: {source}")
    return TimetableDataset.model_validate_json(source.read_text(encoding="utf-8"))


def combine_datasets(*datasets: TimetableDataset) -> TimetableDataset:
    """
    Concatenates the groups of several datasets (e.g. weekday and weekend
    exports), keeping the most recent generation timestamp. A group whose id
    is already taken by an earlier dataset is renamed, with a warning.

    Raises:
        ValueError: If no dataset is given.
    """
    if not datasets:
        raise ValueError("At least one dataset is required")
    groups: List[Group] = []
    taken: Set[str] = set()
    for dataset in datasets:
        for group in dataset.groups:
            group_id = unique_group_id(group, taken)
            if group_id != group.id:
                group = group.model_copy(update={"id": group_id})
            taken.add(group_id)
            groups.append(group)
    return TimetableDataset(
        generated_at=max(dataset.generated_at for dataset in datasets),
        groups=groups,
    )


# --- Queries ---

def find_group(dataset: TimetableDataset, group_id: str) -> Optional[Group]:
    return next((group for group in dataset.groups if group.id == group_id), None)


def sorted_groups(groups: Iterable[Group]) -> List[Group]:
    return sorted(groups, key=lambda group: group.label)


def filter_groups(
    groups: Iterable[Group],
    year_key: Optional[str] = None,
    mode: Optional[str] = None,
    specialization: Optional[str] = None,
) -> List[Group]:
    """Keeps the groups whose metadata matches every filter that is set."""
    selected = []
    for group in groups:
        meta = parse_group_meta(group)
        if year_key is not None and meta.year_key != year_key:
            continue
        if mode is not None and meta.mode != mode:
            continue
        if specialization is not None and meta.specialization != specialization:
            continue
        selected.append(group)
    return selected


def events_by_day(group: Group) -> List[Tuple[str, List[Session]]]:
    """
    Groups a group's sessions by weekday in display order (Monday first),
    each day sorted by start time. Days without sessions are left out.
    """
    by_day: Dict[str, List[Session]] = {}
    for session in group.events:
        by_day.setdefault(session.day, []).append(session)

    return [
        (day, sorted(by_day[day], key=lambda session: clock_to_minutes(session.start)))
        for day in DISPLAY_DAY_ORDER
        if by_day.get(day)
    ]
