# unischedule/cli.py
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.calendar_encoder import InvalidDateRangeError, build_ics
from .core.config import configure_logging, get_settings
from .core.date_utils import parse_date_only
from .core.parsers import TimetableParserError
from .core.service import DatasetNotFoundError, find_group, load_dataset, regenerate_dataset

log = logging.getLogger(__name__)


def _date_arg(value: str):
    try:
        return parse_date_only(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parse_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="unischedule-parse",
        description="Convert an exported schedule HTML document into the timetable dataset JSON.",
    )
    parser.add_argument("input", help="Path to the exported schedule HTML document.")
    parser.add_argument(
        "output",
        nargs="?",
        default=settings.output_path,
        help=f"Where to write the dataset JSON (default: {settings.output_path}).",
    )
    parser.add_argument(
        "--slot-minutes",
        type=int,
        default=settings.slot_minutes,
        help=f"Length of one grid row in minutes (default: {settings.slot_minutes}).",
    )
    return parser


def parse_main(argv: Optional[List[str]] = None) -> int:
    """Entry point for `unischedule-parse INPUT [OUTPUT]`."""
    args = build_parse_parser().parse_args(argv)
    configure_logging(get_settings().log_level)

    if args.slot_minutes <= 0:
        print("Error: --slot-minutes must be positive.", file=sys.stderr)
        return 1

    try:
        dataset = regenerate_dataset(args.input, args.output, slot_minutes=args.slot_minutes)
    except DatasetNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except TimetableParserError as e:
        print(f"Error: could not parse {args.input}: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {len(dataset.groups)} timetables to {args.output}")
    return 0


def build_export_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="unischedule-export",
        description="Export one group's timetable as a weekly recurring iCalendar file.",
    )
    parser.add_argument("dataset", help="Path to the timetable dataset JSON.")
    parser.add_argument("group_id", help="Id of the group to export.")
    parser.add_argument(
        "--start",
        type=_date_arg,
        default=settings.semester_start,
        help="First day of the semester, YYYY-MM-DD (inclusive).",
    )
    parser.add_argument(
        "--end",
        type=_date_arg,
        default=settings.semester_end,
        help="Last day of the semester, YYYY-MM-DD (inclusive).",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output .ics path (default: <group_id>-timetable.ics).",
    )
    return parser


def export_main(argv: Optional[List[str]] = None) -> int:
    """Entry point for `unischedule-export DATASET GROUP_ID`."""
    args = build_export_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        dataset = load_dataset(args.dataset)
    except DatasetNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    group = find_group(dataset, args.group_id)
    if group is None:
        print(f"Error: no group with id '{args.group_id}' in {args.dataset}.", file=sys.stderr)
        return 1

    try:
        content = build_ics(group, args.start, args.end, uid_domain=settings.uid_domain)
    except InvalidDateRangeError as e:
        print(f"Invalid date range: {e}", file=sys.stderr)
        return 1

    output = Path(args.output or f"{group.id}-timetable.ics")
    # Already CRLF terminated, keep newline translation off
    output.write_text(content, encoding="utf-8", newline="")
    print(f"Wrote {len(group.events)} events for {group.label} to {output}")
    return 0


def run_parse() -> None:
    sys.exit(parse_main())


def run_export() -> None:
    sys.exit(export_main())
