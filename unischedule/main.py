import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional
from urllib.parse import quote

from fastapi import FastAPI, HTTPException, Path, Query, Request, Response, status
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError

from .core.calendar_encoder import InvalidDateRangeError, build_ics
from .core.config import configure_logging, get_settings
from .core.formatting import mode_label, parse_group_meta
from .core.service import (DatasetNotFoundError, combine_datasets, events_by_day,
                           filter_groups, find_group, load_dataset, sorted_groups)
from .models.api_models import DaySchedule, GroupListResponse, GroupScheduleResponse, GroupSummary
from .models.models import Group, TimetableDataset

settings = get_settings()
configure_logging(settings.log_level)
log = logging.getLogger(__name__)


def load_configured_datasets(paths: List[str]) -> Optional[TimetableDataset]:
    """
    Loads and combines every configured dataset. Missing or invalid files are
    logged and skipped; returns None when nothing could be loaded.
    """
    datasets = []
    for path in paths:
        try:
            datasets.append(load_dataset(path))
            log.info(f"Loaded timetable dataset from {path}.")
        except DatasetNotFoundError as e:
            log.warning(f"Skipping dataset: {e}")
        except ValidationError as e:
            log.error(f"Dataset {path} is not a valid timetable dataset: {e}")

    if not datasets:
        return None
    return combine_datasets(*datasets)


# --- Lifespan Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Lifespan: Application startup sequence initiated.")
    app.state.dataset = load_configured_datasets(settings.dataset_paths)
    if app.state.dataset is None:
        log.warning("Lifespan startup: No timetable dataset loaded. Group endpoints will return 503.")
    else:
        log.info(f"Lifespan startup: Serving {len(app.state.dataset.groups)} groups.")
    yield
    app.state.dataset = None
    log.info("Lifespan: Application shutdown sequence complete.")


app = FastAPI(
    title="UniSchedule API",
    description="Browse parsed class timetables and download them as recurring calendars.",
    version="0.1.0",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)


def get_dataset(request: Request) -> TimetableDataset:
    dataset = getattr(request.app.state, "dataset", None)
    if dataset is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="No timetable dataset loaded.")
    return dataset


def get_group_or_404(dataset: TimetableDataset, group_id: str) -> Group:
    group = find_group(dataset, group_id)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown group '{group_id}'.")
    return group


def to_summary(group: Group) -> GroupSummary:
    meta = parse_group_meta(group)
    return GroupSummary(
        id=group.id,
        label=group.label,
        parent_group=group.parent_group,
        year=meta.year,
        semester=meta.semester,
        year_key=meta.year_key,
        mode=meta.mode,
        mode_label=mode_label(meta.mode),
        specialization=meta.specialization,
        event_count=len(group.events),
    )


def attachment_disposition(filename: str) -> str:
    """
    Builds a Content-Disposition header for a download. Headers must be
    latin-1, so non-ASCII names go in `filename*` (RFC 6266) and the plain
    `filename` carries an ASCII fallback.
    """
    fallback = filename.encode("ascii", "replace").decode("ascii")
    fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@app.get("/")
async def read_root():
    """
    Root endpoint. Returns a simple message indicating the API is running.
    """
    return {"message": "UniSchedule API is running"}


@app.get("/groups", response_model=GroupListResponse, tags=["Timetables"])
async def list_groups(
    request: Request,
    year: Optional[str] = Query(None, description="Year and semester key, e.g. 'Y2.S2'."),
    mode: Optional[str] = Query(None, description="Mode code, e.g. 'WD' or 'WE'."),
    specialization: Optional[str] = Query(None),
):
    """
    Lists every group sorted by label, optionally filtered by year, mode and
    specialization.
    """
    dataset = get_dataset(request)
    groups = filter_groups(sorted_groups(dataset.groups), year_key=year, mode=mode, specialization=specialization)
    return GroupListResponse(generated_at=dataset.generated_at, groups=[to_summary(group) for group in groups])


@app.get("/groups/{group_id}", response_model=GroupScheduleResponse, tags=["Timetables"])
async def get_group_schedule(request: Request, group_id: str = Path(...)):
    """
    Returns one group's weekly schedule, day by day.
    """
    group = get_group_or_404(get_dataset(request), group_id)
    return GroupScheduleResponse(
        group=to_summary(group),
        days=[DaySchedule(day=day, events=events) for day, events in events_by_day(group)],
    )


@app.get("/groups/{group_id}/calendar.ics", tags=["Timetables"])
async def download_calendar(
    request: Request,
    group_id: str = Path(...),
    start: Optional[date] = Query(None, description="First day of the semester (inclusive)."),
    end: Optional[date] = Query(None, description="Last day of the semester (inclusive)."),
):
    """
    Downloads the group's timetable as an iCalendar file with one weekly
    recurring event per session. Defaults to the configured semester dates.
    """
    group = get_group_or_404(get_dataset(request), group_id)
    try:
        content = build_ics(
            group,
            start or settings.semester_start,
            end or settings.semester_end,
            uid_domain=settings.uid_domain,
        )
    except InvalidDateRangeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return Response(
        content=content,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": attachment_disposition(f"{group.id}-timetable.ics")},
    )
