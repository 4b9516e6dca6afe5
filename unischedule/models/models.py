# unischedule/models/models.py
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.date_utils import normalize_clock


class Session(BaseModel):
    """One weekly meeting of a group: weekday, start time and duration."""

    day: str
    start: str
    duration_minutes: int = Field(..., alias="durationMinutes")
    title: str
    location: str = ""
    description: str = ""

    @field_validator("start")
    @classmethod
    def validate_start(cls, v):
        normalized = normalize_clock(v)
        if normalized is None:
            raise ValueError("Start must be a 24-hour time in HH:MM format")
        return normalized

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v):
        if v <= 0:
            raise ValueError("Duration must be a positive number of minutes")
        return v

    class Config:
        populate_by_name = True
        frozen = True
        json_schema_extra = {
            "example": {
                "day": "Monday",
                "start": "09:00",
                "durationMinutes": 120,
                "title": "Software Engineering",
                "location": "Room 204",
                "description": "Dr. Popescu",
            }
        }


# Name used by the published dataset format
TimetableEvent = Session


class Group(BaseModel):
    id: str
    label: str
    parent_group: str = Field(..., alias="parentGroup")
    events: List[Session] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "Y2.S2.WD.SE.1",
                "label": "Y2.S2.WD.SE.1 (Y2.S2.WD.SE)",
                "parentGroup": "Y2.S2.WD.SE",
                "events": [],
            }
        }


class TimetableDataset(BaseModel):
    generated_at: datetime = Field(..., alias="generatedAt")
    groups: List[Group] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_group_ids(self):
        seen = set()
        for group in self.groups:
            if group.id in seen:
                raise ValueError(f"Duplicate group id '{group.id}'")
            seen.add(group.id)
        return self

    class Config:
        populate_by_name = True
        frozen = True


# --- Cell Interpretation Results ---

class SharedEntry(BaseModel):
    """A single session attended by every subgroup of the table."""

    kind: Literal["shared"] = "shared"
    title: str
    lecturers: str = ""
    location: str = ""

    class Config:
        frozen = True


class DetailEntry(BaseModel):
    """One subgroup's column of a nested detail table."""

    subgroup: str
    title: str
    lecturers: str = ""
    location: str = ""

    @property
    def description(self) -> str:
        lines = [self.lecturers, f"Group {self.subgroup}"]
        return "\n".join(line for line in lines if line)

    class Config:
        frozen = True


class DetailEntries(BaseModel):
    """Parallel subgroup sessions sharing one grid slot."""

    kind: Literal["detail"] = "detail"
    entries: List[DetailEntry] = Field(default_factory=list)

    class Config:
        frozen = True


CellEntry = Union[SharedEntry, DetailEntries]


class GroupMeta(BaseModel):
    year: str
    semester: str
    year_key: str = Field(..., alias="yearKey")
    mode: str
    specialization: str

    class Config:
        populate_by_name = True
        frozen = True


# --- Internal Structures ---

@dataclass(frozen=True)
class GridCell:
    """A newly starting cell found while walking a schedule table."""
    day_index: int
    start: str
    row_span: int
    content: Any  # bs4 Tag of the <td>


@dataclass(frozen=True)
class CalendarEvent:
    """Concrete first occurrence of a session, only alive while encoding."""
    uid: str
    start: datetime
    end: datetime
    until: datetime
    summary: str
    location: Optional[str] = None
    description: Optional[str] = None
