from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from .models import Session


class GroupSummary(BaseModel):
    """
    A group as listed by the API, with the metadata used for filtering.
    """
    id: str = Field(..., description="Unique group id (subgroup id or main group label).")
    label: str = Field(..., description="Display label, e.g. 'Y2.S2.WD.SE.1 (Y2.S2.WD.SE)'.")
    parent_group: str = Field(..., alias="parentGroup", description="Label of the table the group came from.")
    year: str
    semester: str
    year_key: str = Field(..., alias="yearKey", description="Year and semester, e.g. 'Y2.S2'.")
    mode: str = Field(..., description="Attendance mode code, e.g. 'WD' or 'WE'.")
    mode_label: str = Field(..., alias="modeLabel", description="Readable mode, e.g. 'Weekday'.")
    specialization: str
    event_count: int = Field(..., alias="eventCount")

    class Config:
        populate_by_name = True


class GroupListResponse(BaseModel):
    generated_at: datetime = Field(..., alias="generatedAt", description="When the dataset was generated.")
    groups: List[GroupSummary] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class DaySchedule(BaseModel):
    day: str
    events: List[Session] = Field(default_factory=list, description="Sessions of the day, by start time.")


class GroupScheduleResponse(BaseModel):
    """
    One group's weekly schedule laid out day by day (Monday first).
    """
    group: GroupSummary
    days: List[DaySchedule] = Field(default_factory=list, description="Days that have at least one session.")
