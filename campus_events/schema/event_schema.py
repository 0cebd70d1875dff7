import re
from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from campus_events.model.events import EventStatus
from campus_events.model.registrations import RegistrationStatus
from campus_events.schema.common_schema import CamelModel, EventTimesModel

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


class EventIn(CamelModel):
    """Body of event create and update requests"""

    title: str = Field(min_length=3, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    event_date: date
    start_time: time
    end_time: time
    location: Optional[str] = Field(default=None, max_length=255)
    capacity: Optional[int] = Field(default=None, ge=1)
    registration_deadline: Optional[datetime] = None
    category_id: int = Field(gt=0)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_hhmm(cls, value):
        if not isinstance(value, str) or not TIME_PATTERN.match(value):
            raise ValueError("must be a time in HH:MM format")
        hours, minutes = value.split(":")
        return time(int(hours), int(minutes))

    @field_validator("event_date")
    @classmethod
    def event_date_not_past(cls, value: date) -> date:
        if value < date.today():
            raise ValueError("must not be in the past")
        return value

    @field_validator("registration_deadline")
    @classmethod
    def deadline_not_past(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return value
        # stored as server-local naive time
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        if value < datetime.now():
            raise ValueError("must not be in the past")
        return value

    @model_validator(mode="after")
    def start_before_end(self) -> "EventIn":
        if self.start_time >= self.end_time:
            raise ValueError("Start time must be before end time")
        return self


class EventStatusUpdate(BaseModel):
    status: EventStatus


class EventOut(EventTimesModel):
    id: int
    college_id: int
    category_id: int
    title: str
    description: Optional[str] = None
    event_date: date
    start_time: time
    end_time: time
    location: Optional[str] = None
    capacity: Optional[int] = None
    registration_deadline: Optional[datetime] = None
    created_by: int
    status: EventStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EventDetailOut(EventOut):
    category_name: Optional[str] = None
    created_by_name: Optional[str] = None
    registration_count: int = 0
    attendance_count: int = 0


class StudentEventOut(EventOut):
    category_name: Optional[str] = None
    registration_count: int = 0
    is_registered: bool = False


class RegistrationOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    event_id: int
    user_id: int
    status: RegistrationStatus
    registration_date: Optional[datetime] = None


class RosterEntryOut(RegistrationOut):
    first_name: str
    last_name: str
    email: str
    student_id: Optional[str] = None
