from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel

from campus_events.model.events import EventStatus
from campus_events.schema.common_schema import EventTimesModel
from campus_events.schema.event_schema import RegistrationOut


class StudentRegistrationOut(RegistrationOut, EventTimesModel):
    title: str
    description: Optional[str] = None
    event_date: date
    start_time: time
    end_time: time
    location: Optional[str] = None
    event_status: EventStatus
    category_name: Optional[str] = None
    attended: bool = False


class AttendanceOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    event_id: int
    user_id: int
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    status: str


class AttendeeOut(AttendanceOut):
    first_name: str
    last_name: str
    email: str
    student_id: Optional[str] = None


class StudentAttendanceOut(AttendanceOut, EventTimesModel):
    title: str
    event_date: date
    start_time: time
    end_time: time
    location: Optional[str] = None
    category_name: Optional[str] = None


class AttendanceSummaryOut(BaseModel):
    event_id: int
    title: str
    event_date: date
    capacity: Optional[int] = None
    total_registrations: int
    total_attendance: int
    attendance_percentage: float
