from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from pydantic import BaseModel

from campus_events.model.events import EventStatus
from campus_events.schema.common_schema import EventTimesModel


@dataclass
class ReportFilters:
    """Event filters shared by the college-wide reports"""

    category_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    event_type: Optional[str] = None


@dataclass
class FlexibleThresholds:
    min_registrations: int = 0
    min_attendance: int = 0
    min_rating: float = 0.0


class EventMetricsOut(EventTimesModel):
    id: int
    title: str
    event_date: date
    start_time: time
    end_time: time
    location: Optional[str] = None
    capacity: Optional[int] = None
    status: EventStatus
    category_name: Optional[str] = None
    registration_count: int
    attendance_count: int
    attendance_percentage: float
    average_rating: Optional[float] = None
    feedback_count: int


class StudentMetricsOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    student_id: Optional[str] = None
    total_registrations: int
    total_attendance: int
    total_feedback: int
    attendance_percentage: float
    average_feedback_rating: Optional[float] = None


class CategoryCountOut(BaseModel):
    id: int
    name: str
    event_count: int
