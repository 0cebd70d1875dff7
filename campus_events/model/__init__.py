from campus_events.model.colleges import College
from campus_events.model.users import User, UserRole
from campus_events.model.event_categories import EventCategory
from campus_events.model.events import Event, EventStatus
from campus_events.model.registrations import Registration, RegistrationStatus
from campus_events.model.attendance import Attendance
from campus_events.model.feedback import Feedback

__all__ = [
    "College",
    "User",
    "UserRole",
    "EventCategory",
    "Event",
    "EventStatus",
    "Registration",
    "RegistrationStatus",
    "Attendance",
    "Feedback",
]
