from campus_events.router.api.auth import router as auth_router
from campus_events.router.api.events import router as events_router
from campus_events.router.api.students import router as students_router
from campus_events.router.api.attendance import router as attendance_router
from campus_events.router.api.feedback import router as feedback_router
from campus_events.router.api.reports import router as reports_router
__all__ = [
    "auth_router",
    "events_router",
    "students_router",
    "attendance_router",
    "feedback_router",
    "reports_router",
]
