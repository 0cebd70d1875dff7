from typing import Any, List, Tuple

from sqlalchemy import distinct, func
from sqlalchemy.orm import Query, Session

from campus_events.exceptions import NotFoundError
from campus_events.model.attendance import Attendance
from campus_events.model.events import Event
from campus_events.model.feedback import Feedback
from campus_events.model.registrations import Registration, RegistrationStatus
from campus_events.schema.common_schema import Pagination


def paginate(query: Query, page: int, limit: int) -> Tuple[List[Any], Pagination]:
    """Run one page of a query along with the total row count"""
    total = query.order_by(None).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    return rows, Pagination.build(page, limit, total)


def get_college_event(
    db: Session, event_id: int, college_id: int, *criteria, message: str = "Event not found"
) -> Event:
    """Fetch an event of the caller's college; events of other colleges are reported as missing"""
    event = db.query(Event).filter(
        Event.id == event_id,
        Event.college_id == college_id,
        *criteria,
    ).first()
    if not event:
        raise NotFoundError(message)
    return event


def count_active_registrations(db: Session, event_id: int) -> int:
    return db.query(func.count(Registration.id)).filter(
        Registration.event_id == event_id,
        Registration.status == RegistrationStatus.registered,
    ).scalar() or 0


##########################
### per-event counters ###
##########################
def registration_counts(db: Session):
    return (
        db.query(
            Registration.event_id.label("event_id"),
            func.count(Registration.id).label("registration_count"),
        )
        .filter(Registration.status == RegistrationStatus.registered)
        .group_by(Registration.event_id)
        .subquery()
    )


def attendance_counts(db: Session):
    return (
        db.query(
            Attendance.event_id.label("event_id"),
            func.count(Attendance.id).label("attendance_count"),
        )
        .group_by(Attendance.event_id)
        .subquery()
    )


def feedback_stats(db: Session):
    return (
        db.query(
            Feedback.event_id.label("event_id"),
            func.count(Feedback.id).label("feedback_count"),
            func.avg(Feedback.rating).label("average_rating"),
        )
        .group_by(Feedback.event_id)
        .subquery()
    )


############################
### per-student counters ###
############################
def student_registration_counts(db: Session):
    return (
        db.query(
            Registration.user_id.label("user_id"),
            func.count(distinct(Registration.event_id)).label("total_registrations"),
        )
        .filter(Registration.status == RegistrationStatus.registered)
        .group_by(Registration.user_id)
        .subquery()
    )


def student_attendance_counts(db: Session):
    return (
        db.query(
            Attendance.user_id.label("user_id"),
            func.count(distinct(Attendance.event_id)).label("total_attendance"),
        )
        .group_by(Attendance.user_id)
        .subquery()
    )


def student_feedback_stats(db: Session):
    return (
        db.query(
            Feedback.user_id.label("user_id"),
            func.count(distinct(Feedback.event_id)).label("total_feedback"),
            func.avg(Feedback.rating).label("average_feedback_rating"),
        )
        .group_by(Feedback.user_id)
        .subquery()
    )
