from datetime import date, datetime
from typing import Any, Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from campus_events.exceptions import BadRequestError, ConflictError, NotFoundError
from campus_events.log import get_logger
from campus_events.model.attendance import Attendance
from campus_events.model.events import Event, EventStatus
from campus_events.model.registrations import Registration, RegistrationStatus
from campus_events.model.users import User
from campus_events.router.api.logics.metrics import percentage
from campus_events.router.api.logics.queries import count_active_registrations, get_college_event, paginate
from campus_events.schema.student_schema import AttendanceOut, AttendanceSummaryOut, AttendeeOut

log = get_logger(__name__)


def check_in_logic(db: Session, event_id: int, user: User) -> Dict[str, Any]:
    """Record attendance for a registered user on the day of the event.

    Args:
        db (Session): Database session
        event_id (int): Event to check in to
        user (User): Current user

    Raises:
        NotFoundError: When the event is missing, unpublished or in another college
        BadRequestError: When the user is not registered or today is not the event date
        ConflictError: When the user already checked in

    Returns:
        Dict[str, Any]: message and the attendance record
    """
    event = get_college_event(
        db,
        event_id,
        user.college_id,
        Event.status == EventStatus.published,
        message="Event not found or not available for check-in",
    )

    registered = db.query(Registration.id).filter(
        Registration.event_id == event.id,
        Registration.user_id == user.id,
        Registration.status == RegistrationStatus.registered,
    ).first()
    if not registered:
        raise BadRequestError("You must be registered for this event to check in")

    if event.event_date != date.today():
        log.warning("Check-in for event %s on %s rejected, event date is %s", event.id, date.today(), event.event_date)
        raise BadRequestError("Check-in is only available on the event date.")

    existing = db.query(Attendance.id).filter(
        Attendance.event_id == event.id,
        Attendance.user_id == user.id,
    ).first()
    if existing:
        raise ConflictError("Already checked in for this event")

    attendance = Attendance(
        event_id=event.id,
        user_id=user.id,
        check_in_time=datetime.now(),
        status="present",
    )
    db.add(attendance)
    db.commit()
    db.refresh(attendance)
    log.info("User %s checked in to event %s", user.id, event.id)
    return {"message": "Successfully checked in for event", "attendance": AttendanceOut.model_validate(attendance)}


def check_out_logic(db: Session, event_id: int, user: User) -> Dict[str, Any]:
    attendance = db.query(Attendance).filter(
        Attendance.event_id == event_id,
        Attendance.user_id == user.id,
        Attendance.check_out_time.is_(None),
    ).first()
    if not attendance:
        raise NotFoundError("No active attendance record found for this event")

    attendance.check_out_time = datetime.now()
    db.commit()
    db.refresh(attendance)
    log.info("User %s checked out of event %s", user.id, event_id)
    return {"message": "Successfully checked out from event", "attendance": AttendanceOut.model_validate(attendance)}


def list_event_attendance_logic(db: Session, event_id: int, admin: User, page: int, limit: int) -> Dict[str, Any]:
    get_college_event(db, event_id, admin.college_id)
    query = (
        db.query(Attendance, User.first_name, User.last_name, User.email, User.student_id)
        .join(User, Attendance.user_id == User.id)
        .filter(Attendance.event_id == event_id)
        .order_by(Attendance.check_in_time.desc(), Attendance.id.desc())
    )
    rows, pagination = paginate(query, page, limit)
    attendance = [
        AttendeeOut(
            **AttendanceOut.model_validate(record).model_dump(),
            first_name=first_name,
            last_name=last_name,
            email=email,
            student_id=student_id,
        )
        for record, first_name, last_name, email, student_id in rows
    ]
    return {"attendance": attendance, "pagination": pagination}


def attendance_summary_logic(db: Session, event_id: int, admin: User) -> Dict[str, Any]:
    """Registration and attendance totals for one event, percentage over active registrations"""
    event = get_college_event(db, event_id, admin.college_id)
    total_registrations = count_active_registrations(db, event.id)
    total_attendance = db.query(func.count(Attendance.id)).filter(Attendance.event_id == event.id).scalar() or 0

    summary = AttendanceSummaryOut(
        event_id=event.id,
        title=event.title,
        event_date=event.event_date,
        capacity=event.capacity,
        total_registrations=total_registrations,
        total_attendance=total_attendance,
        attendance_percentage=percentage(total_attendance, total_registrations),
    )
    return {"summary": summary}
