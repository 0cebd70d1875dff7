from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from campus_events.exceptions import BadRequestError, ConflictError, NotFoundError
from campus_events.log import get_logger
from campus_events.model.attendance import Attendance
from campus_events.model.event_categories import EventCategory
from campus_events.model.events import Event, EventStatus
from campus_events.model.registrations import Registration, RegistrationStatus
from campus_events.model.users import User
from campus_events.router.api.logics.event_logic import EVENT_SORT_COLUMNS
from campus_events.router.api.logics.metrics import ordered, resolve_direction, resolve_sort
from campus_events.router.api.logics.queries import (
    count_active_registrations,
    get_college_event,
    paginate,
    registration_counts,
)
from campus_events.schema.event_schema import EventOut, RegistrationOut, StudentEventOut
from campus_events.schema.student_schema import StudentAttendanceOut, StudentRegistrationOut

log = get_logger(__name__)

REGISTRATION_SORT_COLUMNS = {
    "registration_date": Registration.registration_date,
    "event_date": Event.event_date,
    "title": Event.title,
}

ATTENDANCE_SORT_COLUMNS = {
    "check_in_time": Attendance.check_in_time,
    "check_out_time": Attendance.check_out_time,
    "event_date": Event.event_date,
}


def _active_registration(db: Session, event_id: int, user_id: int) -> Optional[Registration]:
    return db.query(Registration).filter(
        Registration.event_id == event_id,
        Registration.user_id == user_id,
        Registration.status == RegistrationStatus.registered,
    ).first()


def _catalogue_query(db: Session, student: User):
    reg = registration_counts(db)
    is_registered = (
        db.query(Registration.id)
        .filter(
            Registration.event_id == Event.id,
            Registration.user_id == student.id,
            Registration.status == RegistrationStatus.registered,
        )
        .exists()
    )
    return (
        db.query(
            Event,
            EventCategory.name.label("category_name"),
            func.coalesce(reg.c.registration_count, 0).label("registration_count"),
            is_registered.label("is_registered"),
        )
        .outerjoin(EventCategory, Event.category_id == EventCategory.id)
        .outerjoin(reg, reg.c.event_id == Event.id)
        .filter(Event.college_id == student.college_id)
    )


def _student_event(row) -> StudentEventOut:
    event, category_name, registration_count, is_registered = row
    return StudentEventOut(
        **EventOut.model_validate(event).model_dump(),
        category_name=category_name,
        registration_count=registration_count,
        is_registered=bool(is_registered),
    )


def list_open_events_logic(
    db: Session,
    student: User,
    page: int,
    limit: int,
    category_id: Optional[int] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> Dict[str, Any]:
    """Published events of the student's college that still take registrations.

    Args:
        db (Session): Database session
        student (User): Current student
        page (int): 1-based page number
        limit (int): Page size
        category_id (int, optional): Only events in this category
        search (str, optional): Case-insensitive match on title or description
        sort_by (str, optional): event_date, title, created_at or capacity
        sort_order (str, optional): ASC or DESC

    Returns:
        Dict[str, Any]: events flagged with is_registered, and pagination
    """
    query = _catalogue_query(db, student).filter(
        Event.status == EventStatus.published,
        or_(Event.registration_deadline.is_(None), Event.registration_deadline > datetime.now()),
    )
    if category_id:
        query = query.filter(Event.category_id == category_id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Event.title.ilike(pattern), Event.description.ilike(pattern)))

    column = resolve_sort(sort_by, EVENT_SORT_COLUMNS, "event_date")
    direction = resolve_direction(sort_order, "ASC")
    query = query.order_by(ordered(column, direction), Event.id)

    rows, pagination = paginate(query, page, limit)
    return {"events": [_student_event(row) for row in rows], "pagination": pagination}


def get_open_event_logic(db: Session, event_id: int, student: User) -> Dict[str, Any]:
    row = _catalogue_query(db, student).filter(Event.id == event_id).first()
    if not row:
        raise NotFoundError("Event not found")
    return {"event": _student_event(row)}


def register_for_event_logic(db: Session, event_id: int, student: User) -> Dict[str, Any]:
    """Register a student for a published event of their college.

    Checks run in order: availability, deadline, capacity, duplicate.

    Raises:
        NotFoundError: When the event is missing, unpublished or in another college
        BadRequestError: When the registration deadline has passed
        ConflictError: When the event is full or the student is already registered

    Returns:
        Dict[str, Any]: message and the new registration
    """
    event = get_college_event(
        db,
        event_id,
        student.college_id,
        Event.status == EventStatus.published,
        message="Event not found or not available for registration",
    )

    if event.registration_deadline and datetime.now() > event.registration_deadline:
        log.warning("Late registration for event %s by user %s", event.id, student.id)
        raise BadRequestError("Registration deadline has passed")

    if event.capacity and count_active_registrations(db, event.id) >= event.capacity:
        log.warning("Event %s is full, rejected user %s", event.id, student.id)
        raise ConflictError("Event is at full capacity")

    if _active_registration(db, event.id, student.id):
        raise ConflictError("Already registered for this event")

    registration = Registration(
        event_id=event.id,
        user_id=student.id,
        status=RegistrationStatus.registered,
    )
    db.add(registration)
    db.commit()
    db.refresh(registration)
    log.info("User %s registered for event %s", student.id, event.id)
    return {
        "message": "Successfully registered for event",
        "registration": RegistrationOut.model_validate(registration),
    }


def cancel_registration_logic(db: Session, event_id: int, student: User) -> Dict[str, Any]:
    registration = _active_registration(db, event_id, student.id)
    if not registration:
        raise NotFoundError("Registration not found")

    registration.status = RegistrationStatus.cancelled
    db.commit()
    db.refresh(registration)
    log.info("User %s cancelled registration for event %s", student.id, event_id)
    return {
        "message": "Registration cancelled successfully",
        "registration": RegistrationOut.model_validate(registration),
    }


def list_my_registrations_logic(
    db: Session,
    student: User,
    page: int,
    limit: int,
    status: RegistrationStatus = RegistrationStatus.registered,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> Dict[str, Any]:
    attended = (
        db.query(Attendance.id)
        .filter(Attendance.event_id == Registration.event_id, Attendance.user_id == Registration.user_id)
        .exists()
    )
    query = (
        db.query(Registration, Event, EventCategory.name, attended.label("attended"))
        .join(Event, Registration.event_id == Event.id)
        .outerjoin(EventCategory, Event.category_id == EventCategory.id)
        .filter(Registration.user_id == student.id, Registration.status == status)
    )
    column = resolve_sort(sort_by, REGISTRATION_SORT_COLUMNS, "registration_date")
    direction = resolve_direction(sort_order, "DESC")
    query = query.order_by(ordered(column, direction), Registration.id.desc())

    rows, pagination = paginate(query, page, limit)
    registrations = [
        StudentRegistrationOut(
            **RegistrationOut.model_validate(registration).model_dump(),
            title=event.title,
            description=event.description,
            event_date=event.event_date,
            start_time=event.start_time,
            end_time=event.end_time,
            location=event.location,
            event_status=event.status,
            category_name=category_name,
            attended=bool(has_attended),
        )
        for registration, event, category_name, has_attended in rows
    ]
    return {"registrations": registrations, "pagination": pagination}


def list_my_attendance_logic(
    db: Session,
    student: User,
    page: int,
    limit: int,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> Dict[str, Any]:
    query = (
        db.query(Attendance, Event, EventCategory.name)
        .join(Event, Attendance.event_id == Event.id)
        .outerjoin(EventCategory, Event.category_id == EventCategory.id)
        .filter(Attendance.user_id == student.id)
    )
    column = resolve_sort(sort_by, ATTENDANCE_SORT_COLUMNS, "check_in_time")
    direction = resolve_direction(sort_order, "DESC")
    query = query.order_by(ordered(column, direction), Attendance.id.desc())

    rows, pagination = paginate(query, page, limit)
    attendance = [
        StudentAttendanceOut(
            id=record.id,
            event_id=record.event_id,
            user_id=record.user_id,
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
            status=record.status,
            title=event.title,
            event_date=event.event_date,
            start_time=event.start_time,
            end_time=event.end_time,
            location=event.location,
            category_name=category_name,
        )
        for record, event, category_name in rows
    ]
    return {"attendance": attendance, "pagination": pagination}
