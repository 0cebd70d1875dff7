from typing import Any, Dict, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from campus_events.exceptions import BadRequestError, NotFoundError
from campus_events.log import get_logger
from campus_events.model.event_categories import EventCategory
from campus_events.model.events import Event, EventStatus
from campus_events.model.registrations import Registration, RegistrationStatus
from campus_events.model.users import User
from campus_events.router.api.logics.metrics import ordered, resolve_direction, resolve_sort
from campus_events.router.api.logics.queries import (
    attendance_counts,
    get_college_event,
    paginate,
    registration_counts,
)
from campus_events.schema.event_schema import (
    EventDetailOut,
    EventIn,
    EventOut,
    RegistrationOut,
    RosterEntryOut,
)

log = get_logger(__name__)

EVENT_SORT_COLUMNS = {
    "event_date": Event.event_date,
    "title": Event.title,
    "created_at": Event.created_at,
    "capacity": Event.capacity,
}


def _event_detail_query(db: Session, college_id: int):
    """Events of a college with category, creator and live registration/attendance counts"""
    reg = registration_counts(db)
    att = attendance_counts(db)
    return (
        db.query(
            Event,
            EventCategory.name.label("category_name"),
            User.first_name.label("created_by_name"),
            func.coalesce(reg.c.registration_count, 0).label("registration_count"),
            func.coalesce(att.c.attendance_count, 0).label("attendance_count"),
        )
        .outerjoin(EventCategory, Event.category_id == EventCategory.id)
        .outerjoin(User, Event.created_by == User.id)
        .outerjoin(reg, reg.c.event_id == Event.id)
        .outerjoin(att, att.c.event_id == Event.id)
        .filter(Event.college_id == college_id)
    )


def _event_detail(row) -> EventDetailOut:
    event, category_name, created_by_name, registration_count, attendance_count = row
    return EventDetailOut(
        **EventOut.model_validate(event).model_dump(),
        category_name=category_name,
        created_by_name=created_by_name,
        registration_count=registration_count,
        attendance_count=attendance_count,
    )


def _check_category(db: Session, category_id: int) -> None:
    if not db.query(EventCategory.id).filter(EventCategory.id == category_id).first():
        raise BadRequestError("Invalid category ID")


def list_events_logic(
    db: Session,
    user: User,
    page: int,
    limit: int,
    status: Optional[EventStatus] = None,
    category_id: Optional[int] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> Dict[str, Any]:
    """List the events of the caller's college.

    Args:
        db (Session): Database session
        user (User): Current user, admin or student
        page (int): 1-based page number
        limit (int): Page size
        status (EventStatus, optional): Only events in this status
        category_id (int, optional): Only events in this category
        search (str, optional): Case-insensitive match on title or description
        sort_by (str, optional): event_date, title, created_at or capacity
        sort_order (str, optional): ASC or DESC

    Returns:
        Dict[str, Any]: events and pagination
    """
    query = _event_detail_query(db, user.college_id)
    if status:
        query = query.filter(Event.status == status)
    if category_id:
        query = query.filter(Event.category_id == category_id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Event.title.ilike(pattern), Event.description.ilike(pattern)))

    column = resolve_sort(sort_by, EVENT_SORT_COLUMNS, "event_date")
    direction = resolve_direction(sort_order, "ASC")
    query = query.order_by(ordered(column, direction), Event.id)

    rows, pagination = paginate(query, page, limit)
    return {"events": [_event_detail(row) for row in rows], "pagination": pagination}


def get_event_logic(db: Session, event_id: int, user: User) -> Dict[str, Any]:
    row = _event_detail_query(db, user.college_id).filter(Event.id == event_id).first()
    if not row:
        raise NotFoundError("Event not found")
    return {"event": _event_detail(row)}


def create_event_logic(db: Session, payload: EventIn, admin: User) -> Dict[str, Any]:
    """Create a draft event in the admin's college.

    Raises:
        BadRequestError: When the category does not exist

    Returns:
        Dict[str, Any]: message and the created event
    """
    _check_category(db, payload.category_id)

    event = Event(
        college_id=admin.college_id,
        created_by=admin.id,
        status=EventStatus.draft,
        **payload.model_dump(),
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    log.info("Event %s created by admin %s", event.id, admin.id)
    return {"message": "Event created successfully", "event": EventOut.model_validate(event)}


def update_event_logic(db: Session, event_id: int, payload: EventIn, admin: User) -> Dict[str, Any]:
    """Replace the editable fields of an event.

    Raises:
        NotFoundError: When the event is not in the admin's college
        BadRequestError: When the event is completed or the category does not exist
    """
    event = get_college_event(db, event_id, admin.college_id)
    if event.status == EventStatus.completed:
        raise BadRequestError("Cannot update completed events")
    _check_category(db, payload.category_id)

    for field, value in payload.model_dump().items():
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    log.info("Event %s updated by admin %s", event.id, admin.id)
    return {"message": "Event updated successfully", "event": EventOut.model_validate(event)}


def update_event_status_logic(db: Session, event_id: int, status: EventStatus, admin: User) -> Dict[str, Any]:
    event = get_college_event(db, event_id, admin.college_id)
    previous = event.status
    event.status = status
    db.commit()
    db.refresh(event)
    log.info("Event %s status %s -> %s by admin %s", event.id, previous.value, status.value, admin.id)
    return {"message": "Event status updated successfully", "event": EventOut.model_validate(event)}


def delete_event_logic(db: Session, event_id: int, admin: User) -> Dict[str, Any]:
    """Hard delete an event that nobody ever registered for.

    Raises:
        NotFoundError: When the event is not in the admin's college
        BadRequestError: When any registration row exists, cancelled ones included
    """
    event = get_college_event(db, event_id, admin.college_id)
    has_registrations = db.query(Registration.id).filter(Registration.event_id == event.id).first()
    if has_registrations:
        raise BadRequestError("Cannot delete event with existing registrations")

    db.delete(event)
    db.commit()
    log.info("Event %s deleted by admin %s", event_id, admin.id)
    return {"message": "Event deleted successfully"}


def list_event_registrations_logic(
    db: Session,
    event_id: int,
    admin: User,
    page: int,
    limit: int,
    status: RegistrationStatus = RegistrationStatus.registered,
) -> Dict[str, Any]:
    get_college_event(db, event_id, admin.college_id)
    query = (
        db.query(Registration, User.first_name, User.last_name, User.email, User.student_id)
        .join(User, Registration.user_id == User.id)
        .filter(Registration.event_id == event_id, Registration.status == status)
        .order_by(Registration.registration_date.desc(), Registration.id.desc())
    )
    rows, pagination = paginate(query, page, limit)
    registrations = [
        RosterEntryOut(
            **RegistrationOut.model_validate(registration).model_dump(),
            first_name=first_name,
            last_name=last_name,
            email=email,
            student_id=student_id,
        )
        for registration, first_name, last_name, email, student_id in rows
    ]
    return {"registrations": registrations, "pagination": pagination}
