from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from campus_events.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from campus_events.log import get_logger
from campus_events.model.attendance import Attendance
from campus_events.model.events import Event, EventStatus
from campus_events.model.feedback import Feedback
from campus_events.model.users import User, UserRole
from campus_events.router.api.logics.metrics import rating_distribution, rounded_average, star_count_fields
from campus_events.router.api.logics.queries import get_college_event, paginate
from campus_events.schema.feedback_schema import FeedbackEntryOut, FeedbackIn, FeedbackOut

log = get_logger(__name__)


def _has_attended(db: Session, event_id: int, user_id: int) -> bool:
    return db.query(Attendance.id).filter(
        Attendance.event_id == event_id,
        Attendance.user_id == user_id,
    ).first() is not None


def _own_feedback(db: Session, event_id: int, user_id: int) -> Optional[Feedback]:
    return db.query(Feedback).filter(
        Feedback.event_id == event_id,
        Feedback.user_id == user_id,
    ).first()


def submit_feedback_logic(db: Session, event_id: int, payload: FeedbackIn, student: User) -> Dict[str, Any]:
    """Submit a rating for a completed event the student attended.

    Raises:
        NotFoundError: When the event is missing, not completed or in another college
        BadRequestError: When the student has no attendance for the event
        ConflictError: When the student already left feedback
    """
    event = get_college_event(
        db,
        event_id,
        student.college_id,
        Event.status == EventStatus.completed,
        message="Event not found or not completed",
    )
    if not _has_attended(db, event.id, student.id):
        raise BadRequestError("You must have attended this event to submit feedback")
    if _own_feedback(db, event.id, student.id):
        raise ConflictError("Feedback already submitted for this event")

    feedback = Feedback(
        event_id=event.id,
        user_id=student.id,
        rating=payload.rating,
        comment=payload.comment,
        submitted_at=datetime.now(),
    )
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    log.info("User %s rated event %s with %s", student.id, event.id, feedback.rating)
    return {"message": "Feedback submitted successfully", "feedback": FeedbackOut.model_validate(feedback)}


def update_feedback_logic(db: Session, event_id: int, payload: FeedbackIn, student: User) -> Dict[str, Any]:
    feedback = _own_feedback(db, event_id, student.id)
    if not feedback:
        raise NotFoundError("Feedback not found")

    feedback.rating = payload.rating
    feedback.comment = payload.comment
    feedback.submitted_at = datetime.now()
    db.commit()
    db.refresh(feedback)
    log.info("User %s updated feedback for event %s", student.id, event_id)
    return {"message": "Feedback updated successfully", "feedback": FeedbackOut.model_validate(feedback)}


def delete_feedback_logic(db: Session, event_id: int, student: User) -> Dict[str, Any]:
    feedback = _own_feedback(db, event_id, student.id)
    if not feedback:
        raise NotFoundError("Feedback not found")

    db.delete(feedback)
    db.commit()
    log.info("User %s deleted feedback for event %s", student.id, event_id)
    return {"message": "Feedback deleted successfully"}


def list_event_feedback_logic(db: Session, event_id: int, user: User, page: int, limit: int) -> Dict[str, Any]:
    """Feedback entries of one event with its average rating.

    Args:
        db (Session): Database session
        event_id (int): Event whose feedback is listed
        user (User): Current user, admin or student of the event's college
        page (int): 1-based page number
        limit (int): Page size

    Returns:
        Dict[str, Any]: event, feedback, summary and pagination
    """
    event = get_college_event(db, event_id, user.college_id)

    query = (
        db.query(Feedback, User.first_name, User.last_name, User.student_id)
        .join(User, Feedback.user_id == User.id)
        .filter(Feedback.event_id == event.id)
        .order_by(Feedback.submitted_at.desc(), Feedback.id.desc())
    )
    rows, pagination = paginate(query, page, limit)
    feedback = [
        FeedbackEntryOut(
            **FeedbackOut.model_validate(entry).model_dump(),
            first_name=first_name,
            last_name=last_name,
            student_id=student_id,
        )
        for entry, first_name, last_name, student_id in rows
    ]

    average, total = db.query(func.avg(Feedback.rating), func.count(Feedback.id)).filter(
        Feedback.event_id == event.id
    ).one()

    return {
        "event": {"id": event.id, "title": event.title},
        "feedback": feedback,
        "summary": {"average_rating": rounded_average(average), "total_feedback": total},
        "pagination": pagination,
    }


def feedback_summary_logic(db: Session, event_id: int, user: User) -> Dict[str, Any]:
    """Rating breakdown of one event.

    Admins always see it; students only for events they attended.

    Raises:
        NotFoundError: When the event is not in the caller's college
        ForbiddenError: When a student has no attendance for the event
    """
    event = get_college_event(db, event_id, user.college_id)
    if user.role != UserRole.admin and not _has_attended(db, event.id, user.id):
        raise ForbiddenError("You must have attended this event to view feedback summary")

    star_counts = dict(
        db.query(Feedback.rating, func.count(Feedback.id))
        .filter(Feedback.event_id == event.id)
        .group_by(Feedback.rating)
        .all()
    )
    total = sum(star_counts.values())
    average = db.query(func.avg(Feedback.rating)).filter(Feedback.event_id == event.id).scalar()

    return {
        "summary": {
            "title": event.title,
            "event_date": event.event_date,
            "total_feedback": total,
            "average_rating": rounded_average(average),
            **star_count_fields(star_counts),
            "rating_distribution": rating_distribution(star_counts, total),
        }
    }
