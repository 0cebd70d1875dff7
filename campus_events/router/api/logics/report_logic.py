"""
College-wide reports for admins.

Per-event and per-student counters come from grouped subqueries (see
queries.py) joined once per parent row, so registration, attendance and
feedback counts never multiply each other.
"""

from typing import Any, Dict, Optional

from sqlalchemy import distinct, func, or_, select
from sqlalchemy.orm import Query, Session

from campus_events.model.attendance import Attendance
from campus_events.model.event_categories import EventCategory
from campus_events.model.events import Event
from campus_events.model.feedback import Feedback
from campus_events.model.registrations import Registration, RegistrationStatus
from campus_events.model.users import User, UserRole
from campus_events.router.api.logics.metrics import (
    ordered,
    percentage,
    rating_distribution,
    resolve_direction,
    rounded_average,
    star_count_fields,
)
from campus_events.router.api.logics.queries import (
    attendance_counts,
    feedback_stats,
    paginate,
    registration_counts,
    student_attendance_counts,
    student_feedback_stats,
    student_registration_counts,
)
from campus_events.schema.report_schema import (
    CategoryCountOut,
    EventMetricsOut,
    FlexibleThresholds,
    ReportFilters,
    StudentMetricsOut,
)


def _scoped(db: Session, query: Query, college_id: int, filters: ReportFilters) -> Query:
    """Restrict a query that already selects from events to the college and report filters"""
    query = query.filter(Event.college_id == college_id)
    if filters.category_id:
        query = query.filter(Event.category_id == filters.category_id)
    if filters.start_date:
        query = query.filter(Event.event_date >= filters.start_date)
    if filters.end_date:
        query = query.filter(Event.event_date <= filters.end_date)
    if filters.event_type:
        matching = select(EventCategory.id).where(EventCategory.name.ilike(f"%{filters.event_type}%"))
        query = query.filter(Event.category_id.in_(matching))
    return query


##########################
### per-event reports ###
##########################
def _event_metrics_query(db: Session):
    reg = registration_counts(db)
    att = attendance_counts(db)
    fb = feedback_stats(db)
    columns = {
        "registration_count": func.coalesce(reg.c.registration_count, 0),
        "attendance_count": func.coalesce(att.c.attendance_count, 0),
        "feedback_count": func.coalesce(fb.c.feedback_count, 0),
        "average_rating": fb.c.average_rating,
    }
    query = (
        db.query(
            Event,
            EventCategory.name.label("category_name"),
            *(expression.label(name) for name, expression in columns.items()),
        )
        .outerjoin(EventCategory, Event.category_id == EventCategory.id)
        .outerjoin(reg, reg.c.event_id == Event.id)
        .outerjoin(att, att.c.event_id == Event.id)
        .outerjoin(fb, fb.c.event_id == Event.id)
    )
    return query, columns


def _event_metrics(row) -> EventMetricsOut:
    event, category_name, registration_count, attendance_count, feedback_count, average_rating = row
    return EventMetricsOut(
        id=event.id,
        title=event.title,
        event_date=event.event_date,
        start_time=event.start_time,
        end_time=event.end_time,
        location=event.location,
        capacity=event.capacity,
        status=event.status,
        category_name=category_name,
        registration_count=registration_count,
        attendance_count=attendance_count,
        attendance_percentage=percentage(attendance_count, registration_count),
        average_rating=rounded_average(average_rating),
        feedback_count=feedback_count,
    )


def event_popularity_logic(
    db: Session,
    admin: User,
    filters: ReportFilters,
    page: int,
    limit: int,
    sort_order: Optional[str] = None,
) -> Dict[str, Any]:
    """Events of the admin's college ranked by active registrations.

    Args:
        db (Session): Database session
        admin (User): Current admin
        filters (ReportFilters): category and event date range
        page (int): 1-based page number
        limit (int): Page size
        sort_order (str, optional): ASC or DESC, defaults to DESC

    Returns:
        Dict[str, Any]: report name, events and pagination
    """
    query, columns = _event_metrics_query(db)
    query = _scoped(db, query, admin.college_id, filters)
    direction = resolve_direction(sort_order, "DESC")
    query = query.order_by(ordered(columns["registration_count"], direction), Event.id)

    rows, pagination = paginate(query, page, limit)
    return {
        "report": "Event Popularity Report",
        "events": [_event_metrics(row) for row in rows],
        "pagination": pagination,
    }


def flexible_report_logic(
    db: Session,
    admin: User,
    filters: ReportFilters,
    thresholds: FlexibleThresholds,
    page: int,
    limit: int,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> Dict[str, Any]:
    """Event metrics filtered by category name, date range and metric thresholds.

    Events without feedback pass the rating threshold.
    """
    query, columns = _event_metrics_query(db)
    query = _scoped(db, query, admin.college_id, filters)
    query = query.filter(
        columns["registration_count"] >= thresholds.min_registrations,
        columns["attendance_count"] >= thresholds.min_attendance,
        or_(columns["average_rating"].is_(None), columns["average_rating"] >= thresholds.min_rating),
    )

    sortable = {
        "registration_count": columns["registration_count"],
        "attendance_count": columns["attendance_count"],
        "average_rating": columns["average_rating"],
        "event_date": Event.event_date,
    }
    resolved_sort_by = sort_by if sort_by in sortable else "registration_count"
    direction = resolve_direction(sort_order, "DESC")
    query = query.order_by(ordered(sortable[resolved_sort_by], direction), Event.id)

    rows, pagination = paginate(query, page, limit)
    return {
        "report": "Flexible Event Report",
        "filters": {
            "eventType": filters.event_type,
            "startDate": filters.start_date,
            "endDate": filters.end_date,
            "minRegistrations": thresholds.min_registrations,
            "minAttendance": thresholds.min_attendance,
            "minRating": thresholds.min_rating,
            "sortBy": resolved_sort_by,
            "sortOrder": direction,
        },
        "events": [_event_metrics(row) for row in rows],
        "pagination": pagination,
    }


############################
### per-student reports ###
############################
def _student_metrics_query(db: Session, college_id: int):
    reg = student_registration_counts(db)
    att = student_attendance_counts(db)
    fb = student_feedback_stats(db)
    columns = {
        "total_registrations": func.coalesce(reg.c.total_registrations, 0),
        "total_attendance": func.coalesce(att.c.total_attendance, 0),
        "total_feedback": func.coalesce(fb.c.total_feedback, 0),
        "average_feedback_rating": fb.c.average_feedback_rating,
    }
    query = (
        db.query(User, *(expression.label(name) for name, expression in columns.items()))
        .outerjoin(reg, reg.c.user_id == User.id)
        .outerjoin(att, att.c.user_id == User.id)
        .outerjoin(fb, fb.c.user_id == User.id)
        .filter(User.college_id == college_id, User.role == UserRole.student)
    )
    return query, columns


def _student_metrics(row) -> StudentMetricsOut:
    user, total_registrations, total_attendance, total_feedback, average_feedback_rating = row
    return StudentMetricsOut(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        student_id=user.student_id,
        total_registrations=total_registrations,
        total_attendance=total_attendance,
        total_feedback=total_feedback,
        attendance_percentage=percentage(total_attendance, total_registrations),
        average_feedback_rating=rounded_average(average_feedback_rating),
    )


def student_participation_logic(
    db: Session,
    admin: User,
    page: int,
    limit: int,
    min_events: int = 0,
    sort_order: Optional[str] = None,
) -> Dict[str, Any]:
    query, columns = _student_metrics_query(db, admin.college_id)
    query = query.filter(columns["total_attendance"] >= min_events)
    direction = resolve_direction(sort_order, "DESC")
    query = query.order_by(ordered(columns["total_attendance"], direction), User.id)

    rows, pagination = paginate(query, page, limit)
    return {
        "report": "Student Participation Report",
        "students": [_student_metrics(row) for row in rows],
        "pagination": pagination,
    }


def top_active_students_logic(db: Session, admin: User, limit: int = 3) -> Dict[str, Any]:
    query, columns = _student_metrics_query(db, admin.college_id)
    rows = (
        query.order_by(
            columns["total_attendance"].desc(),
            columns["total_registrations"].desc(),
            User.id,
        )
        .limit(limit)
        .all()
    )
    return {
        "report": "Top Active Students",
        "students": [_student_metrics(row) for row in rows],
        "limit": limit,
    }


##########################
### college summaries ###
##########################
def attendance_report_logic(db: Session, admin: User, filters: ReportFilters) -> Dict[str, Any]:
    """Totals over every event matching the filters.

    Registrations count active registration rows and attendance counts
    check-ins, each summed across the matching events.
    """
    total_events = _scoped(db, db.query(func.count(Event.id)), admin.college_id, filters).scalar() or 0
    total_registrations = _scoped(
        db,
        db.query(func.count(Registration.id))
        .select_from(Registration)
        .join(Event, Registration.event_id == Event.id)
        .filter(Registration.status == RegistrationStatus.registered),
        admin.college_id,
        filters,
    ).scalar() or 0
    total_attendance = _scoped(
        db,
        db.query(func.count(Attendance.id)).select_from(Attendance).join(Event, Attendance.event_id == Event.id),
        admin.college_id,
        filters,
    ).scalar() or 0
    average_rating, total_feedback = _scoped(
        db,
        db.query(func.avg(Feedback.rating), func.count(Feedback.id))
        .select_from(Feedback)
        .join(Event, Feedback.event_id == Event.id),
        admin.college_id,
        filters,
    ).one()

    return {
        "report": "Attendance Summary Report",
        "summary": {
            "total_events": total_events,
            "total_registrations": total_registrations,
            "total_attendance": total_attendance,
            "overall_attendance_percentage": percentage(total_attendance, total_registrations),
            "average_feedback_rating": rounded_average(average_rating),
            "total_feedback": total_feedback or 0,
        },
    }


def feedback_report_logic(db: Session, admin: User, filters: ReportFilters) -> Dict[str, Any]:
    def feedback_query(*columns) -> Query:
        query = db.query(*columns).select_from(Feedback).join(Event, Feedback.event_id == Event.id)
        return _scoped(db, query, admin.college_id, filters)

    events_with_feedback, total_feedback, average_rating = feedback_query(
        func.count(distinct(Feedback.event_id)),
        func.count(Feedback.id),
        func.avg(Feedback.rating),
    ).one()
    star_counts = dict(
        feedback_query(Feedback.rating, func.count(Feedback.id)).group_by(Feedback.rating).all()
    )
    total_feedback = total_feedback or 0

    return {
        "report": "Feedback Summary Report",
        "summary": {
            "events_with_feedback": events_with_feedback or 0,
            "total_feedback": total_feedback,
            "average_rating": rounded_average(average_rating),
            **star_count_fields(star_counts),
            "rating_distribution": rating_distribution(star_counts, total_feedback),
        },
    }


def category_report_logic(db: Session, admin: User) -> Dict[str, Any]:
    rows = (
        db.query(EventCategory.id, EventCategory.name, func.count(Event.id))
        .outerjoin(
            Event,
            (Event.category_id == EventCategory.id) & (Event.college_id == admin.college_id),
        )
        .group_by(EventCategory.id, EventCategory.name)
        .order_by(EventCategory.name)
        .all()
    )
    return {
        "categories": [
            CategoryCountOut(id=category_id, name=name, event_count=event_count)
            for category_id, name, event_count in rows
        ]
    }
