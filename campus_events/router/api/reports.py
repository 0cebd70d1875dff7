from datetime import date
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from campus_events.database import get_db
from campus_events.model.users import User
from campus_events.router.api.logics.report_logic import (
    attendance_report_logic,
    category_report_logic,
    event_popularity_logic,
    feedback_report_logic,
    flexible_report_logic,
    student_participation_logic,
    top_active_students_logic,
)
from campus_events.router.dependencies import get_current_admin, pagination_params
from campus_events.schema.report_schema import FlexibleThresholds, ReportFilters

router = APIRouter()


def report_filters(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
) -> ReportFilters:
    return ReportFilters(category_id=category_id, start_date=start_date, end_date=end_date)


@router.get("/event-popularity", response_model=dict, status_code=status.HTTP_200_OK)
def event_popularity(
    filters: ReportFilters = Depends(report_filters),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    paging: Tuple[int, int] = Depends(pagination_params(20)),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Events ranked by active registrations, with attendance and rating metrics

    Args:
        filters (ReportFilters): categoryId, startDate and endDate
        sort_order (str, optional): DESC by default

    Returns:
        dict: report, events and pagination
    """
    page, limit = paging
    return event_popularity_logic(db, admin, filters, page, limit, sort_order=sort_order)


@router.get("/student-participation", response_model=dict, status_code=status.HTTP_200_OK)
def student_participation(
    min_events: int = Query(0, ge=0, alias="minEvents"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    paging: Tuple[int, int] = Depends(pagination_params(20)),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    page, limit = paging
    return student_participation_logic(db, admin, page, limit, min_events=min_events, sort_order=sort_order)


@router.get("/top-active-students", response_model=dict, status_code=status.HTTP_200_OK)
def top_active_students(
    limit: int = Query(3, gt=0),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return top_active_students_logic(db, admin, limit)


@router.get("/attendance-summary", response_model=dict, status_code=status.HTTP_200_OK)
def attendance_summary(
    filters: ReportFilters = Depends(report_filters),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return attendance_report_logic(db, admin, filters)


@router.get("/feedback-summary", response_model=dict, status_code=status.HTTP_200_OK)
def feedback_summary(
    filters: ReportFilters = Depends(report_filters),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return feedback_report_logic(db, admin, filters)


@router.get("/flexible", response_model=dict, status_code=status.HTTP_200_OK)
def flexible_report(
    event_type: Optional[str] = Query(None, alias="eventType"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    min_registrations: int = Query(0, ge=0, alias="minRegistrations"),
    min_attendance: int = Query(0, ge=0, alias="minAttendance"),
    min_rating: float = Query(0, ge=0, le=5, alias="minRating"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    paging: Tuple[int, int] = Depends(pagination_params(20)),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Event metrics filtered by category name, event date range and metric thresholds

    Events without feedback pass the minRating threshold.

    Returns:
        dict: report, resolved filters, events and pagination
    """
    page, limit = paging
    filters = ReportFilters(start_date=start_date, end_date=end_date, event_type=event_type)
    thresholds = FlexibleThresholds(
        min_registrations=min_registrations,
        min_attendance=min_attendance,
        min_rating=min_rating,
    )
    return flexible_report_logic(
        db, admin, filters, thresholds, page, limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/categories", response_model=dict, status_code=status.HTTP_200_OK)
def categories(db: Session = Depends(get_db), admin: User = Depends(get_current_admin)):
    return category_report_logic(db, admin)
