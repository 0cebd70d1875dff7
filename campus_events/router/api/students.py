from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from campus_events.database import get_db
from campus_events.model.registrations import RegistrationStatus
from campus_events.model.users import User
from campus_events.router.api.logics.student_logic import (
    cancel_registration_logic,
    get_open_event_logic,
    list_my_attendance_logic,
    list_my_registrations_logic,
    list_open_events_logic,
    register_for_event_logic,
)
from campus_events.router.dependencies import get_current_student, pagination_params

router = APIRouter()


@router.get("/events", response_model=dict, status_code=status.HTTP_200_OK)
def list_open_events(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    search: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    paging: Tuple[int, int] = Depends(pagination_params(10)),
    db: Session = Depends(get_db),
    student: User = Depends(get_current_student),
):
    """Published events of the student's college still open for registration

    Returns:
        dict: events, each flagged with is_registered, and pagination
    """
    page, limit = paging
    return list_open_events_logic(
        db, student, page, limit,
        category_id=category_id,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/events/{event_id}", response_model=dict, status_code=status.HTTP_200_OK)
def get_open_event(event_id: int, db: Session = Depends(get_db), student: User = Depends(get_current_student)):
    return get_open_event_logic(db, event_id, student)


@router.post("/events/{event_id}/register", response_model=dict, status_code=status.HTTP_201_CREATED)
def register_for_event(
    event_id: int,
    db: Session = Depends(get_db),
    student: User = Depends(get_current_student),
):
    """Register the current student for a published event

    Raises:
        HTTPException: 404 when unavailable, 400 after the deadline, 409 when full or already registered

    Returns:
        dict: message and registration
    """
    return register_for_event_logic(db, event_id, student)


@router.delete("/events/{event_id}/register", response_model=dict, status_code=status.HTTP_200_OK)
def cancel_registration(
    event_id: int,
    db: Session = Depends(get_db),
    student: User = Depends(get_current_student),
):
    return cancel_registration_logic(db, event_id, student)


@router.get("/registrations", response_model=dict, status_code=status.HTTP_200_OK)
def list_my_registrations(
    registration_status: RegistrationStatus = Query(RegistrationStatus.registered, alias="status"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    paging: Tuple[int, int] = Depends(pagination_params(10)),
    db: Session = Depends(get_db),
    student: User = Depends(get_current_student),
):
    page, limit = paging
    return list_my_registrations_logic(
        db, student, page, limit,
        status=registration_status,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/attendance", response_model=dict, status_code=status.HTTP_200_OK)
def list_my_attendance(
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    paging: Tuple[int, int] = Depends(pagination_params(10)),
    db: Session = Depends(get_db),
    student: User = Depends(get_current_student),
):
    page, limit = paging
    return list_my_attendance_logic(db, student, page, limit, sort_by=sort_by, sort_order=sort_order)
