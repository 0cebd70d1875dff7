from typing import Tuple

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campus_events.database import get_db
from campus_events.model.users import User
from campus_events.router.api.logics.attendance_logic import (
    attendance_summary_logic,
    check_in_logic,
    check_out_logic,
    list_event_attendance_logic,
)
from campus_events.router.dependencies import get_any_user, get_current_admin, pagination_params

router = APIRouter()


@router.post("/events/{event_id}/checkin", response_model=dict, status_code=status.HTTP_201_CREATED)
def check_in(event_id: int, db: Session = Depends(get_db), user: User = Depends(get_any_user)):
    """Check in to a published event on its date

    Raises:
        HTTPException: 404 when unavailable, 400 when not registered or not the event date,
            409 when already checked in

    Returns:
        dict: message and attendance
    """
    return check_in_logic(db, event_id, user)


@router.post("/events/{event_id}/checkout", response_model=dict, status_code=status.HTTP_200_OK)
def check_out(event_id: int, db: Session = Depends(get_db), user: User = Depends(get_any_user)):
    return check_out_logic(db, event_id, user)


@router.get("/events/{event_id}", response_model=dict, status_code=status.HTTP_200_OK)
def list_event_attendance(
    event_id: int,
    paging: Tuple[int, int] = Depends(pagination_params(20)),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    page, limit = paging
    return list_event_attendance_logic(db, event_id, admin, page, limit)


@router.get("/events/{event_id}/summary", response_model=dict, status_code=status.HTTP_200_OK)
def attendance_summary(event_id: int, db: Session = Depends(get_db), admin: User = Depends(get_current_admin)):
    return attendance_summary_logic(db, event_id, admin)
