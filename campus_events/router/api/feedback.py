from typing import Tuple

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campus_events.database import get_db
from campus_events.model.users import User
from campus_events.router.api.logics.feedback_logic import (
    delete_feedback_logic,
    feedback_summary_logic,
    list_event_feedback_logic,
    submit_feedback_logic,
    update_feedback_logic,
)
from campus_events.router.dependencies import get_any_user, get_current_student, pagination_params
from campus_events.schema.feedback_schema import FeedbackIn

router = APIRouter()


@router.post("/events/{event_id}", response_model=dict, status_code=status.HTTP_201_CREATED)
def submit_feedback(
    event_id: int,
    payload: FeedbackIn,
    db: Session = Depends(get_db),
    student: User = Depends(get_current_student),
):
    """Rate a completed event the student attended

    Args:
        event_id (int): Event being rated
        payload (FeedbackIn): rating 1 to 5 and optional comment

    Raises:
        HTTPException: 404 when the event is not completed, 400 without attendance,
            409 when feedback already exists

    Returns:
        dict: message and feedback
    """
    return submit_feedback_logic(db, event_id, payload, student)


@router.get("/events/{event_id}", response_model=dict, status_code=status.HTTP_200_OK)
def list_event_feedback(
    event_id: int,
    paging: Tuple[int, int] = Depends(pagination_params(20)),
    db: Session = Depends(get_db),
    user: User = Depends(get_any_user),
):
    page, limit = paging
    return list_event_feedback_logic(db, event_id, user, page, limit)


@router.get("/events/{event_id}/summary", response_model=dict, status_code=status.HTTP_200_OK)
def feedback_summary(event_id: int, db: Session = Depends(get_db), user: User = Depends(get_any_user)):
    return feedback_summary_logic(db, event_id, user)


@router.put("/events/{event_id}", response_model=dict, status_code=status.HTTP_200_OK)
def update_feedback(
    event_id: int,
    payload: FeedbackIn,
    db: Session = Depends(get_db),
    student: User = Depends(get_current_student),
):
    return update_feedback_logic(db, event_id, payload, student)


@router.delete("/events/{event_id}", response_model=dict, status_code=status.HTTP_200_OK)
def delete_feedback(event_id: int, db: Session = Depends(get_db), student: User = Depends(get_current_student)):
    return delete_feedback_logic(db, event_id, student)
