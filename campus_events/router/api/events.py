from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from campus_events.database import get_db
from campus_events.model.events import EventStatus
from campus_events.model.registrations import RegistrationStatus
from campus_events.model.users import User
from campus_events.router.api.logics.event_logic import (
    create_event_logic,
    delete_event_logic,
    get_event_logic,
    list_event_registrations_logic,
    list_events_logic,
    update_event_logic,
    update_event_status_logic,
)
from campus_events.router.dependencies import get_any_user, get_current_admin, pagination_params
from campus_events.schema.event_schema import EventIn, EventStatusUpdate

router = APIRouter()


@router.get("", response_model=dict, status_code=status.HTTP_200_OK)
def list_events(
    event_status: Optional[EventStatus] = Query(None, alias="status"),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    search: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    paging: Tuple[int, int] = Depends(pagination_params(10)),
    db: Session = Depends(get_db),
    user: User = Depends(get_any_user),
):
    """List the events of the caller's college

    Args:
        event_status (EventStatus, optional): draft, published, cancelled or completed
        category_id (int, optional): category filter
        search (str, optional): matched against title and description
        sort_by (str, optional): event_date, title, created_at or capacity
        sort_order (str, optional): ASC or DESC
        paging (Tuple[int, int]): page and limit, limit defaults to 10

    Returns:
        dict: events and pagination
    """
    page, limit = paging
    return list_events_logic(
        db, user, page, limit,
        status=event_status,
        category_id=category_id,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/{event_id}", response_model=dict, status_code=status.HTTP_200_OK)
def get_event(event_id: int, db: Session = Depends(get_db), user: User = Depends(get_any_user)):
    return get_event_logic(db, event_id, user)


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventIn, db: Session = Depends(get_db), admin: User = Depends(get_current_admin)):
    """Create a draft event in the admin's college

    Raises:
        HTTPException: 400 when the body is invalid or the category does not exist

    Returns:
        dict: message and event
    """
    return create_event_logic(db, payload, admin)


@router.put("/{event_id}", response_model=dict, status_code=status.HTTP_200_OK)
def update_event(
    event_id: int,
    payload: EventIn,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return update_event_logic(db, event_id, payload, admin)


@router.patch("/{event_id}/status", response_model=dict, status_code=status.HTTP_200_OK)
def update_event_status(
    event_id: int,
    payload: EventStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return update_event_status_logic(db, event_id, payload.status, admin)


@router.delete("/{event_id}", response_model=dict, status_code=status.HTTP_200_OK)
def delete_event(event_id: int, db: Session = Depends(get_db), admin: User = Depends(get_current_admin)):
    return delete_event_logic(db, event_id, admin)


@router.get("/{event_id}/registrations", response_model=dict, status_code=status.HTTP_200_OK)
def list_event_registrations(
    event_id: int,
    registration_status: RegistrationStatus = Query(RegistrationStatus.registered, alias="status"),
    paging: Tuple[int, int] = Depends(pagination_params(20)),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    page, limit = paging
    return list_event_registrations_logic(db, event_id, admin, page, limit, status=registration_status)
