from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campus_events.database import get_db
from campus_events.model.users import User
from campus_events.router.api.logics.auth_logic import (
    list_colleges_logic,
    login_logic,
    profile_logic,
    refresh_token_logic,
    register_logic,
)
from campus_events.router.dependencies import get_any_user
from campus_events.schema.auth_schema import LoginRequest, UserRegister

router = APIRouter()


@router.post("/register", response_model=dict, status_code=status.HTTP_201_CREATED)
def register(request: UserRegister, db: Session = Depends(get_db)):
    """Register an admin or student in an existing college

    Args:
        request (UserRegister): email, password, names, optional studentId, collegeId and role
        db (Session): Database session

    Raises:
        HTTPException: 409 when the email is taken, 400 when the college does not exist

    Returns:
        dict: message, user and token
    """
    return register_logic(db, request)


@router.post("/login", response_model=dict, status_code=status.HTTP_200_OK)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Email and password login for any role

    Raises:
        HTTPException: 401 when the credentials are wrong or the user is inactive

    Returns:
        dict: message, user and token
    """
    return login_logic(db, request)


@router.get("/profile", response_model=dict, status_code=status.HTTP_200_OK)
def profile(user: User = Depends(get_any_user)):
    return profile_logic(user)


@router.post("/refresh", response_model=dict, status_code=status.HTTP_200_OK)
def refresh_token(user: User = Depends(get_any_user)):
    return refresh_token_logic(user)


@router.post("/logout", response_model=dict, status_code=status.HTTP_200_OK)
def logout(user: User = Depends(get_any_user)):
    # tokens are stateless, the client drops it
    return {"message": "Logout successful"}


@router.get("/colleges", response_model=dict, status_code=status.HTTP_200_OK)
def list_colleges(db: Session = Depends(get_db)):
    return list_colleges_logic(db)
