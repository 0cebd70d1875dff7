from typing import Any, Dict

from sqlalchemy.orm import Session, joinedload

from campus_events.auth_util import create_access_token, get_password_hash, verify_password
from campus_events.exceptions import AuthenticationError, BadRequestError, ConflictError
from campus_events.log import get_logger
from campus_events.model.colleges import College
from campus_events.model.users import User
from campus_events.schema.auth_schema import CollegeOut, LoginRequest, UserOut, UserRegister

log = get_logger(__name__)


def user_out(user: User) -> UserOut:
    out = UserOut.model_validate(user)
    out.college_name = user.college.name if user.college else None
    return out


def register_logic(db: Session, request: UserRegister) -> Dict[str, Any]:
    """Create a user in an existing college and sign them in.

    Args:
        db (Session): Database session
        request (UserRegister): Registration details

    Raises:
        ConflictError: When the email is already taken
        BadRequestError: When the college does not exist

    Returns:
        Dict[str, Any]: message, user and access token
    """
    if db.query(User.id).filter(User.email == request.email).first():
        raise ConflictError("User with this email already exists")

    college = db.query(College).filter(College.id == request.college_id).first()
    if not college:
        raise BadRequestError("Invalid college ID")

    user = User(
        college_id=college.id,
        email=request.email,
        password_hash=get_password_hash(request.password),
        first_name=request.first_name,
        last_name=request.last_name,
        student_id=request.student_id,
        role=request.role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    log.info("Registered %s user %s in college %s", user.role.value, user.id, college.id)

    return {
        "message": "User registered successfully",
        "user": user_out(user),
        "token": create_access_token(user),
    }


def login_logic(db: Session, request: LoginRequest) -> Dict[str, Any]:
    """Email/password login for admins and students.

    Inactive users and wrong passwords get the same message.

    Args:
        db (Session): Database session
        request (LoginRequest): Login request with email and password

    Raises:
        AuthenticationError: When credentials are incorrect or the user is inactive

    Returns:
        Dict[str, Any]: message, user and access token
    """
    user = (
        db.query(User)
        .options(joinedload(User.college))
        .filter(User.email == request.email, User.is_active.is_(True))
        .first()
    )
    if not user or not verify_password(request.password, user.password_hash):
        log.warning("Failed login for %s", request.email)
        raise AuthenticationError("Invalid email or password")

    return {
        "message": "Login successful",
        "user": user_out(user),
        "token": create_access_token(user),
    }


def profile_logic(user: User) -> Dict[str, Any]:
    return {"user": user_out(user)}


def refresh_token_logic(user: User) -> Dict[str, Any]:
    return {"message": "Token refreshed successfully", "token": create_access_token(user)}


def list_colleges_logic(db: Session) -> Dict[str, Any]:
    colleges = db.query(College).order_by(College.name).all()
    return {"colleges": [CollegeOut.model_validate(c) for c in colleges]}
