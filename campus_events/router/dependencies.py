from typing import Callable, Optional, Tuple

from fastapi import Depends, Query, Security
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session, joinedload

from campus_events.auth_util import check_role, decode_access_token, resolve_token_user
from campus_events.database import get_db
from campus_events.model.users import User, UserRole
from campus_events.schema.auth_schema import TokenPayload

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


def pagination_params(default_limit: int) -> Callable[..., Tuple[int, int]]:
    """Build a page/limit query dependency with an endpoint-specific default limit."""

    def get_pagination_params(
        page: int = Query(1, ge=1), limit: int = Query(default_limit, gt=0)
    ) -> Tuple[int, int]:
        return page, limit

    return get_pagination_params


def get_token(token: Optional[str] = Security(oauth2_scheme)) -> TokenPayload:
    return decode_access_token(token)


def get_current_user(
    db: Session = Depends(get_db), token: TokenPayload = Depends(get_token)
) -> User:
    def lookup_active_user(user_id: int) -> Optional[User]:
        return (
            db.query(User)
            .options(joinedload(User.college))
            .filter(User.id == user_id, User.is_active.is_(True))
            .first()
        )

    return resolve_token_user(token, lookup_active_user)


def require_role(*roles: UserRole) -> Callable[..., User]:
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        return check_role(current_user, roles)

    return role_checker


get_current_admin = require_role(UserRole.admin)
get_current_student = require_role(UserRole.student)
get_any_user = require_role(UserRole.admin, UserRole.student)
