from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from campus_events.config import settings
from campus_events.exceptions import AuthenticationError, AuthorizationError
from campus_events.model.users import User
from campus_events.schema.auth_schema import TokenPayload


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates an access token for a user.

    Parameters:
        user (User): The user the token is issued to.
        expires_delta (timedelta, optional): The expiration time for the access token.
            Defaults to ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns:
        str: The encoded access token.
    """
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user.id),
        "userId": user.id,
        "email": user.email,
        "role": user.role.value,
        "collegeId": user.college_id,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: Optional[str]) -> TokenPayload:
    """
    Decode and verify a bearer token.

    Raises:
        AuthenticationError: When the token is missing or expired.
        AuthorizationError: When the signature or claims are invalid.

    Returns:
        TokenPayload: The verified claims.
    """
    if not token:
        raise AuthenticationError("No token provided")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return TokenPayload(**payload)
    except ExpiredSignatureError as e:
        raise AuthenticationError("Token expired") from e
    except (JWTError, PydanticValidationError) as e:
        raise AuthorizationError("Invalid token") from e


def resolve_token_user(token: TokenPayload, lookup_active_user: Callable[[int], Optional[User]]) -> User:
    """
    Resolve verified claims to the live user row.

    The lookup is called on every request so deactivated or deleted users are
    rejected even while their token is still within its lifetime.

    Parameters:
        token (TokenPayload): Verified claims.
        lookup_active_user (Callable): Returns the active user for an id, or None.

    Raises:
        AuthenticationError: When no active user matches the token.

    Returns:
        User: The current user.
    """
    user = lookup_active_user(token.user_id)
    if user is None:
        raise AuthenticationError("Invalid token or user not found")
    return user


def check_role(user: Optional[User], allowed_roles: Iterable[str]) -> User:
    """Raise unless the user exists and holds one of the allowed roles."""
    if user is None:
        raise AuthenticationError("Authentication required")
    if user.role not in set(allowed_roles):
        raise AuthorizationError("Insufficient permissions")
    return user


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify if a plain password matches a hashed password.

    Parameters:
        plain_password (str): The plain password to be verified.
        hashed_password (str): The hashed password to compare with.

    Returns:
        bool: True if the plain password matches the hashed password, False otherwise.
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Generate the salted hash of a password.

    Parameters:
        password (str): The password to be hashed.

    Returns:
        str: The hash value of the password.
    """
    return pwd_context.hash(password)
