"""
Typed HTTP errors for the campus events API.

Logic modules raise these instead of a bare HTTPException so every failure
carries a short error label next to its message. The handlers in main.py turn
them into the `{"error": ..., "message": ...}` response body.

Usage:
    from campus_events.exceptions import NotFoundError

    if not event:
        raise NotFoundError("Event not found")
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class CampusEventsError(HTTPException):
    """Base error: an HTTP status, a short label and a human readable message"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(status_code=self.status_code, detail=message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.error, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(CampusEventsError):
    """Malformed request input"""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation Error"


class BadRequestError(CampusEventsError):
    """Well-formed request that breaks a business rule"""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class AuthenticationError(CampusEventsError):
    """Missing, expired or unusable credentials"""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Access denied"


class AuthorizationError(CampusEventsError):
    """Bad token signature or a role that is not allowed"""

    status_code = status.HTTP_403_FORBIDDEN
    error = "Access denied"


class ForbiddenError(CampusEventsError):
    """Authenticated user lacks the precondition to see a resource"""

    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"


class NotFoundError(CampusEventsError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class ConflictError(CampusEventsError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"
