"""
Domain exceptions raised by the services.

Every error carries the HTTP status it maps to; ``main.py`` registers a single
handler that renders them as ``{"success": false, "message": ...}``.
"""

from typing import Any, Dict, List, Optional

from fastapi import status


class BlogException(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        errors: Optional[List[Any]] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors
        self.extra = extra or {}
        super().__init__(self.message)

    headers: Optional[Dict[str, str]] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": False, "message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        payload.update(self.extra)
        return payload


class ValidationFailed(BlogException):
    status_code = 422
    default_message = "Validation failed"


class Conflict(BlogException):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class NotFound(BlogException):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class InvalidCredentials(BlogException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class InvalidToken(BlogException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid authentication token"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidOrExpiredToken(BlogException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "The link is invalid or has expired"


class EmailNotVerified(BlogException):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Please verify your email before logging in"


class AlreadyVerified(BlogException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "This email has already been verified"


class Forbidden(BlogException):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class InternalError(BlogException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
