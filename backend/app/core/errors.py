"""
Domain errors raised by services and mapped to HTTP status codes by the routes.
"""
from fastapi import HTTPException, status


class DomainError(Exception):
    """Base class for service-level failures carrying a client-facing message."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT


class AuthError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED


def to_http(err: DomainError) -> HTTPException:
    """Translate a domain error into the HTTPException the route raises."""
    return HTTPException(status_code=err.status_code, detail=err.message)
