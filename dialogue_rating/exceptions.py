"""
Error taxonomy shared by the service layer and the HTTP API.

Every error is a FastAPI ``HTTPException`` with a fixed status code, so the
service functions can raise them directly and the router lets them
propagate. ``dialogue_rating.main`` renders all of them as
``{"error": <detail>}``.
"""

from fastapi import HTTPException


class RatingAppError(HTTPException):
    """Base class for the application errors."""

    status_code = 500
    default_detail = "Server error"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class ValidationError(RatingAppError):
    """Missing or out-of-range input."""

    status_code = 400
    default_detail = "Invalid request"


class ConflictError(RatingAppError):
    """Username or email already registered."""

    status_code = 400
    default_detail = "Username or email already exists"


class InvalidCredentials(RatingAppError):
    status_code = 401
    default_detail = "Invalid credentials"


class Unauthorized(RatingAppError):
    """No token was presented."""

    status_code = 401
    default_detail = "Access token required"


class Forbidden(RatingAppError):
    """Invalid or expired token, or a non-admin on an admin route."""

    status_code = 403
    default_detail = "Invalid or expired token"


class NotFound(RatingAppError):
    status_code = 404
    default_detail = "Not found"


class StoreError(RatingAppError):
    """Underlying database failure. The detail never carries driver output."""

    status_code = 500
    default_detail = "Database error"
