"""
Centralized error handling for the reservation engine.
Error taxonomy plus a reusable mapper so routes stay thin and new error types are easy to add.
"""
from __future__ import annotations

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# Constants: status codes
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_UNAUTHORIZED = 401
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_INTERNAL_ERROR = 500

MSG_AUTH_REQUIRED = "Authentication required"


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------


class ReservationError(Exception):
    """Base for every failure surfaced by the availability engine."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ReservationValidationError(ReservationError):
    """Malformed or out-of-range input; the caller can fix the request."""

    def __init__(self, message: str, *, field: str | None = None, max_capacity: int | None = None):
        super().__init__(message)
        self.field = field
        self.max_capacity = max_capacity


class ReservationNotFoundError(ReservationError):
    """Referenced venue, unit or reservation does not exist (or is not visible to the caller)."""


class ReservationConflictError(ReservationError):
    """Requested interval overlaps a held reservation, or the reservation is already cancelled."""


class ReservationInternalError(ReservationError):
    """Storage or infrastructure failure."""


# ---------------------------------------------------------------------------
# Error rules: (exception type, status_code). First match wins.
# Add new rules here instead of scattering checks in routes.
# ---------------------------------------------------------------------------

RESERVATION_ERROR_RULES: list[tuple[type[ReservationError], int]] = [
    (ReservationValidationError, STATUS_BAD_REQUEST),
    (ReservationNotFoundError, STATUS_NOT_FOUND),
    (ReservationConflictError, STATUS_CONFLICT),
    (ReservationInternalError, STATUS_INTERNAL_ERROR),
]


def reservation_error_to_http(exc: Exception) -> HTTPException:
    """
    Map an exception from the reservation engine into an HTTPException.
    Uses RESERVATION_ERROR_RULES for known error types; otherwise returns 500 with the exception message.
    """
    for error_type, status_code in RESERVATION_ERROR_RULES:
        if isinstance(exc, error_type):
            detail: dict = {"error": exc.message}
            if isinstance(exc, ReservationValidationError) and exc.max_capacity is not None:
                detail["max_capacity"] = exc.max_capacity
            return HTTPException(status_code=status_code, detail=detail)
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail={"error": str(exc)})
