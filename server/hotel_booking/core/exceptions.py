"""Error taxonomy and RFC 9457 Problem Details exceptions."""

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Every failure the API reports. Anything else is an internal error."""
    INVALID_PARAMS = "INVALID_PARAMS"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    NOT_BOOKING_OWNER = "NOT_BOOKING_OWNER"
    CANNOT_LIST_HOTELS = "CANNOT_LIST_HOTELS"
    ROOM_FULL = "ROOM_FULL"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


# 402 is reserved for tickets that do not grant hotel access
ERROR_KIND_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_PARAMS: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.NOT_BOOKING_OWNER: 401,
    ErrorKind.CANNOT_LIST_HOTELS: 402,
    ErrorKind.ROOM_FULL: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


class ProblemDetailsException(HTTPException):
    """
    Base exception class following RFC 9457 Problem Details for HTTP APIs.

    The HTTP status is derived from ``kind`` through ERROR_KIND_STATUS, so
    subclasses only choose a kind, never a status code.

    https://www.rfc-editor.org/rfc/rfc9457
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        title: str,
        detail: Optional[str] = None,
        type_uri: Optional[str] = None,
        instance: Optional[str] = None,
        extensions: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize Problem Details exception.

        Args:
            title: Short, human-readable summary of the problem type
            detail: Human-readable explanation specific to this occurrence
            type_uri: URI reference that identifies the problem type
            instance: URI reference that identifies the specific occurrence
            extensions: Additional problem-specific information
            headers: HTTP headers to include in response
        """
        status_code = ERROR_KIND_STATUS[self.kind]
        self.title = title
        self.type_uri = type_uri or f"about:blank#{status_code}"
        self.instance = instance

        self.problem_details = {
            "type": self.type_uri,
            "title": title,
            "status": status_code,
            "code": self.kind.value,
        }
        if detail:
            self.problem_details["detail"] = detail
        if instance:
            self.problem_details["instance"] = instance
        self.problem_details.update(extensions or {})

        super().__init__(
            status_code=status_code,
            detail=self.problem_details,
            headers=headers,
        )


class ValidationError(ProblemDetailsException):
    """Exception for malformed request parameters."""

    kind = ErrorKind.INVALID_PARAMS

    def __init__(
        self,
        detail: str = "The request data failed validation",
        errors: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            title="Validation Error",
            detail=detail,
            type_uri="https://example.com/problems/validation-error",
            extensions={"errors": errors} if errors else None,
        )


class AuthenticationError(ProblemDetailsException):
    """Exception for missing or invalid session tokens."""

    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, detail: str = "Authentication credentials are required"):
        super().__init__(
            title="Authentication Required",
            detail=detail,
            type_uri="https://example.com/problems/authentication-required",
            headers={"WWW-Authenticate": "Bearer"},
        )


class BookingOwnershipError(ProblemDetailsException):
    """Exception when a user acts on a booking that belongs to someone else."""

    kind = ErrorKind.NOT_BOOKING_OWNER

    def __init__(self, booking_id: int):
        super().__init__(
            title="Booking Not Owned",
            detail=f"Booking {booking_id} does not belong to the authenticated user",
            type_uri="https://example.com/problems/booking-not-owned",
            extensions={"booking_id": booking_id},
        )


class CannotListHotelsError(ProblemDetailsException):
    """Exception when the user's ticket does not grant hotel access."""

    kind = ErrorKind.CANNOT_LIST_HOTELS

    def __init__(self, reason: str):
        super().__init__(
            title="Payment Required",
            detail=f"Ticket does not allow hotel bookings: {reason}",
            type_uri="https://example.com/problems/cannot-list-hotels",
            extensions={"reason": reason},
        )


class RoomFullError(ProblemDetailsException):
    """Exception when a room has no free places left."""

    kind = ErrorKind.ROOM_FULL

    def __init__(self, room_id: int, capacity: int):
        super().__init__(
            title="Room Full",
            detail=f"Room {room_id} is at capacity ({capacity}/{capacity})",
            type_uri="https://example.com/problems/room-full",
            extensions={"room_id": room_id, "capacity": capacity},
        )


class NotFoundError(ProblemDetailsException):
    """Exception for resource not found errors."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource_type: str = "resource",
        resource_id: Optional[Any] = None,
        detail: Optional[str] = None,
    ):
        if not detail:
            detail = f"The requested {resource_type}"
            if resource_id is not None:
                detail += f" with ID '{resource_id}'"
            detail += " could not be found"

        extensions: Dict[str, Any] = {"resource_type": resource_type}
        if resource_id is not None:
            extensions["resource_id"] = str(resource_id)

        super().__init__(
            title="Resource Not Found",
            detail=detail,
            type_uri="https://example.com/problems/resource-not-found",
            extensions=extensions,
        )


async def problem_details_handler(request: Request, exc: ProblemDetailsException) -> JSONResponse:
    """Render a domain error as a Problem Details response."""
    return JSONResponse(
        status_code=exc.status_code,
        content={**exc.problem_details, "instance": exc.instance or request.url.path},
        headers=exc.headers,
        media_type="application/problem+json",
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI request validation failures as an INVALID_PARAMS problem."""
    errors = {
        ".".join(str(part) for part in error["loc"]): error["msg"]
        for error in exc.errors()
    }
    return await problem_details_handler(
        request,
        ValidationError(detail="The request data failed validation", errors=errors),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Convert an exception outside the taxonomy into a 500 Problem Details response.

    Only CANNOT_LIST_HOTELS answers 402; unclassified errors are no longer
    folded into that status and surface as INTERNAL instead.

    Args:
        request: FastAPI request object
        exc: Unhandled exception

    Returns:
        JSONResponse: Problem Details formatted response
    """
    error_id = str(uuid.uuid4())
    logger.error(
        "Unhandled exception",
        extra={"error_id": error_id, "path": request.url.path, "error": str(exc)},
        exc_info=exc,
    )

    return JSONResponse(
        status_code=ERROR_KIND_STATUS[ErrorKind.INTERNAL],
        content={
            "type": "https://example.com/problems/internal-server-error",
            "title": "Internal Server Error",
            "status": ERROR_KIND_STATUS[ErrorKind.INTERNAL],
            "code": ErrorKind.INTERNAL.value,
            "detail": "An unexpected error occurred while processing the request",
            "instance": request.url.path,
            "error_id": error_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        media_type="application/problem+json",
    )
