"""FastAPI exception handlers converting BookingError to HTTP responses.

The ErrorCode-to-HTTP status mapping:
- 400 Bad Request: invalid range, invalid price, too many guests, stay too long
- 401 Unauthorized: no caller identity
- 403 Forbidden: reservation belongs to another guest
- 404 Not Found: unknown room or reservation
- 409 Conflict: room taken, cutoff passed, status does not allow the action

Usage:
    from roomrate_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from roomrate.models import BookingError, ErrorCode
from roomrate.utils.logging import get_logger

logger = get_logger(__name__)

ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    # Input errors -> 400 Bad Request
    ErrorCode.INVALID_RANGE: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PRICE: HTTP_400_BAD_REQUEST,
    ErrorCode.CAPACITY_EXCEEDED: HTTP_400_BAD_REQUEST,
    ErrorCode.STAY_TOO_LONG: HTTP_400_BAD_REQUEST,
    # Identity errors
    ErrorCode.AUTH_REQUIRED: HTTP_401_UNAUTHORIZED,
    ErrorCode.UNAUTHORIZED: HTTP_403_FORBIDDEN,
    # Lookup errors -> 404 Not Found
    ErrorCode.NOT_FOUND: HTTP_404_NOT_FOUND,
    # State conflicts -> 409 Conflict
    ErrorCode.ROOM_INACTIVE: HTTP_409_CONFLICT,
    ErrorCode.ROOM_NO_LONGER_AVAILABLE: HTTP_409_CONFLICT,
    ErrorCode.CANCELLATION_WINDOW_CLOSED: HTTP_409_CONFLICT,
    ErrorCode.RESERVATION_NOT_CANCELLABLE: HTTP_409_CONFLICT,
    ErrorCode.INVALID_RESERVATION_STATE: HTTP_409_CONFLICT,
}

INTERNAL_ERROR_BODY = {
    "success": False,
    "error_code": "ERR_INTERNAL",
    "message": "An unexpected error occurred",
    "recovery": "Please try again later or contact support",
    "details": None,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """HTTP status for an ErrorCode, 400 when not explicitly mapped."""
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    """Convert a BookingError into its ErrorResponse body."""
    status_code = get_http_status_for_error(exc.code)
    logger.info(
        "Request refused",
        extra={"path": request.url.path, "error_code": exc.code.value, "status_code": status_code},
    )
    return JSONResponse(
        status_code=status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected exception and return a generic 500 body."""
    logger.exception("Unhandled exception on %s", request.url.path)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=INTERNAL_ERROR_BODY,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(BookingError, booking_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
