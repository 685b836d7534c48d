"""Standard error codes for the booking engine.

Every failure raised by the pricing, availability and booking services is a
BookingError subclass carrying one of these codes. The HTTP layer converts
them into ErrorResponse bodies.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Stable error codes returned to callers."""

    # Input errors
    INVALID_RANGE = "ERR_001"
    INVALID_PRICE = "ERR_002"
    CAPACITY_EXCEEDED = "ERR_003"
    STAY_TOO_LONG = "ERR_010"

    # Lookup errors
    NOT_FOUND = "ERR_004"
    ROOM_INACTIVE = "ERR_005"

    # Conflict errors
    ROOM_NO_LONGER_AVAILABLE = "ERR_006"
    CANCELLATION_WINDOW_CLOSED = "ERR_007"
    RESERVATION_NOT_CANCELLABLE = "ERR_008"
    INVALID_RESERVATION_STATE = "ERR_009"

    # Identity errors
    AUTH_REQUIRED = "ERR_AUTH_001"
    UNAUTHORIZED = "ERR_AUTH_002"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_RANGE: "Check-out date must be after check-in date",
    ErrorCode.INVALID_PRICE: "Room base price must be greater than zero",
    ErrorCode.CAPACITY_EXCEEDED: "Number of guests exceeds room capacity",
    ErrorCode.STAY_TOO_LONG: "Stay is longer than the maximum bookable length",
    ErrorCode.NOT_FOUND: "The requested room or reservation was not found",
    ErrorCode.ROOM_INACTIVE: "The room is not currently bookable",
    ErrorCode.ROOM_NO_LONGER_AVAILABLE: "Room is no longer available for selected dates",
    ErrorCode.CANCELLATION_WINDOW_CLOSED: "Cancellation not allowed within 24 hours of check-in",
    ErrorCode.RESERVATION_NOT_CANCELLABLE: "Reservation cannot be cancelled in its current status",
    ErrorCode.INVALID_RESERVATION_STATE: "Reservation is not in a valid state for this action",
    ErrorCode.AUTH_REQUIRED: "Authentication required to perform this action",
    ErrorCode.UNAUTHORIZED: "Guest not authorized for this reservation",
}

# Recovery suggestions for callers
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.INVALID_RANGE: "Choose a check-out date at least one night after check-in",
    ErrorCode.INVALID_PRICE: "Verify the room's configured base price",
    ErrorCode.CAPACITY_EXCEEDED: "Reduce the number of guests or pick a larger room",
    ErrorCode.STAY_TOO_LONG: "Split the stay into shorter consecutive bookings",
    ErrorCode.NOT_FOUND: "Verify the room or reservation ID",
    ErrorCode.ROOM_INACTIVE: "Search again for available rooms",
    ErrorCode.ROOM_NO_LONGER_AVAILABLE: "Search again and pick another room or dates",
    ErrorCode.CANCELLATION_WINDOW_CLOSED: "Contact the hotel directly",
    ErrorCode.RESERVATION_NOT_CANCELLABLE: "No action needed",
    ErrorCode.INVALID_RESERVATION_STATE: "Reload the reservation and check its status",
    ErrorCode.AUTH_REQUIRED: "Sign in and retry",
    ErrorCode.UNAUTHORIZED: "Verify the reservation belongs to the signed-in guest",
}


class ErrorResponse(BaseModel):
    """Standard error body for failed operations."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BookingError(Exception):
    """Exception raised by pricing, availability and booking operations."""

    code: ErrorCode = ErrorCode.INVALID_RESERVATION_STATE

    def __init__(
        self,
        code: Optional[ErrorCode] = None,
        details: Optional[dict[str, str]] = None,
    ):
        if code is not None:
            self.code = code
        self.message = ERROR_MESSAGES[self.code]
        self.recovery = ERROR_RECOVERY[self.code]
        self.details = details
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details)


class InvalidRangeError(BookingError):
    """Check-out is not after check-in."""

    code = ErrorCode.INVALID_RANGE


class InvalidPriceError(BookingError):
    """Base price is zero or negative."""

    code = ErrorCode.INVALID_PRICE


class CapacityExceededError(BookingError):
    code = ErrorCode.CAPACITY_EXCEEDED


class NotFoundError(BookingError):
    """Unknown room or reservation reference."""

    code = ErrorCode.NOT_FOUND


class RoomInactiveError(BookingError):
    code = ErrorCode.ROOM_INACTIVE


class RoomNoLongerAvailableError(BookingError):
    """Commit-time availability check found a conflicting reservation."""

    code = ErrorCode.ROOM_NO_LONGER_AVAILABLE


class CancellationWindowClosedError(BookingError):
    """Cancellation requested inside the pre-check-in cutoff."""

    code = ErrorCode.CANCELLATION_WINDOW_CLOSED


class ReservationNotCancellableError(BookingError):
    code = ErrorCode.RESERVATION_NOT_CANCELLABLE


class InvalidReservationStateError(BookingError):
    code = ErrorCode.INVALID_RESERVATION_STATE


class AuthRequiredError(BookingError):
    code = ErrorCode.AUTH_REQUIRED


class UnauthorizedError(BookingError):
    code = ErrorCode.UNAUTHORIZED


class StayTooLongError(BookingError):
    """Stay has more nights than one booking can hold."""

    code = ErrorCode.STAY_TOO_LONG
