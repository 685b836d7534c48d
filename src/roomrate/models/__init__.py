"""Pydantic models for roomrate data entities."""

from .availability import AlternativeDateRange, AvailabilityResult
from .cancellation import CancellationResult, RefundInstruction
from .date_range import DateRange
from .enums import (
    BLOCKING_STATUSES,
    PaymentStatus,
    ReservationDisplayStatus,
    ReservationStatus,
    RoomCategory,
)
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    AuthRequiredError,
    BookingError,
    CancellationWindowClosedError,
    CapacityExceededError,
    ErrorCode,
    ErrorResponse,
    InvalidPriceError,
    InvalidRangeError,
    InvalidReservationStateError,
    NotFoundError,
    ReservationNotCancellableError,
    RoomInactiveError,
    RoomNoLongerAvailableError,
    StayTooLongError,
    UnauthorizedError,
)
from .payment import Payment
from .pricing import (
    NightlyRate,
    PriceBreakdown,
    PricingPolicy,
    RateModifier,
    RoomQuote,
    SeasonWindow,
)
from .reservation import BookingRequest, BookingStats, Reservation
from .room import Room
from .session import GuestSession

__all__ = [
    # Enums
    "BLOCKING_STATUSES",
    "PaymentStatus",
    "ReservationDisplayStatus",
    "ReservationStatus",
    "RoomCategory",
    # Rooms and stays
    "DateRange",
    "Room",
    "GuestSession",
    # Reservation
    "BookingRequest",
    "BookingStats",
    "Reservation",
    # Pricing
    "NightlyRate",
    "PriceBreakdown",
    "PricingPolicy",
    "RateModifier",
    "RoomQuote",
    "SeasonWindow",
    # Availability
    "AlternativeDateRange",
    "AvailabilityResult",
    # Cancellation
    "CancellationResult",
    "RefundInstruction",
    # Payment
    "Payment",
    # Errors
    "AuthRequiredError",
    "BookingError",
    "CancellationWindowClosedError",
    "CapacityExceededError",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "ErrorCode",
    "ErrorResponse",
    "InvalidPriceError",
    "InvalidRangeError",
    "InvalidReservationStateError",
    "NotFoundError",
    "ReservationNotCancellableError",
    "RoomInactiveError",
    "RoomNoLongerAvailableError",
    "StayTooLongError",
    "UnauthorizedError",
]
