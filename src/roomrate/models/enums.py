"""Enumeration types for roomrate data models."""

from enum import Enum


class RoomCategory(str, Enum):
    """Category of a room."""

    STANDARD = "Standard"
    DELUXE = "Deluxe"
    SUITE = "Suite"
    BUSINESS = "Business"
    VILLA = "Villa"
    PREMIUM = "Premium"
    PRESIDENTIAL = "Presidential"


class ReservationStatus(str, Enum):
    """Stored status of a reservation."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class ReservationDisplayStatus(str, Enum):
    """Status shown to guests.

    COMPLETED is derived at read time from the check-out date and is never stored.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    """Status of a payment record."""

    PENDING = "pending"
    COMPLETED = "completed"
    REFUNDED = "refunded"
    FAILED = "failed"


# Reservations in these states hold their nights
BLOCKING_STATUSES: frozenset[ReservationStatus] = frozenset(
    {ReservationStatus.PENDING, ReservationStatus.CONFIRMED}
)
