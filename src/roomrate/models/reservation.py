"""Reservation models."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from .date_range import DateRange
from .enums import BLOCKING_STATUSES, ReservationStatus


class Reservation(BaseModel):
    """A booking of one room for one stay.

    Reservations are never deleted; cancelling only changes the status.
    total_amount is the grand total in whole currency units at commit time.
    """

    model_config = ConfigDict(strict=True)

    reservation_id: str = Field(..., description="Unique reservation ID")
    room_id: str = Field(..., description="Reserved room")
    user_id: str = Field(..., description="Guest who made the booking")
    check_in: dt.date = Field(..., description="Check-in date")
    check_out: dt.date = Field(..., description="Check-out date (exclusive)")
    status: ReservationStatus = Field(..., description="Reservation status")
    guests: int = Field(..., gt=0, description="Number of guests")
    total_amount: int = Field(..., ge=0, description="Grand total in currency units")
    guest_name: str | None = Field(default=None, description="Lead guest name")
    guest_email: str | None = Field(default=None, description="Lead guest email")
    guest_phone: str | None = Field(default=None, description="Lead guest phone")
    special_requests: str | None = Field(default=None, max_length=500)
    created_at: dt.datetime = Field(..., description="Creation timestamp")
    updated_at: dt.datetime | None = Field(default=None, description="Last status change")
    cancelled_at: dt.datetime | None = Field(default=None, description="Cancellation timestamp")

    @property
    def date_range(self) -> DateRange:
        return DateRange(check_in=self.check_in, check_out=self.check_out)

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def is_blocking(self) -> bool:
        """Whether this reservation holds its nights."""
        return self.status in BLOCKING_STATUSES


class BookingRequest(BaseModel):
    """Data required to book a room."""

    model_config = ConfigDict(strict=True)

    room_id: str
    check_in: dt.date
    check_out: dt.date
    guests: int = Field(..., ge=1)
    guest_name: str | None = None
    guest_email: str | None = None
    guest_phone: str | None = None
    special_requests: str | None = Field(default=None, max_length=500)


class BookingStats(BaseModel):
    """Dashboard summary of a guest's bookings."""

    total_bookings: int = Field(..., ge=0)
    total_spent: int = Field(..., ge=0, description="Sum of non-cancelled totals")
    upcoming_bookings: int = Field(..., ge=0)
    recent_bookings: list[Reservation] = Field(default_factory=list)
