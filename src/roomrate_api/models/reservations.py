"""API models for reservation endpoints."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from roomrate.models import BookingRequest, Reservation, ReservationDisplayStatus


class ReservationCreateRequest(BaseModel):
    """Request to create a new reservation.

    The guest is not part of the body; it comes from the identity headers.
    """

    model_config = ConfigDict(
        # Note: strict=False allows string-to-date coercion from JSON
        strict=False,
        json_schema_extra={
            "examples": [
                {
                    "room_id": "room-101",
                    "check_in": "2025-07-15",
                    "check_out": "2025-07-18",
                    "guests": 2,
                    "special_requests": "Late arrival around 10pm",
                }
            ]
        },
    )

    room_id: str = Field(..., min_length=1, description="Room to book")
    check_in: dt.date = Field(..., description="Check-in date (YYYY-MM-DD)")
    check_out: dt.date = Field(..., description="Check-out date (YYYY-MM-DD)")
    guests: int = Field(..., ge=1, description="Number of guests")
    guest_name: str | None = Field(default=None, max_length=200)
    guest_email: str | None = Field(default=None, max_length=254)
    guest_phone: str | None = Field(default=None, max_length=50)
    special_requests: str | None = Field(
        default=None,
        max_length=500,
        description="Special requests or notes",
    )

    def to_booking_request(self) -> BookingRequest:
        return BookingRequest(**self.model_dump())


class ReservationResponse(BaseModel):
    """A reservation together with the status shown to the guest."""

    reservation: Reservation
    display_status: ReservationDisplayStatus
    nights: int = Field(..., ge=1)


class ReservationListResponse(BaseModel):
    """Page of a guest's reservations, newest first."""

    reservations: list[ReservationResponse] = Field(default_factory=list)
    total: int = Field(..., ge=0, description="Number of reservations on this page")
    limit: int
    offset: int
