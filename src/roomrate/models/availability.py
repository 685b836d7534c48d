"""Availability check result models."""

import datetime as dt

from pydantic import BaseModel, Field


class AvailabilityResult(BaseModel):
    """Outcome of checking one room against its reservations."""

    room_id: str
    available: bool
    conflicts: int = Field(..., ge=0, description="Number of overlapping reservations")
    conflicting_reservation_ids: list[str] = Field(default_factory=list)


class AlternativeDateRange(BaseModel):
    """A nearby free window of the same length as the requested stay."""

    check_in: dt.date
    check_out: dt.date
    nights: int = Field(..., ge=1)
    offset_days: int = Field(..., description="Shift from the requested check-in")
    direction: str = Field(..., pattern=r"^(earlier|later)$")
