"""API models for room search, pricing and availability endpoints."""

import datetime as dt

from pydantic import BaseModel, Field

from roomrate.models import AlternativeDateRange, AvailabilityResult, RoomQuote


class RoomSearchResponse(BaseModel):
    """Available rooms for a stay, each with its price."""

    check_in: dt.date
    check_out: dt.date
    nights: int = Field(..., ge=1)
    guests: int = Field(..., ge=1)
    results: list[RoomQuote] = Field(default_factory=list)
    total: int = Field(..., ge=0, description="Number of available rooms")


class RoomAvailabilityResponse(BaseModel):
    """Availability of one room, with nearby free dates when it is taken."""

    check_in: dt.date
    check_out: dt.date
    result: AvailabilityResult
    alternatives: list[AlternativeDateRange] = Field(default_factory=list)
