"""Room endpoints for search, pricing and availability.

Provides REST endpoints for:
- Searching available rooms for a stay, each with its price breakdown
- Pricing a stay in a specific room
- Checking a specific room, with nearby free dates when it is taken

All amounts are whole currency units. check_out is exclusive.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query

from roomrate.models import DateRange, PriceBreakdown
from roomrate.services.booking import BookingService
from roomrate_api.dependencies import get_booking_service
from roomrate_api.models import RoomAvailabilityResponse, RoomSearchResponse

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get(
    "/search",
    summary="Search available rooms",
    description="""
Search rooms that can hold the party and are free for the whole stay.

Each result carries its price breakdown. Results are sorted by grand total.

**Notes:**
- Availability here is advisory; it is checked again when booking
- `category` is matched case-insensitively (e.g. `suite`)
""",
    response_model=RoomSearchResponse,
    responses={
        400: {"description": "check_out is not after check_in"},
    },
)
async def search_rooms(
    check_in: dt.date = Query(..., description="Check-in date (YYYY-MM-DD)", examples=["2025-07-04"]),
    check_out: dt.date = Query(..., description="Check-out date (YYYY-MM-DD)", examples=["2025-07-06"]),
    guests: int = Query(1, ge=1, description="Number of guests"),
    category: str | None = Query(None, description="Room category filter"),
    service: BookingService = Depends(get_booking_service),
) -> RoomSearchResponse:
    stay = DateRange(check_in=check_in, check_out=check_out)
    results = service.search_rooms(stay, guests, category)
    return RoomSearchResponse(
        check_in=check_in,
        check_out=check_out,
        nights=stay.nights,
        guests=guests,
        results=results,
        total=len(results),
    )


@router.get(
    "/{room_id}/pricing",
    summary="Price a stay",
    description="""
Calculate the price of a stay in a room, night by night.

Weekend, holiday, summer peak and premium category surcharges are applied
per night and stack multiplicatively. Each night is rounded once; taxes and
the service fee are added to the subtotal.
""",
    response_model=PriceBreakdown,
    responses={
        400: {"description": "Invalid date range or room price"},
        404: {"description": "Room not found"},
    },
)
async def get_room_pricing(
    room_id: str,
    check_in: dt.date = Query(..., description="Check-in date (YYYY-MM-DD)"),
    check_out: dt.date = Query(..., description="Check-out date (YYYY-MM-DD)"),
    service: BookingService = Depends(get_booking_service),
) -> PriceBreakdown:
    return service.quote(room_id, DateRange(check_in=check_in, check_out=check_out))


@router.get(
    "/{room_id}/availability",
    summary="Check room availability",
    description="""
Check whether a room is free for a stay.

When the room is taken, up to three nearby windows of the same length are
suggested, closest first.
""",
    response_model=RoomAvailabilityResponse,
    responses={
        400: {"description": "check_out is not after check_in"},
        404: {"description": "Room not found"},
    },
)
async def get_room_availability(
    room_id: str,
    check_in: dt.date = Query(..., description="Check-in date (YYYY-MM-DD)"),
    check_out: dt.date = Query(..., description="Check-out date (YYYY-MM-DD)"),
    service: BookingService = Depends(get_booking_service),
) -> RoomAvailabilityResponse:
    stay = DateRange(check_in=check_in, check_out=check_out)
    result = service.check_room_availability(room_id, stay)

    alternatives = []
    if not result.available:
        alternatives = service.suggest_alternative_dates(room_id, stay)

    return RoomAvailabilityResponse(
        check_in=check_in,
        check_out=check_out,
        result=result,
        alternatives=alternatives,
    )
