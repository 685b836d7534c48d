"""Reservation endpoints for booking management.

Provides REST endpoints for:
- Creating new reservations (identity required)
- Listing the caller's reservations and booking stats (identity required)
- Retrieving reservations by ID
- Confirming a reservation after payment success
- Cancelling reservations (identity required, owner only)

The gateway in front of the API authenticates callers and forwards their
identity in the x-user-id header.
"""

from fastapi import APIRouter, Depends, Query
from starlette.status import HTTP_201_CREATED

from roomrate.models import BookingStats, CancellationResult, GuestSession, Reservation
from roomrate.services.booking import BookingService
from roomrate_api.dependencies import (
    get_booking_service,
    get_guest_session,
    verify_payment_webhook_secret,
)
from roomrate_api.models import (
    ReservationCreateRequest,
    ReservationListResponse,
    ReservationResponse,
)

router = APIRouter(prefix="/reservations", tags=["reservations"])


def _to_response(service: BookingService, reservation: Reservation) -> ReservationResponse:
    return ReservationResponse(
        reservation=reservation,
        display_status=service.display_status(reservation),
        nights=reservation.nights,
    )


@router.post(
    "",
    summary="Create reservation",
    description="""
Create a new reservation.

**Requires the x-user-id identity header.**

Prices the stay, re-checks availability and atomically locks every night
of the stay. The reservation starts as `pending` until the payment is
confirmed.
""",
    response_model=ReservationResponse,
    status_code=HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid dates or too many guests"},
        401: {"description": "Identity header missing"},
        404: {"description": "Room not found"},
        409: {"description": "Room no longer available or not bookable"},
    },
)
async def create_reservation(
    body: ReservationCreateRequest,
    session: GuestSession = Depends(get_guest_session),
    service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    reservation = service.create_booking(session, body.to_booking_request())
    return _to_response(service, reservation)


@router.get(
    "/me",
    summary="List my reservations",
    response_model=ReservationListResponse,
    responses={401: {"description": "Identity header missing"}},
)
async def list_my_reservations(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: GuestSession = Depends(get_guest_session),
    service: BookingService = Depends(get_booking_service),
) -> ReservationListResponse:
    reservations = service.list_user_bookings(session, limit=limit, offset=offset)
    return ReservationListResponse(
        reservations=[_to_response(service, r) for r in reservations],
        total=len(reservations),
        limit=limit,
        offset=offset,
    )


@router.get(
    "/me/stats",
    summary="My booking stats",
    response_model=BookingStats,
    responses={401: {"description": "Identity header missing"}},
)
async def get_my_stats(
    session: GuestSession = Depends(get_guest_session),
    service: BookingService = Depends(get_booking_service),
) -> BookingStats:
    return service.booking_stats(session)


@router.get(
    "/{reservation_id}",
    summary="Get reservation",
    response_model=ReservationResponse,
    responses={404: {"description": "Reservation not found"}},
)
async def get_reservation(
    reservation_id: str,
    service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    return _to_response(service, service.get_booking(reservation_id))


@router.post(
    "/{reservation_id}/confirm",
    summary="Confirm reservation after payment",
    description="""
Record a successful payment and move the reservation from `pending` to
`confirmed`. Called by the payment integration, not by guests.

**Requires the x-payment-webhook-secret header** matching the configured
`PAYMENT_WEBHOOK_SECRET`.
""",
    response_model=ReservationResponse,
    dependencies=[Depends(verify_payment_webhook_secret)],
    responses={
        401: {"description": "Webhook secret header missing"},
        403: {"description": "Webhook secret invalid or not configured"},
        404: {"description": "Reservation not found"},
        409: {"description": "Reservation is not pending"},
    },
)
async def confirm_reservation(
    reservation_id: str,
    service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    return _to_response(service, service.confirm_payment(reservation_id))


@router.post(
    "/{reservation_id}/cancel",
    summary="Cancel reservation",
    description="""
Cancel a reservation.

**Requires the x-user-id identity header. Owner only.**

Cancellation is free until 24 hours before check-in (00:00 UTC on the
check-in date). Inside that window the request is refused and the
reservation is unchanged. A successful cancellation releases the nights
and marks the payment record refunded.
""",
    response_model=CancellationResult,
    responses={
        401: {"description": "Identity header missing"},
        403: {"description": "Reservation belongs to another guest"},
        404: {"description": "Reservation not found"},
        409: {"description": "Cutoff passed or reservation already cancelled"},
    },
)
async def cancel_reservation(
    reservation_id: str,
    session: GuestSession = Depends(get_guest_session),
    service: BookingService = Depends(get_booking_service),
) -> CancellationResult:
    return service.cancel_booking(session, reservation_id)
