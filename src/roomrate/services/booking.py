"""Booking service orchestrating search, quote, commit, confirm and cancel.

Availability seen during search is advisory. create_booking re-checks the
room's reservations immediately before committing, and the commit itself
locks every night of the stay in the same DynamoDB transaction as the
reservation, so of two overlapping bookings only the first commit wins.
"""

import datetime as dt
import uuid

from roomrate.models import (
    AlternativeDateRange,
    AvailabilityResult,
    BookingRequest,
    BookingStats,
    CancellationResult,
    CapacityExceededError,
    DateRange,
    GuestSession,
    InvalidReservationStateError,
    NotFoundError,
    PriceBreakdown,
    Reservation,
    ReservationDisplayStatus,
    ReservationStatus,
    Room,
    RoomInactiveError,
    RoomNoLongerAvailableError,
    RoomQuote,
    StayTooLongError,
    UnauthorizedError,
)
from roomrate.utils.logging import get_logger, log_booking_operation

from .availability import AvailabilityService, conflicting_reservations
from .cancellation import CancellationPolicyService
from .dynamodb import MAX_NIGHTS_PER_TRANSACTION, DynamoDBService
from .payment_service import PaymentService
from .pricing import PricingService

logger = get_logger(__name__)

# One booking commits its nights in a single transaction
MAX_STAY_NIGHTS = MAX_NIGHTS_PER_TRANSACTION


def check_stay_length(stay: DateRange) -> None:
    """Raise StayTooLongError for stays one booking cannot hold."""
    if stay.nights > MAX_STAY_NIGHTS:
        raise StayTooLongError(
            details={"nights": str(stay.nights), "max_nights": str(MAX_STAY_NIGHTS)}
        )


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


def generate_reservation_id(now: dt.datetime | None = None) -> str:
    """Generate a unique reservation ID like RES-2025-1A2B3C4D."""
    year = (now or _utcnow()).year
    return f"RES-{year}-{uuid.uuid4().hex[:8].upper()}"


def display_status(reservation: Reservation, today: dt.date) -> ReservationDisplayStatus:
    """Status shown to the guest.

    A confirmed stay whose check-out is not after today shows as completed.
    """
    if reservation.status == ReservationStatus.CONFIRMED and reservation.check_out <= today:
        return ReservationDisplayStatus.COMPLETED
    return ReservationDisplayStatus(reservation.status.value)


class BookingService:
    """Service for the booking lifecycle of hotel rooms."""

    def __init__(
        self,
        db: DynamoDBService,
        pricing: PricingService,
        availability: AvailabilityService,
        cancellation: CancellationPolicyService,
        payments: PaymentService,
    ) -> None:
        self.db = db
        self.pricing = pricing
        self.availability = availability
        self.cancellation = cancellation
        self.payments = payments

    # =========================================================================
    # Search and quote
    # =========================================================================

    def search_rooms(
        self,
        stay: DateRange,
        guests: int,
        category: str | None = None,
    ) -> list[RoomQuote]:
        """Find bookable rooms for a stay and price each of them.

        Args:
            stay: Requested stay
            guests: Number of guests; rooms with smaller capacity are skipped
            category: Optional category filter, case-insensitive

        Returns:
            Priced rooms without conflicting reservations, cheapest first
        """
        check_stay_length(stay)
        candidates = [
            room
            for room in self.db.list_rooms(active_only=True)
            if room.capacity >= guests
            and (category is None or room.category.value.lower() == category.lower())
        ]

        quotes: list[RoomQuote] = []
        for room in candidates:
            reservations = self.db.get_reservations_for_room(room.room_id)
            if not self.availability.filter_available([room], stay, reservations):
                continue
            quotes.append(RoomQuote(room=room, pricing=self.pricing.quote_range(room, stay)))

        quotes.sort(key=lambda q: (q.pricing.grand_total, q.room.room_id))
        logger.info(
            "Room search completed",
            extra={
                "check_in": stay.check_in.isoformat(),
                "check_out": stay.check_out.isoformat(),
                "guests": guests,
                "candidates": len(candidates),
                "available": len(quotes),
            },
        )
        return quotes

    def _get_room_or_raise(self, room_id: str) -> Room:
        room = self.db.get_room(room_id)
        if room is None:
            raise NotFoundError(details={"room_id": room_id})
        return room

    def quote(self, room_id: str, stay: DateRange) -> PriceBreakdown:
        """Price a stay in a room without checking availability."""
        check_stay_length(stay)
        return self.pricing.quote_range(self._get_room_or_raise(room_id), stay)

    def check_room_availability(self, room_id: str, stay: DateRange) -> AvailabilityResult:
        """Check whether a room is free for a stay."""
        self._get_room_or_raise(room_id)
        return self.availability.check_room(
            room_id, stay, self.db.get_reservations_for_room(room_id)
        )

    def suggest_alternative_dates(
        self,
        room_id: str,
        stay: DateRange,
        today: dt.date | None = None,
    ) -> list[AlternativeDateRange]:
        """Nearby free windows of the same length for a taken room."""
        return self.availability.suggest_alternative_dates(
            room_id,
            stay,
            self.db.get_reservations_for_room(room_id),
            today=today or _utcnow().date(),
        )

    # =========================================================================
    # Commit
    # =========================================================================

    def create_booking(
        self,
        session: GuestSession,
        request: BookingRequest,
        now: dt.datetime | None = None,
    ) -> Reservation:
        """Create a pending reservation.

        Args:
            session: Guest making the booking
            request: Room, stay and guest details
            now: Booking time (defaults to the current UTC time)

        Returns:
            The committed reservation with status PENDING

        Raises:
            InvalidRangeError: check_out is not after check_in
            StayTooLongError: More nights than one booking can hold
            NotFoundError: Unknown room
            RoomInactiveError: Room is not bookable
            CapacityExceededError: Too many guests for the room
            InvalidPriceError: Room has a non-positive base price
            RoomNoLongerAvailableError: Another booking holds one of the nights
        """
        now = now or _utcnow()
        stay = DateRange(check_in=request.check_in, check_out=request.check_out)
        check_stay_length(stay)

        room = self._get_room_or_raise(request.room_id)
        if not room.is_active:
            raise RoomInactiveError(details={"room_id": room.room_id})
        if request.guests > room.capacity:
            raise CapacityExceededError(
                details={
                    "room_id": room.room_id,
                    "requested": str(request.guests),
                    "capacity": str(room.capacity),
                }
            )

        pricing = self.pricing.quote_range(room, stay)

        # Authoritative re-check right before the commit
        conflicts = conflicting_reservations(
            room.room_id, stay, self.db.get_reservations_for_room(room.room_id)
        )
        if conflicts:
            log_booking_operation(
                logger,
                "create_booking",
                room_id=room.room_id,
                user_id=session.user_id,
                error=RoomNoLongerAvailableError.code.value,
                conflicts=len(conflicts),
            )
            raise RoomNoLongerAvailableError(
                details={
                    "room_id": room.room_id,
                    "check_in": stay.check_in.isoformat(),
                    "check_out": stay.check_out.isoformat(),
                }
            )

        reservation = Reservation(
            reservation_id=generate_reservation_id(now),
            room_id=room.room_id,
            user_id=session.user_id,
            check_in=stay.check_in,
            check_out=stay.check_out,
            status=ReservationStatus.PENDING,
            guests=request.guests,
            total_amount=pricing.grand_total,
            guest_name=request.guest_name or session.full_name,
            guest_email=request.guest_email or session.email,
            guest_phone=request.guest_phone,
            special_requests=request.special_requests,
            created_at=now,
            updated_at=now,
        )

        if not self.db.create_reservation(reservation):
            # Lost the race on the room-night locks
            log_booking_operation(
                logger,
                "create_booking",
                reservation_id=reservation.reservation_id,
                room_id=room.room_id,
                user_id=session.user_id,
                error="booking_conflict",
            )
            raise RoomNoLongerAvailableError(
                details={"room_id": room.room_id, "reason": "booking_conflict"}
            )

        self.payments.create_pending(reservation, now)

        log_booking_operation(
            logger,
            "create_booking",
            reservation_id=reservation.reservation_id,
            room_id=room.room_id,
            user_id=session.user_id,
            amount=reservation.total_amount,
            status=reservation.status.value,
            nights=stay.nights,
        )
        return reservation

    def confirm_payment(self, reservation_id: str, now: dt.datetime | None = None) -> Reservation:
        """Confirm a pending reservation after the payment succeeded.

        Raises:
            NotFoundError: Unknown reservation
            InvalidReservationStateError: Reservation is not pending
        """
        now = now or _utcnow()
        existing = self.get_booking(reservation_id)
        if existing.status != ReservationStatus.PENDING:
            raise InvalidReservationStateError(
                details={"reservation_id": reservation_id, "status": existing.status.value}
            )

        updated = self.db.transition_reservation_status(
            reservation_id, ReservationStatus.PENDING, ReservationStatus.CONFIRMED, now
        )
        if updated is None:
            raise InvalidReservationStateError(
                details={"reservation_id": reservation_id, "reason": "status_changed"}
            )

        self.payments.mark_completed(reservation_id, now)
        log_booking_operation(
            logger,
            "confirm_payment",
            reservation_id=reservation_id,
            amount=updated.total_amount,
            status=updated.status.value,
        )
        return updated

    def cancel_booking(
        self,
        session: GuestSession,
        reservation_id: str,
        now: dt.datetime | None = None,
    ) -> CancellationResult:
        """Cancel a guest's reservation if the cutoff allows it.

        Raises:
            NotFoundError: Unknown reservation
            UnauthorizedError: Reservation belongs to another guest
            ReservationNotCancellableError: Already cancelled
            CancellationWindowClosedError: Inside the pre-check-in cutoff
            InvalidReservationStateError: Status changed while cancelling
        """
        now = now or _utcnow()
        reservation = self.get_booking(reservation_id)
        if reservation.user_id != session.user_id:
            log_booking_operation(
                logger,
                "cancel_booking",
                reservation_id=reservation_id,
                user_id=session.user_id,
                error=UnauthorizedError.code.value,
            )
            raise UnauthorizedError(details={"reservation_id": reservation_id})

        result = self.cancellation.cancel(reservation, now)

        if not self.db.cancel_reservation(reservation, result.cancelled_at):
            raise InvalidReservationStateError(
                details={"reservation_id": reservation_id, "reason": "status_changed"}
            )

        self.payments.mark_refunded(result.refund, result.cancelled_at)
        log_booking_operation(
            logger,
            "cancel_booking",
            reservation_id=reservation_id,
            room_id=reservation.room_id,
            user_id=session.user_id,
            amount=result.refund.amount,
            status=result.status.value,
        )
        return result

    # =========================================================================
    # Read
    # =========================================================================

    def get_booking(self, reservation_id: str) -> Reservation:
        """Get a reservation by ID.

        Raises:
            NotFoundError: Unknown reservation
        """
        reservation = self.db.get_reservation(reservation_id)
        if reservation is None:
            raise NotFoundError(details={"reservation_id": reservation_id})
        return reservation

    def list_user_bookings(
        self,
        session: GuestSession,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Reservation]:
        """A guest's reservations, newest first."""
        reservations = self.db.get_reservations_by_user(session.user_id)
        return reservations[offset : offset + limit]

    def booking_stats(self, session: GuestSession, today: dt.date | None = None) -> BookingStats:
        """Dashboard summary of a guest's bookings.

        total_spent sums non-cancelled reservations; upcoming counts
        non-cancelled stays that have not started yet.
        """
        today = today or _utcnow().date()
        reservations = self.db.get_reservations_by_user(session.user_id)
        active = [r for r in reservations if r.status != ReservationStatus.CANCELLED]
        return BookingStats(
            total_bookings=len(reservations),
            total_spent=sum(r.total_amount for r in active),
            upcoming_bookings=sum(1 for r in active if r.check_in >= today),
            recent_bookings=reservations[:5],
        )

    def display_status(
        self,
        reservation: Reservation,
        today: dt.date | None = None,
    ) -> ReservationDisplayStatus:
        return display_status(reservation, today or _utcnow().date())
