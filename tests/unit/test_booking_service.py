"""Unit tests for BookingService orchestration.

The store and payment services are MagicMocks; pricing, availability and
the cancellation policy are the real services.
"""

import datetime as dt
from collections.abc import Callable
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from roomrate.models import (
    BookingRequest,
    CancellationWindowClosedError,
    CapacityExceededError,
    DateRange,
    GuestSession,
    InvalidRangeError,
    InvalidReservationStateError,
    NotFoundError,
    RefundInstruction,
    Reservation,
    ReservationDisplayStatus,
    ReservationStatus,
    Room,
    RoomCategory,
    RoomInactiveError,
    RoomNoLongerAvailableError,
    StayTooLongError,
    UnauthorizedError,
)
from roomrate.services.availability import AvailabilityService
from roomrate.services.booking import (
    MAX_STAY_NIGHTS,
    BookingService,
    display_status,
    generate_reservation_id,
)
from roomrate.services.cancellation import CancellationPolicyService
from roomrate.services.pricing import PricingService

NOW = dt.datetime(2025, 2, 1, 9, 0, tzinfo=dt.UTC)


@pytest.fixture
def db() -> MagicMock:
    mock = MagicMock()
    mock.get_reservations_for_room.return_value = []
    mock.create_reservation.return_value = True
    mock.cancel_reservation.return_value = True
    return mock


@pytest.fixture
def payments() -> MagicMock:
    return MagicMock()


@pytest.fixture
def service(db: MagicMock, payments: MagicMock) -> BookingService:
    return BookingService(
        db=db,
        pricing=PricingService(),
        availability=AvailabilityService(),
        cancellation=CancellationPolicyService(),
        payments=payments,
    )


def _request(**overrides) -> BookingRequest:
    data = {
        "room_id": "room-101",
        "check_in": dt.date(2025, 3, 7),
        "check_out": dt.date(2025, 3, 9),
        "guests": 2,
    }
    data.update(overrides)
    return BookingRequest(**data)


class TestGenerateReservationId:
    def test_format(self) -> None:
        reservation_id = generate_reservation_id(NOW)

        assert reservation_id.startswith("RES-2025-")
        assert len(reservation_id.split("-")[2]) == 8


class TestCreateBooking:
    def test_creates_pending_reservation_with_grand_total(
        self,
        service: BookingService,
        db: MagicMock,
        payments: MagicMock,
        session: GuestSession,
        standard_room: Room,
    ) -> None:
        db.get_room.return_value = standard_room

        reservation = service.create_booking(session, _request(), now=NOW)

        assert reservation.status == ReservationStatus.PENDING
        assert reservation.total_amount == 316
        assert reservation.user_id == session.user_id
        assert reservation.guest_name == "Test Guest"
        assert reservation.guest_email == "guest@example.com"
        assert reservation.created_at == NOW
        db.create_reservation.assert_called_once_with(reservation)
        payments.create_pending.assert_called_once_with(reservation, NOW)

    def test_request_guest_details_take_precedence(
        self,
        service: BookingService,
        db: MagicMock,
        session: GuestSession,
        standard_room: Room,
    ) -> None:
        db.get_room.return_value = standard_room

        reservation = service.create_booking(
            session, _request(guest_name="Ana Lima", guest_phone="+351 900 000 000"), now=NOW
        )

        assert reservation.guest_name == "Ana Lima"
        assert reservation.guest_phone == "+351 900 000 000"

    def test_commit_time_conflict_creates_nothing(
        self,
        service: BookingService,
        db: MagicMock,
        payments: MagicMock,
        session: GuestSession,
        standard_room: Room,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        db.get_room.return_value = standard_room
        db.get_reservations_for_room.return_value = [
            make_reservation(check_in=dt.date(2025, 3, 8), check_out=dt.date(2025, 3, 10))
        ]

        with pytest.raises(RoomNoLongerAvailableError):
            service.create_booking(session, _request(), now=NOW)

        db.create_reservation.assert_not_called()
        payments.create_pending.assert_not_called()

    def test_lost_transaction_raises_room_no_longer_available(
        self,
        service: BookingService,
        db: MagicMock,
        payments: MagicMock,
        session: GuestSession,
        standard_room: Room,
    ) -> None:
        db.get_room.return_value = standard_room
        db.create_reservation.return_value = False

        with pytest.raises(RoomNoLongerAvailableError) as exc_info:
            service.create_booking(session, _request(), now=NOW)

        assert exc_info.value.details == {"room_id": "room-101", "reason": "booking_conflict"}
        payments.create_pending.assert_not_called()

    def test_cancelled_reservation_does_not_block(
        self,
        service: BookingService,
        db: MagicMock,
        session: GuestSession,
        standard_room: Room,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        db.get_room.return_value = standard_room
        db.get_reservations_for_room.return_value = [
            make_reservation(
                check_in=dt.date(2025, 3, 7),
                check_out=dt.date(2025, 3, 9),
                status=ReservationStatus.CANCELLED,
            )
        ]

        reservation = service.create_booking(session, _request(), now=NOW)

        assert reservation.status == ReservationStatus.PENDING

    def test_invalid_range_checked_before_lookup(
        self, service: BookingService, db: MagicMock, session: GuestSession
    ) -> None:
        with pytest.raises(InvalidRangeError):
            service.create_booking(
                session, _request(check_out=dt.date(2025, 3, 7)), now=NOW
            )

        db.get_room.assert_not_called()

    def test_unknown_room(self, service: BookingService, db: MagicMock, session: GuestSession) -> None:
        db.get_room.return_value = None

        with pytest.raises(NotFoundError):
            service.create_booking(session, _request(), now=NOW)

    def test_inactive_room(
        self, service: BookingService, db: MagicMock, session: GuestSession, standard_room: Room
    ) -> None:
        db.get_room.return_value = standard_room.model_copy(update={"is_active": False})

        with pytest.raises(RoomInactiveError):
            service.create_booking(session, _request(), now=NOW)

    def test_capacity_exceeded(
        self, service: BookingService, db: MagicMock, session: GuestSession, standard_room: Room
    ) -> None:
        db.get_room.return_value = standard_room

        with pytest.raises(CapacityExceededError) as exc_info:
            service.create_booking(session, _request(guests=3), now=NOW)

        assert exc_info.value.details == {"room_id": "room-101", "requested": "3", "capacity": "2"}
        db.create_reservation.assert_not_called()

    def test_stay_over_limit_is_refused_before_commit(
        self, service: BookingService, db: MagicMock, payments: MagicMock, session: GuestSession, standard_room: Room
    ) -> None:
        db.get_room.return_value = standard_room
        check_in = dt.date(2030, 1, 1)

        with pytest.raises(StayTooLongError) as exc_info:
            service.create_booking(
                session,
                _request(check_in=check_in, check_out=check_in + dt.timedelta(days=MAX_STAY_NIGHTS + 1)),
                now=NOW,
            )

        assert exc_info.value.details == {"nights": str(MAX_STAY_NIGHTS + 1), "max_nights": str(MAX_STAY_NIGHTS)}
        db.create_reservation.assert_not_called()
        payments.create_pending.assert_not_called()

    def test_stay_at_limit_is_committed(
        self, service: BookingService, db: MagicMock, session: GuestSession, standard_room: Room
    ) -> None:
        db.get_room.return_value = standard_room
        check_in = dt.date(2030, 1, 1)

        reservation = service.create_booking(
            session,
            _request(check_in=check_in, check_out=check_in + dt.timedelta(days=MAX_STAY_NIGHTS)),
            now=NOW,
        )

        assert reservation.nights == MAX_STAY_NIGHTS
        db.create_reservation.assert_called_once_with(reservation)


class TestSearchAndQuote:
    def test_search_filters_capacity_conflicts_and_sorts_by_total(
        self,
        service: BookingService,
        db: MagicMock,
        standard_room: Room,
        suite_room: Room,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        small = Room(room_id="room-001", category=RoomCategory.STANDARD, base_price=Decimal("60"), capacity=1)
        booked = Room(room_id="room-002", category=RoomCategory.DELUXE, base_price=Decimal("90"), capacity=2)
        db.list_rooms.return_value = [suite_room, small, booked, standard_room]
        db.get_reservations_for_room.side_effect = lambda room_id: (
            [make_reservation(room_id="room-002", check_in=dt.date(2025, 3, 7), check_out=dt.date(2025, 3, 8))]
            if room_id == "room-002"
            else []
        )

        quotes = service.search_rooms(
            DateRange(check_in=dt.date(2025, 3, 7), check_out=dt.date(2025, 3, 9)), guests=2
        )

        assert [q.room.room_id for q in quotes] == ["room-101", "room-301"]
        assert quotes[0].pricing.grand_total == 316
        db.list_rooms.assert_called_once_with(active_only=True)

    def test_search_category_filter_is_case_insensitive(
        self,
        service: BookingService,
        db: MagicMock,
        standard_room: Room,
        suite_room: Room,
    ) -> None:
        db.list_rooms.return_value = [standard_room, suite_room]

        quotes = service.search_rooms(
            DateRange(check_in=dt.date(2025, 3, 7), check_out=dt.date(2025, 3, 9)),
            guests=1,
            category="suite",
        )

        assert [q.room.room_id for q in quotes] == ["room-301"]

    def test_quote_unknown_room(self, service: BookingService, db: MagicMock) -> None:
        db.get_room.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            service.quote("room-404", DateRange(check_in=dt.date(2025, 3, 7), check_out=dt.date(2025, 3, 9)))

        assert exc_info.value.details == {"room_id": "room-404"}

    def test_search_and_quote_refuse_stays_over_limit(self, service: BookingService, db: MagicMock) -> None:
        check_in = dt.date(2030, 1, 1)
        stay = DateRange(check_in=check_in, check_out=check_in + dt.timedelta(days=120))

        with pytest.raises(StayTooLongError):
            service.search_rooms(stay, guests=2)
        with pytest.raises(StayTooLongError):
            service.quote("room-101", stay)

        db.list_rooms.assert_not_called()
        db.get_room.assert_not_called()

    def test_check_room_availability(
        self,
        service: BookingService,
        db: MagicMock,
        standard_room: Room,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        db.get_room.return_value = standard_room
        db.get_reservations_for_room.return_value = [make_reservation()]

        result = service.check_room_availability(
            "room-101", DateRange(check_in=dt.date(2025, 7, 4), check_out=dt.date(2025, 7, 8))
        )

        assert result.available is False
        assert result.conflicts == 1


class TestConfirmPayment:
    def test_pending_becomes_confirmed(
        self,
        service: BookingService,
        db: MagicMock,
        payments: MagicMock,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        pending = make_reservation(status=ReservationStatus.PENDING)
        confirmed = pending.model_copy(update={"status": ReservationStatus.CONFIRMED})
        db.get_reservation.return_value = pending
        db.transition_reservation_status.return_value = confirmed

        result = service.confirm_payment(pending.reservation_id, now=NOW)

        assert result.status == ReservationStatus.CONFIRMED
        db.transition_reservation_status.assert_called_once_with(
            pending.reservation_id, ReservationStatus.PENDING, ReservationStatus.CONFIRMED, NOW
        )
        payments.mark_completed.assert_called_once_with(pending.reservation_id, NOW)

    @pytest.mark.parametrize("status", [ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED])
    def test_only_pending_can_be_confirmed(
        self,
        service: BookingService,
        db: MagicMock,
        make_reservation: Callable[..., Reservation],
        status: ReservationStatus,
    ) -> None:
        db.get_reservation.return_value = make_reservation(status=status)

        with pytest.raises(InvalidReservationStateError):
            service.confirm_payment("RES-2025-AAAA0001", now=NOW)

        db.transition_reservation_status.assert_not_called()

    def test_concurrent_status_change(
        self,
        service: BookingService,
        db: MagicMock,
        payments: MagicMock,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        db.get_reservation.return_value = make_reservation(status=ReservationStatus.PENDING)
        db.transition_reservation_status.return_value = None

        with pytest.raises(InvalidReservationStateError):
            service.confirm_payment("RES-2025-AAAA0001", now=NOW)

        payments.mark_completed.assert_not_called()

    def test_unknown_reservation(self, service: BookingService, db: MagicMock) -> None:
        db.get_reservation.return_value = None

        with pytest.raises(NotFoundError):
            service.confirm_payment("RES-NOPE", now=NOW)


class TestCancelBooking:
    def test_cancels_and_refunds(
        self,
        service: BookingService,
        db: MagicMock,
        payments: MagicMock,
        session: GuestSession,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        reservation = make_reservation(total_amount=700)
        db.get_reservation.return_value = reservation

        result = service.cancel_booking(session, reservation.reservation_id, now=NOW)

        assert result.status == ReservationStatus.CANCELLED
        db.cancel_reservation.assert_called_once_with(reservation, NOW)
        payments.mark_refunded.assert_called_once_with(
            RefundInstruction(reservation_id=reservation.reservation_id, amount=700), NOW
        )

    def test_other_guest_is_unauthorized(
        self,
        service: BookingService,
        db: MagicMock,
        other_session: GuestSession,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        db.get_reservation.return_value = make_reservation()

        with pytest.raises(UnauthorizedError):
            service.cancel_booking(other_session, "RES-2025-AAAA0001", now=NOW)

        db.cancel_reservation.assert_not_called()

    def test_inside_cutoff_leaves_reservation_untouched(
        self,
        service: BookingService,
        db: MagicMock,
        payments: MagicMock,
        session: GuestSession,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        db.get_reservation.return_value = make_reservation()

        with pytest.raises(CancellationWindowClosedError):
            service.cancel_booking(
                session, "RES-2025-AAAA0001", now=dt.datetime(2025, 6, 30, 12, tzinfo=dt.UTC)
            )

        db.cancel_reservation.assert_not_called()
        payments.mark_refunded.assert_not_called()

    def test_concurrent_cancel_is_rejected(
        self,
        service: BookingService,
        db: MagicMock,
        payments: MagicMock,
        session: GuestSession,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        db.get_reservation.return_value = make_reservation()
        db.cancel_reservation.return_value = False

        with pytest.raises(InvalidReservationStateError):
            service.cancel_booking(session, "RES-2025-AAAA0001", now=NOW)

        payments.mark_refunded.assert_not_called()


class TestReads:
    def test_list_user_bookings_paginates(
        self,
        service: BookingService,
        db: MagicMock,
        session: GuestSession,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        reservations = [make_reservation(reservation_id=f"RES-{i}") for i in range(5)]
        db.get_reservations_by_user.return_value = reservations

        page = service.list_user_bookings(session, limit=2, offset=1)

        assert [r.reservation_id for r in page] == ["RES-1", "RES-2"]
        db.get_reservations_by_user.assert_called_once_with(session.user_id)

    def test_booking_stats(
        self,
        service: BookingService,
        db: MagicMock,
        session: GuestSession,
        make_reservation: Callable[..., Reservation],
    ) -> None:
        db.get_reservations_by_user.return_value = [
            make_reservation(reservation_id="RES-1", total_amount=300, check_in=dt.date(2025, 8, 1), check_out=dt.date(2025, 8, 3)),
            make_reservation(reservation_id="RES-2", total_amount=200, check_in=dt.date(2025, 5, 1), check_out=dt.date(2025, 5, 3)),
            make_reservation(
                reservation_id="RES-3",
                total_amount=900,
                check_in=dt.date(2025, 9, 1),
                check_out=dt.date(2025, 9, 3),
                status=ReservationStatus.CANCELLED,
            ),
        ]

        stats = service.booking_stats(session, today=dt.date(2025, 6, 1))

        assert stats.total_bookings == 3
        assert stats.total_spent == 500
        assert stats.upcoming_bookings == 1
        assert [r.reservation_id for r in stats.recent_bookings] == ["RES-1", "RES-2", "RES-3"]

    def test_get_booking_unknown(self, service: BookingService, db: MagicMock) -> None:
        db.get_reservation.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            service.get_booking("RES-NOPE")

        assert exc_info.value.details == {"reservation_id": "RES-NOPE"}


class TestDisplayStatus:
    def test_confirmed_past_stay_is_completed(
        self, make_reservation: Callable[..., Reservation]
    ) -> None:
        reservation = make_reservation(check_out=dt.date(2025, 7, 5))

        assert display_status(reservation, dt.date(2025, 7, 5)) == ReservationDisplayStatus.COMPLETED
        assert display_status(reservation, dt.date(2025, 7, 4)) == ReservationDisplayStatus.CONFIRMED

    def test_cancelled_stays_cancelled(self, make_reservation: Callable[..., Reservation]) -> None:
        reservation = make_reservation(status=ReservationStatus.CANCELLED)

        assert display_status(reservation, dt.date(2026, 1, 1)) == ReservationDisplayStatus.CANCELLED

    def test_pending_past_stay_stays_pending(
        self, make_reservation: Callable[..., Reservation]
    ) -> None:
        reservation = make_reservation(status=ReservationStatus.PENDING)

        assert display_status(reservation, dt.date(2026, 1, 1)) == ReservationDisplayStatus.PENDING
