"""Unit tests for DynamoDBService against moto.

Focus on the room-night locks: a reservation and its nights are written in
one transaction, and cancelling releases exactly that reservation's nights.
"""

import datetime as dt
from collections.abc import Callable
from decimal import Decimal

import pytest

from roomrate.config import Settings
from roomrate.models import Reservation, ReservationStatus, Room, RoomCategory
from roomrate.services.dynamodb import ROOMS_TABLE, DynamoDBService

CANCELLED_AT = dt.datetime(2025, 6, 2, 10, 0, tzinfo=dt.UTC)


class TestTableNames:
    def test_prefix_from_settings(self, db: DynamoDBService) -> None:
        assert db._table_name(ROOMS_TABLE) == "test-roomrate-rooms"

    def test_default_prefix_uses_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DYNAMODB_TABLE_PREFIX", raising=False)

        settings = Settings(_env_file=None, environment="prod")

        assert settings.dynamodb_table_prefix == "roomrate-prod"


class TestRooms:
    def test_round_trip_room(self, db: DynamoDBService, standard_room: Room) -> None:
        db.put_room(standard_room)

        assert db.get_room(standard_room.room_id) == standard_room
        assert db.get_room("room-missing") is None

    def test_list_rooms_skips_inactive(self, db: DynamoDBService, standard_room: Room, suite_room: Room) -> None:
        inactive = Room(
            room_id="room-000",
            category=RoomCategory.DELUXE,
            base_price=Decimal("80.50"),
            capacity=2,
            is_active=False,
        )
        for room in (suite_room, inactive, standard_room):
            db.put_room(room)

        assert [r.room_id for r in db.list_rooms()] == ["room-101", "room-301"]
        assert [r.room_id for r in db.list_rooms(active_only=False)] == ["room-000", "room-101", "room-301"]

    def test_string_is_active_flag(self, db: DynamoDBService) -> None:
        db.put_item(
            ROOMS_TABLE,
            {
                "room_id": "room-legacy",
                "category": "Villa",
                "base_price": Decimal("400"),
                "capacity": 6,
                "is_active": "false",
            },
        )

        room = db.get_room("room-legacy")

        assert room is not None
        assert room.is_active is False


class TestCreateReservation:
    def test_stores_reservation_and_locks_nights(
        self, db: DynamoDBService, make_reservation: Callable[..., Reservation]
    ) -> None:
        reservation = make_reservation(status=ReservationStatus.PENDING, guest_name="Ana Lima")

        assert db.create_reservation(reservation) is True

        assert db.get_reservation(reservation.reservation_id) == reservation
        assert db.get_booked_nights("room-101") == {
            "2025-07-01": reservation.reservation_id,
            "2025-07-02": reservation.reservation_id,
            "2025-07-03": reservation.reservation_id,
            "2025-07-04": reservation.reservation_id,
        }

    def test_overlapping_commit_fails_atomically(
        self, db: DynamoDBService, make_reservation: Callable[..., Reservation]
    ) -> None:
        first = make_reservation(reservation_id="RES-FIRST")
        second = make_reservation(
            reservation_id="RES-SECOND",
            check_in=dt.date(2025, 7, 4),
            check_out=dt.date(2025, 7, 8),
        )

        assert db.create_reservation(first) is True
        assert db.create_reservation(second) is False

        assert db.get_reservation("RES-SECOND") is None
        nights = db.get_booked_nights("room-101")
        assert "2025-07-05" not in nights
        assert nights["2025-07-04"] == "RES-FIRST"

    def test_back_to_back_commits_succeed(
        self, db: DynamoDBService, make_reservation: Callable[..., Reservation]
    ) -> None:
        first = make_reservation(reservation_id="RES-FIRST")
        second = make_reservation(
            reservation_id="RES-SECOND",
            check_in=dt.date(2025, 7, 5),
            check_out=dt.date(2025, 7, 7),
        )

        assert db.create_reservation(first) is True
        assert db.create_reservation(second) is True

    def test_same_nights_in_other_room_succeed(
        self, db: DynamoDBService, make_reservation: Callable[..., Reservation]
    ) -> None:
        assert db.create_reservation(make_reservation(reservation_id="RES-A")) is True
        assert db.create_reservation(make_reservation(reservation_id="RES-B", room_id="room-301")) is True


class TestCancelReservation:
    def test_marks_cancelled_and_releases_nights(
        self, db: DynamoDBService, make_reservation: Callable[..., Reservation]
    ) -> None:
        reservation = make_reservation()
        db.create_reservation(reservation)

        assert db.cancel_reservation(reservation, CANCELLED_AT) is True

        stored = db.get_reservation(reservation.reservation_id)
        assert stored is not None
        assert stored.status == ReservationStatus.CANCELLED
        assert stored.cancelled_at == CANCELLED_AT
        assert db.get_booked_nights("room-101") == {}

    def test_second_cancel_fails(
        self, db: DynamoDBService, make_reservation: Callable[..., Reservation]
    ) -> None:
        reservation = make_reservation()
        db.create_reservation(reservation)
        db.cancel_reservation(reservation, CANCELLED_AT)

        assert db.cancel_reservation(reservation, CANCELLED_AT) is False


class TestStatusTransition:
    def test_conditional_transition(
        self, db: DynamoDBService, make_reservation: Callable[..., Reservation]
    ) -> None:
        reservation = make_reservation(status=ReservationStatus.PENDING)
        db.create_reservation(reservation)

        confirmed = db.transition_reservation_status(
            reservation.reservation_id,
            ReservationStatus.PENDING,
            ReservationStatus.CONFIRMED,
            CANCELLED_AT,
        )
        again = db.transition_reservation_status(
            reservation.reservation_id,
            ReservationStatus.PENDING,
            ReservationStatus.CONFIRMED,
            CANCELLED_AT,
        )

        assert confirmed is not None
        assert confirmed.status == ReservationStatus.CONFIRMED
        assert confirmed.updated_at == CANCELLED_AT
        assert again is None


class TestReservationQueries:
    def test_by_room_and_user(
        self, db: DynamoDBService, make_reservation: Callable[..., Reservation]
    ) -> None:
        older = make_reservation(reservation_id="RES-OLD")
        newer = make_reservation(
            reservation_id="RES-NEW",
            check_in=dt.date(2025, 8, 1),
            check_out=dt.date(2025, 8, 2),
            created_at=dt.datetime(2025, 6, 5, tzinfo=dt.UTC),
        )
        elsewhere = make_reservation(reservation_id="RES-OTHER", room_id="room-301", user_id="user-0002")
        for reservation in (older, newer, elsewhere):
            db.create_reservation(reservation)

        assert {r.reservation_id for r in db.get_reservations_for_room("room-101")} == {"RES-OLD", "RES-NEW"}
        assert [r.reservation_id for r in db.get_reservations_by_user("user-0001")] == ["RES-NEW", "RES-OLD"]
