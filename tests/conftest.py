"""Pytest configuration and fixtures for roomrate tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto
- Sample rooms, reservations and guest sessions
- Reset of cached settings and service singletons
"""

import datetime as dt
import os
from collections.abc import Callable, Generator
from decimal import Decimal
from typing import Any

import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-roomrate")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from roomrate.config import reset_settings_cache  # noqa: E402
from roomrate.models import (  # noqa: E402
    GuestSession,
    Reservation,
    ReservationStatus,
    Room,
    RoomCategory,
)
from roomrate.services.dynamodb import DynamoDBService  # noqa: E402
from roomrate_api.dependencies import reset_services  # noqa: E402

TEST_USER_ID = "user-0001"
OTHER_USER_ID = "user-0002"


# === Singleton Reset ===


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset cached settings, services and the DynamoDB singleton.

    Tests using mock_aws get a fresh service instance inside the mock
    context rather than reusing one from a previous test.
    """
    reset_settings_cache()
    reset_services()
    yield
    reset_settings_cache()
    reset_services()


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"


@pytest.fixture
def db(aws_credentials: None) -> Generator[DynamoDBService, None, None]:
    """DynamoDBService backed by moto with all tables created."""
    with mock_aws():
        service = DynamoDBService()
        service.create_tables()
        yield service


# === Sample Data Fixtures ===


@pytest.fixture
def session() -> GuestSession:
    return GuestSession(user_id=TEST_USER_ID, email="guest@example.com", full_name="Test Guest")


@pytest.fixture
def other_session() -> GuestSession:
    return GuestSession(user_id=OTHER_USER_ID)


@pytest.fixture
def standard_room() -> Room:
    return Room(
        room_id="room-101",
        hotel_id="hotel-1",
        room_number="101",
        category=RoomCategory.STANDARD,
        base_price=Decimal("100"),
        capacity=2,
    )


@pytest.fixture
def suite_room() -> Room:
    return Room(
        room_id="room-301",
        hotel_id="hotel-1",
        room_number="301",
        category=RoomCategory.SUITE,
        base_price=Decimal("250"),
        capacity=4,
    )


@pytest.fixture
def make_reservation() -> Callable[..., Reservation]:
    """Factory for reservations with sensible defaults."""

    def _make(**overrides: Any) -> Reservation:
        data: dict[str, Any] = {
            "reservation_id": "RES-2025-AAAA0001",
            "room_id": "room-101",
            "user_id": TEST_USER_ID,
            "check_in": dt.date(2025, 7, 1),
            "check_out": dt.date(2025, 7, 5),
            "status": ReservationStatus.CONFIRMED,
            "guests": 2,
            "total_amount": 500,
            "created_at": dt.datetime(2025, 6, 1, 12, 0, tzinfo=dt.UTC),
        }
        data.update(overrides)
        return Reservation(**data)

    return _make
