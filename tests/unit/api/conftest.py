"""Fixtures for API route tests.

Routes run against a MagicMock BookingService installed through
app.dependency_overrides, so no DynamoDB is involved.
"""

from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from roomrate.models import ReservationDisplayStatus
from roomrate_api.dependencies import get_booking_service
from roomrate_api.main import app


@pytest.fixture
def booking_service() -> MagicMock:
    service = MagicMock()
    service.display_status.return_value = ReservationDisplayStatus.PENDING
    service.suggest_alternative_dates.return_value = []
    return service


@pytest.fixture
def client(booking_service: MagicMock) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_booking_service] = lambda: booking_service
    yield TestClient(app)
    app.dependency_overrides.clear()
