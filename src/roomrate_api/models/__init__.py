"""API request/response models.

Domain models live in roomrate.models; these cover HTTP-specific shapes only.
"""

from .common import HealthResponse
from .reservations import (
    ReservationCreateRequest,
    ReservationListResponse,
    ReservationResponse,
)
from .rooms import RoomAvailabilityResponse, RoomSearchResponse

__all__ = [
    "HealthResponse",
    "ReservationCreateRequest",
    "ReservationListResponse",
    "ReservationResponse",
    "RoomAvailabilityResponse",
    "RoomSearchResponse",
]
