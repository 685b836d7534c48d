"""API routes package.

Routers are organized by domain and registered in main.py under /api:

- health: Health check endpoints
- rooms: Room search, pricing and availability
- reservations: Booking lifecycle
"""

from roomrate_api.routes.health import router as health_router
from roomrate_api.routes.reservations import router as reservations_router
from roomrate_api.routes.rooms import router as rooms_router

__all__ = [
    "health_router",
    "reservations_router",
    "rooms_router",
]
