"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter

from roomrate import __version__
from roomrate.config import get_settings
from roomrate_api.models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        version=__version__,
        environment=get_settings().environment,
        timestamp=datetime.now(UTC).isoformat(),
    )
