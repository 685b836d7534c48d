"""FastAPI application for the roomrate booking API.

Provides REST endpoints for:
- Health checks
- Room search, pricing and availability
- Reservation lifecycle (create, confirm, cancel, list)

Deployed behind API Gateway through the Mangum handler, or run locally
with uvicorn via run_server().
"""

from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from roomrate import __version__
from roomrate.config import get_settings
from roomrate.utils.logging import configure_logging, get_logger
from roomrate_api.exceptions import register_exception_handlers
from roomrate_api.middleware.correlation import CorrelationIdMiddleware
from roomrate_api.routes import health_router, reservations_router, rooms_router

settings = get_settings()
configure_logging(settings.log_level)
logger = get_logger(__name__)

app = FastAPI(
    title="Roomrate Booking API",
    description="Dynamic room pricing, availability and reservations",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

register_exception_handlers(app)

app.include_router(health_router, prefix="/api")
app.include_router(rooms_router, prefix="/api")
app.include_router(reservations_router, prefix="/api")


@app.get("/api/ping")
async def ping() -> dict[str, Any]:
    """Root liveness endpoint at /api/ping."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "roomrate-api",
    }


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 8080)
        reload: Enable hot reload for development (default: True)
    """
    import uvicorn

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run("roomrate_api.main:app", host=host, port=port, reload=True, reload_dirs=["src"])
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
