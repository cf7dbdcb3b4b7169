"""
Showcase API: Health Check Route
===================================

What:  Health check endpoint for monitoring and container probes.
How:   Pings the document store and reports the result with uptime.
Who:   Called by Docker health checks and uptime monitors.

Status levels:
    - healthy:    store answers a ping
    - unhealthy:  store never connected or stopped answering

The endpoint always answers HTTP 200, in line with the rest of the API;
monitors read the `status` field.
"""

import logging
import time

from fastapi import APIRouter, Depends

from showcase import __version__
from showcase.database import Store, get_store
from showcase.schemas.envelope import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module load time, for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(store: Store = Depends(get_store)) -> HealthResponse:
    db_status = "connected" if await store.ping() else "disconnected"
    overall = "healthy" if db_status == "connected" else "unhealthy"
    if overall != "healthy":
        logger.warning("Health check: store unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
