"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from srecha import __version__
from srecha.api.dependencies import get_container
from srecha.application.container import ServiceContainer
from srecha.application.dto.responses import HealthResponse
from srecha.core.exceptions import StorageError

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(
    container: ServiceContainer = Depends(get_container),
) -> HealthResponse:
    """
    Service status, uptime and database reachability.
    """
    try:
        invoices = await container.invoices.count_invoices()
        database = "ok"
    except StorageError as e:
        invoices = None
        database = f"unavailable: {e.message}"

    return HealthResponse(
        status="healthy" if invoices is not None else "degraded",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=database,
        invoices=invoices,
    )
