"""
CanarIAgentic Web - Health Check Route
======================================

What:  Liveness endpoint for the hosting platform and uptime monitors.
How:   Answers without touching Supabase. A missing store does not make the
       site unhealthy (submissions fall back to the log), so it is reported
       as a flag rather than a status.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from canariagentic import __version__
from canariagentic.config import settings
from canariagentic.schemas.submissions import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        service=settings.service_name,
        version=__version__,
        store_configured=settings.store_configured,
    )
