"""
Liveness probe; also reports how many club integrations are registered.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.config import VERSION
from app.models import HealthResponse
from app.services.registry import registry

router = APIRouter(prefix="/api", tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    operation_id="getHealth",
    summary="Service liveness and number of active club adapters",
)
async def get_health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=VERSION,
        timestamp=datetime.now(timezone.utc),
        adapters=len(registry.adapters()),
    )
