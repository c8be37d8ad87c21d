"""
Integration status: latest health-check result per club.
"""

from fastapi import APIRouter

from app.models import ClubHealth
from app.services.health_checker import health_checker

router = APIRouter(prefix="/api", tags=["status"])


@router.get(
    "/status",
    response_model=list[ClubHealth],
    response_model_by_alias=True,
    operation_id="getStatus",
    summary="Health of every club integration",
)
async def get_status() -> list[ClubHealth]:
    return health_checker.status()
