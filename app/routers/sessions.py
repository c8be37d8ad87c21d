"""
Session overview for operators (state and expiry only, never cookie values).
"""

from fastapi import APIRouter

from app.models import SessionStatus
from app.services.registry import registry

router = APIRouter(prefix="/api", tags=["sessions"])


@router.get(
    "/sessions",
    response_model=list[SessionStatus],
    response_model_by_alias=True,
    operation_id="listSessions",
    summary="State of every stored club session",
)
async def list_sessions() -> list[SessionStatus]:
    statuses = []
    for store in registry.session_stores():
        await store.get_valid()
        statuses.append(store.status())
    return statuses
