"""
Direct P4 Padel Indoor lookup around a single hour.
"""

from datetime import date

from fastapi import APIRouter, HTTPException, Request, status

from app.clubs import P4PADELINDOOR
from app.models import P4SlotsRequest, P4SlotsResponse
from app.rate_limit import DEFAULT, limiter
from app.services.errors import ConfigurationError, UpstreamError
from app.services.registry import registry

router = APIRouter(prefix="/api/p4", tags=["p4"])


@router.post(
    "/slots",
    response_model=P4SlotsResponse,
    response_model_by_alias=True,
    operation_id="getP4Slots",
    summary="P4 Padel Indoor slots within three hours of the given hour",
)
@limiter.limit(DEFAULT)
async def get_p4_slots(request: Request, body: P4SlotsRequest) -> P4SlotsResponse:
    try:
        adapter = registry.require(P4PADELINDOOR)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))

    try:
        day = date.fromisoformat(body.date)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid date {body.date}")

    try:
        slots = await adapter.fetch_around(day, body.hour)
    except UpstreamError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return P4SlotsResponse(date=body.date, hour=body.hour, count=len(slots), slots=slots)
