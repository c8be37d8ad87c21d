"""
Availability search across every club near a point.

Query parameters are taken as raw strings and checked by
``validate_search_params`` so that malformed input yields the same 400
``ErrorResponse`` whatever the offending field.
"""

from fastapi import APIRouter, Query, Request

from app.models import SearchResponse
from app.rate_limit import SEARCH, limiter
from app.services.aggregator import Aggregator, validate_search_params
from app.services.registry import registry

router = APIRouter(prefix="/api", tags=["search"])


@router.get(
    "/search",
    response_model=SearchResponse,
    response_model_by_alias=True,
    operation_id="searchSlots",
    summary="Free padel slots within a radius, sorted by start time then distance",
)
@limiter.limit(SEARCH)
async def search_slots(
    request: Request,
    date: str | None = Query(None, description="Day to search (YYYY-MM-DD)"),
    start_hour: str | None = Query(None, alias="startHour", description="First start hour (0-23)"),
    end_hour: str | None = Query(None, alias="endHour", description="Last start hour (0-23)"),
    latitude: str | None = Query(None, description="Latitude of the search centre"),
    longitude: str | None = Query(None, description="Longitude of the search centre"),
    radius: str | None = Query(None, description="Search radius in km"),
) -> SearchResponse:
    params = validate_search_params(date, start_hour, end_hour, latitude, longitude, radius)
    slots = await Aggregator(registry).search_validated(params)
    return SearchResponse(
        date=params.day.isoformat(),
        start_hour=params.hours.start_hour,
        end_hour=params.hours.end_hour,
        latitude=params.latitude,
        longitude=params.longitude,
        radius=params.radius,
        count=len(slots),
        slots=slots,
    )
