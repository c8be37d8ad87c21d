"""
Padel club endpoints.
"""

from fastapi import APIRouter, HTTPException, Query, status

from app.clubs import CLUBS, get_club
from app.models import ClubDescriptor, ClubListResponse
from app.services.registry import registry

router = APIRouter(prefix="/api/clubs", tags=["clubs"])


@router.get(
    "",
    response_model=ClubListResponse,
    response_model_by_alias=True,
    operation_id="listClubs",
    summary="List the padel clubs known to the finder",
)
async def list_clubs(
    enabled: bool | None = Query(None, description="Only clubs with (or without) a registered adapter"),
) -> ClubListResponse:
    clubs = list(CLUBS)
    if enabled is not None:
        clubs = [c for c in clubs if (registry.get(c.id) is not None) == enabled]
    return ClubListResponse(items=clubs, count=len(clubs))


@router.get(
    "/{club_id}",
    response_model=ClubDescriptor,
    operation_id="getClub",
    summary="Get details of a specific club",
)
async def get_club_by_id(club_id: str) -> ClubDescriptor:
    club = get_club(club_id)
    if club is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Club {club_id} not found",
        )
    return club
