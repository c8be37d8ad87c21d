from __future__ import annotations

import logging
from datetime import date

import httpx
from pydantic import ValidationError

from app.services.complexepadel.api_models import SlotsResponse
from app.services.complexepadel.config import (
    CLUB_ID,
    DEFAULT_HEADERS,
    REQUEST_TIMEOUT_SECONDS,
    SLOT_DURATION_SECONDS,
    SLOTS_URL,
    CourtService,
)
from app.services.errors import UpstreamError

logger = logging.getLogger(__name__)


class ComplexePadelClient:
    """Async HTTP client for the Amelia booking endpoint."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT_SECONDS) -> None:
        self._client = httpx.AsyncClient(headers=DEFAULT_HEADERS, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_free_times(self, service: CourtService, day: date) -> list[str]:
        """Start times (``HH:MM``) with at least one free provider for *service* on *day*."""
        params = {
            "action": "wpamelia_api",
            "call": "/slots",
            "serviceId": service.service_id,
            "serviceDuration": SLOT_DURATION_SECONDS,
            "providerIds": service.provider_id,
            "group": 1,
            "page": "booking",
            "persons": 1,
            "date": day.isoformat(),
        }
        logger.debug("Amelia slots request: service=%s date=%s", service.service_id, day)
        try:
            resp = await self._client.get(SLOTS_URL, params=params)
            resp.raise_for_status()
            payload = SlotsResponse.model_validate(resp.json())
        except httpx.HTTPError as exc:
            raise UpstreamError(CLUB_ID, f"slots request failed: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise UpstreamError(CLUB_ID, f"unexpected slots payload: {exc}") from exc

        return self.free_times(payload, day)

    @staticmethod
    def free_times(payload: SlotsResponse, day: date) -> list[str]:
        by_time = payload.slot_map().get(day.isoformat(), {})
        return [time for time, providers in by_time.items() if providers]
