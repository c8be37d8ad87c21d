"""
Complexe Padel integration configuration.

The club books through the Amelia WordPress plugin; its public AJAX
endpoint returns free start times per "service" (one service per court).
"""

from __future__ import annotations

from dataclasses import dataclass

from app.clubs import COMPLEXEPADEL
from app.models import INDOOR, OUTDOOR, CourtType

CLUB_ID = COMPLEXEPADEL

BASE_URL = "https://www.lecomplexe-salon.com"
SLOTS_URL = f"{BASE_URL}/wp-admin/admin-ajax.php"
RESERVATION_URL = f"{BASE_URL}/padel/?service={{service_id}}&date={{date}}&time={{time}}"

# Each service is fetched concurrently; this bounds the whole fan-out.
TIMEOUT_SECONDS = 10.0
REQUEST_TIMEOUT_SECONDS = 5.0

# Upper bound on slots returned per query, earliest first.
MAX_RESULTS = 30

SLOT_DURATION_SECONDS = 5400


@dataclass(frozen=True)
class CourtService:
    """An Amelia service and its provider – effectively one court."""
    service_id: int
    provider_id: int
    name: str
    court_type: CourtType

    @property
    def price(self) -> int:
        # Per-player price
        return 14 if self.court_type == INDOOR else 12


SERVICES: tuple[CourtService, ...] = (
    CourtService(service_id=8, provider_id=6, name="Terrain vert", court_type=OUTDOOR),
    CourtService(service_id=7, provider_id=5, name="Terrain bleu", court_type=OUTDOOR),
    CourtService(service_id=9, provider_id=2306, name="Chiquita", court_type=INDOOR),
    CourtService(service_id=10, provider_id=2307, name="Viboja", court_type=INDOOR),
    CourtService(service_id=11, provider_id=2308, name="Central", court_type=INDOOR),
)

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (compatible; PadelSlotFinder/0.1)",
    "Accept": "application/json, text/javascript, */*; q=0.01",
    "X-Requested-With": "XMLHttpRequest",
    "Referer": f"{BASE_URL}/padel/",
}
