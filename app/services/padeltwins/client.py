from __future__ import annotations

import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup

from app.services.mymobileapp import MyMobileAppClient
from app.services.padeltwins.config import BASE_URL, CLUB_ID, FREE_SLOT_SELECTOR, TERRAINS_RE, TIME_RE

logger = logging.getLogger(__name__)


@dataclass
class ParsedSlot:
    time: str  # "HH:MM"
    free_courts: int
    price: int | None


class PadelTwinsClient(MyMobileAppClient):
    def __init__(self, timeout: float = 10.0) -> None:
        super().__init__(CLUB_ID, BASE_URL, timeout=timeout)

    @staticmethod
    def parse_calendar_html(html: str) -> list[ParsedSlot]:
        soup = BeautifulSoup(html, "html.parser")
        parsed: list[ParsedSlot] = []
        for button in soup.select(FREE_SLOT_SELECTOR):
            heading = button.select_one("h1")
            match = TIME_RE.search(heading.get_text(strip=True)) if heading else None
            if match is None:
                logger.warning("Padel Twins slot button without a readable time")
                continue
            hours, minutes = int(match.group(1)), int(match.group(2))

            info = button.select_one("small small")
            terrains = TERRAINS_RE.search(info.get_text(" ", strip=True)) if info else None
            parsed.append(
                ParsedSlot(
                    time=f"{hours:02d}:{minutes:02d}",
                    free_courts=int(terrains.group(1)) if terrains else 1,
                    price=int(terrains.group(2)) if terrains else None,
                )
            )
        return parsed
