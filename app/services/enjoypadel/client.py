from __future__ import annotations

import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup

from app.services.enjoypadel.config import BASE_URL, CHOOSE_POP_RE, CLUB_ID, SLOT_SELECTOR
from app.services.mymobileapp import MyMobileAppClient

logger = logging.getLogger(__name__)


@dataclass
class ParsedSlot:
    date: str  # "DD/MM/YYYY" as printed by the calendar
    time: str  # "HH:MM"
    court_ids: list[str]


class EnjoyPadelClient(MyMobileAppClient):
    def __init__(self, timeout: float = 10.0) -> None:
        super().__init__(CLUB_ID, BASE_URL, timeout=timeout)

    @staticmethod
    def parse_calendar_html(html: str) -> list[ParsedSlot]:
        soup = BeautifulSoup(html, "html.parser")
        parsed: list[ParsedSlot] = []
        for button in soup.select(SLOT_SELECTOR):
            onclick = button.get("onclick") or ""
            if not onclick.startswith("choosePop("):
                continue
            match = CHOOSE_POP_RE.search(onclick)
            if match is None:
                logger.warning("Enjoy Padel: unexpected choosePop payload %r", onclick[:80])
                continue
            # The first id is a placeholder the widget always prepends.
            court_ids = [c.strip() for c in match.group("courts").split(";")[1:] if c.strip()]
            parsed.append(ParsedSlot(date=match.group("date"), time=match.group("time"), court_ids=court_ids))
        return parsed
