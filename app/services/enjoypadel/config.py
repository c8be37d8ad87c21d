from __future__ import annotations

import re

from app.clubs import ENJOYPADEL
from app.models import OUTDOOR

CLUB_ID = ENJOYPADEL

BASE_URL = "https://enjoypadel.mymobileapp.fr"
# No deep link exists; the club points players at its link page.
RESERVATION_LINK = "https://linktr.ee/enjoypadel"

TIMEOUT_SECONDS = 10.0
SLOT_DURATION_MINUTES = 90
DEFAULT_COURT_TYPE = OUTDOOR

SLOT_SELECTOR = "button.btn-horaires"
# choosePop('24/05/2025 18:30:00','999;1075;1076', …)
CHOOSE_POP_RE = re.compile(
    r"choosePop\(\s*'(?P<date>\d{2}/\d{2}/\d{4})\s+(?P<time>\d{1,2}:\d{2})[^']*'\s*,\s*'(?P<courts>[^']*)'"
)

# mymobileapp court id → name shown at the club
COURT_NAMES: dict[str, str] = {
    "1075": "Court 1",
    "1076": "Court 2",
    "1077": "Court 3",
    "1078": "Court 4",
}
