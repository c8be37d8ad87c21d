from __future__ import annotations

import re

from app.clubs import PADELTWINS
from app.models import OUTDOOR

CLUB_ID = PADELTWINS

BASE_URL = "https://padeltwins.mymobileapp.fr"
RESERVATION_LINK = f"{BASE_URL}/"

TIMEOUT_SECONDS = 10.0
SLOT_DURATION_MINUTES = 90

# All courts are outdoor; the calendar only reports how many are free.
DEFAULT_COURT_TYPE = OUTDOOR

FREE_SLOT_SELECTOR = ".btn-success.btn-horaires"
TIME_RE = re.compile(r"(\d{1,2})h(\d{2})")
# e.g. "3 Terrains | Dès 48"
TERRAINS_RE = re.compile(r"(\d+)\s*Terrains?\s*\|\s*Dès\s*(\d+)")
