"""
P4 Padel Indoor (gestion-sports) integration configuration.
"""

from __future__ import annotations

from app.clubs import P4PADELINDOOR
from app.models import INDOOR

CLUB_ID = P4PADELINDOOR

BASE_URL = "https://p4-padel-indoor.gestion-sports.com"
RESERVATION_URL = f"{BASE_URL}/membre/reservation.html"
LOGIN_URL = f"{BASE_URL}/connexion.php"
RESERVATION_LINK = f"{BASE_URL}/membre/"

SPORT_ID = "1057"

# The club only answers availability queries for these start hours.
OPENING_HOUR = 8
CLOSING_HOUR = 22

# Hours either side of a requested hour for single-hour lookups.
DEFAULT_HOUR_RANGE = 3

# One POST per half hour; each gets its own short budget.
REQUEST_TIMEOUT_SECONDS = 3.0
TIMEOUT_SECONDS = 20.0

DEFAULT_DURATION_MINUTES = 90
DEFAULT_COURT_TYPE = INDOOR

# Most meaningful cookie for session lifetime
SESSION_COOKIE = "COOK_USER"

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:138.0) Gecko/20100101 Firefox/138.0",
    "Accept": "application/json, text/javascript, */*; q=0.01",
    "Accept-Language": "fr,fr-FR;q=0.8,en-US;q=0.5,en;q=0.3",
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
    "X-Requested-With": "XMLHttpRequest",
    "Origin": BASE_URL,
    "Referer": RESERVATION_URL,
}
