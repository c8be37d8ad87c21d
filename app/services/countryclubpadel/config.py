"""
Country Club Padel (openresa, login required) integration configuration.
"""

from __future__ import annotations

import re

from app.clubs import COUNTRYCLUBPADEL

CLUB_ID = COUNTRYCLUBPADEL

CLUB_URL = "https://openresa.com/club/countryclubpadel"
DAY_URL = "https://openresa.com/reservation/day"
BOOK_URL = "https://openresa.com/reservation/book?slot={slot_id}"
RESERVATION_LINK = CLUB_URL

TIMEOUT_SECONDS = 20.0
REQUEST_TIMEOUT_SECONDS = 15.0

# Openresa does not report a usable cookie expiry for this club.
SESSION_TTL_DAYS = 30
REMEMBER_SELECTOR = "input[name=remember]"

FALLBACK_COURT = "Terrain non spécifié"

FREE_SLOT_SELECTOR = ".slot.slot-free"
# Older markup only exposes booking links.
FALLBACK_SLOT_SELECTOR = 'a[href*="reservation/book"], a[href*="slot"]'

TIME_RE = re.compile(r"\d{1,2}[h:]\d{0,2}")
COURT_RE = re.compile(r"(P\d+|T\d+|Court \d+|Terrain [A-Za-z\s\d]+)", re.IGNORECASE)
PRICE_RE = re.compile(r"(\d+(?:[,.]\d{2})?)\s*€")
SLOT_ID_RE = re.compile(r"slot=(\d+)")

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:138.0) Gecko/20100101 Firefox/138.0",
    "Accept": "*/*",
    "Accept-Language": "fr,fr-FR;q=0.8,en-US;q=0.5,en;q=0.3",
    "Referer": "https://openresa.com/reservation/",
    "X-Requested-With": "XMLHttpRequest",
}
