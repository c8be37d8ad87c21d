"""
Padel Gentle integration configuration.

The club embeds an openresa planning widget on its site; the widget key is
public, so no login is needed.
"""

from __future__ import annotations

from app.clubs import PADELGENTLE
from app.models import OUTDOOR

CLUB_ID = PADELGENTLE

WIDGET_URL = "https://openresa.com/plannings-integrated"
WIDGET_ID = "1448"
WIDGET_KEY = (
    "4537b1a27b78108e8932cf5163272e78423233210c740abf61c8604b278a9823"
    "d28945e1bb4c024e"
)
RESERVATION_LINK = "https://openresa.com/club/padel-gentle"

TIMEOUT_SECONDS = 10.0
DEFAULT_COURT_TYPE = OUTDOOR
UNKNOWN_COURT = "Inconnu"

# Tried in order; later selectors cover older widget markup.
FREE_SLOT_SELECTORS = (
    "a.slot-free",
    ".schedule-slot:not(.slot-busy):not(.slot-disabled)",
    ".schedule-slot",
)

# Shown when the widget has nothing to display for the date.
NO_RESULTS_SELECTOR = ".text.text-error"

# The widget reports the first session as 9:15 while it is played from 9:45.
TIME_CORRECTIONS: dict[str, str] = {"09:15": "09:45"}

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (compatible; PadelSlotFinder/0.1)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "fr-FR,fr;q=0.9",
}
