"""
Monkey Padel (openresa, login required) integration configuration.
"""

from __future__ import annotations

from app.clubs import MONKEYPADEL
from app.models import INDOOR, OUTDOOR, CourtType

CLUB_ID = MONKEYPADEL

CLUB_URL = "https://openresa.com/club/themonkeypadel"
RESERVATION_URL = "https://openresa.com/reservation/#action=0&date={date}&group=0&page=0"
# Booking form endpoint; receives one slot's ReservationInfo.request_data.
SWITCH_URL = "https://openresa.com/reservation/switch"

# Rendering the planning needs a real browser; allow for login + page load.
TIMEOUT_SECONDS = 60.0

# Milliseconds to wait for the planning widgets to render.
RESERVATION_CONTAINER_TIMEOUT_MS = 10_000
FREE_SLOT_TIMEOUT_MS = 10_000

FREE_SLOT_SELECTORS = ("a.slot.slot-free, a.slot.slot-free-full",)
UNKNOWN_COURT = "Terrain inconnu"

# ── Court metadata ────────────────────────────────────────────────────────

COURT_TYPES: dict[str, CourtType] = {
    "Piste extérieure 01": OUTDOOR,
    "Piste extérieure 02": OUTDOOR,
    "Piste extérieure 03": OUTDOOR,
    "Piste extérieure 04": OUTDOOR,
    "Piste indoor 01": INDOOR,
    "Piste indoor 02": INDOOR,
    "Piste indoor 03": INDOOR,
    "Piste indoor 04": INDOOR,
}

# Openresa schedule id per court; sent as "schedule" in the booking form data.
SCHEDULE_IDS: dict[str, str] = {
    "Piste extérieure 01": "57729",
    "Piste extérieure 02": "57730",
    "Piste extérieure 03": "57731",
    "Piste extérieure 04": "57736",
    "Piste indoor 01": "72534",
    "Piste indoor 02": "72535",
    "Piste indoor 03": "72536",
    "Piste indoor 04": "72537",
}

COURTS_BY_SCHEDULE_ID: dict[str, str] = {sid: name for name, sid in SCHEDULE_IDS.items()}
