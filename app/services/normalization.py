"""
Helpers every club adapter uses to turn raw availability into ``Slot`` objects.

The rules are the same regardless of where the data came from:

* times are normalised to zero-padded ``HH:MM``;
* ``end_time`` is ``time + duration`` and wraps around midnight
  (23:30 + 90 min → ``01:00``);
* ``(time, court)`` is the dedup key and the first occurrence wins;
* a slot whose time or court cannot be read is dropped, unless the adapter
  explicitly supplies a fallback court label.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date

from pydantic import ValidationError

from app.models import UNSPECIFIED, CourtType, Slot

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 90

_MINUTES_PER_DAY = 24 * 60

# "09:00", "9:00", "9h15", "9h", "21H30"
_TIME_RE = re.compile(r"^\s*(\d{1,2})\s*[:hH]\s*(\d{1,2})?\s*$")


@dataclass(frozen=True)
class HourRange:
    """Inclusive window of start hours, e.g. 18–21 keeps 18:00 … 21:59."""

    start_hour: int
    end_hour: int

    def __post_init__(self) -> None:
        if not (0 <= self.start_hour <= self.end_hour <= 23):
            raise ValueError(f"invalid hour range {self.start_hour}-{self.end_hour}")

    def contains(self, hour: int) -> bool:
        return self.start_hour <= hour <= self.end_hour

    def __str__(self) -> str:
        return f"{self.start_hour}-{self.end_hour}"


# ── Time helpers ───────────────────────────────────────────────────────────


def parse_time(value: str | None) -> tuple[int, int] | None:
    """Parse a loosely formatted clock time; ``None`` when it is not one."""
    if not value:
        return None
    match = _TIME_RE.match(value)
    if match is None:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    if hours > 23 or minutes > 59:
        return None
    return hours, minutes


def format_time(hours: int, minutes: int) -> str:
    return f"{hours:02d}:{minutes:02d}"


def normalize_time(value: str | None) -> str | None:
    parsed = parse_time(value)
    return format_time(*parsed) if parsed else None


def minutes_to_time(minutes_since_midnight: int) -> str | None:
    """Convert the ``data-timestart`` style minute offset into ``HH:MM``."""
    if minutes_since_midnight < 0 or minutes_since_midnight >= _MINUTES_PER_DAY:
        return None
    return format_time(*divmod(minutes_since_midnight, 60))


def compute_end_time(start: str, duration_minutes: int) -> str | None:
    parsed = parse_time(start)
    if parsed is None or duration_minutes <= 0:
        return None
    total = (parsed[0] * 60 + parsed[1] + duration_minutes) % _MINUTES_PER_DAY
    return format_time(*divmod(total, 60))


def is_at_or_after(value: str, minimum: str | None) -> bool:
    """True when *value* is not earlier than *minimum* (both clock times)."""
    if not minimum:
        return True
    current = parse_time(value)
    floor = parse_time(minimum)
    if current is None or floor is None:
        return False
    return current >= floor


# ── Date helpers ───────────────────────────────────────────────────────────


def to_french_date(day: date) -> str:
    """``DD/MM/YYYY`` as expected by openresa / gestion-sports / mymobileapp."""
    return day.strftime("%d/%m/%Y")


def to_us_date(day: date) -> str:
    return day.strftime("%m/%d/%Y")


# ── Slot construction ─────────────────────────────────────────────────────


def court_type_for(
    court: str,
    mapping: Mapping[str, CourtType],
    default: CourtType = UNSPECIFIED,
) -> CourtType:
    """Look up a court's type in a static per-club table (never guessed from text)."""
    return mapping.get(court, default)


def make_slot(
    *,
    day: date,
    time: str | None,
    court: str | None,
    court_type: CourtType = UNSPECIFIED,
    duration_minutes: int | None = None,
    price: float | str = 0,
    reservation_link: str = "",
    fallback_court: str | None = None,
) -> Slot | None:
    """
    Build a normalised slot, or return None when the raw data is unusable.

    *fallback_court* lets an adapter keep slots whose court could not be
    identified under a documented placeholder label instead of dropping them.
    """
    start = normalize_time(time)
    if start is None:
        logger.debug("Dropping slot with unparseable time %r (court=%r)", time, court)
        return None

    court_name = " ".join((court or "").split())
    if not court_name:
        if fallback_court is None:
            logger.debug("Dropping slot at %s without a court name", start)
            return None
        court_name = fallback_court

    duration = duration_minutes if duration_minutes and duration_minutes > 0 else DEFAULT_DURATION_MINUTES
    try:
        return Slot(
            date=day.isoformat(),
            time=start,
            end_time=compute_end_time(start, duration),
            duration_minutes=duration,
            court=court_name,
            court_type=court_type,
            price=price,
            reservation_link=reservation_link,
        )
    except ValidationError:
        logger.warning("Dropping malformed slot %s %s on %s", start, court_name, day)
        return None


def dedupe_slots(slots: Iterable[Slot | None]) -> list[Slot]:
    """Drop ``None`` entries and repeated ``(time, court)`` pairs, keeping the first."""
    seen: set[tuple[str, str]] = set()
    unique: list[Slot] = []
    for slot in slots:
        if slot is None:
            continue
        key = (slot.time, slot.court)
        if key in seen:
            continue
        seen.add(key)
        unique.append(slot)
    return unique


def filter_hours(slots: Iterable[Slot], hours: HourRange | None) -> list[Slot]:
    if hours is None:
        return list(slots)
    return [s for s in slots if hours.contains(s.hour)]


def sort_by_time(slots: Iterable[Slot]) -> list[Slot]:
    return sorted(slots, key=lambda s: (s.time, s.court))
