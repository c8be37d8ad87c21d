"""
Application configuration from environment variables.

All settings have sensible defaults for local development.
A .env file in the project root is loaded automatically (if present).
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file before reading any env vars
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# ── Environment ───────────────────────────────────────────────────────────

VERSION = "1.0.0"

ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info")

# ── Paths ─────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# One JSON session file per club (or per account for multi-account clubs)
COOKIES_DIR = Path(os.getenv("COOKIES_DIR", str(DATA_DIR / "cookies")))

# ── Headless browser ──────────────────────────────────────────────────────

BROWSER_HEADLESS: bool = os.getenv("BROWSER_HEADLESS", "true").lower() == "true"

# ── Slot cache ────────────────────────────────────────────────────────────

# Availability moves fast while people are booking, slowly overnight.
CACHE_PEAK_TTL_SECONDS: float = float(os.getenv("CACHE_PEAK_TTL_SECONDS", "120"))
CACHE_OFFPEAK_TTL_SECONDS: float = float(os.getenv("CACHE_OFFPEAK_TTL_SECONDS", "300"))
CACHE_PEAK_START_HOUR: int = int(os.getenv("CACHE_PEAK_START_HOUR", "7"))
CACHE_PEAK_END_HOUR: int = int(os.getenv("CACHE_PEAK_END_HOUR", "23"))

# ── Sessions ──────────────────────────────────────────────────────────────

SESSION_DEFAULT_TTL_DAYS: int = int(os.getenv("SESSION_DEFAULT_TTL_DAYS", "30"))
SESSION_MAX_LIFETIME_DAYS: int = int(os.getenv("SESSION_MAX_LIFETIME_DAYS", "365"))
SESSION_REFRESH_THRESHOLD_DAYS: int = int(os.getenv("SESSION_REFRESH_THRESHOLD_DAYS", "3"))
# Budget for one browser login; runs independently of the adapter timeouts.
SESSION_LOGIN_TIMEOUT_SECONDS: float = float(os.getenv("SESSION_LOGIN_TIMEOUT_SECONDS", "120"))

# ── Background workers ────────────────────────────────────────────────────

BACKGROUND_TASKS_ENABLED: bool = os.getenv("BACKGROUND_TASKS_ENABLED", "true").lower() == "true"

# How often every adapter is exercised by the health checker (seconds).
HEALTH_CHECK_INTERVAL: float = float(os.getenv("HEALTH_CHECK_INTERVAL", "3600"))
HEALTH_ERROR_THRESHOLD: int = int(os.getenv("HEALTH_ERROR_THRESHOLD", "3"))
HEALTH_ALERT_COOLDOWN: float = float(os.getenv("HEALTH_ALERT_COOLDOWN", str(12 * 3600)))

# How often stored sessions are checked for upcoming expiry (seconds).
SESSION_CHECK_INTERVAL: float = float(os.getenv("SESSION_CHECK_INTERVAL", "86400"))

# ── Club credentials ──────────────────────────────────────────────────────


def _credential(name: str) -> str:
    """Read a credential, tolerating values wrapped in quotes in .env files."""
    return os.getenv(name, "").strip().strip("'\"")


MONKEYPADEL_USERNAME: str = _credential("MONKEYPADEL_USERNAME")
MONKEYPADEL_PASSWORD: str = _credential("MONKEYPADEL_PASSWORD")

COUNTRYCLUBPADEL_USERNAME: str = _credential("COUNTRYCLUBPADEL_USERNAME")
COUNTRYCLUBPADEL_PASSWORD: str = _credential("COUNTRYCLUBPADEL_PASSWORD")

P4_MAX_ACCOUNTS = 3


def p4_accounts() -> list[tuple[int, str, str]]:
    """(number, email, password) for every configured P4 account.

    Reads P4_EMAIL_1 / P4_PASSWORD_1 … P4_EMAIL_3 / P4_PASSWORD_3 and skips
    incomplete pairs.
    """
    accounts: list[tuple[int, str, str]] = []
    for n in range(1, P4_MAX_ACCOUNTS + 1):
        email = _credential(f"P4_EMAIL_{n}")
        password = _credential(f"P4_PASSWORD_{n}")
        if email and password:
            accounts.append((n, email, password))
    return accounts
