"""
Exception hierarchy shared by adapters, session stores and the aggregator.

Only ``SearchValidationError`` ever reaches an API caller; everything else is
contained per club by the aggregator or logged by the background workers.
"""

from __future__ import annotations


class SlotFinderError(Exception):
    """Base class for all errors raised by the slot finder."""


class SearchValidationError(SlotFinderError, ValueError):
    """Malformed search input, detected before any adapter is invoked."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class UpstreamError(SlotFinderError):
    """A club's booking site failed, timed out or answered something unexpected."""

    def __init__(self, club_id: str, message: str) -> None:
        super().__init__(f"[{club_id}] {message}")
        self.club_id = club_id


class AuthenticationError(UpstreamError):
    """The upstream rejected our session (login page served instead of data)."""


class SessionRefreshError(SlotFinderError):
    """The login flow did not yield a usable session."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"[{key}] {message}")
        self.key = key


class ConfigurationError(SlotFinderError):
    """Required settings (usually credentials) are missing."""
