"""
Rate limiting configuration using slowapi.

Two tiers:
  • search  – 30/min (every uncached search fans out to all club sites)
  • default – 60/min (direct P4 lookups and everything else)

The limiter keys on client IP.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, default_limits=["60/minute"])

# Named rate strings for use in @limiter.limit() decorators
SEARCH = "30/minute"
DEFAULT = "60/minute"
