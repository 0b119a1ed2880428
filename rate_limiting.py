"""
Taskboard - HTTP Rate Limiting
slowapi limiter keyed by client address, shared by every router.
"""

import os

from slowapi import Limiter
from slowapi.util import get_remote_address

RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "1").lower() in ("1", "true", "yes")


class RateLimits:
    """Limit strings per procedure kind"""
    READ = os.getenv("RATE_LIMIT_READ", "300/minute")
    WRITE = os.getenv("RATE_LIMIT_WRITE", "120/minute")


limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)
