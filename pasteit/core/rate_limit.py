"""
Rate limiter shared by the routes.

Counters live in Redis when REDIS_URL is set and in process memory otherwise.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from pasteit.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.rate_limit_storage_uri,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)
