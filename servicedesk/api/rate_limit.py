"""
Rate Limiting
=============

slowapi limiter keyed on the client address. The default limit applies to
every route through SlowAPIMiddleware; credential endpoints get a stricter one.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from servicedesk.core.config import get_settings

AUTH_RATE_LIMIT = "10/minute"

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_settings.rate_limit_default],
    enabled=_settings.rate_limit_enabled,
)
