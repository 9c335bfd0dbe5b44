"""Rate limiting configuration."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import get_settings


settings = get_settings()

# Per-client limit applied to every DLP-backed endpoint.
RATE_LIMIT = settings.rate_limit

limiter = Limiter(key_func=get_remote_address, default_limits=[RATE_LIMIT])
