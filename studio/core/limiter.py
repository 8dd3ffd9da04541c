"""
Process-wide rate limiter. Route decorators bind their limits at import, so
RATE_LIMIT_ENABLED and CHAT_RATE_LIMIT come from the environment, not from the
Settings handed to create_app.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from studio.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
