from __future__ import annotations

from typing import Any, Callable

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def rate_limit(limit: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Per-client limit for analysis routes; a no-op when RATE_LIMIT_ENABLED is off."""
    if settings.rate_limit_enabled:
        return limiter.limit(limit or settings.rate_limit)

    def decorator(func):
        return func

    return decorator
