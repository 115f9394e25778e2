from __future__ import annotations

from app.core.config import settings


def cors_allowed_origins() -> list[str]:
    """Configured origins, trailing slashes dropped and duplicates removed.

    A wildcard is discarded because the API is served with credentials enabled.
    """
    origins: list[str] = []
    for origin in settings.cors_allowed_origins:
        cleaned = origin.strip().rstrip("/")
        if not cleaned or cleaned == "*" or cleaned in origins:
            continue
        origins.append(cleaned)
    return origins
