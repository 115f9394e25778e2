from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    cors_allowed_origins: tuple[str, ...]
    max_upload_bytes: int


@dataclass(frozen=True)
class AssessmentSettings:
    enabled: bool
    api_key: str
    base_url: str | None
    model: str
    timeout_s: float
    max_retries: int
    retry_backoff_s: float
    temperature: float
    max_tokens: int
    max_chars: int


def load_assessment_settings() -> AssessmentSettings:
    """Read assessment settings on every call so tests can flip env vars."""
    return AssessmentSettings(
        enabled=_get_env_bool("ASSESSMENT_ENABLED", True),
        api_key=(_get_env("OPENAI_API_KEY", "") or "").strip(),
        base_url=_get_env("OPENAI_BASE_URL"),
        model=(_get_env("AI_MODEL", "gpt-4o-mini") or "gpt-4o-mini").strip(),
        timeout_s=_get_env_float("ASSESSMENT_TIMEOUT_S", 30.0),
        max_retries=max(0, _get_env_int("ASSESSMENT_MAX_RETRIES", 1)),
        retry_backoff_s=max(0.0, _get_env_float("ASSESSMENT_RETRY_BACKOFF_S", 1.0)),
        temperature=_get_env_float("ASSESSMENT_TEMPERATURE", 0.3),
        max_tokens=_get_env_int("ASSESSMENT_MAX_TOKENS", 2000),
        max_chars=_get_env_int("ASSESSMENT_MAX_CHARS", 8000),
    )


settings = Settings(
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "10/minute") or "10/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 5 * 1024 * 1024),
)

__all__ = ["AssessmentSettings", "Settings", "load_assessment_settings", "settings"]
