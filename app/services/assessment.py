from __future__ import annotations

import json
import logging
import time
from functools import lru_cache
from pathlib import Path
from typing import Any

from openai import OpenAI

from app.core.config import AssessmentSettings, load_assessment_settings
from app.schemas.ats import QualitativeAssessment

logger = logging.getLogger(__name__)

PROMPT_PATH = Path(__file__).resolve().parents[2] / "config" / "prompts" / "ats_analysis.txt"
RESUME_PLACEHOLDER = "{RESUME_TEXT}"
TRUNCATION_MARKER = "... [truncated]"


class AssessmentError(RuntimeError):
    def __init__(self, message: str, *, code: str = "assessment_unavailable"):
        super().__init__(message)
        self.code = code


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def assessment_enabled(config: AssessmentSettings | None = None) -> bool:
    config = config or load_assessment_settings()
    if not config.enabled:
        return False
    if not config.api_key or _looks_like_placeholder(config.api_key):
        return False
    return True


@lru_cache(maxsize=4)
def _client(api_key: str, base_url: str | None, timeout_s: float) -> OpenAI:
    # Retries are driven by request_assessment so the backoff stays fixed.
    return OpenAI(api_key=api_key, base_url=base_url, timeout=timeout_s, max_retries=0)


def truncate_resume_text(text: str, max_chars: int) -> str:
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


@lru_cache(maxsize=1)
def _prompt_template() -> str:
    try:
        return PROMPT_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Assessment prompt not found at '{PROMPT_PATH}': {exc}") from exc


def build_prompt(text: str, max_chars: int) -> str:
    return _prompt_template().replace(RESUME_PLACEHOLDER, truncate_resume_text(text, max_chars))


def _request_once(config: AssessmentSettings, prompt: str) -> dict[str, Any]:
    response = _client(config.api_key, config.base_url, config.timeout_s).chat.completions.create(
        model=config.model,
        messages=[{"role": "user", "content": prompt}],
        temperature=config.temperature,
        response_format={"type": "json_object"},
        max_tokens=config.max_tokens,
    )
    content = response.choices[0].message.content if response.choices else ""
    if not content:
        raise AssessmentError("Assessment response was empty.", code="empty_response")
    parsed = json.loads(content)
    if not isinstance(parsed, dict):
        raise AssessmentError("Assessment response was not a JSON object.", code="invalid_schema")
    return parsed


def request_assessment(text: str) -> QualitativeAssessment | None:
    """Ask the language model for a qualitative ATS judgement of the resume.

    Returns None when the assessment is disabled or unconfigured, and when every
    attempt fails. The caller treats None as "assessment unavailable" and falls
    back to the deterministic report, so nothing is raised from here.
    """
    config = load_assessment_settings()
    if not assessment_enabled(config):
        logger.warning("assessment_skipped reason=disabled_or_unconfigured")
        return None

    try:
        prompt = build_prompt(text, config.max_chars)
    except RuntimeError as exc:
        logger.warning("assessment_prompt_unavailable: %s", exc)
        return None

    attempts = 1 + config.max_retries
    started = time.perf_counter()
    for attempt in range(1, attempts + 1):
        try:
            payload = _request_once(config, prompt)
            assessment = QualitativeAssessment.model_validate(payload)
        except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
            logger.warning(
                "assessment_request_failed attempt=%s model=%s prompt_len=%s code=%s: %s",
                attempt,
                config.model,
                len(prompt),
                getattr(exc, "code", None) or "request_exception",
                exc,
            )
            if attempt < attempts:
                time.sleep(config.retry_backoff_s)
            continue

        logger.info(
            "assessment_request_succeeded attempt=%s model=%s latency_ms=%s",
            attempt,
            config.model,
            int((time.perf_counter() - started) * 1000),
        )
        return assessment

    return None
