from __future__ import annotations

import re

from app.core.config.scoring import scoring_int
from app.schemas.ats import MetricsSignal

METRIC_PATTERNS = (
    re.compile(r"\d+\s*%"),
    re.compile(r"\$[\d,]+[KM]?", re.IGNORECASE),
    re.compile(
        r"\d+\+?\s*(?:years?|months?|team\s+members?|users?|customers?|clients?|projects?|employees?"
        r"|people|hours?|days?)",
        re.IGNORECASE,
    ),
    re.compile(r"\d+\s+(?:to|from|by)\s+\d+", re.IGNORECASE),
    re.compile(r"\d+x\b", re.IGNORECASE),
)


def check_quantifiable_metrics(text: str) -> MetricsSignal:
    count = sum(len(pattern.findall(text)) for pattern in METRIC_PATTERNS)
    return MetricsSignal(
        has_metrics=count >= scoring_int("parseability.metrics.min_count", 3),
        metric_count=count,
    )
