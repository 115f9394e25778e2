from __future__ import annotations

import logging
import math
import re

from app.core.config.scoring import scoring_int
from app.detectors.text_utils import PageCounter, count_words, is_pdf_source
from app.schemas.ats import DocumentLengthSignal, ExperienceLevelSignal

logger = logging.getLogger(__name__)

EXPLICIT_YEARS_PATTERNS = (
    re.compile(r"\b(\d+)\+?\s*years?\s+of\s+experience\b", re.IGNORECASE),
    re.compile(r"\b(\d+)\+?\s*years?\s+experience\b", re.IGNORECASE),
    re.compile(r"\b(\d+)\+?\s*years?\s+in\b", re.IGNORECASE),
    re.compile(r"\b(\d+)\+?\s*years?\s+(?:of\s+)?(?:professional|work|industry|relevant)\b", re.IGNORECASE),
)
WORK_HISTORY_RE = re.compile(
    r"\b(?:work\s+)?experience|employment|professional\s+experience|career\s+history\b",
    re.IGNORECASE,
)
POSITION_KEYWORD_RE = re.compile(
    r"\b(?:Senior|Junior|Lead|Manager|Developer|Engineer|Analyst|Specialist|Coordinator|Director"
    r"|VP|President|CEO|CTO|Founder|Co-founder)\b",
    re.IGNORECASE,
)


def verify_document_length(
    text: str,
    *,
    file_path: str,
    mime_type: str,
    page_counter: PageCounter,
) -> DocumentLengthSignal:
    min_words = scoring_int("parseability.length.min_words", 400)
    max_words = scoring_int("parseability.length.max_words", 800)
    min_pages = scoring_int("parseability.length.min_pages", 1)
    max_pages = scoring_int("parseability.length.max_pages", 2)

    word_count = count_words(text)
    page_count = 1
    if is_pdf_source(file_path, mime_type):
        try:
            page_count = int(page_counter(file_path))
        except Exception as exc:  # noqa: BLE001 - fall back to an estimate
            words_per_page = max(1, scoring_int("parseability.length.words_per_page", 400))
            page_count = max(min_pages, math.ceil(word_count / words_per_page))
            logger.warning(
                "parseability_page_count_failed check=document_length file=%s estimated_pages=%s: %s",
                file_path,
                page_count,
                exc,
            )

    is_optimal = min_words <= word_count <= max_words and min_pages <= page_count <= max_pages
    if is_optimal:
        message = "Document length is optimal"
    elif word_count < min_words:
        message = (
            f"Resume is too short ({word_count} words, ideal: {min_words}-{max_words}). "
            "Consider adding more detail about your experience and achievements."
        )
    elif word_count > max_words:
        message = (
            f"Resume is too long ({word_count} words, ideal: {min_words}-{max_words}). "
            f"Consider condensing to {min_pages}-{max_pages} pages."
        )
    else:
        message = (
            f"Resume is too long ({page_count} pages, ideal: {min_pages}-{max_pages} pages). "
            "ATS systems and recruiters prefer concise resumes."
        )

    return DocumentLengthSignal(
        is_optimal=is_optimal,
        word_count=word_count,
        page_count=page_count,
        message=message,
    )


def detect_experience_level(text: str) -> ExperienceLevelSignal:
    """Infer years of experience from explicit phrasing, else from role keywords."""
    years = 0
    for pattern in EXPLICIT_YEARS_PATTERNS:
        for match in pattern.finditer(text):
            years = max(years, int(match.group(1)))

    estimated = False
    if years == 0 and WORK_HISTORY_RE.search(text):
        positions = len(POSITION_KEYWORD_RE.findall(text))
        if positions >= scoring_int("parseability.experience.many_positions", 3):
            years = scoring_int("parseability.experience.years_many_positions", 5)
            estimated = True
        elif positions >= scoring_int("parseability.experience.few_positions", 2):
            years = scoring_int("parseability.experience.years_few_positions", 3)
            estimated = True

    return ExperienceLevelSignal(
        years=years,
        is_experienced=years >= scoring_int("parseability.experience.experienced_years", 5),
        estimated=estimated,
    )
