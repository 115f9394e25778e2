from __future__ import annotations

import logging

from app.detectors import PageCounter
from app.parsing import ParsedResume, count_pdf_pages
from app.schemas.ats import CombinedAnalysis
from app.services.assessment import request_assessment
from app.services.parseability import check_parseability
from app.services.score_validator import validate

logger = logging.getLogger(__name__)


def analyze_resume_text(
    text: str,
    *,
    mime_type: str = "text/plain",
    file_path: str = "",
    page_counter: PageCounter = count_pdf_pages,
) -> CombinedAnalysis:
    report = check_parseability(text, mime_type=mime_type, file_path=file_path, page_counter=page_counter)

    # A zero score means nothing usable was extracted; skip the paid call.
    assessment = request_assessment(text) if report.score > 0 else None
    result = validate(report, assessment)

    logger.info(
        "resume_analysis_completed score=%s confidence=%s assessment=%s text_len=%s",
        result.overall_score,
        result.confidence,
        "used" if assessment is not None else "unavailable",
        len(text),
    )
    return result


def analyze_parsed_resume(parsed: ParsedResume) -> CombinedAnalysis:
    # The page count is already known from extraction; avoid reopening the file.
    known_pages = parsed.page_count
    if parsed.parsing_warnings:
        logger.warning(
            "resume_parse_warnings source=%s count=%s: %s",
            parsed.source_type,
            len(parsed.parsing_warnings),
            "; ".join(parsed.parsing_warnings),
        )

    def page_counter(file_path: str) -> int:
        if known_pages is not None:
            return known_pages
        return count_pdf_pages(file_path)

    return analyze_resume_text(
        parsed.text,
        mime_type=parsed.mime_type,
        file_path=parsed.file_path,
        page_counter=page_counter,
    )
