from __future__ import annotations

import logging

from app.core.config.scoring import scoring_int
from app.detectors import (
    PageCounter,
    check_contact_location,
    check_dates,
    check_name,
    check_quantifiable_metrics,
    check_summary,
    check_text_extractability,
    count_bullet_points,
    detect_experience_level,
    detect_multi_column_layout,
    detect_sections,
    detect_tables,
    verify_document_length,
)
from app.parsing import count_pdf_pages
from app.schemas.ats import BulletSignal, Confidence, ParseabilityDetails, ParseabilityReport

logger = logging.getLogger(__name__)

CONTACT_MISPLACED_MESSAGE = (
    "Contact information not found in first 300 characters or top 10 lines. ATS systems may miss this "
    "information if it's in a header/footer."
)
CONTACT_MISSING_MESSAGE = (
    "No contact information (email or phone) found in the resume. This is critical for ATS systems."
)
CONTACT_IN_HEADER_MESSAGE = (
    "Contact information may be in PDF header/footer. ATS systems may miss headers/footers - consider "
    "moving to main body text."
)
EMAIL_MISPLACED_MESSAGE = (
    "Email not found in first 300 characters. Consider moving it to the top of the resume for better ATS "
    "compatibility."
)
PHONE_MISPLACED_MESSAGE = (
    "Phone number not found in first 300 characters. Consider moving it to the top of the resume for "
    "better ATS compatibility."
)
NO_NAME_MESSAGE = (
    "No name found in the resume. ATS systems require a candidate name for proper identification and "
    "tracking."
)
NO_SUMMARY_MESSAGE = (
    "No summary or professional profile section found. A summary section helps ATS systems and "
    "recruiters quickly understand your background and career goals."
)
NO_METRICS_MESSAGE = (
    "Resume lacks quantifiable metrics and specific numbers. ATS systems and recruiters value resumes "
    'with measurable achievements (e.g., "increased sales by 30%", "managed team of 5", '
    '"reduced costs by $50K").'
)


def _penalty(name: str, default: int) -> int:
    return scoring_int(f"parseability.penalties.{name}", default)


def calculate_confidence(issue_count: int) -> Confidence:
    if issue_count <= scoring_int("parseability.confidence.high_max_issues", 0):
        return "high"
    if issue_count <= scoring_int("parseability.confidence.medium_max_issues", 2):
        return "medium"
    return "low"


def bullet_penalty(signal: BulletSignal) -> int:
    """Base penalty by total count plus an extra one for a thin Experience section."""
    if signal.count < scoring_int("parseability.bullets.very_few", 5):
        penalty = _penalty("very_few_bullets", 20)
    elif signal.count < scoring_int("parseability.bullets.few", 8):
        penalty = _penalty("few_bullets", 15)
    else:
        penalty = _penalty("insufficient_bullets", 10)

    experience = signal.by_section.experience
    if experience < scoring_int("parseability.bullets.experience_min", 8):
        if experience < scoring_int("parseability.bullets.experience_very_few", 3):
            penalty += _penalty("very_few_experience_bullets", 10)
        elif experience < scoring_int("parseability.bullets.experience_few", 5):
            penalty += _penalty("few_experience_bullets", 5)
    return penalty


def bullet_warning(signal: BulletSignal) -> str:
    """Build the bullet shortfall warning with its per-section breakdown and advice."""
    min_optimal = scoring_int("parseability.bullets.min_optimal", 12)
    max_optimal = scoring_int("parseability.bullets.max_optimal", 20)
    experience_min = scoring_int("parseability.bullets.experience_min", 8)
    experience = signal.by_section.experience
    projects = signal.by_section.projects
    other = signal.by_section.other
    has_projects = "projects" in signal.sections_found

    message = f"Resume has {signal.count} total bullet points (recommended: {min_optimal}-{max_optimal}). "

    if signal.sections_found or experience or projects or other:
        message += f"Breakdown: {experience} in Experience"
        if has_projects or projects > 0:
            message += f", {projects} in Projects"
        if other > 0:
            message += f", {other} in other sections"
        message += ". "

    non_standard = signal.non_standard_by_section
    if (
        signal.potential_non_standard_bullets > 0
        and signal.count < min_optimal
        and (non_standard.projects > 0 or non_standard.experience > 0)
    ):
        message += (
            f"Note: {signal.potential_non_standard_bullets} potential bullet point(s) detected but not "
            "recognized (likely due to non-standard bullet characters). Consider normalizing bullet "
            "characters to standard format (•, -, or *) for better ATS compatibility. "
        )

    if experience < experience_min:
        message += "Focus on adding more bullet points in your Experience section (aim for 8-12 bullets). "
    elif signal.count < min_optimal:
        if has_projects and projects == 0:
            message += (
                "Your Projects section has no bullet points - consider adding bullet points to showcase "
                "your work. "
            )
        elif has_projects and 0 < projects < 3:
            message += f"Consider adding more bullet points to your Projects section (currently has {projects}). "
        elif projects > 0 or not has_projects:
            message += "Consider adding more bullet points to highlight achievements and metrics. "
        else:
            message += "Consider adding more bullet points across all sections to highlight achievements and metrics. "
    else:
        message += (
            "More bullet points with specific achievements and metrics will improve ATS compatibility "
            "and readability."
        )
    return message


def check_parseability(
    text: str,
    *,
    mime_type: str = "",
    file_path: str = "",
    page_counter: PageCounter = count_pdf_pages,
) -> ParseabilityReport:
    """Run every detector over one document and fold the findings into a score.

    The score starts at the calibrated baseline and loses a fixed penalty per
    finding; each finding is filed as a critical issue or a warning. The detector
    signals are returned untouched in the report details for the score validator.
    """
    score = scoring_int("parseability.starting_score", 90)
    critical_issues: list[str] = []
    warnings: list[str] = []

    extractability = check_text_extractability(
        text, file_path=file_path, mime_type=mime_type, page_counter=page_counter
    )
    if extractability.is_scanned_image:
        score -= _penalty("scanned_image", 30)
        critical_issues.append(extractability.message)

    tables = detect_tables(text)
    if tables.has_tables:
        score -= _penalty("tables", 30)
        warnings.append(tables.message)

    multi_column = detect_multi_column_layout(text)
    if multi_column.has_multi_column:
        score -= _penalty("multi_column", 25)
        warnings.append(multi_column.message)

    length = verify_document_length(text, file_path=file_path, mime_type=mime_type, page_counter=page_counter)
    if not length.is_optimal:
        if length.word_count < scoring_int("parseability.length.min_words", 400):
            score -= _penalty("short_resume", 15)
        elif length.word_count > scoring_int("parseability.length.max_words", 800):
            score -= _penalty("long_resume", 12)
        else:
            score -= _penalty("page_count", 10)
        warnings.append(length.message)

    contact = check_contact_location(text)
    if not contact.email_in_acceptable_area and not contact.phone_in_acceptable_area:
        if contact.email_exists or contact.phone_exists:
            score -= _penalty("contact_bad_location", 15)
            warnings.append(CONTACT_MISPLACED_MESSAGE)
        else:
            score -= _penalty("no_contact", 25)
            critical_issues.append(CONTACT_MISSING_MESSAGE)
    elif contact.may_be_in_pdf_header:
        warnings.append(CONTACT_IN_HEADER_MESSAGE)
    elif not contact.email_in_acceptable_area and contact.email_exists:
        warnings.append(EMAIL_MISPLACED_MESSAGE)
    elif not contact.phone_in_acceptable_area and contact.phone_exists:
        warnings.append(PHONE_MISPLACED_MESSAGE)

    dates = check_dates(text)
    if dates.has_placeholders:
        score -= _penalty("date_placeholders", 20)
        critical_issues.append(dates.message)
    elif not dates.has_valid_dates:
        score -= _penalty("no_dates", 25)
        critical_issues.append(dates.message)

    experience = detect_experience_level(text)
    if (
        not length.is_optimal
        and experience.is_experienced
        and length.word_count < scoring_int("parseability.length.min_words", 400)
    ):
        score -= _penalty("experienced_short_resume", 10)
        warnings.append(
            f"Resume is too short for your experience level. With {experience.years}+ years of experience, "
            "you should have more content to showcase your achievements."
        )

    name = check_name(text)
    if not name.has_name:
        score -= _penalty("no_name", 20)
        critical_issues.append(NO_NAME_MESSAGE)

    summary = check_summary(text)
    if not summary.has_summary:
        score -= _penalty("no_summary", 10)
        warnings.append(NO_SUMMARY_MESSAGE)

    bullets = count_bullet_points(text)
    if not bullets.is_optimal:
        score -= bullet_penalty(bullets)
        warnings.append(bullet_warning(bullets))

    metrics = check_quantifiable_metrics(text)
    if not metrics.has_metrics:
        score -= _penalty("no_metrics", 15)
        warnings.append(NO_METRICS_MESSAGE)

    score = max(scoring_int("parseability.min_score", 0), min(scoring_int("parseability.max_score", 100), score))
    confidence = calculate_confidence(len(critical_issues) + len(warnings))

    logger.info(
        "parseability_checked score=%s critical=%s warnings=%s words=%s",
        score,
        len(critical_issues),
        len(warnings),
        length.word_count,
    )

    return ParseabilityReport(
        score=score,
        critical_issues=tuple(critical_issues),
        warnings=tuple(warnings),
        confidence=confidence,
        details=ParseabilityDetails(
            text_extractability=extractability,
            table_detection=tables,
            multi_column=multi_column,
            document_length=length,
            contact_location=contact,
            date_detection=dates,
            experience_level=experience,
            name_detection=name,
            summary_detection=summary,
            bullet_point_count=bullets,
            metrics_detection=metrics,
            sections=detect_sections(text),
        ),
    )
