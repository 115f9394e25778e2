"""Combine the deterministic parseability report with the qualitative assessment.

The assessment's sub-scores are trusted as reported, then pulled down by hard
overrides wherever a detector contradicts them. Without an assessment a basic
report is derived from the parseability score alone.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterable

from app.core.config.scoring import scoring_float, scoring_int
from app.schemas.ats import CombinedAnalysis, Confidence, ParseabilityDetails, ParseabilityReport, QualitativeAssessment

HARD_FAILURE_PHRASES = ("unparseable", "no contact", "scanned image")

STRUCTURE_WARNING = "Resume structure may not be optimal for ATS parsing."
SPARSE_KEYWORDS_WARNING = "Keyword density is too sparse. Consider adding more relevant technical keywords."
ASSESSMENT_UNAVAILABLE_WARNING = "AI analysis is not available. Some insights may be limited."
ASSESSMENT_UNAVAILABLE_MESSAGE = "AI analysis is temporarily unavailable. Please try again later."


@dataclass(frozen=True)
class SubScores:
    format: int
    keyword: int
    contact: int
    content: int


def _round(value: float) -> int:
    """Round half away from zero; builtin round() would bank 52.5 down to 52."""
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


def _clamp(value: int) -> int:
    return max(0, min(100, value))


def _dedupe(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(item for item in items if item))


def _threshold(name: str, default: int) -> int:
    return scoring_int(f"validator.thresholds.{name}", default)


def _override(name: str, default: int) -> int:
    return scoring_int(f"validator.overrides.{name}", default)


def is_thin_content(word_count: int, achievement_count: int) -> bool:
    return word_count < scoring_int("validator.thin_content.word_count", 400) and achievement_count < scoring_int(
        "validator.thin_content.achievement_count", 3
    )


def apply_thin_content_penalty(content: int, word_count: int, assessment: QualitativeAssessment) -> int:
    if word_count >= scoring_int("validator.thin_content.word_count", 400):
        return content
    if assessment.content_quality.quantifiable_achievements:
        return content
    content = min(content, scoring_int("validator.thin_content.content_cap", 35))
    if assessment.achievement_count < scoring_int("validator.thin_content.achievement_count", 3):
        content = max(0, content - scoring_int("validator.thin_content.few_achievements_penalty", 15))
    return content


def should_apply_overrides(report: ParseabilityReport, assessment: QualitativeAssessment) -> bool:
    """Overrides only run when something already looks wrong.

    Two good scores with no critical findings are trusted as they are; the
    scanned-image cap is the one override applied regardless.
    """
    good = _threshold("good", 70)
    return bool(report.critical_issues) or report.score <= good or assessment.overall_score <= good


def apply_overrides(scores: SubScores, details: ParseabilityDetails, *, has_critical: bool, apply_all: bool) -> SubScores:
    if details.text_extractability.is_scanned_image:
        cap = _override("scanned_image_cap", 20)
        scores = replace(
            scores,
            format=min(scores.format, cap),
            keyword=min(scores.keyword, cap),
            content=min(scores.content, cap),
        )
    if not apply_all:
        return scores

    def lower_format(amount: int) -> None:
        nonlocal scores
        scores = replace(scores, format=max(0, scores.format - amount))

    def lower_content(amount: int) -> None:
        nonlocal scores
        scores = replace(scores, content=max(0, scores.content - amount))

    if details.date_detection.has_placeholders:
        lower_format(_override("date_placeholders", 25))
    if not details.date_detection.has_valid_dates:
        lower_format(_override("no_dates", 30))
    if not details.name_detection.has_name:
        lower_format(_override("no_name", 20))
    if not details.summary_detection.has_summary:
        lower_format(_override("no_summary", 10))

    bullet_count = details.bullet_point_count.count
    if bullet_count < scoring_int("parseability.bullets.min_optimal", 12):
        if bullet_count < scoring_int("parseability.bullets.very_few", 5):
            lower_content(_override("very_few_bullets", 25))
        elif bullet_count < scoring_int("parseability.bullets.few", 8):
            lower_content(_override("few_bullets", 20))
        else:
            lower_content(_override("insufficient_bullets", 15))

    if not details.metrics_detection.has_metrics:
        lower_content(_override("no_metrics", 20))
    if details.table_detection.has_tables:
        lower_format(_override("tables", 20))
    if details.multi_column.has_multi_column:
        lower_format(_override("multi_column", 15))

    if details.contact_location.contact_missing:
        factor = scoring_float("validator.multipliers.contact_missing", 0.3)
        scores = replace(scores, contact=max(0, int(scores.contact * factor)))

    if details.document_length.page_count > _override("long_resume_pages", 2) and has_critical:
        factor = scoring_float("validator.multipliers.long_resume_content", 0.8)
        scores = replace(scores, content=max(0, int(scores.content * factor)))

    return scores


def calculate_overall_score(
    parseability_score: int,
    assessment_score: int,
    scores: SubScores,
    *,
    critical_count: int,
    thin: bool,
) -> int:
    good = _threshold("good", 70)
    thin_cap = _threshold("thin_cap", 40)

    if parseability_score > good and assessment_score > good and critical_count == 0:
        overall = _round(
            assessment_score * scoring_float("validator.weights.assessment_when_good", 0.5)
            + parseability_score * scoring_float("validator.weights.parseability_when_good", 0.5)
        )
        if thin:
            overall = min(overall, thin_cap)
        return _clamp(overall)

    weighted = _round(
        parseability_score * scoring_float("validator.weights.parseability", 0.25)
        + scores.format * scoring_float("validator.weights.format", 0.25)
        + scores.keyword * scoring_float("validator.weights.keyword", 0.25)
        + scores.contact * scoring_float("validator.weights.contact", 0.10)
        + scores.content * scoring_float("validator.weights.content", 0.15)
    )
    if weighted < _threshold("normalization", 50) and critical_count == 0 and not thin:
        weighted = _threshold("normalized_min", 52)

    if critical_count >= 2:
        multiplier = scoring_float("validator.multipliers.multiple_critical", 0.88)
    elif critical_count == 1:
        multiplier = scoring_float("validator.multipliers.one_critical", 0.90)
    else:
        multiplier = scoring_float("validator.multipliers.base_alignment", 0.92)
    overall = _round(weighted * multiplier)

    poor_content = _threshold("poor_content", 40)
    if scores.content < poor_content:
        overall -= _override("poor_content", 10)
    if scores.format > good and scores.content < poor_content:
        overall = min(overall, _threshold("format_good_content_poor_cap", 50))
    if thin:
        overall = min(overall, thin_cap)
    return _clamp(overall)


def categorize_issues(
    issues: Iterable[str],
    *,
    overall_score: int,
    format_score: int,
    contact_score: int,
) -> tuple[list[str], list[str]]:
    """Split issues into (critical, demoted); demoted issues belong with the warnings."""
    critical_threshold = _threshold("critical", 30)
    severe = overall_score < critical_threshold or format_score < critical_threshold or contact_score < critical_threshold

    critical: list[str] = []
    demoted: list[str] = []
    for issue in issues:
        lowered = issue.lower()
        if severe or any(phrase in lowered for phrase in HARD_FAILURE_PHRASES):
            critical.append(issue)
        else:
            demoted.append(issue)
    return critical, demoted


def assessment_warnings(assessment: QualitativeAssessment) -> list[str]:
    warnings: list[str] = []
    if not assessment.format_analysis.has_appropriate_structure:
        warnings.append(STRUCTURE_WARNING)
    if assessment.keyword_analysis.keyword_density == "too_sparse":
        warnings.append(SPARSE_KEYWORDS_WARNING)
    return warnings


def calculate_confidence(report: ParseabilityReport) -> Confidence:
    issue_count = len(report.critical_issues) + len(report.warnings)
    if report.confidence == "high" and issue_count == 0:
        return "high"
    if report.confidence in {"high", "medium"}:
        return "medium"
    return "low"


def basic_contact_score(details: ParseabilityDetails) -> int:
    contact = details.contact_location
    points = 0
    if contact.email_in_acceptable_area:
        points += scoring_int("validator.contact_points.email", 30) + scoring_int(
            "validator.contact_points.email_top_bonus", 20
        )
    elif contact.email_exists:
        points += scoring_int("validator.contact_points.email", 30)
    if contact.phone_in_acceptable_area:
        points += scoring_int("validator.contact_points.phone", 20) + scoring_int(
            "validator.contact_points.phone_top_bonus", 10
        )
    elif contact.phone_exists:
        points += scoring_int("validator.contact_points.phone", 20)
    if contact.linkedin_exists:
        points += scoring_int("validator.contact_points.linkedin", 15)
    if contact.github_exists:
        points += scoring_int("validator.contact_points.github", 10)
    return min(100, points)


def basic_suggestions(details: ParseabilityDetails) -> list[str]:
    suggestions: list[str] = []
    if details.text_extractability.is_scanned_image:
        suggestions.append("Convert scanned PDF to text-based format for better ATS compatibility")
    if details.table_detection.has_tables:
        suggestions.append("Replace tables with simple bullet points for better ATS parsing")
    if details.multi_column.has_multi_column:
        suggestions.append("Use single-column layout for better ATS compatibility")

    length = details.document_length
    if not length.is_optimal:
        if length.word_count < scoring_int("parseability.length.min_words", 400):
            suggestions.append("Resume is too short. Consider adding more detail (ideal: 400-800 words)")
        elif length.word_count > scoring_int("parseability.length.max_words", 800):
            suggestions.append("Resume is too long. Consider condensing to 1-2 pages (ideal: 400-800 words)")

    contact = details.contact_location
    if contact.email_exists and not contact.email_in_acceptable_area:
        suggestions.append("Move email address to the top of the resume (first 300 characters)")
    if contact.phone_exists and not contact.phone_in_acceptable_area:
        suggestions.append("Move phone number to the top of the resume (first 300 characters)")
    return suggestions


def build_basic_analysis(report: ParseabilityReport) -> CombinedAnalysis:
    return CombinedAnalysis(
        overall_score=min(100, report.score + scoring_int("validator.basic_analysis.bonus", 20)),
        confidence="medium",
        parseability_score=report.score,
        format_score=0,
        keyword_score=0,
        contact_score=basic_contact_score(report.details),
        content_score=0,
        critical_issues=_dedupe(report.critical_issues),
        warnings=_dedupe([*report.warnings, ASSESSMENT_UNAVAILABLE_WARNING]),
        improvements=_dedupe(basic_suggestions(report.details)),
        estimated_cost=scoring_float("validator.estimated_cost.without_assessment", 0.0),
        assessment_unavailable=True,
        unavailability_message=ASSESSMENT_UNAVAILABLE_MESSAGE,
    )


def validate(report: ParseabilityReport, assessment: QualitativeAssessment | None) -> CombinedAnalysis:
    if assessment is None:
        return build_basic_analysis(report)

    details = report.details
    word_count = details.document_length.word_count
    content = apply_thin_content_penalty(assessment.content_quality.score, word_count, assessment)
    scores = SubScores(
        format=assessment.format_analysis.score,
        keyword=assessment.keyword_analysis.score,
        contact=assessment.contact_information.score,
        content=content,
    )
    critical_count = len(report.critical_issues)
    scores = apply_overrides(
        scores,
        details,
        has_critical=critical_count > 0,
        apply_all=should_apply_overrides(report, assessment),
    )

    overall = calculate_overall_score(
        report.score,
        assessment.overall_score,
        scores,
        critical_count=critical_count,
        thin=is_thin_content(word_count, assessment.achievement_count),
    )

    critical, demoted = categorize_issues(
        [*report.critical_issues, *assessment.ats_red_flags, *assessment.critical_fixes_required],
        overall_score=overall,
        format_score=scores.format,
        contact_score=scores.contact,
    )

    return CombinedAnalysis(
        overall_score=overall,
        confidence=calculate_confidence(report),
        parseability_score=report.score,
        format_score=_clamp(scores.format),
        keyword_score=_clamp(scores.keyword),
        contact_score=_clamp(scores.contact),
        content_score=_clamp(scores.content),
        critical_issues=_dedupe(critical),
        warnings=_dedupe([*report.warnings, *demoted, *assessment_warnings(assessment)]),
        improvements=_dedupe(assessment.recommended_improvements),
        estimated_cost=scoring_float("validator.estimated_cost.with_assessment", 0.001),
        assessment_unavailable=False,
    )
