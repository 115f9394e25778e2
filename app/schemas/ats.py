from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Confidence = Literal["high", "medium", "low"]
Section = Literal["experience", "projects", "other"]


class Signal(BaseModel):
    """Base for detector output. Signals are recomputed per analysis and never mutated."""

    model_config = ConfigDict(frozen=True)


class TextExtractabilitySignal(Signal):
    is_scanned_image: bool = False
    message: str = ""
    page_count: int | None = None
    text_length: int | None = None


class TableSignal(Signal):
    has_tables: bool = False
    message: str = ""
    table_line_count: int = Field(default=0, ge=0)
    approximate_lines: tuple[int, ...] = ()


class MultiColumnSignal(Signal):
    has_multi_column: bool = False
    message: str = ""
    confidence: Confidence = "low"
    suspicious_patterns: int = Field(default=0, ge=0)


class DocumentLengthSignal(Signal):
    is_optimal: bool = True
    word_count: int = Field(default=0, ge=0)
    page_count: int = Field(default=1, ge=0)
    message: str = ""


class ContactLocationSignal(Signal):
    email_in_first_300: bool = False
    phone_in_first_300: bool = False
    email_in_first_10_lines: bool = False
    phone_in_first_10_lines: bool = False
    email_position: int | None = None
    phone_position: int | None = None
    email_exists: bool = False
    phone_exists: bool = False
    may_be_in_pdf_header: bool = False
    linkedin_exists: bool = False
    github_exists: bool = False

    @property
    def email_in_acceptable_area(self) -> bool:
        return self.email_in_first_300 or self.email_in_first_10_lines

    @property
    def phone_in_acceptable_area(self) -> bool:
        return self.phone_in_first_300 or self.phone_in_first_10_lines

    @property
    def contact_missing(self) -> bool:
        return not self.email_exists and not self.phone_exists


class DateSignal(Signal):
    has_valid_dates: bool = False
    has_placeholders: bool = False
    date_count: int = Field(default=0, ge=0)
    placeholder_count: int = Field(default=0, ge=0)
    message: str = ""


class ExperienceLevelSignal(Signal):
    years: int = Field(default=0, ge=0)
    is_experienced: bool = False
    estimated: bool = False


class NameSignal(Signal):
    has_name: bool = False
    name: str | None = None


class SummarySignal(Signal):
    has_summary: bool = False
    message: str = ""


class SectionCounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    experience: int = Field(default=0, ge=0)
    projects: int = Field(default=0, ge=0)
    other: int = Field(default=0, ge=0)

    def bump(self, section: Section, amount: int = 1) -> "SectionCounts":
        return self.model_copy(update={section: getattr(self, section) + amount})


class BulletSignal(Signal):
    count: int = Field(default=0, ge=0)
    is_optimal: bool = False
    by_section: SectionCounts = Field(default_factory=SectionCounts)
    sections_found: tuple[Section, ...] = ()
    potential_non_standard_bullets: int = Field(default=0, ge=0)
    non_standard_by_section: SectionCounts = Field(default_factory=SectionCounts)


class MetricsSignal(Signal):
    has_metrics: bool = False
    metric_count: int = Field(default=0, ge=0)


class SectionPresenceSignal(Signal):
    experience: bool = False
    education: bool = False
    skills: bool = False


class ParseabilityDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    text_extractability: TextExtractabilitySignal = Field(default_factory=TextExtractabilitySignal)
    table_detection: TableSignal = Field(default_factory=TableSignal)
    multi_column: MultiColumnSignal = Field(default_factory=MultiColumnSignal)
    document_length: DocumentLengthSignal = Field(default_factory=DocumentLengthSignal)
    contact_location: ContactLocationSignal = Field(default_factory=ContactLocationSignal)
    date_detection: DateSignal = Field(default_factory=lambda: DateSignal(has_valid_dates=True))
    experience_level: ExperienceLevelSignal = Field(default_factory=ExperienceLevelSignal)
    name_detection: NameSignal = Field(default_factory=lambda: NameSignal(has_name=True))
    summary_detection: SummarySignal = Field(default_factory=lambda: SummarySignal(has_summary=True))
    bullet_point_count: BulletSignal = Field(
        default_factory=lambda: BulletSignal(count=12, is_optimal=True, by_section=SectionCounts(experience=12))
    )
    metrics_detection: MetricsSignal = Field(default_factory=lambda: MetricsSignal(has_metrics=True, metric_count=3))
    sections: SectionPresenceSignal = Field(default_factory=SectionPresenceSignal)


class ParseabilityReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    critical_issues: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    confidence: Confidence = "high"
    details: ParseabilityDetails = Field(default_factory=ParseabilityDetails)


# External assessment. Every field is lenient: a missing or malformed value
# becomes zero, false or empty instead of failing validation.


def _coerce_score(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(100, number))


def _coerce_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return max(0, int(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0


def _coerce_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return default


def _coerce_str(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _coerce_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    items: list[str] = []
    for item in value:
        if isinstance(item, dict):
            text = _coerce_str(item.get("issue") or item.get("text") or item.get("example") or "")
        else:
            text = _coerce_str(item)
        if text:
            items.append(text)
    return items


def _coerce_mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


class OverallAssessment(BaseModel):
    ats_compatibility_score: int = 0
    summary: str = ""

    @field_validator("ats_compatibility_score", mode="before")
    @classmethod
    def _score(cls, value: Any) -> int:
        return _coerce_score(value)

    @field_validator("summary", mode="before")
    @classmethod
    def _summary(cls, value: Any) -> str:
        return _coerce_str(value)


class FormatAnalysis(BaseModel):
    score: int = 0
    has_appropriate_structure: bool = True
    issues: list[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _score(cls, value: Any) -> int:
        return _coerce_score(value)

    @field_validator("has_appropriate_structure", mode="before")
    @classmethod
    def _structure(cls, value: Any) -> bool:
        return _coerce_bool(value, default=True)

    @field_validator("issues", mode="before")
    @classmethod
    def _issues(cls, value: Any) -> list[str]:
        return _coerce_str_list(value)


class KeywordAnalysis(BaseModel):
    score: int = 0
    total_unique_keywords: int = 0
    industry_alignment: str = ""
    keyword_density: str = ""
    top_keywords: list[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _score(cls, value: Any) -> int:
        return _coerce_score(value)

    @field_validator("total_unique_keywords", mode="before")
    @classmethod
    def _total(cls, value: Any) -> int:
        return _coerce_count(value)

    @field_validator("industry_alignment", "keyword_density", mode="before")
    @classmethod
    def _label(cls, value: Any) -> str:
        return _coerce_str(value).lower()

    @field_validator("top_keywords", mode="before")
    @classmethod
    def _keywords(cls, value: Any) -> list[str]:
        return _coerce_str_list(value)


class ContactInformation(BaseModel):
    score: int = 0
    email_found: bool = False
    email_location: str = ""
    phone_found: bool = False
    phone_location: str = ""
    linkedin_found: bool = False
    linkedin_format_correct: bool = True
    github_found: bool = False
    location_found: bool = False

    @field_validator("score", mode="before")
    @classmethod
    def _score(cls, value: Any) -> int:
        return _coerce_score(value)

    @field_validator("email_found", "phone_found", "linkedin_found", "github_found", "location_found", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return _coerce_bool(value)

    @field_validator("linkedin_format_correct", mode="before")
    @classmethod
    def _format_flag(cls, value: Any) -> bool:
        return _coerce_bool(value, default=True)

    @field_validator("email_location", "phone_location", mode="before")
    @classmethod
    def _location(cls, value: Any) -> str:
        return _coerce_str(value).lower()


class AchievementExample(BaseModel):
    example: str = ""


class ContentQuality(BaseModel):
    score: int = 0
    estimated_word_count: int = 0
    quantifiable_achievements: bool = False
    achievement_examples: list[AchievementExample] = Field(default_factory=list)
    uses_action_verbs: bool = False
    action_verb_examples: list[str] = Field(default_factory=list)
    appropriate_length: bool = False
    has_bullet_points: bool = False

    @field_validator("score", mode="before")
    @classmethod
    def _score(cls, value: Any) -> int:
        return _coerce_score(value)

    @field_validator("estimated_word_count", mode="before")
    @classmethod
    def _word_count(cls, value: Any) -> int:
        return _coerce_count(value)

    @field_validator("quantifiable_achievements", "uses_action_verbs", "appropriate_length", "has_bullet_points", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return _coerce_bool(value)

    @field_validator("achievement_examples", mode="before")
    @classmethod
    def _examples(cls, value: Any) -> list[dict[str, str]]:
        if not isinstance(value, list):
            return []
        examples: list[dict[str, str]] = []
        for item in value:
            text = _coerce_str(item.get("example")) if isinstance(item, dict) else _coerce_str(item)
            if text:
                examples.append({"example": text})
        return examples

    @field_validator("action_verb_examples", mode="before")
    @classmethod
    def _verbs(cls, value: Any) -> list[str]:
        return _coerce_str_list(value)


class QualitativeAssessment(BaseModel):
    overall_assessment: OverallAssessment = Field(default_factory=OverallAssessment)
    format_analysis: FormatAnalysis = Field(default_factory=FormatAnalysis)
    keyword_analysis: KeywordAnalysis = Field(default_factory=KeywordAnalysis)
    contact_information: ContactInformation = Field(default_factory=ContactInformation)
    content_quality: ContentQuality = Field(default_factory=ContentQuality)
    ats_red_flags: list[str] = Field(default_factory=list)
    critical_fixes_required: list[str] = Field(default_factory=list)
    recommended_improvements: list[str] = Field(default_factory=list)

    @field_validator(
        "overall_assessment",
        "format_analysis",
        "keyword_analysis",
        "contact_information",
        "content_quality",
        mode="before",
    )
    @classmethod
    def _section(cls, value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value
        return _coerce_mapping(value)

    @field_validator("ats_red_flags", "critical_fixes_required", "recommended_improvements", mode="before")
    @classmethod
    def _issue_list(cls, value: Any) -> list[str]:
        return _coerce_str_list(value)

    @property
    def overall_score(self) -> int:
        return self.overall_assessment.ats_compatibility_score

    @property
    def achievement_count(self) -> int:
        return len(self.content_quality.achievement_examples)


class CombinedAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(ge=0, le=100)
    confidence: Confidence
    parseability_score: int = Field(ge=0, le=100)
    format_score: int = Field(ge=0, le=100)
    keyword_score: int = Field(ge=0, le=100)
    contact_score: int = Field(ge=0, le=100)
    content_score: int = Field(ge=0, le=100)
    critical_issues: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    improvements: tuple[str, ...] = ()
    estimated_cost: float = Field(default=0.0, ge=0.0)
    assessment_unavailable: bool = False
    unavailability_message: str | None = None


class AnalyzeTextRequest(BaseModel):
    text: str = Field(min_length=1, max_length=100000)
    mime_type: str = Field(default="text/plain", max_length=120)
    file_name: str = Field(default="", max_length=255)
