"""Content-presence detectors: dates, candidate name, summary and section headers."""

from __future__ import annotations

import re

from app.core.config.scoring import scoring_int
from app.detectors.text_utils import count_words, split_lines
from app.schemas.ats import DateSignal, NameSignal, SectionPresenceSignal, SummarySignal

MONTHS = (
    "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec|January|February|March|April|May|June"
    "|July|August|September|October|November|December"
)

# Patterns are counted independently, so "Jan 2020" counts once as a month date
# and once as a bare year.
VALID_DATE_PATTERNS = (
    re.compile(r"\b(?:19|20)\d{2}[-./](?:0[1-9]|1[0-2])[-./](?:0[1-9]|[12][0-9]|3[01])\b"),
    re.compile(r"\b(?:0[1-9]|1[0-2])[-./](?:19|20)\d{2}\b"),
    re.compile(rf"\b(?:{MONTHS})\s+(?:19|20)\d{{2}}\b", re.IGNORECASE),
    re.compile(r"\b(?:19|20)\d{2}\b"),
)
PLACEHOLDER_DATE_RE = re.compile(r"\b(?:19|20)XX\b", re.IGNORECASE)

PLACEHOLDER_MESSAGE = (
    'Resume contains date placeholders (e.g., "20XX") instead of actual dates. ATS systems cannot '
    'parse placeholder dates - you must include real dates (e.g., "2023", "Jan 2023", "2023-2024").'
)
NO_DATES_MESSAGE = (
    "No dates found in work experience or education sections. ATS systems require dates to verify "
    "employment history and education timeline."
)

COMMON_HEADERS = (
    "experience",
    "education",
    "skills",
    "summary",
    "profile",
    "objective",
    "contact",
    "professional",
    "technical",
)
TITLE_CASE_NAME_RE = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z]\.?)?\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?$")
FALLBACK_TITLE_CASE_RE = re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+")
FALLBACK_ALL_CAPS_RE = re.compile(r"^[A-Z]+\s+[A-Z]+")

SUMMARY_HEADER_RE = re.compile(
    r"\b(?:summary|profile|professional\s+summary|executive\s+summary|career\s+summary|objective"
    r"|career\s+objective)\b",
    re.IGNORECASE,
)

SECTION_PATTERNS = {
    "experience": re.compile(
        r"\b(?:work\s+)?experience\b|\bemployment\b|\bprofessional\s+experience\b"
        r"|\bcareer\s+history\b|\bwork\s+history\b",
        re.IGNORECASE,
    ),
    "education": re.compile(r"\beducation\b|\bacademic\b|\bqualifications?\b|\bcredentials?\b|\bdegrees?\b", re.IGNORECASE),
    "skills": re.compile(
        r"\b(?:technical\s+)?skills\b|\bcore\s+competencies\b|\bproficiencies\b|\bcompetencies\b"
        r"|\bexpertise\b|\btechnologies?\b",
        re.IGNORECASE,
    ),
}


def check_dates(text: str) -> DateSignal:
    date_count = sum(len(pattern.findall(text)) for pattern in VALID_DATE_PATTERNS)
    placeholder_count = len(PLACEHOLDER_DATE_RE.findall(text))
    has_valid_dates = date_count >= scoring_int("parseability.dates.min_count", 2)

    if placeholder_count > 0:
        return DateSignal(
            has_valid_dates=has_valid_dates,
            has_placeholders=True,
            date_count=date_count,
            placeholder_count=placeholder_count,
            message=PLACEHOLDER_MESSAGE,
        )
    if not has_valid_dates:
        return DateSignal(
            has_valid_dates=False,
            has_placeholders=False,
            date_count=date_count,
            placeholder_count=0,
            message=NO_DATES_MESSAGE,
        )
    return DateSignal(
        has_valid_dates=True,
        has_placeholders=False,
        date_count=date_count,
        placeholder_count=0,
        message="Dates found and appear to be valid",
    )


def _is_header(line: str) -> bool:
    lowered = line.lower()
    return any(header in lowered for header in COMMON_HEADERS)


def _is_all_caps(line: str) -> bool:
    letters = [char for char in line if char.isalpha()]
    return bool(letters) and all(char.isupper() for char in letters)


def check_name(text: str) -> NameSignal:
    """Look for a 2-4 word name line at the very top of the document."""
    head = text[: scoring_int("parseability.name.check_chars", 200)]
    candidates = [line for line in split_lines(head) if line][: scoring_int("parseability.name.check_lines", 5)]
    max_line_length = scoring_int("parseability.name.max_line_length", 50)
    min_words = scoring_int("parseability.name.min_words", 2)
    max_words = scoring_int("parseability.name.max_words", 4)

    for raw_line in candidates:
        line = raw_line.strip()
        if not line or len(line) > max_line_length:
            continue
        if not (_is_all_caps(line) or TITLE_CASE_NAME_RE.match(line)):
            continue
        word_count = len(line.split(" "))
        if not _is_header(line) and min_words <= word_count <= max_words:
            return NameSignal(has_name=True, name=line)

    fallback = text[: scoring_int("parseability.name.fallback_chars", 100)]
    match = FALLBACK_TITLE_CASE_RE.match(fallback)
    if match:
        return NameSignal(has_name=True, name=match.group(0))

    match = FALLBACK_ALL_CAPS_RE.match(fallback)
    if match:
        name = match.group(0).strip()
        if not _is_header(name) and len(name) <= scoring_int("parseability.name.max_caps_length", 30):
            return NameSignal(has_name=True, name=name)

    return NameSignal(has_name=False, name=None)


def check_summary(text: str) -> SummarySignal:
    match = SUMMARY_HEADER_RE.search(text)
    if match is None:
        return SummarySignal(has_summary=False, message="No summary or profile header found")

    window = text[match.start() : match.start() + scoring_int("parseability.summary.check_chars", 300)]
    if count_words(window) >= scoring_int("parseability.summary.min_words", 20):
        return SummarySignal(has_summary=True, message="Summary section found")
    return SummarySignal(has_summary=False, message="Summary header found without enough content")


def detect_sections(text: str) -> SectionPresenceSignal:
    return SectionPresenceSignal(
        **{section: pattern.search(text) is not None for section, pattern in SECTION_PATTERNS.items()}
    )
