"""Section-aware bullet point census.

Every pass is a fold over the document lines. The fold state carries the current
section (taken from the nearest preceding section header) and the running scan:
the bullet total, bullets per section, the set of line texts already counted and
the sections seen so far. Passes are ordered strategies; the looser ones only run
while the running total is still below the fallback threshold, so each heuristic
can be exercised on its own.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from functools import reduce
from typing import Callable, Sequence

from app.core.config.scoring import scoring_float, scoring_int
from app.detectors.text_utils import split_lines
from app.schemas.ats import BulletSignal, Section, SectionCounts

STANDARD_GLYPHS = (
    "•", "◦", "▪", "▫", "◘", "◙", "◉", "○", "●",
    "✓", "✔", "☑", "✅",
    "→", "⇒", "➜", "➤",
    "□", "■",
)
# U+F0B7 is what many PDF fonts emit for a Symbol-font bullet.
NON_STANDARD_GLYPH = "\uf0b7"
BULLET_GLYPHS = STANDARD_GLYPHS + ("-", "*", NON_STANDARD_GLYPH)

INLINE_BULLET_PATTERNS = (
    re.compile(r"^\s*[•◦▪▫◘◙◉○●]"),
    re.compile(r"^\s*\d+[.)-]\s+"),
    re.compile(r"^\s*[✓✔☑✅]"),
    re.compile(r"^\s*[-*]\s+"),
    re.compile(r"^\s*o\s+"),
    re.compile(r"^\s*[→⇒➜➤]"),
    re.compile(r"^\s*[□■▪▫]"),
)
NUMBERED_ITEM_RE = re.compile(r"^\d+[.)-]\s+")

EXPERIENCE_HEADER_RE = re.compile(
    r"^(?:professional\s+)?experience|work\s+experience|work\s+history|employment|career\s+history",
    re.IGNORECASE,
)
PROJECTS_HEADER_RE = re.compile(r"^projects?|^portfolio|^personal\s+projects", re.IGNORECASE)

HEADER_OR_DATE_PATTERNS = (
    re.compile(
        r"^(?:PROFESSIONAL|EXPERIENCE|EDUCATION|PROJECTS|SKILLS|SUMMARY|LANGUAGES|CERTIFICATIONS"
        r"|LEADERSHIP|WORK\s+HISTORY)",
        re.IGNORECASE,
    ),
    re.compile(r"\d{4}"),
    re.compile(r"^(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)", re.IGNORECASE),
)
HEADER_DATE_OR_COMPANY_PATTERNS = (
    re.compile(
        r"^(?:PROFESSIONAL|EXPERIENCE|EDUCATION|PROJECTS|SKILLS|SUMMARY|LANGUAGES|CERTIFICATIONS"
        r"|LEADERSHIP|WORK\s+HISTORY|Highlights|Lead|Senior|Staff|Accountant|Branch|Cashier)\s+"
        r"(?:Accountant|Developer|Engineer|Manager|Analyst|Specialist|Coordinator|Director|VP|President"
        r"|CEO|CTO|Service)",
        re.IGNORECASE,
    ),
    re.compile(r"\d{4}\s+to\s+(?:Current|Present|\d{4})", re.IGNORECASE),
    re.compile(r"^(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\.?\s+\d{4}", re.IGNORECASE),
    re.compile(
        r"^(?:November|September|March|January|February|April|May|June|July|August|October|December)\s+\d{4}",
        re.IGNORECASE,
    ),
    re.compile(r"^\d{2}/\d{4}"),
    re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+\s+\|", re.IGNORECASE),
    re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+\s+\d{4}", re.IGNORECASE),
    re.compile(r"^Company\s+Name", re.IGNORECASE),
)
JOB_TITLE_RE = re.compile(
    r"^(?:Senior|Junior|Lead|Manager|Developer|Engineer|Analyst|Specialist|Coordinator|Director|VP"
    r"|President|CEO|CTO|Full Stack|Software|Web|Accountant)\s+",
    re.IGNORECASE,
)
NON_LETTERS_RE = re.compile(r"[^a-z]")
NON_ASCII_LETTERS_RE = re.compile(r"[^a-zA-Z]")

ACTION_VERBS = frozenset(
    {
        "managed", "developed", "led", "created", "built", "implemented", "designed", "improved",
        "launched", "optimized", "delivered", "achieved", "increased", "reduced", "established",
        "coordinated", "executed", "transformed", "enhanced", "streamlined", "automated",
        "architected", "deployed", "integrated", "migrated", "scaled", "maintained", "collaborated",
        "mentored", "trained", "supervised", "analyzed", "researched", "evaluated",
        "performed", "prepared", "monitored", "reviewed", "provided", "compiled",
        "filed", "reconciled", "posted", "verified", "acted", "tracked", "identified", "stayed",
    }
)
# Base forms ("develop", "execute", "prepare", "process") let third-person verbs match
# once a trailing "s"/"es" is stripped.
EXTENDED_ACTION_VERBS = ACTION_VERBS | frozenset(
    {
        "develop", "execute", "prepare", "process", "tested", "strengthened", "overlooked", "assessed",
        "ensured", "organized", "completed", "handled", "assisted", "supported", "expanded",
        "initiated", "facilitated", "generated", "produced", "administered", "directed", "guided",
        "influenced", "negotiated", "persuaded", "presented", "promoted", "recommended", "resolved",
        "secured", "solved", "standardized", "structured", "synthesized", "systematized", "validated",
        "wrote", "authored", "composed", "constructed", "cultivated", "demonstrated", "documented",
        "educated", "examined", "explored", "formulated", "fostered", "innovated", "inspired",
        "instructed", "introduced", "investigated", "leveraged", "maximized", "minimized",
        "modernized", "motivated", "navigated", "orchestrated", "overhauled", "pioneered", "planned",
        "positioned", "prioritized", "programmed", "projected", "proposed", "qualified", "quantified",
        "rationalized", "realized", "rebuilt", "recruited", "redesigned", "refined", "regulated",
        "reinforced", "reorganized", "repaired", "replaced", "reported", "represented", "restored",
        "restructured", "retained", "revamped", "revised", "saved", "scheduled", "selected",
        "separated", "served", "simplified", "sorted", "spearheaded", "specialized", "specified",
        "started", "studied", "submitted", "substituted", "succeeded", "suggested", "summarized",
        "supplied", "sustained", "targeted", "taught", "teamed", "transferred", "translated",
        "troubleshot", "turned", "unified", "united", "updated", "upgraded", "utilized", "valued",
        "volunteered", "won",
    }
)


@dataclass(frozen=True)
class BulletRules:
    min_optimal: int
    experience_min: int
    fallback_threshold: int
    implicit_min: int
    experience_implicit_threshold: int
    bullet_line_max_length: int
    content_min_length: int
    lookahead_lines: int
    glyph_max_position: int
    implicit_min_length: int
    implicit_max_length: int
    short_item_min_length: int
    short_item_max_length: int
    short_item_min_words: int
    short_item_max_words: int
    short_item_title_case_ratio: float
    job_title_max_length: int


def load_bullet_rules() -> BulletRules:
    prefix = "parseability.bullets."
    return BulletRules(
        min_optimal=scoring_int(prefix + "min_optimal", 12),
        experience_min=scoring_int(prefix + "experience_min", 8),
        fallback_threshold=scoring_int(prefix + "fallback_threshold", 5),
        implicit_min=scoring_int(prefix + "implicit_min", 3),
        experience_implicit_threshold=scoring_int(prefix + "experience_implicit_threshold", 5),
        bullet_line_max_length=scoring_int(prefix + "bullet_line_max_length", 3),
        content_min_length=scoring_int(prefix + "content_min_length", 10),
        lookahead_lines=scoring_int(prefix + "lookahead_lines", 3),
        glyph_max_position=scoring_int(prefix + "glyph_max_position", 5),
        implicit_min_length=scoring_int(prefix + "implicit_min_length", 20),
        implicit_max_length=scoring_int(prefix + "implicit_max_length", 300),
        short_item_min_length=scoring_int(prefix + "short_item_min_length", 10),
        short_item_max_length=scoring_int(prefix + "short_item_max_length", 60),
        short_item_min_words=scoring_int(prefix + "short_item_min_words", 2),
        short_item_max_words=scoring_int(prefix + "short_item_max_words", 4),
        short_item_title_case_ratio=scoring_float(prefix + "short_item_title_case_ratio", 0.5),
        job_title_max_length=scoring_int(prefix + "job_title_max_length", 80),
    )


@dataclass(frozen=True)
class BulletScan:
    count: int = 0
    by_section: SectionCounts = field(default_factory=SectionCounts)
    processed: frozenset[str] = frozenset()
    sections_found: tuple[Section, ...] = ()

    def record(self, line: str, section: Section) -> "BulletScan":
        return replace(
            self,
            count=self.count + 1,
            by_section=self.by_section.bump(section),
            processed=self.processed | {line},
        )

    def found_section(self, section: Section) -> "BulletScan":
        if section in self.sections_found:
            return self
        return replace(self, sections_found=self.sections_found + (section,))


@dataclass(frozen=True)
class PassState:
    section: Section
    scan: BulletScan

    def record(self, line: str) -> "PassState":
        return replace(self, scan=self.scan.record(line, self.section))


def section_for_line(line: str, current: Section) -> Section:
    """Return the section a line belongs to; header lines switch the section."""
    if EXPERIENCE_HEADER_RE.search(line):
        return "experience"
    if PROJECTS_HEADER_RE.search(line):
        return "projects"
    return current


def enter_line(state: PassState, line: str) -> PassState:
    section = section_for_line(line, state.section)
    if section == "other":
        return state
    return PassState(section=section, scan=state.scan.found_section(section))


LineStep = Callable[[PassState, int, str], PassState]


def fold_lines(lines: Sequence[str], step: LineStep, scan: BulletScan) -> BulletScan:
    """Walk non-empty trimmed lines, tracking sections, and thread the state through step."""

    def advance(state: PassState, item: tuple[int, str]) -> PassState:
        index, raw_line = item
        line = raw_line.strip()
        if not line:
            return state
        return step(enter_line(state, line), index, line)

    return reduce(advance, enumerate(lines), PassState(section="other", scan=scan)).scan


def is_header_or_date(line: str) -> bool:
    return any(pattern.search(line) for pattern in HEADER_OR_DATE_PATTERNS)


def is_header_date_or_company(line: str) -> bool:
    return any(pattern.search(line) for pattern in HEADER_DATE_OR_COMPANY_PATTERNS)


def _lookahead(lines: Sequence[str], index: int, rules: BulletRules) -> list[str]:
    """Trimmed content lines among the next few lines."""
    window = lines[index + 1 : index + 1 + rules.lookahead_lines]
    return [line.strip() for line in window if len(line.strip()) >= rules.content_min_length]


def _is_bullet_only(line: str, lines: Sequence[str], index: int, rules: BulletRules) -> bool:
    if len(line) > rules.bullet_line_max_length:
        return False
    if any(glyph in line for glyph in BULLET_GLYPHS):
        return True
    return bool(_lookahead(lines, index, rules)) and not is_header_or_date(line)


def _next_unprocessed_content(
    lines: Sequence[str], index: int, processed: frozenset[str], rules: BulletRules
) -> str | None:
    for raw_line in lines[index + 1 :]:
        line = raw_line.strip()
        if len(line) >= rules.content_min_length and line not in processed:
            return line
    return None


def separate_line_bullets(lines: Sequence[str], scan: BulletScan, rules: BulletRules) -> BulletScan:
    """A glyph alone on its line counts the next unprocessed content line."""

    def step(state: PassState, index: int, line: str) -> PassState:
        if not _is_bullet_only(line, lines, index, rules):
            return state
        content = _next_unprocessed_content(lines, index, state.scan.processed, rules)
        return state.record(content) if content is not None else state

    return fold_lines(lines, step, scan)


def inline_bullets(lines: Sequence[str], scan: BulletScan, rules: BulletRules) -> BulletScan:
    """A line starting with a glyph or list marker and carrying content counts itself."""

    def step(state: PassState, index: int, line: str) -> PassState:
        if line in state.scan.processed or len(line) < rules.content_min_length:
            return state
        if any(pattern.match(line) for pattern in INLINE_BULLET_PATTERNS):
            return state.record(line)
        return state

    return fold_lines(lines, step, scan)


def loose_glyph_bullets(lines: Sequence[str], scan: BulletScan, rules: BulletRules) -> BulletScan:
    """Accept a standard glyph anywhere in the first few characters of a line."""

    def step(state: PassState, index: int, line: str) -> PassState:
        if line in state.scan.processed:
            return state
        for glyph in STANDARD_GLYPHS:
            position = line.find(glyph)
            if position == -1 or position >= rules.glyph_max_position:
                continue
            if len(line) >= rules.content_min_length:
                return state.record(line)
            following = [content for content in _lookahead(lines, index, rules) if content not in state.scan.processed]
            return state.record(following[0]) if following else state
        return state

    return fold_lines(lines, step, scan)


def numbered_list_bullets(lines: Sequence[str], scan: BulletScan, rules: BulletRules) -> BulletScan:
    def step(state: PassState, index: int, line: str) -> PassState:
        if len(line) < rules.content_min_length or line in state.scan.processed:
            return state
        return state.record(line) if NUMBERED_ITEM_RE.match(line) else state

    return fold_lines(lines, step, scan)


def _is_short_list_item(line: str, rules: BulletRules) -> bool:
    if not rules.short_item_min_length <= len(line) <= rules.short_item_max_length:
        return False
    words = line.split(" ")
    if not rules.short_item_min_words <= len(words) <= rules.short_item_max_words:
        return False
    capitalised = 0
    for word in words:
        letters = NON_ASCII_LETTERS_RE.sub("", word)
        if letters and (letters == letters[0].upper() + letters[1:].lower() or letters.isupper()):
            capitalised += 1
    return capitalised >= len(words) * rules.short_item_title_case_ratio


def implicit_list_items(lines: Sequence[str], scan: BulletScan, rules: BulletRules) -> BulletScan:
    """Short title-case list items add to the total, never to a section."""
    short_items = 0
    verb_lines = 0
    for raw_line in lines:
        line = raw_line.strip()
        if not line or line in scan.processed:
            continue
        if _is_short_list_item(line, rules):
            short_items += 1
            continue
        if line.split(" ")[0].lower() in ACTION_VERBS and len(line) >= rules.implicit_min_length:
            verb_lines += 1

    if short_items >= rules.implicit_min or verb_lines >= rules.implicit_min:
        return replace(scan, count=scan.count + short_items)
    return scan


def _starts_with_action_verb(line: str) -> bool:
    first_word = NON_LETTERS_RE.sub("", line.split(" ")[0].lower())
    return bool({first_word, first_word.rstrip("s"), first_word.rstrip("es")} & EXTENDED_ACTION_VERBS)


def implicit_experience_bullets(lines: Sequence[str], scan: BulletScan, rules: BulletRules) -> BulletScan:
    """Unmarked action-verb lines inside the Experience section count as bullets."""

    def step(state: PassState, index: int, line: str) -> PassState:
        if state.section != "experience":
            return state
        if not rules.implicit_min_length <= len(line) <= rules.implicit_max_length:
            return state
        if line in state.scan.processed or is_header_date_or_company(line):
            return state
        if not _starts_with_action_verb(line):
            return state
        if JOB_TITLE_RE.match(line) and len(line) < rules.job_title_max_length:
            return state
        return state.record(line)

    return fold_lines(lines, step, scan)


Strategy = Callable[[Sequence[str], BulletScan, BulletRules], BulletScan]
Gate = Callable[[BulletScan, BulletRules], bool]


def _always(scan: BulletScan, rules: BulletRules) -> bool:
    return True


def _below_fallback_threshold(scan: BulletScan, rules: BulletRules) -> bool:
    return scan.count < rules.fallback_threshold


def _thin_experience_section(scan: BulletScan, rules: BulletRules) -> bool:
    return "experience" in scan.sections_found and scan.by_section.experience < rules.experience_implicit_threshold


BULLET_STRATEGIES: tuple[tuple[Gate, Strategy], ...] = (
    (_always, separate_line_bullets),
    (_always, inline_bullets),
    (_below_fallback_threshold, loose_glyph_bullets),
    (_below_fallback_threshold, numbered_list_bullets),
    (_below_fallback_threshold, implicit_list_items),
    (_thin_experience_section, implicit_experience_bullets),
)


def run_strategies(
    lines: Sequence[str],
    rules: BulletRules,
    strategies: Sequence[tuple[Gate, Strategy]] = BULLET_STRATEGIES,
) -> BulletScan:
    scan = BulletScan()
    for gate, strategy in strategies:
        if gate(scan, rules):
            scan = strategy(lines, scan, rules)
    return scan


def non_standard_census(lines: Sequence[str], scan: BulletScan, rules: BulletRules) -> SectionCounts:
    """Count short unrecognised marker lines that sit right above uncounted content."""
    census = SectionCounts()
    section: Section = "other"
    for index, raw_line in enumerate(lines):
        line = raw_line.strip()
        if not line:
            continue
        section = section_for_line(line, section)
        if len(line) > rules.bullet_line_max_length or line in scan.processed:
            continue
        following = _lookahead(lines, index, rules)
        if not following or any(content in scan.processed for content in following):
            continue
        if not is_header_or_date(line):
            census = census.bump(section)
    return census


def count_bullet_points(text: str, rules: BulletRules | None = None) -> BulletSignal:
    rules = rules or load_bullet_rules()
    lines = split_lines(text)
    scan = run_strategies(lines, rules)
    census = non_standard_census(lines, scan, rules)

    return BulletSignal(
        count=scan.count,
        is_optimal=scan.count >= rules.min_optimal and scan.by_section.experience >= rules.experience_min,
        by_section=scan.by_section,
        sections_found=scan.sections_found,
        potential_non_standard_bullets=census.experience + census.projects + census.other,
        non_standard_by_section=census,
    )
