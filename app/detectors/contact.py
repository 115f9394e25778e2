from __future__ import annotations

import re

from app.core.config.scoring import scoring_int
from app.detectors.text_utils import split_lines
from app.schemas.ats import ContactLocationSignal

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b")
# NANP first, then the secondary international layout.
PHONE_PATTERNS = (
    re.compile(r"\+?1?\s*\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}"),
    re.compile(r"\+?52\s*\(?\d{2}\)?[\s.-]?\d{4}[\s.-]?\d{4}"),
)
LINKEDIN_RE = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/(?:in|pub|profile)/[a-zA-Z0-9_-]+", re.IGNORECASE)
GITHUB_RE = re.compile(r"(?:https?://)?(?:www\.)?github\.com/[a-zA-Z0-9_-]+", re.IGNORECASE)


def _find_phone(text: str) -> re.Match[str] | None:
    for pattern in PHONE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match
    return None


def check_contact_location(text: str) -> ContactLocationSignal:
    """Locate email and phone near the top of the document.

    The first characters and the first lines are checked separately because PDF
    headers are sometimes extracted after a long first line. Contact details that
    show up in the first lines but not in the first characters are flagged as a
    possible header/footer placement.
    """
    head_chars = text[: scoring_int("parseability.contact.check_chars", 300)]
    head_lines = "\n".join(split_lines(text)[: scoring_int("parseability.contact.check_lines", 10)])

    email_match = EMAIL_RE.search(head_chars)
    phone_match = _find_phone(head_chars)
    email_in_lines = EMAIL_RE.search(head_lines) is not None
    phone_in_lines = _find_phone(head_lines) is not None
    email_in_chars = email_match is not None
    phone_in_chars = phone_match is not None

    return ContactLocationSignal(
        email_in_first_300=email_in_chars,
        phone_in_first_300=phone_in_chars,
        email_in_first_10_lines=email_in_lines,
        phone_in_first_10_lines=phone_in_lines,
        email_position=email_match.start() if email_match else None,
        phone_position=phone_match.start() if phone_match else None,
        email_exists=EMAIL_RE.search(text) is not None,
        phone_exists=_find_phone(text) is not None,
        may_be_in_pdf_header=(email_in_lines or phone_in_lines) and not (email_in_chars or phone_in_chars),
        linkedin_exists=LINKEDIN_RE.search(text) is not None,
        github_exists=GITHUB_RE.search(text) is not None,
    )
