from __future__ import annotations

import re
from typing import Callable

NON_PRINTABLE_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
WHITESPACE_RE = re.compile(r"\s+")
WORD_STRIP_RE = re.compile(r"[^\w\-.@/]")

PDF_MIME_TYPE = "application/pdf"

PageCounter = Callable[[str], int]


def split_lines(text: str) -> list[str]:
    return text.split("\n")


def count_words(text: str) -> int:
    """Whitespace token count that keeps emails, URLs and hyphenated words whole."""
    collapsed = WHITESPACE_RE.sub(" ", text.strip())
    collapsed = NON_PRINTABLE_RE.sub("", collapsed)
    count = 0
    for token in collapsed.split():
        if WORD_STRIP_RE.sub("", token).strip():
            count += 1
    return count


def is_pdf_source(file_path: str, mime_type: str) -> bool:
    return mime_type == PDF_MIME_TYPE or file_path.lower().endswith(".pdf")
