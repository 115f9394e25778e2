"""Layout detectors: scanned-image PDFs, table structures and multi-column text."""

from __future__ import annotations

import logging
import re

from app.core.config.scoring import scoring_int
from app.detectors.text_utils import PageCounter, is_pdf_source, split_lines
from app.schemas.ats import MultiColumnSignal, TableSignal, TextExtractabilitySignal

logger = logging.getLogger(__name__)

TABLE_GAP_RE = re.compile(r"\s{3,}")
TABLE_SPLIT_RE = re.compile(r"\s{3,}|\t+")
EDGE_ALIGNED_RE = re.compile(r"^.{1,20}.*\s{10,}.*.{1,20}$")

SCANNED_MULTI_PAGE_MESSAGE = (
    "PDF appears to be a scanned image. ATS systems cannot extract text from images. "
    "Consider using OCR or recreating as a text-based PDF."
)
SCANNED_MINIMAL_TEXT_MESSAGE = (
    "PDF appears to be a scanned image with minimal text extraction. "
    "ATS systems may struggle to parse this document."
)
TABLES_MESSAGE = (
    "Table-like structure detected. ATS systems often fail to parse tables correctly, causing text "
    "to be scrambled or lost. Consider using simple bullet points instead."
)
MULTI_COLUMN_MESSAGE = (
    "Multi-column layout detected. ATS systems read text left-to-right, top-to-bottom. "
    "Multi-column layouts can cause text to be read in the wrong order."
)


def check_text_extractability(
    text: str,
    *,
    file_path: str,
    mime_type: str,
    page_counter: PageCounter,
) -> TextExtractabilitySignal:
    """Flag PDFs whose extracted text is too short to be anything but a scanned image.

    Only PDF sources are checked. When the page count cannot be read the document is
    assumed to be text-based, so a lookup failure never produces a critical issue.
    """
    if not is_pdf_source(file_path, mime_type):
        return TextExtractabilitySignal(is_scanned_image=False, message="Not a PDF file")

    try:
        page_count = int(page_counter(file_path))
    except Exception as exc:  # noqa: BLE001 - page lookup is best effort
        logger.warning("parseability_page_count_failed check=text_extractability file=%s: %s", file_path, exc)
        return TextExtractabilitySignal(is_scanned_image=False, message="Could not verify text extractability")

    text_length = len(text.strip())
    if text_length < scoring_int("parseability.text_extractability.min_chars_multi_page", 50) and page_count > 1:
        return TextExtractabilitySignal(
            is_scanned_image=True,
            message=SCANNED_MULTI_PAGE_MESSAGE,
            page_count=page_count,
            text_length=text_length,
        )
    if text_length < scoring_int("parseability.text_extractability.min_chars_single_page", 20):
        return TextExtractabilitySignal(
            is_scanned_image=True,
            message=SCANNED_MINIMAL_TEXT_MESSAGE,
            page_count=page_count,
            text_length=text_length,
        )
    return TextExtractabilitySignal(
        is_scanned_image=False,
        message="Text extraction successful",
        page_count=page_count,
        text_length=text_length,
    )


def detect_tables(text: str) -> TableSignal:
    min_columns = scoring_int("parseability.tables.min_columns", 3)
    table_lines: list[int] = []

    for line_number, line in enumerate(split_lines(text), start=1):
        if not TABLE_GAP_RE.search(line) and "\t" not in line:
            continue
        columns = [column for column in TABLE_SPLIT_RE.split(line.strip()) if column.strip()]
        if len(columns) >= min_columns:
            table_lines.append(line_number)

    has_tables = len(table_lines) >= scoring_int("parseability.tables.min_lines", 3)
    reported = scoring_int("parseability.tables.reported_lines", 5)
    return TableSignal(
        has_tables=has_tables,
        message=TABLES_MESSAGE if has_tables else "No table structure detected",
        table_line_count=len(table_lines),
        approximate_lines=tuple(table_lines[:reported]) if has_tables else (),
    )


def detect_multi_column_layout(text: str) -> MultiColumnSignal:
    """Count adjacent-line patterns typical of text read across two columns.

    Three patterns are counted over the first lines of the document: a short line
    followed by a long one, a line with text pinned to both edges, and a line whose
    length differs sharply from both of its neighbours.
    """
    lines = split_lines(text)
    short_line = scoring_int("parseability.multi_column.short_line", 30)
    long_line = scoring_int("parseability.multi_column.long_line", 80)
    length_diff = scoring_int("parseability.multi_column.length_diff", 60)
    limit = min(scoring_int("parseability.multi_column.check_lines", 50), len(lines) - 1)

    suspicious = 0
    for index in range(max(0, limit)):
        current = lines[index].strip()
        following = lines[index + 1].strip()
        if not current or not following:
            continue

        current_length = len(current)
        following_length = len(following)

        if current_length < short_line and following_length > long_line:
            suspicious += 1

        if EDGE_ALIGNED_RE.match(current):
            suspicious += 1

        if index > 0:
            previous_length = len(lines[index - 1].strip())
            if (
                abs(current_length - previous_length) > length_diff
                and abs(current_length - following_length) > length_diff
            ):
                suspicious += 1

    min_patterns = scoring_int("parseability.multi_column.min_patterns", 10)
    high_patterns = scoring_int("parseability.multi_column.high_confidence_patterns", 20)
    has_multi_column = suspicious >= min_patterns
    if suspicious >= high_patterns:
        confidence = "high"
    elif suspicious >= min_patterns:
        confidence = "medium"
    else:
        confidence = "low"

    return MultiColumnSignal(
        has_multi_column=has_multi_column,
        message=MULTI_COLUMN_MESSAGE if has_multi_column else "No multi-column layout detected",
        confidence=confidence,
        suspicious_patterns=suspicious,
    )
