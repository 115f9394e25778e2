from __future__ import annotations

import logging
import re
from io import BytesIO
from pathlib import Path
from zipfile import BadZipFile, ZipFile

from .models import DOCX_MIME_TYPE, SOURCE_MIME_TYPES, DocumentParseError, ParsedResume

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")

NON_PRINTABLE_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
HORIZONTAL_SPACE_RE = re.compile(r"[ \t]+")
EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


def clean_text(text: str) -> str:
    """Normalise extracted text: printable characters only, \\n line endings, single spaces."""
    text = NON_PRINTABLE_RE.sub("", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = HORIZONTAL_SPACE_RE.sub(" ", text)
    text = EXCESS_NEWLINES_RE.sub("\n\n", text)
    return text.strip()


def count_pdf_pages(file_path: str) -> int:
    from pypdf import PdfReader

    return len(PdfReader(str(file_path)).pages)


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
    except BadZipFile:
        return False
    return any(name.startswith(prefix) for name in names for prefix in prefixes)


def validate_upload_signature(*, filename: str, content: bytes) -> None:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext == "doc":
        raise DocumentParseError("Legacy .doc is not supported. Convert to .docx.")

    if ext == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise DocumentParseError("File signature does not match .pdf content.")
        return

    if ext == "docx":
        if not _is_zip_payload(content) or not _zip_has_paths(content, ("word/",)):
            raise DocumentParseError("File signature does not match .docx content.")
        return

    raise DocumentParseError("The resume must be a PDF or DOCX file.")


def _parse_txt(file_path: Path) -> tuple[str, int | None, list[str]]:
    return file_path.read_text(encoding="utf-8", errors="replace"), None, []


def _parse_pdf(file_path: Path) -> tuple[str, int | None, list[str]]:
    from pypdf import PdfReader

    warnings: list[str] = []
    try:
        reader = PdfReader(str(file_path))
        text_parts: list[str] = []
        for page in reader.pages:
            page_text = (page.extract_text() or "").strip()
            if page_text:
                text_parts.append(page_text)
        page_count = len(reader.pages)
    except Exception as exc:
        logger.error("resume_parse_failed source=pdf file=%s: %s", file_path.name, exc)
        raise DocumentParseError("Failed to parse PDF file. Please ensure the file is not corrupted.") from exc

    if not text_parts:
        warnings.append("No extractable text found in PDF.")
    return "\n".join(text_parts), page_count, warnings


def _parse_docx(file_path: Path) -> tuple[str, int | None, list[str]]:
    from docx import Document

    warnings: list[str] = []
    try:
        document = Document(str(file_path))
        paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    except Exception as exc:
        logger.error("resume_parse_failed source=docx file=%s: %s", file_path.name, exc)
        raise DocumentParseError("Failed to parse DOCX file. Please ensure the file is not corrupted.") from exc

    if not paragraphs:
        warnings.append("No extractable text found in DOCX.")
    return "\n".join(paragraphs), None, warnings


def parse_document(file_path: str, mime_type: str = "") -> ParsedResume:
    """Extract cleaned text from a .pdf, .docx or .txt resume.

    The file extension decides the parser, with the MIME type as fallback for
    uploads stored without a suffix. A document with no extractable text raises
    DocumentParseError; PDFs keep their page count so scanned images can still be
    reported by the caller.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Input document not found: '{path}'")

    extension = path.suffix.lower().lstrip(".")
    mime = (mime_type or "").strip().lower()
    if extension == "pdf" or mime == SOURCE_MIME_TYPES["pdf"]:
        source_type = "pdf"
        text, page_count, warnings = _parse_pdf(path)
    elif extension == "docx" or mime == DOCX_MIME_TYPE or "wordprocessingml" in mime:
        source_type = "docx"
        text, page_count, warnings = _parse_docx(path)
    elif extension == "txt" or mime == SOURCE_MIME_TYPES["txt"]:
        source_type = "txt"
        text, page_count, warnings = _parse_txt(path)
    else:
        raise DocumentParseError(
            f"Unsupported file type '{extension or mime}'. Only PDF and DOCX files are supported."
        )

    cleaned = clean_text(text)
    if not cleaned and source_type != "pdf":
        raise DocumentParseError(f"Unable to extract text from {source_type.upper()}. The file may be corrupted or empty.")

    return ParsedResume(
        source_type=source_type,
        mime_type=SOURCE_MIME_TYPES[source_type],
        file_path=str(path),
        text=cleaned,
        page_count=page_count,
        parsing_warnings=warnings,
    )
