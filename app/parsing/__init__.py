from .models import DocumentParseError, ParsedResume
from .parse import clean_text, count_pdf_pages, parse_document, validate_upload_signature

__all__ = [
    "DocumentParseError",
    "ParsedResume",
    "clean_text",
    "count_pdf_pages",
    "parse_document",
    "validate_upload_signature",
]
