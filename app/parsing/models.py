from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME_TYPE = "text/plain"

SOURCE_MIME_TYPES = {
    "pdf": PDF_MIME_TYPE,
    "docx": DOCX_MIME_TYPE,
    "txt": TEXT_MIME_TYPE,
}


class DocumentParseError(ValueError):
    """Raised when a resume document cannot be turned into analysable text."""


class ParsedResume(BaseModel):
    source_type: str
    mime_type: str
    file_path: str
    text: str
    page_count: int | None = None
    parsing_warnings: list[str] = Field(default_factory=list)

    @field_validator("source_type")
    @classmethod
    def _validate_source_type(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in SOURCE_MIME_TYPES:
            raise ValueError("source_type must be one of: pdf, docx, txt")
        return normalized
