import asyncio
import logging
import os
import tempfile

from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status

from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.parsing import DocumentParseError, parse_document, validate_upload_signature
from app.schemas.ats import AnalyzeTextRequest, CombinedAnalysis
from app.services.analysis import analyze_parsed_resume, analyze_resume_text

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_EXTENSIONS = {"pdf", "docx"}


async def _read_upload(upload: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await upload.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"The resume file must not be larger than {settings.max_upload_bytes // (1024 * 1024)}MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


def _page_count_unavailable(file_path: str) -> int:
    # Pasted text has no file behind it; never open a client-supplied path.
    raise DocumentParseError(f"No document available to count pages for '{file_path}'.")


def _analyze_upload(filename: str, content: bytes, mime_type: str) -> CombinedAnalysis:
    validate_upload_signature(filename=filename, content=content)
    suffix = "." + filename.rsplit(".", 1)[-1].lower()
    tmp = tempfile.NamedTemporaryFile(suffix=suffix, delete=False)
    try:
        with tmp:
            tmp.write(content)
        parsed = parse_document(tmp.name, mime_type)
        return analyze_parsed_resume(parsed)
    finally:
        try:
            os.unlink(tmp.name)
        except OSError:
            logger.warning("resume_upload_cleanup_failed path=%s", tmp.name)


@router.post("/resume/analyze", response_model=CombinedAnalysis)
@rate_limit()
async def analyze_resume(request: Request, resume: UploadFile | None = File(default=None)):
    _ = request
    if resume is None or not resume.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please select a resume file to upload.")

    filename = resume.filename
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The resume must be a PDF or DOCX file.")

    content = await _read_upload(resume)
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The uploaded file is invalid.")

    try:
        return await asyncio.to_thread(_analyze_upload, filename, content, resume.content_type or "")
    except DocumentParseError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/resume/analyze-text", response_model=CombinedAnalysis)
@rate_limit()
async def analyze_text(request: Request, payload: AnalyzeTextRequest):
    _ = request
    if not payload.text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Resume text must not be empty.")
    return await asyncio.to_thread(
        analyze_resume_text,
        payload.text,
        mime_type=payload.mime_type,
        file_path=payload.file_name,
        page_counter=_page_count_unavailable,
    )
