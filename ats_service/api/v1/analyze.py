from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from ats_service.api.deps import get_analysis_service
from ats_service.core.config import settings
from ats_service.core.errors import InvalidRequest
from ats_service.core.rate_limit import rate_limit
from ats_service.schemas.analysis import AnalysisResult, ErrorResponse, UploadedDocument
from ats_service.services.analysis_service import AnalysisService

router = APIRouter()

_READ_CHUNK_BYTES = 1024 * 64


async def _read_upload(file: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(_READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise InvalidRequest(
                f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
                status_code=413,
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Analyze Resume",
    description="Score a PDF or DOCX resume against a job description.",
)
@rate_limit()
async def analyze_resume(
    request: Request,
    resume: UploadFile | None = File(default=None),
    job_description: str | None = Form(default=None, alias="jobDescription"),
    service: AnalysisService = Depends(get_analysis_service),
):
    _ = request
    document = None
    if resume is not None:
        document = UploadedDocument(
            content=await _read_upload(resume),
            media_type=resume.content_type or "",
            filename=resume.filename or "uploaded-file",
        )
    return await service.analyze(document, job_description)
