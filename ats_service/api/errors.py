import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from ats_service.core.errors import AnalysisError, InvalidRequest
from ats_service.schemas.analysis import ErrorResponse

logger = logging.getLogger(__name__)


async def analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
    if isinstance(exc, InvalidRequest):
        body = ErrorResponse(error=str(exc))
    else:
        logger.error("analysis_failed path=%s kind=%s: %s", request.url.path, exc.code, exc)
        body = ErrorResponse(error="Analysis failed", kind=exc.code, details=str(exc))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))
