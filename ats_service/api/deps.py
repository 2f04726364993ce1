from fastapi import HTTPException, Request, status

from ats_service.services.analysis_service import AnalysisService
from ats_service.store.db import ResultStore


def get_analysis_service(request: Request) -> AnalysisService:
    service = getattr(request.app.state, "analysis_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analysis service is not initialised.",
        )
    return service


def get_result_store(request: Request) -> ResultStore:
    store = getattr(request.app.state, "result_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Result store is not initialised.",
        )
    return store
