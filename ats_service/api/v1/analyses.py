from fastapi import APIRouter, Depends, Header, Query

from ats_service.api.deps import get_result_store
from ats_service.core.security import check_api_key
from ats_service.schemas.analysis import AnalysisSummary, StoredAnalysis
from ats_service.store.db import ResultStore

router = APIRouter()


def _auth(x_api_key: str | None = Header(default=None, alias="X-API-Key")):
    check_api_key(x_api_key)


@router.get("/analyses/latest", response_model=list[StoredAnalysis])
def latest(
    limit: int = Query(default=20, ge=1, le=200),
    _: None = Depends(_auth),
    store: ResultStore = Depends(get_result_store),
):
    return store.get_latest(limit=limit)


@router.get("/analyses/summary", response_model=AnalysisSummary)
def summary(
    _: None = Depends(_auth),
    store: ResultStore = Depends(get_result_store),
):
    return store.get_summary()
