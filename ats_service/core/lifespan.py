import contextlib
from contextlib import asynccontextmanager
import asyncio
import logging

from ats_service.ai.factory import get_completion_client
from ats_service.core.config import settings
from ats_service.services.analysis_service import AnalysisService
from ats_service.store.db import ResultStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = ResultStore(
        settings.store_db_path,
        enabled=settings.store_enabled,
        retention_days=settings.store_retention_days,
    )
    store.init_db()
    store.purge_old_records()

    app.state.result_store = store
    app.state.analysis_service = AnalysisService(
        get_completion_client(),
        store,
        score_policy=settings.score_policy,
        job_role=settings.job_role_label,
    )

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = await asyncio.to_thread(store.purge_old_records)
                if deleted:
                    logger.info("analysis_retention_purge deleted=%s", deleted)
            except Exception as exc:  # pragma: no cover - defensive guard
                logger.warning("analysis_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=3600)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
