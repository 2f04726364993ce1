from __future__ import annotations

import asyncio
import hashlib
import logging

from ats_service.ai.types import CompletionClient
from ats_service.core.errors import AnalysisError, CompletionFailed, InvalidRequest
from ats_service.normalize.response import normalize
from ats_service.parsing.extract import extract
from ats_service.prompt.analysis import build_prompt
from ats_service.schemas.analysis import AnalysisRecord, AnalysisResult, UploadedDocument
from ats_service.store.db import ResultStore

logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "Resume file and Job Description are required"


def _short_hash(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()[:12]


class AnalysisService:
    """Runs one résumé against one job description.

    Stages run strictly in order: validate, extract, prompt, complete,
    normalize, then a best-effort store write. Any failure before the
    result is normalized ends the request.
    """

    def __init__(
        self,
        completion_client: CompletionClient,
        store: ResultStore,
        *,
        score_policy: str = "reject",
        job_role: str = "Extracted from JD",
    ):
        self._completion_client = completion_client
        self._store = store
        self._score_policy = score_policy
        self._job_role = job_role

    async def analyze(self, document: UploadedDocument | None, job_description: str | None) -> AnalysisResult:
        if document is None or not document.content or not (job_description or "").strip():
            raise InvalidRequest(MISSING_INPUT_MESSAGE)

        doc_hash = _short_hash(document.content)
        logger.info(
            "analysis_started doc=%s media_type=%s bytes=%s jd_len=%s",
            doc_hash,
            document.media_type,
            len(document.content),
            len(job_description),
        )

        try:
            resume_text = await asyncio.to_thread(extract, document.content, document.media_type)
        except AnalysisError as exc:
            logger.warning("analysis_extraction_failed doc=%s media_type=%s: %s", doc_hash, document.media_type, exc)
            raise
        logger.info("analysis_text_extracted doc=%s chars=%s", doc_hash, len(resume_text))

        prompt = build_prompt(resume_text, job_description)
        try:
            reply = await self._completion_client.complete(prompt.system, prompt.user)
        except CompletionFailed:
            raise
        except Exception as exc:
            logger.exception("analysis_completion_failed doc=%s", doc_hash)
            raise CompletionFailed(f"Completion request failed: {exc}") from exc

        try:
            result = normalize(reply, score_policy=self._score_policy)
        except AnalysisError as exc:
            logger.warning("analysis_malformed_output doc=%s reply=%r: %s", doc_hash, (reply or "")[:500], exc)
            raise

        await self.record_best_effort(result)
        logger.info("analysis_completed doc=%s score=%s", doc_hash, result.score)
        return result

    async def record_best_effort(self, result: AnalysisResult) -> None:
        """Persist an audit record; failures are logged and never raised."""
        record = AnalysisRecord(
            job_role=self._job_role,
            score=result.score,
            missing_keywords=tuple(result.missing_keywords),
        )
        try:
            await asyncio.to_thread(self._store.save, record)
        except Exception:
            logger.warning("analysis_store_failed (non-fatal) score=%s", record.score, exc_info=True)
