from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from ats_service.core.errors import MalformedModelOutput
from ats_service.schemas.analysis import AnalysisResult

logger = logging.getLogger(__name__)

_LEADING_FENCE_RE = re.compile(r"^\s*```[\w+-]*[ \t]*\n?")
_TRAILING_FENCE_RE = re.compile(r"\n?[ \t]*```\s*$")


def strip_code_fences(reply: str) -> str:
    """Remove a markdown code fence wrapped around the model's JSON payload."""
    text = _LEADING_FENCE_RE.sub("", reply, count=1)
    text = _TRAILING_FENCE_RE.sub("", text, count=1)
    return text.strip()


def _apply_score_policy(payload: dict[str, Any], score_policy: str) -> dict[str, Any]:
    score = payload.get("score")
    if score_policy != "clamp" or isinstance(score, bool) or not isinstance(score, int):
        return payload
    clamped = min(100, max(0, score))
    if clamped != score:
        logger.info("model_score_clamped original=%s clamped=%s", score, clamped)
    return {**payload, "score": clamped}


def normalize(reply: str | None, score_policy: str = "reject") -> AnalysisResult:
    """Parse a model reply into an AnalysisResult.

    The reply is fence-stripped, decoded as JSON and then validated against
    the result schema. Any failure raises MalformedModelOutput carrying the
    raw reply. The score must be a JSON integer; strings and floats are
    rejected. With ``score_policy="clamp"`` integer scores outside 0-100 are
    clamped instead of rejected.
    """
    raw = reply or ""
    cleaned = strip_code_fences(raw)
    if not cleaned:
        raise MalformedModelOutput("Model returned an empty reply.", raw_reply=raw)

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedModelOutput(f"Model reply is not valid JSON: {exc}", raw_reply=raw) from exc

    if not isinstance(payload, dict):
        raise MalformedModelOutput("Model reply is not a JSON object.", raw_reply=raw)

    score = payload.get("score")
    if score is not None and (isinstance(score, bool) or not isinstance(score, int)):
        raise MalformedModelOutput(f"Model reply has a non-integer score: {score!r}", raw_reply=raw)

    payload = _apply_score_policy(payload, score_policy)
    for key in ("missingKeywords", "formattingIssues"):
        if payload.get(key) is None:
            payload[key] = []

    try:
        return AnalysisResult.model_validate(payload)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise MalformedModelOutput(f"Model reply does not match the result schema: {problems}", raw_reply=raw) from exc
