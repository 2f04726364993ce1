from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class UploadedDocument:
    content: bytes
    media_type: str
    filename: str = ""


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    score: int = Field(strict=True, ge=0, le=100)
    missing_keywords: list[str] = Field(default_factory=list, alias="missingKeywords")
    formatting_issues: list[str] = Field(default_factory=list, alias="formattingIssues")
    feedback: str


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AnalysisRecord:
    job_role: str
    score: int
    missing_keywords: tuple[str, ...] = ()
    created_at: datetime = field(default_factory=_utc_now)


class ErrorResponse(BaseModel):
    error: str
    kind: str | None = None
    details: str | None = None


class StoredAnalysis(BaseModel):
    id: int
    created_at: str
    job_role: str
    score: int
    missing_keywords: list[str] = Field(default_factory=list)


class AnalysisSummary(BaseModel):
    total: int
    average_score: float | None = None
    top_missing_keywords: list[dict[str, int | str]] = Field(default_factory=list)
