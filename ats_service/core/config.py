from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

SCORE_POLICIES = {"reject", "clamp"}


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_credentials: bool
    rate_limit: str
    rate_limit_enabled: bool
    trust_x_forwarded_for: bool
    max_upload_bytes: int
    score_policy: str
    job_role_label: str
    store_enabled: bool
    store_db_path: str
    store_retention_days: int


settings = Settings(
    api_key=_get_env("API_KEY"),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
    ),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", True),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    trust_x_forwarded_for=_get_env_bool("TRUST_X_FORWARDED_FOR", False),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
    score_policy=(_get_env("SCORE_POLICY", "reject") or "reject").strip().lower(),
    job_role_label=_get_env("ANALYSIS_JOB_ROLE", "Extracted from JD") or "Extracted from JD",
    store_enabled=_get_env_bool("STORE_ENABLED", True),
    store_db_path=_get_env("STORE_DB_PATH", "data/analyses.db") or "data/analyses.db",
    store_retention_days=_get_env_int("STORE_RETENTION_DAYS", 365),
)

if settings.score_policy not in SCORE_POLICIES:
    raise RuntimeError("SCORE_POLICY must be either 'reject' or 'clamp'.")
