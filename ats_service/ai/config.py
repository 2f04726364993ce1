import os
from dataclasses import dataclass

SUPPORTED_RESPONSE_FORMATS = {"", "json"}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    base_url: str | None = None
    timeout_s: float = 60.0
    max_retries: int = 0
    temperature: float = 0.2
    response_format: str = ""


def _env_number(name: str, default, cast):
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        return default


def load_ai_config() -> AIConfig:
    """Completion settings; the defaults make one attempt bounded by a 60s timeout."""
    response_format = (os.getenv("OPENAI_RESPONSE_FORMAT") or "").strip().lower()
    if response_format not in SUPPORTED_RESPONSE_FORMATS:
        raise ValueError(f"Unsupported OPENAI_RESPONSE_FORMAT='{response_format}'")

    return AIConfig(
        provider=os.getenv("AI_PROVIDER", "openai").strip().lower(),
        model=os.getenv("AI_MODEL", "gpt-3.5-turbo").strip(),
        base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or None,
        timeout_s=max(1.0, _env_number("OPENAI_TIMEOUT_S", 60.0, float)),
        max_retries=max(0, _env_number("OPENAI_MAX_RETRIES", 0, int)),
        temperature=_env_number("AI_TEMPERATURE", 0.2, float),
        response_format=response_format,
    )
