from ats_service.ai.config import load_ai_config
from ats_service.ai.types import CompletionClient

from ats_service.ai.providers.openai_provider import OpenAIProvider


def get_completion_client() -> CompletionClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            temperature=cfg.temperature,
            response_format=cfg.response_format,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
