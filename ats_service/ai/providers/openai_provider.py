from __future__ import annotations

import logging
import os
import time
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from ats_service.ai.types import ChatMessage, to_payload
from ats_service.core.errors import CompletionFailed

logger = logging.getLogger(__name__)


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 0,
        temperature: float = 0.2,
        response_format: str = "",
    ):
        self._model = model
        self._temperature = temperature
        self._response_format = response_format
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, system_message: str, user_message: str) -> str:
        messages = [
            ChatMessage(role="system", content=system_message),
            ChatMessage(role="user", content=user_message),
        ]
        create_kwargs = {
            "model": self._model,
            "messages": to_payload(messages),
            "temperature": self._temperature,
        }
        if self._response_format == "json":
            create_kwargs["response_format"] = {"type": "json_object"}

        started = time.perf_counter()
        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except OpenAIError as exc:
            logger.warning("openai_completion_failed model=%s prompt_len=%s: %s", self._model, len(user_message), exc)
            raise CompletionFailed(f"Completion request failed: {exc}") from exc

        latency_ms = int((time.perf_counter() - started) * 1000)
        if not response.choices:
            raise CompletionFailed("Completion response contained no choices.")
        content = response.choices[0].message.content or ""
        logger.info("openai_completion_ok model=%s latency_ms=%s reply_len=%s", self._model, latency_ms, len(content))
        return content
