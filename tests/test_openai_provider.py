import asyncio
import os
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

from openai import OpenAIError

from ats_service.ai.config import load_ai_config
from ats_service.ai.factory import get_completion_client
from ats_service.ai.providers.openai_provider import OpenAIProvider
from ats_service.core.errors import CompletionFailed


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class OpenAIProviderTests(unittest.TestCase):
    def setUp(self):
        self.provider = OpenAIProvider(model="gpt-3.5-turbo", api_key="sk-test")

    def test_complete_sends_system_and_user_messages(self):
        create = AsyncMock(return_value=_response('{"score": 1}'))
        with patch.object(self.provider._client.chat.completions, "create", create):
            reply = asyncio.run(self.provider.complete("be strict", "analyze this"))

        self.assertEqual(reply, '{"score": 1}')
        kwargs = create.call_args.kwargs
        self.assertEqual(kwargs["model"], "gpt-3.5-turbo")
        self.assertEqual(
            kwargs["messages"],
            [{"role": "system", "content": "be strict"}, {"role": "user", "content": "analyze this"}],
        )

    def test_api_error_becomes_completion_failed(self):
        create = AsyncMock(side_effect=OpenAIError("invalid api key"))
        with patch.object(self.provider._client.chat.completions, "create", create):
            with self.assertRaises(CompletionFailed) as ctx:
                asyncio.run(self.provider.complete("s", "u"))
        self.assertIn("invalid api key", str(ctx.exception))

    def test_empty_choices_become_completion_failed(self):
        create = AsyncMock(return_value=SimpleNamespace(choices=[]))
        with patch.object(self.provider._client.chat.completions, "create", create):
            with self.assertRaises(CompletionFailed):
                asyncio.run(self.provider.complete("s", "u"))

    def test_missing_api_key_raises(self):
        with patch.dict(os.environ, {"OPENAI_API_KEY": ""}):
            with self.assertRaises(RuntimeError):
                OpenAIProvider(model="gpt-3.5-turbo")

    def test_factory_rejects_unknown_provider(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "gemini"}):
            with self.assertRaises(ValueError):
                get_completion_client()

    def test_factory_builds_openai_provider(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "openai", "AI_MODEL": "gpt-4o-mini", "OPENAI_API_KEY": "sk-test"}):
            client = get_completion_client()
        self.assertIsInstance(client, OpenAIProvider)
        self.assertEqual(client.model, "gpt-4o-mini")

    def test_json_response_format_is_requested(self):
        provider = OpenAIProvider(model="gpt-3.5-turbo", api_key="sk-test", response_format="json")
        create = AsyncMock(return_value=_response("{}"))
        with patch.object(provider._client.chat.completions, "create", create):
            asyncio.run(provider.complete("s", "u"))
        self.assertEqual(create.call_args.kwargs["response_format"], {"type": "json_object"})


class AIConfigTests(unittest.TestCase):
    def test_defaults_make_a_single_bounded_attempt(self):
        with patch.dict(os.environ, {"OPENAI_TIMEOUT_S": "", "OPENAI_MAX_RETRIES": "", "AI_MODEL": "gpt-3.5-turbo"}):
            cfg = load_ai_config()
        self.assertEqual(cfg.max_retries, 0)
        self.assertEqual(cfg.timeout_s, 60.0)
        self.assertEqual(cfg.model, "gpt-3.5-turbo")

    def test_invalid_numbers_fall_back_to_defaults(self):
        with patch.dict(os.environ, {"OPENAI_TIMEOUT_S": "soon", "OPENAI_MAX_RETRIES": "-3"}):
            cfg = load_ai_config()
        self.assertEqual(cfg.timeout_s, 60.0)
        self.assertEqual(cfg.max_retries, 0)

    def test_unknown_response_format_is_rejected(self):
        with patch.dict(os.environ, {"OPENAI_RESPONSE_FORMAT": "xml"}):
            with self.assertRaises(ValueError):
                load_ai_config()


if __name__ == "__main__":
    unittest.main()
