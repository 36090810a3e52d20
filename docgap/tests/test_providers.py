import os
import unittest
from types import SimpleNamespace
from typing import Any

from docgap.core.exceptions import ProviderNotConfiguredError
from docgap.embeddings import EmbeddingManager
from docgap.llm_manager import LLMManager
from docgap.providers.embeddings import GeminiEmbeddingProvider, OpenAIEmbeddingProvider
from docgap.providers.llm import GeminiLLMProvider, OpenAILLMProvider


class _FakeChatCompletions:
    def __init__(self, content: str | None = "ok", error: Exception | None = None):
        self.content = content
        self.error = error
        self.requests: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            choices=[
                SimpleNamespace(
                    message=SimpleNamespace(content=self.content),
                    finish_reason="stop",
                )
            ],
            usage=SimpleNamespace(prompt_tokens=7, completion_tokens=3, total_tokens=10),
        )


class _FakeEmbeddings:
    def __init__(self, embedding: Any = None, error: Exception | None = None):
        self.embedding = embedding if embedding is not None else [0.1, 0.2]
        self.error = error
        self.requests: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            data=[SimpleNamespace(embedding=self.embedding)],
            usage=SimpleNamespace(total_tokens=4),
        )


def _client(
    chat: _FakeChatCompletions | None = None,
    embeddings: _FakeEmbeddings | None = None,
) -> Any:
    return SimpleNamespace(
        chat=SimpleNamespace(completions=chat or _FakeChatCompletions()),
        embeddings=embeddings or _FakeEmbeddings(),
    )


class LLMProviderTests(unittest.IsolatedAsyncioTestCase):
    async def test_complete_sends_messages_and_tracks_usage(self) -> None:
        chat = _FakeChatCompletions(content='  {"outline": "- A"}  ')
        provider = OpenAILLMProvider(model="gpt-4o-mini", client=_client(chat))

        response = await provider.complete("prompt", system="sys")

        self.assertEqual(response.content, '{"outline": "- A"}')
        self.assertEqual(response.tokens_used, 10)
        request = chat.requests[0]
        self.assertEqual(
            request["messages"],
            [{"role": "system", "content": "sys"}, {"role": "user", "content": "prompt"}],
        )
        self.assertEqual(request["max_completion_tokens"], 500)
        self.assertEqual(provider.get_usage_stats()["total_tokens"], 10)

    async def test_gemini_uses_max_tokens(self) -> None:
        chat = _FakeChatCompletions()
        provider = GeminiLLMProvider(model="gemini-2.0-flash", client=_client(chat))

        await provider.complete("prompt", max_completion_tokens=64)

        self.assertEqual(provider.name, "gemini")
        self.assertEqual(chat.requests[0]["max_tokens"], 64)
        self.assertNotIn("max_completion_tokens", chat.requests[0])

    async def test_empty_content_raises(self) -> None:
        provider = OpenAILLMProvider(client=_client(_FakeChatCompletions(content="")))
        with self.assertRaises(RuntimeError):
            await provider.complete("prompt")

    async def test_sdk_error_wrapped(self) -> None:
        error = ConnectionError("connection reset")
        provider = OpenAILLMProvider(client=_client(_FakeChatCompletions(error=error)))

        with self.assertRaises(RuntimeError) as ctx:
            await provider.complete("prompt")
        self.assertIs(ctx.exception.__cause__, error)

    async def test_health_check_reports_unhealthy(self) -> None:
        provider = OpenAILLMProvider(
            client=_client(_FakeChatCompletions(error=RuntimeError("down")))
        )
        self.assertEqual((await provider.health_check())["status"], "unhealthy")

    def test_missing_key_rejected(self) -> None:
        with self.assertRaises(ProviderNotConfiguredError):
            OpenAILLMProvider(api_key=None)
        with self.assertRaises(ProviderNotConfiguredError):
            OpenAILLMProvider(api_key="replace-with-real-key")


class EmbeddingProviderTests(unittest.IsolatedAsyncioTestCase):
    async def test_embed_returns_floats(self) -> None:
        embeddings = _FakeEmbeddings(embedding=[1, 2, 3])
        provider = OpenAIEmbeddingProvider(client=_client(embeddings=embeddings))

        self.assertEqual(await provider.embed("hello"), [1.0, 2.0, 3.0])
        self.assertEqual(
            embeddings.requests[0], {"model": "text-embedding-3-small", "input": "hello"}
        )
        self.assertEqual(provider.get_usage_stats()["requests_made"], 1)

    async def test_invalid_response_raises(self) -> None:
        embeddings = _FakeEmbeddings(embedding="not-a-list")
        provider = OpenAIEmbeddingProvider(client=_client(embeddings=embeddings))
        with self.assertRaises(RuntimeError):
            await provider.embed("hello")

    async def test_sdk_error_wrapped(self) -> None:
        provider = GeminiEmbeddingProvider(
            client=_client(embeddings=_FakeEmbeddings(error=ValueError("bad")))
        )
        with self.assertRaises(RuntimeError):
            await provider.embed("hello")
        self.assertEqual(provider.name, "gemini")


class ManagerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._saved_key = os.environ.pop("OPENAI_API_KEY", None)

    def tearDown(self) -> None:
        if self._saved_key is not None:
            os.environ["OPENAI_API_KEY"] = self._saved_key

    async def test_llm_manager_selects_provider_once(self) -> None:
        manager = LLMManager(
            {"provider": "gemini", "model": "gemini-2.0-flash", "client": _client()}
        )

        provider = manager.get_provider()

        self.assertIsInstance(provider, GeminiLLMProvider)
        self.assertIs(manager.get_provider(), provider)
        self.assertTrue(manager.is_configured())
        self.assertEqual(manager.list_providers(), ["gemini", "openai"])
        self.assertEqual((await manager.health_check())["status"], "healthy")

    def test_llm_manager_unknown_provider(self) -> None:
        with self.assertRaises(ValueError):
            LLMManager({"provider": "nope"})

    def test_llm_manager_missing_key(self) -> None:
        with self.assertRaises(ProviderNotConfiguredError):
            LLMManager({"provider": "openai", "api_key": None})

    def test_embedding_manager(self) -> None:
        manager = EmbeddingManager({"provider": "openai", "client": _client()})
        self.assertIsInstance(manager.get_provider(), OpenAIEmbeddingProvider)

        with self.assertRaises(ValueError):
            EmbeddingManager({"provider": "nope"})


if __name__ == "__main__":
    unittest.main()
