from __future__ import annotations

from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError, AsyncOpenAI, RateLimitError

from painmap.processing.llm_client import (
    LLMChatRoute,
    LLMInvocationErrorCode,
    OpenAITextGenerator,
    TransportFailureError,
    classify_error,
    create_client_optional,
    error_reason,
)

pytestmark = pytest.mark.unit

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class _HttpStatusError(Exception):
    def __init__(self, status_code: int):
        super().__init__(f"status {status_code}")
        self.status_code = status_code


def _route(content: str | None) -> LLMChatRoute:
    class ChatCompletions:
        async def create(self, **kwargs):
            _ = kwargs
            return SimpleNamespace(
                choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
            )

    return LLMChatRoute(
        provider="openai",
        model="gpt-4.1-mini",
        client=SimpleNamespace(chat=SimpleNamespace(completions=ChatCompletions())),
    )


def test_classify_error_maps_provider_failures() -> None:
    rate_limited = RateLimitError(
        "slow down",
        response=httpx.Response(429, request=_REQUEST),
        body=None,
    )

    assert classify_error(rate_limited).code == LLMInvocationErrorCode.RATE_LIMIT
    assert classify_error(TimeoutError("late")).code == LLMInvocationErrorCode.TIMEOUT
    assert (
        classify_error(APIConnectionError(request=_REQUEST)).code
        == LLMInvocationErrorCode.CONNECTION
    )
    assert classify_error(_HttpStatusError(503)).code == LLMInvocationErrorCode.PROVIDER_HTTP_5XX
    assert classify_error(_HttpStatusError(429)).retryable is True
    assert classify_error(_HttpStatusError(400)).code == LLMInvocationErrorCode.NON_RETRYABLE
    assert classify_error(ValueError("bad")).retryable is False


def test_error_reason_reports_empty_responses() -> None:
    assert error_reason(TransportFailureError("empty")) == "empty_response"


def test_create_client_optional_requires_api_key() -> None:
    assert create_client_optional(api_key="   ") is None
    client = create_client_optional(
        api_key="test-key",  # pragma: allowlist secret
        base_url=" https://llm.example.com/v1 ",
        timeout_seconds=5,
    )

    assert isinstance(client, AsyncOpenAI)
    assert str(client.base_url).startswith("https://llm.example.com/v1")


@pytest.mark.asyncio
async def test_openai_text_generator_returns_stripped_text() -> None:
    generator = OpenAITextGenerator(route=_route("  You logged 3 entries.  "))

    assert await generator.generate("prompt") == "You logged 3 entries."


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, "", "   \n"])
async def test_openai_text_generator_raises_on_empty_text(content: str | None) -> None:
    generator = OpenAITextGenerator(route=_route(content))

    with pytest.raises(TransportFailureError, match="Empty response from openai model"):
        await generator.generate("prompt")
