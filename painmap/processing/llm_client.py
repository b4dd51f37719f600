"""
Text-generation capability used by the summary orchestrator.

The orchestrator only depends on ``TextGenerator.generate(prompt) -> str``;
the OpenAI-compatible implementation and the provider error taxonomy live
here so that tests can swap in deterministic stubs.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

import structlog
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI, RateLimitError

from painmap.processing.llm_invocation_adapter import create_route_text

logger = structlog.get_logger(__name__)


class TransportFailureError(Exception):
    """The generation capability produced no usable text."""


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


@dataclass(slots=True)
class LLMChatRoute:
    """One provider/model route for generation calls."""

    provider: str
    model: str
    client: Any
    api_mode: str = "chat_completions"
    request_overrides: dict[str, Any] | None = None


class LLMInvocationErrorCode(StrEnum):
    RATE_LIMIT = "rate_limit"
    PROVIDER_HTTP_5XX = "http_5xx"
    TIMEOUT = "timeout"
    CONNECTION = "connection_error"
    EMPTY_RESPONSE = "empty_response"
    NON_RETRYABLE = "non_retryable"


@dataclass(slots=True, frozen=True)
class LLMInvocationError:
    """
    Diagnostic classification of a provider failure.

    ``retryable`` is informational only: the summary orchestrator retries every
    capability failure within its attempt budget, and ``code`` becomes the
    logged and metered ``reason``.
    """

    code: LLMInvocationErrorCode
    retryable: bool
    status_code: int | None = None


def _extract_status_code(exc: BaseException) -> int | None:
    raw_status = getattr(exc, "status_code", None)
    if isinstance(raw_status, int):
        return raw_status
    response = getattr(exc, "response", None)
    response_status = getattr(response, "status_code", None)
    if isinstance(response_status, int):
        return response_status
    return None


def classify_error(exc: BaseException) -> LLMInvocationError:
    """Map a provider exception to a diagnostic error code."""
    if isinstance(exc, TransportFailureError):
        return LLMInvocationError(code=LLMInvocationErrorCode.EMPTY_RESPONSE, retryable=True)
    if isinstance(exc, RateLimitError):
        return LLMInvocationError(
            code=LLMInvocationErrorCode.RATE_LIMIT,
            retryable=True,
            status_code=429,
        )
    if isinstance(exc, APITimeoutError | TimeoutError):
        return LLMInvocationError(code=LLMInvocationErrorCode.TIMEOUT, retryable=True)
    if isinstance(exc, APIConnectionError | ConnectionError):
        return LLMInvocationError(code=LLMInvocationErrorCode.CONNECTION, retryable=True)

    status_code = _extract_status_code(exc)
    if isinstance(exc, APIStatusError) and status_code is None:
        status_code = 0
    if status_code == 429:
        return LLMInvocationError(
            code=LLMInvocationErrorCode.RATE_LIMIT,
            retryable=True,
            status_code=status_code,
        )
    if status_code is not None and status_code >= 500:
        return LLMInvocationError(
            code=LLMInvocationErrorCode.PROVIDER_HTTP_5XX,
            retryable=True,
            status_code=status_code,
        )
    return LLMInvocationError(
        code=LLMInvocationErrorCode.NON_RETRYABLE,
        retryable=False,
        status_code=status_code,
    )


def error_reason(exc: BaseException) -> str:
    return str(classify_error(exc).code)


def create_client_optional(
    *,
    api_key: str,
    base_url: str | None = None,
    timeout_seconds: float | None = None,
) -> AsyncOpenAI | None:
    if not api_key.strip():
        return None
    client_kwargs: dict[str, Any] = {"api_key": api_key}
    if isinstance(base_url, str) and base_url.strip():
        client_kwargs["base_url"] = base_url.strip()
    if timeout_seconds is not None:
        client_kwargs["timeout"] = timeout_seconds
    return AsyncOpenAI(**client_kwargs)


class OpenAITextGenerator:
    """Generate summary text over an OpenAI-compatible route."""

    def __init__(
        self,
        *,
        route: LLMChatRoute,
        temperature: float = 0.7,
        max_output_tokens: int | None = 200,
    ) -> None:
        self.route = route
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    async def generate(self, prompt: str) -> str:
        text = await create_route_text(
            route=self.route,
            prompt=prompt,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
        if not text.strip():
            logger.warning(
                "LLM returned empty summary text",
                provider=self.route.provider,
                model=self.route.model,
            )
            msg = f"Empty response from {self.route.provider} model '{self.route.model}'"
            raise TransportFailureError(msg)
        return text.strip()
