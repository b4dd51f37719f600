"""
Adapter layer for chat-completions vs responses API invocation.
"""

from __future__ import annotations

from typing import Any


def _to_responses_input(messages: list[dict[str, str]]) -> list[dict[str, Any]]:
    converted: list[dict[str, Any]] = []
    for message in messages:
        role = str(message.get("role", "user") or "user")
        content = str(message.get("content", ""))
        converted.append(
            {
                "role": role,
                "content": [{"type": "input_text", "text": content}],
            }
        )
    return converted


def _extract_responses_output_text(response: Any) -> str:
    direct_text = getattr(response, "output_text", None)
    if isinstance(direct_text, str) and direct_text.strip():
        return direct_text.strip()

    output = getattr(response, "output", None)
    if not isinstance(output, list):
        return ""

    chunks: list[str] = []
    for item in output:
        content = getattr(item, "content", None)
        if not isinstance(content, list):
            continue
        for segment in content:
            segment_text = getattr(segment, "text", None)
            if isinstance(segment_text, str) and segment_text.strip():
                chunks.append(segment_text.strip())
    return "\n".join(chunks).strip()


def _extract_chat_output_text(response: Any) -> str:
    choices = getattr(response, "choices", None)
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if isinstance(content, str):
        return content.strip()
    return ""


async def create_route_text(
    *,
    route: Any,
    prompt: str,
    temperature: float,
    max_output_tokens: int | None = None,
) -> str:
    """Send one prompt over the route's API mode and return the stripped output text."""
    api_mode = str(getattr(route, "api_mode", "chat_completions") or "chat_completions")
    request_overrides = getattr(route, "request_overrides", None)

    if api_mode == "chat_completions":
        create_kwargs: dict[str, Any] = {
            "model": route.model,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if max_output_tokens is not None:
            create_kwargs["max_tokens"] = max_output_tokens
        if isinstance(request_overrides, dict):
            create_kwargs.update(request_overrides)
        response = await route.client.chat.completions.create(**create_kwargs)
        return _extract_chat_output_text(response)

    if api_mode == "responses":
        responses_create_kwargs: dict[str, Any] = {
            "model": route.model,
            "temperature": temperature,
            "input": _to_responses_input([{"role": "user", "content": prompt}]),
        }
        if max_output_tokens is not None:
            responses_create_kwargs["max_output_tokens"] = max_output_tokens
        if isinstance(request_overrides, dict):
            responses_create_kwargs.update(request_overrides)
        raw_response = await route.client.responses.create(**responses_create_kwargs)
        return _extract_responses_output_text(raw_response)

    msg = f"Unsupported LLM API mode '{api_mode}'"
    raise ValueError(msg)
