"""OpenAI transport shared by Spendio's AI-assisted features."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Mapping, Sequence

from openai import APIError, OpenAI

from config import Settings, get_settings

__all__ = [
    "AIServiceError",
    "ClientFactory",
    "resolve_openai_client",
    "request_completion",
    "extract_json_object",
    "normalise_bullets",
    "format_payload",
]

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], OpenAI]

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class AIServiceError(RuntimeError):
    """Raised when the remote AI service cannot produce a usable reply."""


def resolve_openai_client(settings: Settings | None = None) -> OpenAI:
    settings = settings or get_settings()
    if not settings.ai_enabled:
        raise AIServiceError(
            "Missing OpenAI API key. Set OPENAI_API_KEY or add it to .streamlit/secrets.toml under [openai]."
        )
    return OpenAI(**settings.openai_client_kwargs)


def request_completion(
    messages: Sequence[Mapping[str, str]],
    *,
    client_factory: ClientFactory | None = None,
    settings: Settings | None = None,
    temperature: float = 0.2,
    max_tokens: int | None = None,
) -> str:
    """Send a chat completion request and return the reply text.

    Raises
    ------
    AIServiceError
        On missing credentials, API errors (including timeouts), unexpected
        SDK output or an empty reply.
    """

    settings = settings or get_settings()
    client = client_factory() if client_factory is not None else resolve_openai_client(settings)

    try:
        response = client.chat.completions.create(
            model=settings.openai_model,
            messages=list(messages),
            max_tokens=max_tokens or settings.openai_max_tokens,
            temperature=temperature,
            timeout=settings.openai_timeout_seconds,
        )
    except APIError as exc:
        raise AIServiceError(f"OpenAI API error: {exc}") from exc

    try:
        text = response.choices[0].message.content or ""
    except (AttributeError, IndexError, TypeError) as exc:
        raise AIServiceError("Unexpected response format from OpenAI API") from exc

    if not text.strip():
        raise AIServiceError("OpenAI response was empty")
    return text


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the first JSON object embedded in a model reply."""

    match = _JSON_OBJECT.search(text)
    candidate = match.group(0) if match else text
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.debug("Unparsable AI reply: %.200s", text)
        raise AIServiceError("AI reply did not contain valid JSON") from exc
    if not isinstance(parsed, dict):
        raise AIServiceError("AI reply JSON was not an object")
    return parsed


def normalise_bullets(response_text: str) -> list[str]:
    normalized: list[str] = []
    for line in response_text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith(("- ", "• ", "* ")):
            stripped = stripped[2:].strip()
        normalized.append(stripped)
    return normalized


def format_payload(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, default=str)
