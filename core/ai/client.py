"""Thin OpenAI chat-completions wrapper shared by the AI features."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from openai import APIError, OpenAI

from config import Settings, get_settings

__all__ = ["AIClientError", "ClientFactory", "DEFAULT_SYSTEM_PROMPT", "call_llm", "resolve_openai_client"]

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."
TEMPERATURE = 0.2

ClientFactory = Callable[[], OpenAI]


class AIClientError(RuntimeError):
    """Raised when a language-model response cannot be obtained."""


def resolve_openai_client(settings: Settings | None = None) -> OpenAI:
    settings = settings or get_settings()
    if not settings.openai_api_key:
        raise AIClientError(
            "Missing OpenAI API key. Set OPENAI_API_KEY or add it to .streamlit/secrets.toml under [openai]."
        )
    return OpenAI(**settings.openai_client_kwargs)


def _build_mock_payload(system: str | None, prompt: str, json_mode: bool) -> str:
    if json_mode:
        return json.dumps({"status": "mock", "system": system, "prompt": prompt}, ensure_ascii=False)
    return "Mock LLM response"


def call_llm(
    prompt: str,
    *,
    system: str | None = None,
    json_mode: bool = False,
    mock: str | None = None,
    settings: Settings | None = None,
    client_factory: ClientFactory | None = None,
) -> str:
    """Send one system + user exchange and return the trimmed reply text.

    With ``ai_mock`` enabled no request is made: ``mock`` is returned when
    given, otherwise a generic placeholder payload.
    """

    settings = settings or get_settings()
    if settings.ai_mock:
        logger.info("AI mock mode enabled; skipping OpenAI request")
        return mock if mock is not None else _build_mock_payload(system, prompt, json_mode)

    client = client_factory() if client_factory is not None else resolve_openai_client(settings)

    request: dict[str, Any] = {
        "model": settings.openai_model,
        "messages": [
            {"role": "system", "content": system or DEFAULT_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        "temperature": TEMPERATURE,
    }
    if json_mode:
        request["response_format"] = {"type": "json_object"}

    try:
        response = client.chat.completions.create(**request)
    except APIError as exc:
        logger.error("OpenAI request failed: %s", exc)
        raise AIClientError(f"OpenAI API error: {exc}") from exc

    try:
        content = response.choices[0].message.content or ""
    except (AttributeError, IndexError) as exc:  # pragma: no cover - unexpected SDK output
        raise AIClientError("Unexpected response format from OpenAI API") from exc

    content = content.strip()
    if not content:
        logger.error("OpenAI response did not include any content")
        raise AIClientError("LLM response did not include any content.")
    return content
