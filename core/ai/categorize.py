"""Category and tag suggestions for a single subscription."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from analytics.categorize import OTHER_SEGMENT, classify_subscription
from config import Settings
from core.ai.client import AIClientError, ClientFactory, call_llm
from prompts import get_prompt_text, render_prompt

__all__ = [
    "ALLOWED_CATEGORIES",
    "CategorizeError",
    "CategoryResult",
    "normalize_category",
    "normalize_tags",
    "categorize_subscription",
]

logger = logging.getLogger(__name__)

ALLOWED_CATEGORIES: tuple[str, ...] = (
    "Entertainment",
    "Productivity",
    "Education",
    "Utilities",
    "Finance",
    "Health",
    "Gaming",
    "Cloud",
    "Other",
)


class CategorizeError(AIClientError):
    """Raised when a subscription cannot be categorised."""


@dataclass(frozen=True)
class CategoryResult:
    category: str
    tags: list[str] = field(default_factory=list)


def normalize_category(value: Any) -> str:
    if isinstance(value, str) and value in ALLOWED_CATEGORIES:
        return value
    return "Other"


def normalize_tags(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [tag.strip() for tag in value if isinstance(tag, str) and tag.strip()]


def _mock_result(name: str) -> CategoryResult:
    segment = classify_subscription(name)
    tags = [] if segment == OTHER_SEGMENT else [segment.label]
    return CategoryResult(category=segment.category, tags=tags)


def categorize_subscription(
    name: str,
    notes: str | None = None,
    url: str | None = None,
    *,
    settings: Settings | None = None,
    client_factory: ClientFactory | None = None,
) -> CategoryResult:
    if not name or not name.strip():
        raise CategorizeError("'name' is required")

    mock = _mock_result(name)
    raw = call_llm(
        render_prompt("categorize_request", name=name.strip(), notes=notes or "-", url=url or "-"),
        system=get_prompt_text("categorize"),
        json_mode=True,
        mock=json.dumps({"category": mock.category, "tags": mock.tags}, ensure_ascii=False),
        settings=settings,
        client_factory=client_factory,
    )

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse categorize response: %s", raw[:200])
        raise CategorizeError("Failed to parse LLM response") from exc
    if not isinstance(parsed, dict):
        raise CategorizeError("LLM response is not a JSON object")

    return CategoryResult(
        category=normalize_category(parsed.get("category")),
        tags=normalize_tags(parsed.get("tags")),
    )
