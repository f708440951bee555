"""AI-focused helpers for SubKeeper."""

from .advisor import (
    Advice,
    AdvisorError,
    AdvisorResult,
    Conflict,
    build_advisor_prompt,
    build_mock_advice,
    parse_advisor_response,
    run_advisor,
)
from .categorize import CategorizeError, CategoryResult, categorize_subscription
from .client import AIClientError, call_llm

__all__ = [
    "AIClientError",
    "call_llm",
    "Advice",
    "AdvisorError",
    "AdvisorResult",
    "Conflict",
    "build_advisor_prompt",
    "build_mock_advice",
    "parse_advisor_response",
    "run_advisor",
    "CategorizeError",
    "CategoryResult",
    "categorize_subscription",
]
