"""Savings advice for overlapping subscriptions, backed by a language model."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Mapping, Sequence

import numpy as np

from analytics.aggregation import monthly_cost
from analytics.categorize import OTHER_SEGMENT, classify_subscription
from config import Settings
from core.ai.client import AIClientError, ClientFactory, call_llm
from core.formatting import format_money
from core.models import Subscription
from prompts import get_prompt_text, render_prompt

__all__ = [
    "AdvisorError",
    "Conflict",
    "Advice",
    "AdvisorResult",
    "build_advisor_prompt",
    "build_mock_advice",
    "parse_advisor_response",
    "run_advisor",
]

logger = logging.getLogger(__name__)

PROMPT_SYSTEM = "advisor"
PROMPT_REQUEST = "advisor_request"


class AdvisorError(AIClientError):
    """Raised when advice cannot be produced for the given subscriptions."""


@dataclass(frozen=True)
class Conflict:
    group: str
    items: list[str]
    reason: str


@dataclass(frozen=True)
class Advice:
    title: str
    detail: str
    saving_per_month: float | None = None


@dataclass(frozen=True)
class AdvisorResult:
    conflicts: list[Conflict] = field(default_factory=list)
    advice: list[Advice] = field(default_factory=list)
    monthly_before: float = 0.0
    monthly_after: float = 0.0
    saving_per_month: float = 0.0

    def to_payload(self) -> dict[str, Any]:
        """Camel-cased JSON-ready form, matching the LLM response schema."""

        return {
            "conflicts": [asdict(conflict) for conflict in self.conflicts],
            "advice": [_advice_payload(item) for item in self.advice],
            "monthlyBefore": self.monthly_before,
            "monthlyAfter": self.monthly_after,
            "savingPerMonth": self.saving_per_month,
        }


def _advice_payload(advice: Advice) -> dict[str, Any]:
    payload: dict[str, Any] = {"title": advice.title, "detail": advice.detail}
    if advice.saving_per_month is not None:
        payload["savingPerMonth"] = advice.saving_per_month
    return payload


def _is_amount(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and bool(np.isfinite(value))
        and value >= 0
    )


def build_advisor_prompt(subscriptions: Sequence[Subscription]) -> str:
    if not subscriptions:
        return "Нет активных подписок. Верни пустые массивы и нулевые суммы."

    lines = [
        " | ".join(
            [
                f"ID: {subscription.id}",
                f"Название: {subscription.name}",
                f"Период: {subscription.frequency_label}",
                f"Цена в месяц: {format_money(monthly_cost(subscription))} {subscription.currency}",
                f"Сегмент: {classify_subscription(subscription.name).name}",
            ]
        )
        for subscription in subscriptions
    ]
    return render_prompt(PROMPT_REQUEST, subscriptions="\n".join(lines))


def build_mock_advice(subscriptions: Sequence[Subscription]) -> AdvisorResult:
    """Deterministic advice used when the model is unavailable or mocked.

    Subscriptions are grouped by segment and currency; within each group of
    two or more the cheapest service is kept and the rest are suggested for
    cancellation.
    """

    costs = [(subscription, monthly_cost(subscription)) for subscription in subscriptions]
    monthly_before = sum(cost for _, cost in costs)

    groups: dict[tuple[str, str], list[tuple[Subscription, float]]] = {}
    for subscription, cost in costs:
        segment = classify_subscription(subscription.name)
        if segment == OTHER_SEGMENT:
            continue
        groups.setdefault((segment.name, subscription.currency), []).append((subscription, cost))

    conflicts: list[Conflict] = []
    advice: list[Advice] = []
    for (segment_name, currency), items in groups.items():
        if len(items) < 2:
            continue
        ordered = sorted(items, key=lambda pair: pair[1])
        keeper, keeper_cost = ordered[0]
        redundant = ordered[1:]
        saving = sum(cost for _, cost in redundant)

        conflicts.append(
            Conflict(
                group=segment_name,
                items=[subscription.name for subscription, _ in items],
                reason=f"{segment_name} сервисы дублируют друг друга по контенту и оплачиваются параллельно",
            )
        )
        dropped = ", ".join(
            f"{subscription.name} ({format_money(cost)} {currency}/мес)" for subscription, cost in redundant
        )
        advice.append(
            Advice(
                title=f"Оптимизировать {segment_name}",
                detail=(
                    f"Оставь {keeper.name} ({format_money(keeper_cost)} {currency}/мес), "
                    f"отключи {dropped} → экономия {format_money(saving)} {currency}/мес"
                ),
                saving_per_month=saving,
            )
        )

    total_saving = sum(item.saving_per_month or 0.0 for item in advice)
    monthly_after = max(monthly_before - total_saving, 0.0)

    if not advice:
        advice.append(
            Advice(
                title="Обновить годовые планы",
                detail=(
                    "Проверь, есть ли годовые планы со скидкой 15–20% и объединённые пакеты "
                    "вроде СберПрайм или Яндекс Плюс."
                ),
            )
        )

    return AdvisorResult(
        conflicts=conflicts,
        advice=advice,
        monthly_before=monthly_before,
        monthly_after=monthly_after,
        saving_per_month=monthly_before - monthly_after,
    )


def _normalize_conflict(raw: Any) -> Conflict | None:
    if not isinstance(raw, Mapping):
        return None
    group, items, reason = raw.get("group"), raw.get("items"), raw.get("reason")
    if not isinstance(group, str) or not isinstance(reason, str) or not isinstance(items, list):
        return None
    names = [item.strip() for item in items if isinstance(item, str) and item.strip()]
    if not names:
        return None
    return Conflict(group=group.strip(), items=names, reason=reason.strip())


def _normalize_advice(raw: Any) -> Advice | None:
    if not isinstance(raw, Mapping):
        return None
    title, detail = raw.get("title"), raw.get("detail")
    if not isinstance(title, str) or not isinstance(detail, str):
        return None
    saving = raw.get("savingPerMonth")
    return Advice(
        title=title.strip(),
        detail=detail.strip(),
        saving_per_month=float(saving) if _is_amount(saving) else None,
    )


def _normalize_list(raw: Any, normalizer) -> list:
    if not isinstance(raw, list):
        return []
    return [item for item in (normalizer(entry) for entry in raw) if item is not None]


def parse_advisor_response(raw_text: str, estimated_monthly_before: float) -> AdvisorResult:
    """Validate a JSON reply, dropping malformed entries and filling missing sums.

    Missing or invalid totals fall back to the locally computed monthly
    figure and the savings claimed by the surviving advice entries.
    """

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse advisor response: %s", raw_text[:200])
        raise AdvisorError("Failed to parse LLM response") from exc
    if not isinstance(parsed, Mapping):
        raise AdvisorError("LLM response is not a JSON object")

    conflicts = _normalize_list(parsed.get("conflicts"), _normalize_conflict)
    advice = _normalize_list(parsed.get("advice"), _normalize_advice)

    raw_before = parsed.get("monthlyBefore")
    monthly_before = float(raw_before) if _is_amount(raw_before) else estimated_monthly_before

    raw_after = parsed.get("monthlyAfter")
    if _is_amount(raw_after):
        monthly_after = float(raw_after)
    else:
        claimed = sum(item.saving_per_month or 0.0 for item in advice)
        monthly_after = max(monthly_before - claimed, 0.0)

    raw_saving = parsed.get("savingPerMonth")
    saving = float(raw_saving) if _is_amount(raw_saving) else max(monthly_before - monthly_after, 0.0)

    return AdvisorResult(
        conflicts=conflicts,
        advice=advice,
        monthly_before=monthly_before,
        monthly_after=monthly_after,
        saving_per_month=saving,
    )


def run_advisor(
    subscriptions: Iterable[Subscription],
    *,
    settings: Settings | None = None,
    client_factory: ClientFactory | None = None,
) -> AdvisorResult:
    """Ask the model for overlap and savings advice on the subscription list.

    Monthly figures come from :func:`analytics.aggregation.monthly_cost`, the
    same normalisation the dashboard totals use.
    """

    items = list(subscriptions)
    if not items:
        raise AdvisorError("Provide at least one valid subscription")

    estimated_before = sum(monthly_cost(subscription) for subscription in items)
    mock = json.dumps(build_mock_advice(items).to_payload(), ensure_ascii=False)

    raw = call_llm(
        build_advisor_prompt(items),
        system=get_prompt_text(PROMPT_SYSTEM),
        json_mode=True,
        mock=mock,
        settings=settings,
        client_factory=client_factory,
    )
    return parse_advisor_response(raw, estimated_before)
