"""Per-currency aggregation of subscription costs."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence, TypedDict

import numpy as np

from analytics.recurrence import coerce_interval
from core.models import FrequencyBucket, Subscription

__all__ = [
    "CurrencyTotals",
    "finite_cost",
    "monthly_cost",
    "aggregate_totals",
    "build_frequency_distribution",
    "compute_average_monthly",
    "collect_currencies",
]

logger = logging.getLogger(__name__)

QUARTER_MONTHS = 3
YEAR_MONTHS = 12


class CurrencyTotals(TypedDict):
    """Monthly-equivalent totals keyed by currency tag."""

    monthly: dict[str, float]
    quarterly: dict[str, float]
    yearly: dict[str, float]
    counts: dict[str, int]


def finite_cost(subscription: Subscription) -> float | None:
    """Return the charged amount as a float, or ``None`` when it is not a finite number."""

    try:
        cost = float(subscription.cost)
    except (TypeError, ValueError):
        return None
    if not np.isfinite(cost):
        return None
    return cost


def monthly_cost(subscription: Subscription) -> float:
    """Return the monthly-equivalent cost (``cost / months``) of a subscription.

    This is the only place the normalisation happens; every total, ranking
    and advice figure is built from it. Records with a non-finite cost or an
    interval that is not a positive whole number of months contribute ``0.0``.
    """

    cost = finite_cost(subscription)
    if cost is None:
        logger.debug("Subscription %r has a non-finite cost; counting it as 0", subscription.id)
        return 0.0

    months = coerce_interval(subscription.months)
    if months is None:
        logger.debug(
            "Subscription %r has an unusable billing interval %r; counting it as 0",
            subscription.id,
            subscription.months,
        )
        return 0.0
    return cost / months


def aggregate_totals(subscriptions: Iterable[Subscription]) -> CurrencyTotals:
    """Accumulate monthly, quarterly and yearly totals per currency.

    Quarter and year figures are scaled from the same monthly-equivalent
    value, so ``quarterly == 3 * monthly`` and ``yearly == 12 * monthly``
    hold for every currency.
    """

    monthly: dict[str, float] = {}
    quarterly: dict[str, float] = {}
    yearly: dict[str, float] = {}
    counts: dict[str, int] = {}

    for subscription in subscriptions:
        currency = subscription.currency
        per_month = monthly_cost(subscription)
        monthly[currency] = monthly.get(currency, 0.0) + per_month
        quarterly[currency] = quarterly.get(currency, 0.0) + per_month * QUARTER_MONTHS
        yearly[currency] = yearly.get(currency, 0.0) + per_month * YEAR_MONTHS
        counts[currency] = counts.get(currency, 0) + 1

    return {"monthly": monthly, "quarterly": quarterly, "yearly": yearly, "counts": counts}


def build_frequency_distribution(subscriptions: Iterable[Subscription]) -> list[FrequencyBucket]:
    """Group subscriptions by their stored frequency label.

    Buckets are ordered by combined monthly total, largest first.
    """

    counts: dict[str, int] = {}
    totals: dict[str, dict[str, float]] = {}
    combined: dict[str, float] = {}

    for subscription in subscriptions:
        label = subscription.frequency_label
        per_month = monthly_cost(subscription)
        counts[label] = counts.get(label, 0) + 1
        label_totals = totals.setdefault(label, {})
        label_totals[subscription.currency] = label_totals.get(subscription.currency, 0.0) + per_month
        combined[label] = combined.get(label, 0.0) + per_month

    distribution = [
        FrequencyBucket(label=label, count=count, totals=totals[label], monthly_total=combined[label])
        for label, count in counts.items()
    ]
    distribution.sort(key=lambda bucket: bucket.monthly_total, reverse=True)
    return distribution


def compute_average_monthly(
    monthly_totals: Mapping[str, float],
    counts: Mapping[str, int],
) -> dict[str, float]:
    averages: dict[str, float] = {}
    for currency, count in counts.items():
        if count <= 0:
            continue
        averages[currency] = monthly_totals.get(currency, 0.0) / count
    return averages


def collect_currencies(
    monthly_totals: Mapping[str, float],
    subscriptions: Sequence[Subscription],
) -> list[str]:
    """Return every currency seen in the totals or the raw list, first-seen order."""

    currencies = list(monthly_totals)
    for subscription in subscriptions:
        if subscription.currency not in currencies:
            currencies.append(subscription.currency)
    return currencies
