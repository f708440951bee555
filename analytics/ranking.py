"""Ordering helpers: top spenders, upcoming payments and period comparison."""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Sequence

import pandas as pd

from analytics.aggregation import CurrencyTotals, finite_cost, monthly_cost
from analytics.recurrence import add_days, as_day, next_occurrence
from core.models import (
    NextPaymentDetail,
    PeriodComparisonItem,
    Subscription,
    SubscriptionId,
    TopSubscription,
    UpcomingPayment,
)

__all__ = [
    "UPCOMING_WINDOW_DAYS",
    "days_until",
    "rank_top_subscriptions",
    "resolve_next_payments",
    "build_upcoming_payments",
    "build_period_comparison",
]

UPCOMING_WINDOW_DAYS = 30

_ONE_DAY = pd.Timedelta(days=1)


def days_until(occurrence: pd.Timestamp, now: pd.Timestamp) -> int:
    """Whole days from ``now`` to ``occurrence``, rounded up and never negative."""

    reference = pd.Timestamp(now)
    if reference.tzinfo is not None:
        reference = reference.tz_localize(None)
    return max(0, math.ceil((occurrence - reference) / _ONE_DAY))


def rank_top_subscriptions(subscriptions: Iterable[Subscription]) -> list[TopSubscription]:
    """Pair every subscription with its monthly cost, most expensive first.

    The full list is returned; picking a prefix is left to the caller.
    """

    ranked = [TopSubscription(subscription=item, monthly_cost=monthly_cost(item)) for item in subscriptions]
    ranked.sort(key=lambda row: row.monthly_cost, reverse=True)
    return ranked


def resolve_next_payments(
    subscriptions: Iterable[Subscription],
    now: pd.Timestamp,
) -> dict[SubscriptionId, NextPaymentDetail | None]:
    details: dict[SubscriptionId, NextPaymentDetail | None] = {}
    for subscription in subscriptions:
        next_date = next_occurrence(subscription.next_payment_date, subscription.months, now)
        if next_date is None:
            details[subscription.id] = None
            continue
        details[subscription.id] = NextPaymentDetail(date=next_date, days_left=days_until(next_date, now))
    return details


def build_upcoming_payments(
    subscriptions: Iterable[Subscription],
    next_payments: Mapping[SubscriptionId, NextPaymentDetail | None],
    now: pd.Timestamp,
    window_days: int = UPCOMING_WINDOW_DAYS,
) -> list[UpcomingPayment]:
    """Return payments due within ``window_days`` of today, soonest first."""

    threshold = add_days(as_day(now), window_days)
    upcoming: list[UpcomingPayment] = []

    for subscription in subscriptions:
        detail = next_payments.get(subscription.id)
        if detail is None or detail.date > threshold:
            continue
        cost = finite_cost(subscription)
        upcoming.append(
            UpcomingPayment(
                id=subscription.id,
                name=subscription.name,
                currency=subscription.currency,
                cost=cost if cost is not None else 0.0,
                next_date=detail.date,
                days_left=detail.days_left,
            )
        )

    upcoming.sort(key=lambda payment: payment.next_date)
    return upcoming


def build_period_comparison(
    currencies: Sequence[str],
    totals: CurrencyTotals,
) -> list[PeriodComparisonItem]:
    rows: list[PeriodComparisonItem] = []
    for currency in currencies:
        month = totals["monthly"].get(currency, 0.0)
        quarter = totals["quarterly"].get(currency, 0.0)
        year = totals["yearly"].get(currency, 0.0)
        rows.append(
            PeriodComparisonItem(
                currency=currency,
                month=month,
                quarter=quarter,
                year=year,
                quarter_diff=quarter - month,
                year_diff=year - month,
            )
        )
    return rows
