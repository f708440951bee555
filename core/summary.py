"""Assembly of the subscription analytics snapshot."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

import pandas as pd

from analytics.aggregation import (
    aggregate_totals,
    build_frequency_distribution,
    collect_currencies,
    compute_average_monthly,
    finite_cost,
)
from analytics.forecasting import build_monthly_forecast, build_payment_calendar, summarise_forecast_peaks
from analytics.ranking import (
    build_period_comparison,
    build_upcoming_payments,
    rank_top_subscriptions,
    resolve_next_payments,
)
from analytics.recurrence import coerce_interval, parse_anchor_date
from core.models import Subscription, SubscriptionAnalytics

__all__ = ["compute_subscription_analytics"]

logger = logging.getLogger(__name__)


def compute_subscription_analytics(
    subscriptions: Sequence[Subscription],
    now: Optional[datetime | pd.Timestamp] = None,
) -> SubscriptionAnalytics:
    """Derive totals, forecasts, calendar and rankings for a subscription list.

    Parameters
    ----------
    subscriptions:
        Current subscription list. It is only read, never modified.
    now:
        Reference instant. Defaults to the wall clock; pass a fixed value to
        get reproducible snapshots.

    Returns
    -------
    SubscriptionAnalytics
        A fresh snapshot. An empty list yields an empty, valid snapshot.
    """

    reference = pd.Timestamp.now() if now is None else pd.Timestamp(now)
    _warn_about_unusable_records(subscriptions)

    totals = aggregate_totals(subscriptions)
    currencies = collect_currencies(totals["monthly"], subscriptions)

    next_payments = resolve_next_payments(subscriptions, reference)
    upcoming_payments = build_upcoming_payments(subscriptions, next_payments, reference)

    monthly_forecast = build_monthly_forecast(subscriptions, reference)
    max_totals, highest_months = summarise_forecast_peaks(monthly_forecast)
    calendar = build_payment_calendar(subscriptions, reference)

    logger.debug(
        "Computed analytics for %d subscriptions in %d currencies (%d forecast months, %d calendar days)",
        len(subscriptions),
        len(currencies),
        len(monthly_forecast),
        len(calendar),
    )

    return SubscriptionAnalytics(
        currencies=currencies,
        monthly_totals=totals["monthly"],
        quarterly_totals=totals["quarterly"],
        yearly_totals=totals["yearly"],
        period_comparison=build_period_comparison(currencies, totals),
        monthly_forecast=monthly_forecast,
        max_totals_by_currency=max_totals,
        highest_month_by_currency=highest_months,
        upcoming_payments=upcoming_payments,
        next_payment_details=next_payments,
        frequency_distribution=build_frequency_distribution(subscriptions),
        top_subscriptions=rank_top_subscriptions(subscriptions),
        average_monthly_per_subscription=compute_average_monthly(totals["monthly"], totals["counts"]),
        calendar=calendar,
        subscription_count_by_currency=totals["counts"],
    )


def _warn_about_unusable_records(subscriptions: Sequence[Subscription]) -> None:
    for subscription in subscriptions:
        problems: list[str] = []
        if finite_cost(subscription) is None:
            problems.append(f"cost={subscription.cost!r}")
        if coerce_interval(subscription.months) is None:
            problems.append(f"months={subscription.months!r}")
        if parse_anchor_date(subscription.next_payment_date) is None:
            problems.append(f"next_payment_date={subscription.next_payment_date!r}")
        if problems:
            logger.warning(
                "Subscription %r (%s) has unusable fields: %s",
                subscription.id,
                subscription.name,
                ", ".join(problems),
            )
