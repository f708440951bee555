"""Recurring-payment analytics shared across SubKeeper services."""

from analytics.aggregation import (
    CurrencyTotals,
    aggregate_totals,
    build_frequency_distribution,
    collect_currencies,
    compute_average_monthly,
    monthly_cost,
)
from analytics.categorize import Segment, classify_subscription, normalize_service_name
from analytics.forecasting import (
    build_calendar_frame,
    build_forecast_frame,
    build_monthly_forecast,
    build_payment_calendar,
    summarise_forecast_peaks,
)
from analytics.ranking import (
    build_period_comparison,
    build_upcoming_payments,
    rank_top_subscriptions,
    resolve_next_payments,
)
from analytics.recurrence import MAX_RECURRENCE_STEPS, add_months, iter_occurrences, next_occurrence

__all__ = [
    "CurrencyTotals",
    "aggregate_totals",
    "build_frequency_distribution",
    "collect_currencies",
    "compute_average_monthly",
    "monthly_cost",
    "Segment",
    "classify_subscription",
    "normalize_service_name",
    "build_calendar_frame",
    "build_forecast_frame",
    "build_monthly_forecast",
    "build_payment_calendar",
    "summarise_forecast_peaks",
    "build_period_comparison",
    "build_upcoming_payments",
    "rank_top_subscriptions",
    "resolve_next_payments",
    "MAX_RECURRENCE_STEPS",
    "add_months",
    "iter_occurrences",
    "next_occurrence",
]
