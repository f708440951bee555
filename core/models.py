"""Shared data model definitions for SubKeeper analytics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import pandas as pd

SubscriptionId = Union[int, str]


@dataclass(frozen=True)
class Subscription:
    """A recurring payment as recorded by the user.

    ``cost`` is charged once every ``months`` months, starting from the
    occurrence stored in ``next_payment_date`` (an ISO ``YYYY-MM-DD`` string
    that may lie in the past). ``frequency_label`` is only a grouping key.
    """

    id: SubscriptionId
    name: str
    cost: float
    currency: str
    months: int
    frequency_label: str
    next_payment_date: str


@dataclass(frozen=True)
class PeriodComparisonItem:
    currency: str
    month: float
    quarter: float
    year: float
    quarter_diff: float
    year_diff: float


@dataclass(frozen=True)
class NextPaymentDetail:
    date: pd.Timestamp
    days_left: int


@dataclass(frozen=True)
class UpcomingPayment:
    id: SubscriptionId
    name: str
    currency: str
    cost: float
    next_date: pd.Timestamp
    days_left: int


@dataclass(frozen=True)
class ForecastMonth:
    key: str
    date: pd.Timestamp
    totals: dict[str, float]


@dataclass(frozen=True)
class ForecastPeak:
    date: pd.Timestamp
    total: float


@dataclass(frozen=True)
class FrequencyBucket:
    label: str
    count: int
    totals: dict[str, float]
    monthly_total: float


@dataclass(frozen=True)
class CalendarItem:
    id: SubscriptionId
    name: str
    currency: str
    cost: float


@dataclass(frozen=True)
class CalendarEntry:
    date: pd.Timestamp
    totals: dict[str, float]
    items: list[CalendarItem]


@dataclass(frozen=True)
class TopSubscription:
    subscription: Subscription
    monthly_cost: float


@dataclass(frozen=True)
class SubscriptionAnalytics:
    """Snapshot of everything derived from one subscription list and one ``now``."""

    currencies: list[str] = field(default_factory=list)
    monthly_totals: dict[str, float] = field(default_factory=dict)
    quarterly_totals: dict[str, float] = field(default_factory=dict)
    yearly_totals: dict[str, float] = field(default_factory=dict)
    period_comparison: list[PeriodComparisonItem] = field(default_factory=list)
    monthly_forecast: list[ForecastMonth] = field(default_factory=list)
    max_totals_by_currency: dict[str, float] = field(default_factory=dict)
    highest_month_by_currency: dict[str, ForecastPeak] = field(default_factory=dict)
    upcoming_payments: list[UpcomingPayment] = field(default_factory=list)
    next_payment_details: dict[SubscriptionId, NextPaymentDetail | None] = field(default_factory=dict)
    frequency_distribution: list[FrequencyBucket] = field(default_factory=list)
    top_subscriptions: list[TopSubscription] = field(default_factory=list)
    average_monthly_per_subscription: dict[str, float] = field(default_factory=dict)
    calendar: list[CalendarEntry] = field(default_factory=list)
    subscription_count_by_currency: dict[str, int] = field(default_factory=dict)


__all__ = [
    "SubscriptionId",
    "Subscription",
    "PeriodComparisonItem",
    "NextPaymentDetail",
    "UpcomingPayment",
    "ForecastMonth",
    "ForecastPeak",
    "FrequencyBucket",
    "CalendarItem",
    "CalendarEntry",
    "TopSubscription",
    "SubscriptionAnalytics",
]
