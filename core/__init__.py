"""Core domain package for the SubKeeper application.

Only the data model and record helpers are re-exported here; import
``core.summary`` and ``core.ai`` directly, since they depend on ``analytics``.
"""

from .models import (
    CalendarEntry,
    ForecastMonth,
    FrequencyBucket,
    NextPaymentDetail,
    Subscription,
    SubscriptionAnalytics,
    TopSubscription,
    UpcomingPayment,
)
from .subscriptions import FREQUENCIES, build_default_subscriptions, parse_subscriptions

__all__ = [
    "CalendarEntry",
    "ForecastMonth",
    "FrequencyBucket",
    "NextPaymentDetail",
    "Subscription",
    "SubscriptionAnalytics",
    "TopSubscription",
    "UpcomingPayment",
    "FREQUENCIES",
    "build_default_subscriptions",
    "parse_subscriptions",
]
