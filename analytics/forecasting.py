"""Forward projections of subscription payments."""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import pandas as pd

from analytics.aggregation import finite_cost
from analytics.recurrence import add_days, add_months, as_day, iter_occurrences, start_of_month
from core.models import CalendarEntry, CalendarItem, ForecastMonth, ForecastPeak, Subscription

__all__ = [
    "FORECAST_MONTHS",
    "CALENDAR_DAYS",
    "forecast_key",
    "build_monthly_forecast",
    "summarise_forecast_peaks",
    "build_payment_calendar",
    "build_forecast_frame",
    "build_calendar_frame",
]

FORECAST_MONTHS = 6
CALENDAR_DAYS = 60


def forecast_key(value: pd.Timestamp) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def build_monthly_forecast(
    subscriptions: Iterable[Subscription],
    now: pd.Timestamp,
    months: int = FORECAST_MONTHS,
) -> list[ForecastMonth]:
    """Project raw payment amounts into the coming calendar months.

    Parameters
    ----------
    subscriptions:
        Subscriptions to project.
    now:
        Reference instant; the window starts on the first day of its month.
    months:
        Number of monthly buckets in the window.

    Returns
    -------
    list[ForecastMonth]
        Buckets in calendar order. Months without a positive total in any
        currency are left out.
    """

    window_start = start_of_month(now)
    window_end = add_months(window_start, months)

    buckets: dict[str, ForecastMonth] = {}
    for offset in range(months):
        month_date = add_months(window_start, offset)
        key = forecast_key(month_date)
        buckets[key] = ForecastMonth(key=key, date=month_date, totals={})

    for subscription in subscriptions:
        cost = finite_cost(subscription)
        if cost is None:
            continue
        occurrences = iter_occurrences(
            subscription.next_payment_date,
            subscription.months,
            window_start,
            window_end,
        )
        for occurrence in occurrences:
            bucket = buckets.get(forecast_key(occurrence))
            if bucket is None:
                continue
            bucket.totals[subscription.currency] = (
                bucket.totals.get(subscription.currency, 0.0) + cost
            )

    return [bucket for bucket in buckets.values() if any(value > 0 for value in bucket.totals.values())]


def summarise_forecast_peaks(
    forecast: Sequence[ForecastMonth],
) -> Tuple[dict[str, float], dict[str, ForecastPeak]]:
    """Return the largest monthly total per currency and the month it falls in.

    On ties the earliest month wins.
    """

    max_totals: dict[str, float] = {}
    highest: dict[str, ForecastPeak] = {}

    for bucket in forecast:
        for currency, total in bucket.totals.items():
            if total <= 0:
                continue
            max_totals[currency] = max(max_totals.get(currency, 0.0), total)
            current = highest.get(currency)
            if current is None or total > current.total:
                highest[currency] = ForecastPeak(date=bucket.date, total=total)

    return max_totals, highest


def build_payment_calendar(
    subscriptions: Iterable[Subscription],
    now: pd.Timestamp,
    days: int = CALENDAR_DAYS,
) -> list[CalendarEntry]:
    """Collect every payment due from today through ``days`` days ahead.

    Both ends of the window are inclusive. Entries are keyed by day and
    returned in ascending date order.
    """

    today = as_day(now)
    horizon = add_days(today, days)
    entries: dict[pd.Timestamp, CalendarEntry] = {}

    for subscription in subscriptions:
        cost = finite_cost(subscription)
        if cost is None:
            continue
        occurrences = iter_occurrences(
            subscription.next_payment_date,
            subscription.months,
            today,
            horizon,
            inclusive=True,
        )
        for occurrence in occurrences:
            day = occurrence.normalize()
            entry = entries.get(day)
            if entry is None:
                entry = CalendarEntry(date=day, totals={}, items=[])
                entries[day] = entry
            entry.totals[subscription.currency] = entry.totals.get(subscription.currency, 0.0) + cost
            entry.items.append(
                CalendarItem(
                    id=subscription.id,
                    name=subscription.name,
                    currency=subscription.currency,
                    cost=cost,
                )
            )

    return [entries[day] for day in sorted(entries)]


def build_forecast_frame(forecast: Sequence[ForecastMonth]) -> pd.DataFrame:
    """Return a long-format frame (``Month``, ``Key``, ``Currency``, ``Total``)."""

    records: list[dict[str, object]] = []
    for bucket in forecast:
        for currency, total in bucket.totals.items():
            records.append({"Month": bucket.date, "Key": bucket.key, "Currency": currency, "Total": float(total)})

    frame = pd.DataFrame(records, columns=["Month", "Key", "Currency", "Total"])
    if not frame.empty:
        frame = frame.sort_values(["Month", "Currency"]).reset_index(drop=True)
    return frame


def build_calendar_frame(calendar: Sequence[CalendarEntry]) -> pd.DataFrame:
    """Return one row per scheduled payment in the calendar window."""

    records: list[dict[str, object]] = []
    for entry in calendar:
        for item in entry.items:
            records.append(
                {
                    "Day": entry.date,
                    "Subscription": item.name,
                    "Currency": item.currency,
                    "Cost": float(item.cost),
                }
            )

    frame = pd.DataFrame(records, columns=["Day", "Subscription", "Currency", "Cost"])
    if not frame.empty:
        frame = frame.sort_values("Day", kind="stable").reset_index(drop=True)
    return frame
