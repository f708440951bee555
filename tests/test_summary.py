"""End-to-end checks for the analytics snapshot."""

from __future__ import annotations

import logging
from datetime import date

import pandas as pd
import pytest

from core.models import SubscriptionAnalytics
from core.subscriptions import build_default_subscriptions
from core.summary import compute_subscription_analytics

TODAY = pd.Timestamp("2025-03-10")


@pytest.fixture()
def defaults():
    return build_default_subscriptions(date(2025, 3, 10))


def test_default_subscriptions_snapshot(defaults):
    analytics = compute_subscription_analytics(defaults, TODAY)

    assert analytics.currencies == ["₽"]
    assert analytics.monthly_totals["₽"] == pytest.approx(599 + 269 + 3299 / 12)
    assert analytics.subscription_count_by_currency == {"₽": 3}

    forecast = {bucket.key: bucket.totals["₽"] for bucket in analytics.monthly_forecast}
    assert forecast == {
        "2025-03": pytest.approx(868.0),
        "2025-04": pytest.approx(4167.0),
        "2025-05": pytest.approx(868.0),
        "2025-06": pytest.approx(868.0),
        "2025-07": pytest.approx(868.0),
        "2025-08": pytest.approx(868.0),
    }
    assert analytics.max_totals_by_currency["₽"] == pytest.approx(4167.0)
    assert analytics.highest_month_by_currency["₽"].date == pd.Timestamp("2025-04-01")


def test_default_subscriptions_upcoming_and_calendar(defaults):
    analytics = compute_subscription_analytics(defaults, TODAY)

    assert [(payment.name, payment.days_left) for payment in analytics.upcoming_payments] == [
        ("Netflix Premium", 8),
        ("Spotify Family", 15),
    ]
    assert [entry.date for entry in analytics.calendar] == [
        pd.Timestamp("2025-03-18"),
        pd.Timestamp("2025-03-25"),
        pd.Timestamp("2025-04-18"),
        pd.Timestamp("2025-04-24"),
        pd.Timestamp("2025-04-25"),
    ]
    assert analytics.next_payment_details[3].days_left == 45


def test_default_subscriptions_ranking_and_comparison(defaults):
    analytics = compute_subscription_analytics(defaults, TODAY)

    assert [row.subscription.name for row in analytics.top_subscriptions] == [
        "Netflix Premium",
        "Adobe Creative Cloud",
        "Spotify Family",
    ]
    comparison = analytics.period_comparison[0]
    assert comparison.quarter_diff == pytest.approx(2 * comparison.month)
    assert comparison.year_diff == pytest.approx(11 * comparison.month)
    assert analytics.average_monthly_per_subscription["₽"] == pytest.approx(comparison.month / 3)


def test_next_payment_rolls_after_due_day(make_subscription):
    subscription = make_subscription(next_payment_date="2025-03-18")

    before = compute_subscription_analytics([subscription], TODAY)
    on_day = compute_subscription_analytics([subscription], pd.Timestamp("2025-03-18"))
    after = compute_subscription_analytics([subscription], pd.Timestamp("2025-03-19"))

    assert before.next_payment_details[1].days_left == 8
    assert on_day.next_payment_details[1].days_left == 0
    assert after.next_payment_details[1].date == pd.Timestamp("2025-04-18")
    assert after.next_payment_details[1].days_left == 30


def test_same_day_payment_is_upcoming_with_zero_days(make_subscription, now):
    analytics = compute_subscription_analytics([make_subscription(next_payment_date="2025-03-10")], now)

    assert analytics.next_payment_details[1].days_left == 0
    assert [payment.id for payment in analytics.upcoming_payments] == [1]


def test_invalid_date_is_counted_but_not_scheduled(make_subscription, caplog):
    broken = make_subscription(sub_id="broken", cost=100.0, next_payment_date="2025-02-30")

    with caplog.at_level(logging.WARNING, logger="core.summary"):
        analytics = compute_subscription_analytics([broken], TODAY)

    assert analytics.next_payment_details == {"broken": None}
    assert analytics.upcoming_payments == []
    assert analytics.monthly_forecast == []
    assert analytics.calendar == []
    assert analytics.monthly_totals == {"₽": pytest.approx(100.0)}
    assert analytics.subscription_count_by_currency == {"₽": 1}
    assert "next_payment_date='2025-02-30'" in caplog.text


def test_defective_interval_contributes_zero(make_subscription):
    subscriptions = [
        make_subscription(sub_id=1, cost=300.0),
        make_subscription(sub_id=2, cost=float("nan")),
        make_subscription(sub_id=3, cost=50.0, months=0),
    ]

    analytics = compute_subscription_analytics(subscriptions, TODAY)

    assert analytics.monthly_totals["₽"] == pytest.approx(300.0)
    assert analytics.subscription_count_by_currency["₽"] == 3
    assert analytics.average_monthly_per_subscription["₽"] == pytest.approx(100.0)


def test_snapshot_is_deterministic_and_input_untouched(defaults):
    snapshot = list(defaults)

    first = compute_subscription_analytics(defaults, TODAY)
    second = compute_subscription_analytics(defaults, TODAY)

    assert first == second
    assert defaults == snapshot


def test_empty_list_yields_empty_snapshot():
    analytics = compute_subscription_analytics([], TODAY)

    assert analytics == SubscriptionAnalytics()
    assert analytics.currencies == []
    assert analytics.calendar == []


def test_interval_beyond_date_range_is_not_projected(make_subscription):
    subscriptions = [
        make_subscription(sub_id="huge", cost=100.0, months=10**6, next_payment_date="2024-01-01"),
        make_subscription(sub_id="ok", cost=300.0, next_payment_date="2025-03-18"),
    ]

    analytics = compute_subscription_analytics(subscriptions, TODAY)

    assert analytics.next_payment_details["huge"] is None
    assert analytics.next_payment_details["ok"].days_left == 8
    assert [payment.id for payment in analytics.upcoming_payments] == ["ok"]
    assert all(item.id == "ok" for entry in analytics.calendar for item in entry.items)
    assert analytics.subscription_count_by_currency == {"₽": 2}


def test_relative_date_words_are_not_anchors(make_subscription):
    analytics = compute_subscription_analytics([make_subscription(next_payment_date="now")], TODAY)

    assert analytics.next_payment_details == {1: None}
    assert analytics.upcoming_payments == []
