"""Tests for subscription parsing, sample data and display formatting."""

from __future__ import annotations

from datetime import date

import pytest

from core.formatting import format_days_left, format_difference, format_money
from core.models import Subscription
from core.subscriptions import (
    FREQUENCIES,
    build_default_subscriptions,
    frequency_label_for,
    parse_subscriptions,
)


def _record(**overrides):
    record = {
        "id": 1,
        "name": "Netflix Premium",
        "cost": 599,
        "currency": "₽",
        "months": 1,
        "frequencyLabel": "Ежемесячно",
        "nextPaymentDate": "2025-03-18",
    }
    record.update(overrides)
    return record


def test_parse_subscriptions_accepts_camel_case_records():
    parsed = parse_subscriptions([_record(), _record(id="abc", cost=3299.0, months=12, frequencyLabel="Ежегодно")])

    assert parsed == [
        Subscription(1, "Netflix Premium", 599.0, "₽", 1, "Ежемесячно", "2025-03-18"),
        Subscription("abc", "Netflix Premium", 3299.0, "₽", 12, "Ежегодно", "2025-03-18"),
    ]


def test_parse_subscriptions_accepts_snake_case_keys():
    record = _record()
    record["frequency_label"] = record.pop("frequencyLabel")
    record["next_payment_date"] = record.pop("nextPaymentDate")

    parsed = parse_subscriptions([record])

    assert parsed is not None
    assert parsed[0].next_payment_date == "2025-03-18"


@pytest.mark.parametrize(
    "records",
    [
        {"id": 1},
        "[]",
        None,
        [_record(), _record(cost="599")],
        [_record(id=True)],
        [_record(nextPaymentDate=None)],
        [_record(), 42],
    ],
)
def test_parse_subscriptions_rejects_the_whole_batch(records, caplog):
    assert parse_subscriptions(records) is None
    assert caplog.records


def test_frequency_labels():
    assert frequency_label_for("yearly") == "Ежегодно"
    assert {option.value: option.months for option in FREQUENCIES}["semiannual"] == 6
    with pytest.raises(ValueError):
        frequency_label_for("fortnightly")


def test_default_subscriptions_are_relative_to_today():
    defaults = build_default_subscriptions(date(2025, 3, 10))

    assert [(item.name, item.next_payment_date) for item in defaults] == [
        ("Netflix Premium", "2025-03-18"),
        ("Spotify Family", "2025-03-25"),
        ("Adobe Creative Cloud", "2025-04-24"),
    ]
    assert {item.currency for item in defaults} == {"₽"}
    assert defaults[2].months == 12
    assert defaults[2].frequency_label == "Ежегодно"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(873.0833, "873.08"), (599.0, "599"), (0.005, "0.01"), (12.5, "12.50"), (0, "0")],
)
def test_format_money(value, expected):
    assert format_money(value) == expected


def test_format_difference():
    assert format_difference(0.004, "₽") == "без изменений"
    assert format_difference(-12.5, "$") == "-12.50 $"
    assert format_difference(1198, "₽") == "+1198 ₽"


@pytest.mark.parametrize(
    ("days", "expected"),
    [
        (0, "сегодня"),
        (-2, "сегодня"),
        (1, "через 1 день"),
        (3, "через 3 дня"),
        (5, "через 5 дней"),
        (11, "через 11 дней"),
        (12, "через 12 дней"),
        (21, "через 21 день"),
        (22, "через 22 дня"),
    ],
)
def test_format_days_left(days, expected):
    assert format_days_left(days) == expected
