"""Subscription records: frequency options, parsing and sample data."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable, Mapping, Optional

from core.models import Subscription

__all__ = [
    "FrequencyOption",
    "FREQUENCIES",
    "frequency_label_for",
    "parse_subscriptions",
    "build_default_subscriptions",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrequencyOption:
    value: str
    label: str
    months: int


FREQUENCIES: tuple[FrequencyOption, ...] = (
    FrequencyOption("monthly", "Ежемесячно", 1),
    FrequencyOption("quarterly", "Ежеквартально", 3),
    FrequencyOption("semiannual", "Раз в полгода", 6),
    FrequencyOption("yearly", "Ежегодно", 12),
    FrequencyOption("custom", "Своя периодичность", 1),
)

_FREQUENCY_BY_VALUE = {option.value: option for option in FREQUENCIES}


def frequency_label_for(value: str) -> str:
    """Return the display label for a frequency value such as ``"yearly"``."""

    option = _FREQUENCY_BY_VALUE.get(value)
    if option is None:
        raise ValueError(f"Unknown frequency: {value!r}")
    return option.label


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_valid_record(record: Any) -> bool:
    if not isinstance(record, Mapping):
        return False
    return (
        isinstance(record.get("id"), (int, str))
        and not isinstance(record.get("id"), bool)
        and isinstance(record.get("name"), str)
        and _is_number(record.get("cost"))
        and isinstance(record.get("currency"), str)
        and _is_number(record.get("months"))
        and isinstance(record.get("frequencyLabel", record.get("frequency_label")), str)
        and isinstance(record.get("nextPaymentDate", record.get("next_payment_date")), str)
    )


def parse_subscriptions(records: Any) -> Optional[list[Subscription]]:
    """Turn raw records (e.g. decoded JSON) into :class:`Subscription` objects.

    Both camelCase keys (``frequencyLabel``, ``nextPaymentDate``) and their
    snake_case spellings are accepted. The batch is all-or-nothing: if the
    input is not a list or any record is malformed, ``None`` is returned so
    the caller can keep its previous data.
    """

    if not isinstance(records, list):
        logger.warning("Expected a list of subscription records, got %s", type(records).__name__)
        return None

    invalid = [index for index, record in enumerate(records) if not _is_valid_record(record)]
    if invalid:
        logger.warning("Rejecting subscription batch: %d malformed record(s) at %s", len(invalid), invalid)
        return None

    return [
        Subscription(
            id=record["id"],
            name=record["name"],
            cost=float(record["cost"]),
            currency=record["currency"],
            months=record["months"],
            frequency_label=record.get("frequencyLabel", record.get("frequency_label")),
            next_payment_date=record.get("nextPaymentDate", record.get("next_payment_date")),
        )
        for record in records
    ]


def build_default_subscriptions(today: Optional[date] = None) -> list[Subscription]:
    """Sample subscriptions shown before the user has entered any data."""

    today = today or date.today()

    def _in_days(days: int) -> str:
        return (today + timedelta(days=days)).isoformat()

    samples: Iterable[tuple[int, str, float, int, str, int]] = (
        (1, "Netflix Premium", 599.0, 1, "monthly", 8),
        (2, "Spotify Family", 269.0, 1, "monthly", 15),
        (3, "Adobe Creative Cloud", 3299.0, 12, "yearly", 45),
    )
    return [
        Subscription(
            id=sub_id,
            name=name,
            cost=cost,
            currency="₽",
            months=months,
            frequency_label=frequency_label_for(frequency),
            next_payment_date=_in_days(offset),
        )
        for sub_id, name, cost, months, frequency, offset in samples
    ]
