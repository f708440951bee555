"""Formatting helpers for SubKeeper summaries."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

__all__ = ["format_money", "format_difference", "format_days_left"]


def format_money(value: float) -> str:
    """Round to cents and drop a trailing ``.00``: ``873.0833`` -> ``"873.08"``, ``599.0`` -> ``"599"``."""

    rounded = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if rounded == rounded.to_integral_value():
        return f"{rounded:.0f}"
    return f"{rounded:.2f}"


def format_difference(value: float, currency: str) -> str:
    if abs(value) < 0.01:
        return "без изменений"
    sign = "+" if value > 0 else "-"
    return f"{sign}{format_money(abs(value))} {currency}"


def format_days_left(days: int) -> str:
    if days <= 0:
        return "сегодня"

    mod10 = days % 10
    mod100 = days % 100
    suffix = "дней"
    if mod10 == 1 and mod100 != 11:
        suffix = "день"
    elif 2 <= mod10 <= 4 and (mod100 < 10 or mod100 >= 20):
        suffix = "дня"

    return f"через {days} {suffix}"
