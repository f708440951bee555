"""Recurrence resolution for subscriptions billed every N calendar months."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator

import numpy as np
import pandas as pd

__all__ = [
    "MAX_RECURRENCE_STEPS",
    "as_day",
    "add_days",
    "add_months",
    "start_of_month",
    "parse_anchor_date",
    "coerce_interval",
    "occurrence_at",
    "next_occurrence",
    "iter_occurrences",
]

logger = logging.getLogger(__name__)

# Occurrences needing this many interval steps (or more) from the anchor are
# treated as unresolvable.
MAX_RECURRENCE_STEPS = 120

# Stored dates are ISO calendar days, optionally followed by a time part.
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ].*)?$")

_DATE_ARITHMETIC_ERRORS = (OverflowError, ValueError, pd.errors.OutOfBoundsDatetime)


def add_days(value: pd.Timestamp, days: int) -> pd.Timestamp:
    return value + pd.Timedelta(days=days)


def add_months(value: pd.Timestamp, months: int) -> pd.Timestamp:
    """Shift ``value`` by whole calendar months.

    The day of month is clamped to the last day of the target month, so
    ``2024-01-31 + 1 month`` is ``2024-02-29`` rather than rolling into March.
    """

    return value + pd.DateOffset(months=months)


def as_day(value: Any) -> pd.Timestamp:
    """Return midnight of the given instant as a timezone-naive timestamp."""

    return _as_naive(pd.Timestamp(value)).normalize()


def start_of_month(value: Any) -> pd.Timestamp:
    return as_day(value).replace(day=1)


def parse_anchor_date(value: Any) -> pd.Timestamp | None:
    """Parse a stored payment date, returning ``None`` when it is not a real date.

    Parameters
    ----------
    value:
        ISO date string (``YYYY-MM-DD``), ``datetime``/``date`` or timestamp.

    Returns
    -------
    pd.Timestamp | None
        Midnight of the parsed day, or ``None`` for empty, malformed or
        impossible dates such as ``2024-02-30``.
    """

    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        # pandas also understands words such as "now" and "today"
        if not _ISO_DATE.match(value):
            return None

    try:
        parsed = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError):
        return None

    if pd.isna(parsed):
        return None
    return _as_naive(parsed).normalize()


def coerce_interval(value: Any) -> int | None:
    """Return the billing interval as a positive ``int`` or ``None`` if unusable."""

    if isinstance(value, bool):
        return None
    try:
        months = float(value)
    except (TypeError, ValueError):
        return None
    if not np.isfinite(months) or months <= 0 or not months.is_integer():
        return None
    return int(months)


def occurrence_at(anchor: pd.Timestamp, interval_months: int, step: int) -> pd.Timestamp:
    """Return the ``step``-th occurrence, always measured from the anchor.

    Measuring from the anchor keeps month-end clamping from drifting: a
    subscription anchored on the 31st lands on Feb 28/29 and back on Mar 31.
    """

    return add_months(anchor, interval_months * step)


def _safe_occurrence(anchor: pd.Timestamp, interval_months: int, step: int) -> pd.Timestamp | None:
    try:
        return occurrence_at(anchor, interval_months, step)
    except _DATE_ARITHMETIC_ERRORS:
        logger.debug(
            "Occurrence %s of %s every %s months is outside the supported date range",
            step,
            anchor.date(),
            interval_months,
        )
        return None


def _resolve_step(anchor: pd.Timestamp, interval_months: int, reference_day: pd.Timestamp) -> int | None:
    if anchor >= reference_day:
        return 0

    month_gap = (reference_day.year - anchor.year) * 12 + (reference_day.month - anchor.month)
    step = max(month_gap // interval_months, 0)
    while True:
        occurrence = _safe_occurrence(anchor, interval_months, step)
        if occurrence is None:
            return None
        if occurrence >= reference_day:
            return step
        step += 1


def _resolve(anchor: Any, interval_months: Any, reference: Any) -> tuple[pd.Timestamp, int, int] | None:
    anchor_ts = parse_anchor_date(anchor)
    if anchor_ts is None:
        return None

    interval = coerce_interval(interval_months)
    if interval is None:
        logger.debug("Skipping recurrence with unusable interval %r", interval_months)
        return None

    reference_day = as_day(reference)
    step = _resolve_step(anchor_ts, interval, reference_day)
    if step is None:
        return None
    if step >= MAX_RECURRENCE_STEPS:
        logger.debug(
            "Recurrence from %s every %s months needs %s steps to reach %s",
            anchor_ts.date(),
            interval,
            step,
            reference_day.date(),
        )
        return None
    return anchor_ts, interval, step


def next_occurrence(anchor: Any, interval_months: Any, reference: Any) -> pd.Timestamp | None:
    """Return the first occurrence on or after the reference day.

    The reference is compared at day granularity, so a payment due earlier
    on the reference day still counts as the next occurrence. ``None`` is
    returned when the anchor is not a valid date, the interval is not a
    positive whole number of months, or reaching the reference would take
    ``MAX_RECURRENCE_STEPS`` steps or more.
    """

    resolved = _resolve(anchor, interval_months, reference)
    if resolved is None:
        return None
    anchor_ts, interval, step = resolved
    return occurrence_at(anchor_ts, interval, step)


def iter_occurrences(
    anchor: Any,
    interval_months: Any,
    start: Any,
    end: Any,
    *,
    inclusive: bool = False,
) -> Iterator[pd.Timestamp]:
    """Yield every occurrence from ``start`` up to ``end``.

    ``end`` is exclusive unless ``inclusive`` is set. Each call starts again
    from the anchor; no cursor is shared between enumerations. Enumeration
    stops early once an occurrence falls outside the representable range.
    """

    resolved = _resolve(anchor, interval_months, start)
    if resolved is None:
        return

    anchor_ts, interval, step = resolved
    end_ts = _as_naive(pd.Timestamp(end))
    current = occurrence_at(anchor_ts, interval, step)
    while current is not None and (current < end_ts or (inclusive and current == end_ts)):
        yield current
        step += 1
        current = _safe_occurrence(anchor_ts, interval, step)


def _as_naive(value: pd.Timestamp) -> pd.Timestamp:
    if value.tzinfo is not None:
        return value.tz_localize(None)
    return value
