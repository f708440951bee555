"""Shared fixtures for the SubKeeper test suite."""

from __future__ import annotations

import pathlib
import sys

import pandas as pd
import pytest
import streamlit as st

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import get_settings  # noqa: E402
from core.models import Subscription  # noqa: E402


@pytest.fixture(autouse=True)
def clear_streamlit_secrets(monkeypatch):
    """Provide an empty secrets mapping so tests don't rely on Streamlit runtime."""

    monkeypatch.setattr(st, "secrets", {}, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def now() -> pd.Timestamp:
    return pd.Timestamp("2025-03-10 09:30")


@pytest.fixture()
def make_subscription():
    def _make(
        sub_id=1,
        name="Netflix Premium",
        cost=599.0,
        currency="₽",
        months=1,
        frequency_label="Ежемесячно",
        next_payment_date="2025-03-18",
    ) -> Subscription:
        return Subscription(
            id=sub_id,
            name=name,
            cost=cost,
            currency=currency,
            months=months,
            frequency_label=frequency_label,
            next_payment_date=next_payment_date,
        )

    return _make
