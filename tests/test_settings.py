"""Configuration and logging setup."""

from __future__ import annotations

import logging

import streamlit as st

from config import DEFAULT_OPENAI_MODEL, Settings, get_settings
from core.logging_setup import setup_logging


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-env")
    monkeypatch.setenv("AI_MOCK", "true")

    settings = get_settings()

    assert settings.openai_api_key == "env-key"
    assert settings.openai_model == "gpt-env"
    assert settings.ai_mock is True


def test_streamlit_secrets_override_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    monkeypatch.setattr(
        st,
        "secrets",
        {"openai": {"api_key": "secret-key", "api_base": "https://proxy.local/v1", "mock": False}},
        raising=False,
    )

    settings = get_settings()

    assert settings.openai_api_key == "secret-key"
    assert settings.openai_model == DEFAULT_OPENAI_MODEL
    assert settings.openai_client_kwargs == {"api_key": "secret-key", "base_url": "https://proxy.local/v1"}


def test_client_kwargs_skip_empty_values():
    assert Settings(openai_api_key=None, openai_base_url=None).openai_client_kwargs == {}


def test_setup_logging_installs_one_handler():
    root = logging.getLogger()
    previous_level = root.level
    try:
        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)

        ours = [handler for handler in root.handlers if getattr(handler, "_subkeeper", False)]
        assert len(ours) == 1
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for handler in [h for h in root.handlers if getattr(h, "_subkeeper", False)]:
            root.removeHandler(handler)
        root.setLevel(previous_level)
