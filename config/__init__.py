"""Application configuration utilities."""

from .settings import DEFAULT_OPENAI_MODEL, Settings, get_settings

__all__ = [
    "DEFAULT_OPENAI_MODEL",
    "Settings",
    "get_settings",
]
