"""Logging configuration for SubKeeper entry points."""

from __future__ import annotations

import logging
import sys

__all__ = ["setup_logging"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging to output to stdout with proper formatting."""

    root_logger = logging.getLogger()
    if not any(getattr(handler, "_subkeeper", False) for handler in root_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._subkeeper = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Quiet the HTTP stack used by the OpenAI SDK
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
