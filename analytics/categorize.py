"""Keyword-based segmentation of subscription services."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

__all__ = [
    "Segment",
    "SEGMENTS",
    "OTHER_SEGMENT",
    "normalize_service_name",
    "classify_subscription",
]


@dataclass(frozen=True)
class Segment:
    name: str
    label: str
    category: str
    keywords: tuple[str, ...] = ()


SEGMENTS: tuple[Segment, ...] = (
    Segment(
        "Видео",
        "streaming",
        "Entertainment",
        (
            "netflix",
            "иви",
            "ivi",
            "кино",
            "okko",
            "amediateka",
            "amedia",
            "амедиатека",
            "hbo",
            "t-премиум",
            "t премиум",
            "wink",
            "start",
            "megogo",
            "apple tv",
        ),
    ),
    Segment(
        "Музыка",
        "music",
        "Entertainment",
        ("spotify", "яндекс музыка", "yandex music", "apple music", "deezer", "boom", "sound"),
    ),
    Segment(
        "Пакеты",
        "bundle",
        "Finance",
        ("сберпрайм", "yandex plus", "яндекс плюс", "прайм", "тинькофф", "tinkoff"),
    ),
)

OTHER_SEGMENT = Segment("Прочее", "other", "Other")

_PUNCTUATION = re.compile(r"[^\w\s+-]")


@lru_cache(maxsize=512)
def normalize_service_name(raw_name: str) -> str:
    """Return a lowercase, whitespace-collapsed form of a service name.

    Parameters
    ----------
    raw_name:
        Name as entered by the user.

    Returns
    -------
    str
        Normalised name with stray punctuation removed; ``""`` for falsy input.
    """

    if not raw_name:
        return ""

    name = raw_name.strip().lower()
    name = _PUNCTUATION.sub(" ", name)
    name = re.sub(r"\s+", " ", name)
    return name.strip()


def classify_subscription(name: str) -> Segment:
    """Return the first segment whose keywords appear in the service name."""

    normalized = normalize_service_name(name)
    for segment in SEGMENTS:
        if any(keyword in normalized for keyword in segment.keywords):
            return segment
    return OTHER_SEGMENT
