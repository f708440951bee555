"""Prompt loading utilities for SubKeeper AI features."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from string import Template

__all__ = ["PromptTemplate", "load_prompt", "get_prompt_text", "render_prompt", "available_prompts"]


@dataclass(frozen=True)
class PromptTemplate:
    """A prompt file with its resolved text content.

    ``$name`` placeholders are filled by :meth:`render`; a prompt without
    placeholders renders to itself.
    """

    name: str
    content: str

    def render(self, **values: object) -> str:
        return Template(self.content).substitute({key: str(value) for key, value in values.items()})


PROMPTS_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=32)
def load_prompt(name: str) -> PromptTemplate:
    """Load a prompt template by stem name (without extension)."""

    path = PROMPTS_DIR / f"{name}.txt"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path}")

    content = path.read_text(encoding="utf-8").strip()
    return PromptTemplate(name=name, content=content)


def get_prompt_text(name: str) -> str:
    return load_prompt(name).content


def render_prompt(name: str, /, **values: object) -> str:
    """Load ``name`` and substitute its placeholders; missing values raise ``KeyError``."""

    return load_prompt(name).render(**values)


def available_prompts() -> list[str]:
    return sorted(path.stem for path in PROMPTS_DIR.glob("*.txt"))
