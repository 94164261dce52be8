"""Prompt loading and rendering for Spendio AI features."""

from __future__ import annotations

import string
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

__all__ = ["PromptTemplate", "load_prompt", "get_prompt_text", "render_prompt"]

PROMPTS_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class PromptTemplate:
    """A prompt file's text and the placeholders it expects."""

    name: str
    content: str

    @property
    def fields(self) -> frozenset[str]:
        return frozenset(
            field for _, field, _, _ in string.Formatter().parse(self.content) if field
        )

    def render(self, **values: Any) -> str:
        missing = self.fields - values.keys()
        if missing:
            raise KeyError(f"Prompt {self.name!r} is missing values for: {', '.join(sorted(missing))}")
        return self.content.format(**values)


@lru_cache(maxsize=32)
def load_prompt(name: str) -> PromptTemplate:
    """Load a prompt template by stem name (without extension)."""

    path = PROMPTS_DIR / f"{name}.txt"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path}")

    return PromptTemplate(name=name, content=path.read_text(encoding="utf-8").strip())


def get_prompt_text(name: str) -> str:
    """Return raw prompt text for templates sent verbatim, such as system prompts."""

    return load_prompt(name).content


def render_prompt(template_name: str, /, **values: Any) -> str:
    return load_prompt(template_name).render(**values)
