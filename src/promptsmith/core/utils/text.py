"""Text helpers for display names and output identifiers."""
from __future__ import annotations

import re

_AUTHOR_SUFFIX = re.compile(r"\s*\(@[\w-]+\)$")


def format_prompt_name(name: str) -> str:
    """Turn a prompt fragment name into a display title.

    >>> format_prompt_name("core-principles")
    'Core Principles'
    """
    return " ".join(word[:1].upper() + word[1:] for word in name.replace("_", "-").split("-") if word)


def display_name_from_id(skill_id: str) -> str:
    """Derive a skill display name from its id.

    The category prefix and an ``(@author)`` suffix are dropped:

    >>> display_name_from_id("frontend/react-query (@vince)")
    'React Query'
    """
    leaf = skill_id.rstrip("/").split("/")[-1] or skill_id
    leaf = _AUTHOR_SUFFIX.sub("", leaf).strip()
    return format_prompt_name(leaf)


def sanitize_skill_id(skill_id: str) -> str:
    """Map a skill id to a single directory name (``a/b`` -> ``a-b``)."""
    return skill_id.strip().strip("/").replace("/", "-")


__all__ = ["format_prompt_name", "display_name_from_id", "sanitize_skill_id"]
