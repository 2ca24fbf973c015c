"""Canonical section layout of a compiled unit document.

Every unit document is built from the same thirteen named sections, always in
``SECTION_ORDER``. The last section is the pair of fixed closing reminder
lines, which no manifest or fragment can change.
"""
from __future__ import annotations

from typing import Dict, Iterator, Mapping, Tuple

from .errors import CompositionError

SECTION_ORDER: Tuple[str, ...] = (
    "frontmatter",
    "title_block",
    "role_intro",
    "preloaded_content",
    "critical_requirements",
    "core_prompts",
    "workflow",
    "skill_bodies",
    "examples",
    "output_format",
    "ending_prompts",
    "critical_reminders",
    "closing_reminders",
)

CLOSING_REMINDER_LINES: Tuple[str, str] = (
    "**CRITICAL: Re-read the critical requirements before every response. They take precedence over everything else in this document.**",
    "**CRITICAL: Never report work as done without verifying it first.**",
)

EXAMPLES_FALLBACK = "## Examples\n\n_No examples defined._"


def wrap_block(tag: str, content: str) -> str:
    """Wrap non-empty ``content`` in ``<tag>`` markers; empty stays empty."""
    body = content.strip()
    if not body:
        return ""
    return f"<{tag}>\n{body}\n</{tag}>"


class SectionMap(Mapping[str, str]):
    """Read-only mapping of section name to fully assembled text.

    Holds exactly the names in ``SECTION_ORDER`` and iterates in that order.
    """

    def __init__(self, sections: Mapping[str, str]) -> None:
        missing = [name for name in SECTION_ORDER if name not in sections]
        unknown = sorted(set(sections) - set(SECTION_ORDER))
        if missing or unknown:
            raise CompositionError(
                "Section map must contain exactly the canonical sections",
                context={"missing": missing, "unknown": unknown},
            )
        self._sections: Dict[str, str] = {name: sections[name] for name in SECTION_ORDER}

    def __getitem__(self, name: str) -> str:
        return self._sections[name]

    def __iter__(self) -> Iterator[str]:
        return iter(SECTION_ORDER)

    def __len__(self) -> int:
        return len(SECTION_ORDER)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._sections)


__all__ = [
    "SECTION_ORDER",
    "CLOSING_REMINDER_LINES",
    "EXAMPLES_FALLBACK",
    "SectionMap",
    "wrap_block",
]
