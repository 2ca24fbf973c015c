"""Placeholder line pruning.

A template line that holds nothing but a placeholder whose value is empty
(e.g. ``{{critical_requirements}}`` for a unit without that fragment) is
removed, and runs of blank lines left behind collapse to one. Only template
text is touched; section content is inserted later.
"""
from __future__ import annotations

import re

from .base import ContentTransformer, TransformContext


class BlankPlaceholderPruner(ContentTransformer):
    LINE_PATTERN = re.compile(r"^[ \t]*\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}[ \t]*$")
    BLANK_RUN = re.compile(r"\n(?:[ \t]*\n){2,}")

    def transform(self, content: str, context: TransformContext) -> str:
        kept = []
        for line in content.split("\n"):
            match = self.LINE_PATTERN.match(line)
            if match and context.is_empty(match.group(1)):
                continue
            kept.append(line)
        return self.BLANK_RUN.sub("\n\n", "\n".join(kept))
