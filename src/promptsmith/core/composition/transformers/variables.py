"""Variable substitution for unit templates.

Every ``{{...}}`` left in the template after loop expansion is resolved in a
single pass: section names and metadata scalars become their text, loop
chunks are inserted, anything else is an error. Inserted text is not
scanned again, so fragment content may contain literal braces.
"""
from __future__ import annotations

import re

from ..errors import RenderError
from .base import ContentTransformer, TransformContext


class ContextVariableTransformer(ContentTransformer):
    """Substitute {{name}} placeholders from sections and metadata."""

    PLACEHOLDER = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
    NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
    CHUNK = re.compile(r"@chunk:(\d+)")

    def transform(self, content: str, context: TransformContext) -> str:
        def replacer(match: re.Match[str]) -> str:
            token = match.group(1).strip()

            chunk = self.CHUNK.fullmatch(token)
            if chunk:
                return context.chunks[int(chunk.group(1))]
            if self.NAME.fullmatch(token):
                return context.scalar(token)
            raise RenderError(
                f"Unsupported template directive: {match.group(0)}",
                context={"directive": match.group(0)},
            )

        return self.PLACEHOLDER.sub(replacer, content)
