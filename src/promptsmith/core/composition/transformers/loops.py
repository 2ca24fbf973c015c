"""Loop transformer for template composition.

Handles Handlebars-style loops over unit metadata lists:
- {{#each collection}}...{{/each}} - Iterate over a list from metadata
- {{#each this.property}}...{{/each}} - Nested loops over item properties
- {{this}} - Current item in loop
- {{this.property}} - Access item property
- {{@index}} - Current index (0-based)

Other ``{{name}}`` placeholders inside a loop body resolve like top-level
variables. Each expanded loop is rendered in one pass and handed to the
variable transformer as a finished chunk, so item values are never scanned
for placeholders again.
"""
from __future__ import annotations

import re
from typing import Any, List, Tuple

from ..errors import RenderError
from .base import ContentTransformer, TransformContext

_OPEN = "{{#each"
_CLOSE = "{{/each}}"


class LoopExpander(ContentTransformer):
    """Expand {{#each collection}}...{{/each}} loops.

    Example:
        Metadata: {"dynamic_skills": [{"id": "a", "usage": "when X"}]}
        Template: {{#each dynamic_skills}}- {{this.id}}: {{this.usage}}
        {{/each}}
        Output: - a: when X
    """

    EACH_PATTERN = re.compile(r"\{\{#each\s+([\w.]+)\s*\}\}")

    BODY_TOKEN = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
    NESTED_EACH = re.compile(r"#each\s+([\w.]+)")
    THIS_TOKEN = re.compile(r"this(?:\.([\w.]+))?")
    NAME_TOKEN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

    def transform(self, content: str, context: TransformContext) -> str:
        parts: List[str] = []
        pos = 0
        while True:
            match = self.EACH_PATTERN.search(content, pos)
            if not match:
                break
            body_end, block_end = self._find_close(content, match.end(), match.group(1))
            body = content[match.end():body_end]
            items = context.collection(match.group(1))
            rendered = "".join(self._render(body, item, i, context) for i, item in enumerate(items))
            context.loops_expanded += 1

            parts.append(content[pos:match.start()])
            parts.append(context.add_chunk(rendered))
            pos = block_end
        parts.append(content[pos:])

        result = "".join(parts)
        if _CLOSE in result:
            raise RenderError("Unmatched {{/each}} in template")
        return result

    def _find_close(self, content: str, start: int, name: str) -> Tuple[int, int]:
        """Return ``(body_end, block_end)`` of the {{/each}} matching an opening tag."""
        depth = 1
        pos = start
        while True:
            next_open = content.find(_OPEN, pos)
            next_close = content.find(_CLOSE, pos)
            if next_close == -1:
                raise RenderError(f"Unclosed {{{{#each {name}}}}} in template", context={"variable": name})
            if next_open != -1 and next_open < next_close:
                depth += 1
                pos = next_open + len(_OPEN)
                continue
            depth -= 1
            if depth == 0:
                return next_close, next_close + len(_CLOSE)
            pos = next_close + len(_CLOSE)

    def _render(self, template: str, item: Any, index: int, context: TransformContext) -> str:
        """Render one loop body for ``item`` in a single left-to-right pass."""
        parts: List[str] = []
        pos = 0
        while True:
            match = self.BODY_TOKEN.search(template, pos)
            if not match:
                parts.append(template[pos:])
                break
            parts.append(template[pos:match.start()])
            token = match.group(1).strip()

            nested = self.NESTED_EACH.fullmatch(token)
            if nested:
                path = nested.group(1)
                body_end, block_end = self._find_close(template, match.end(), path)
                body = template[match.end():body_end]
                for j, sub in enumerate(self._nested_collection(path, item, context)):
                    parts.append(self._render(body, sub, j, context))
                pos = block_end
                continue

            this = self.THIS_TOKEN.fullmatch(token)
            if this:
                value = item if this.group(1) is None else self._get_nested_prop(item, this.group(1))
                parts.append("" if value is None else str(value))
            elif token == "@index":
                parts.append(str(index))
            elif self.NAME_TOKEN.fullmatch(token):
                parts.append(context.scalar(token))
            elif token == "/each":
                raise RenderError("Unmatched {{/each}} in template")
            else:
                raise RenderError(
                    f"Unsupported template directive: {match.group(0)}",
                    context={"directive": match.group(0)},
                )
            pos = match.end()
        return "".join(parts)

    def _nested_collection(self, path: str, item: Any, context: TransformContext) -> List[Any]:
        if not path.startswith("this."):
            return context.collection(path)
        value = self._get_nested_prop(item, path[len("this."):])
        if value is None:
            return []
        if not isinstance(value, list):
            raise RenderError(f"Loop property '{path}' is not a list", context={"variable": path})
        return value

    def _get_nested_prop(self, item: Any, prop_path: str) -> Any:
        """Get nested property from item using dot notation."""
        current = item
        for part in prop_path.split("."):
            if isinstance(current, dict):
                current = current.get(part)
            else:
                return None
            if current is None:
                return None
        return current
