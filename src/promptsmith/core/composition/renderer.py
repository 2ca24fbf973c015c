"""Unit template rendering.

Usage:
    renderer = TemplateRenderer(template_text)
    text = renderer.render(sections, metadata)

The template must end with the ``{{closing_reminders}}`` placeholder, so
every rendered unit ends with the fixed closing lines.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from promptsmith.data import read_text as read_bundled_text

from .errors import TemplateError
from .fragments import FragmentPaths, FragmentStore
from .transformers import (
    BlankPlaceholderPruner,
    ContextVariableTransformer,
    LoopExpander,
    TransformContext,
    TransformerPipeline,
)

logger = logging.getLogger(__name__)

CLOSING_PLACEHOLDER = "{{closing_reminders}}"
BUNDLED_TEMPLATE = "unit.md"


class TemplateRenderer:
    """Render a :class:`~.sections.SectionMap` and unit metadata through a template."""

    def __init__(self, template: str, *, source: str = "<string>") -> None:
        self.template = template
        self.source = source
        self._check_closing()
        self.pipeline = TransformerPipeline([
            BlankPlaceholderPruner(),
            LoopExpander(),
            ContextVariableTransformer(),
        ])

    def _check_closing(self) -> None:
        lines = [line.strip() for line in self.template.splitlines() if line.strip()]
        if not lines or lines[-1] != CLOSING_PLACEHOLDER:
            raise TemplateError(
                f"Template {self.source} must end with {CLOSING_PLACEHOLDER}",
                context={"template": self.source},
            )

    def render(self, sections: Mapping[str, str], metadata: Optional[Dict[str, Any]] = None) -> str:
        context = TransformContext(sections=dict(sections), metadata=dict(metadata or {}))
        result = self.pipeline.execute(self.template, context)
        logger.debug(
            "Rendered %s: %d variable(s), %d loop(s)",
            self.source,
            len(context.variables_substituted),
            context.loops_expanded,
        )
        return result.strip() + "\n"


def resolve_template(store: FragmentStore, paths: FragmentPaths) -> Tuple[str, str]:
    """Find the unit template: profile root, then system root, then bundled default.

    Returns ``(source, text)``.
    """
    template_id = paths.template()
    found = store.locate(template_id)
    if found is not None:
        label, path = found
        logger.debug("Using %s template %s", label, path)
        return str(path), store.read(template_id)
    logger.debug("Using bundled template %s", BUNDLED_TEMPLATE)
    return f"promptsmith:{BUNDLED_TEMPLATE}", read_bundled_text("templates", BUNDLED_TEMPLATE)


def load_renderer(store: FragmentStore, paths: FragmentPaths) -> TemplateRenderer:
    source, text = resolve_template(store, paths)
    return TemplateRenderer(text, source=source)


__all__ = ["TemplateRenderer", "resolve_template", "load_renderer", "CLOSING_PLACEHOLDER"]
