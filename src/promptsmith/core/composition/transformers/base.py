"""Base class for content transformers in the unit renderer.

The renderer runs a template through a pipeline of transformers. Each
transformer handles one category of template processing and receives a
shared :class:`TransformContext`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from ..errors import RenderError


@dataclass
class TransformContext:
    """Context provided to transformers during processing.

    - ``sections``: assembled section text, inserted verbatim
    - ``metadata``: unit metadata (scalars for ``{{var}}``, lists for ``{{#each}}``)
    - ``chunks``: already-rendered loop output awaiting insertion
    """

    sections: Dict[str, str] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    chunks: List[str] = field(default_factory=list)

    # Tracking for debug logging
    variables_substituted: Set[str] = field(default_factory=set)
    loops_expanded: int = 0

    def is_empty(self, name: str) -> bool:
        """True when ``name`` is a known variable whose value is an empty string."""
        if name in self.sections:
            return not self.sections[name].strip()
        value = self.metadata.get(name)
        return isinstance(value, str) and not value.strip()

    def scalar(self, name: str) -> str:
        """Resolve ``{{name}}`` to text.

        Raises:
            RenderError: If the name is unknown or refers to a list.
        """
        if name in self.sections:
            self.variables_substituted.add(name)
            return self.sections[name]
        if name not in self.metadata:
            raise RenderError(f"Unknown template variable: {{{{{name}}}}}", context={"variable": name})
        value = self.metadata[name]
        if isinstance(value, (list, dict)):
            raise RenderError(
                f"Template variable '{name}' is a list; iterate it with {{{{#each {name}}}}}",
                context={"variable": name},
            )
        self.variables_substituted.add(name)
        return "" if value is None else str(value)

    def collection(self, path: str) -> List[Any]:
        current: Any = self.metadata
        for part in path.split("."):
            if not isinstance(current, dict) or part not in current:
                raise RenderError(f"Unknown template list: {path}", context={"variable": path})
            current = current[part]
        if not isinstance(current, list):
            raise RenderError(f"Template variable '{path}' is not a list", context={"variable": path})
        return current

    def add_chunk(self, text: str) -> str:
        """Stash rendered text and return the marker that stands in for it."""
        self.chunks.append(text)
        return f"{{{{@chunk:{len(self.chunks) - 1}}}}}"


class ContentTransformer(ABC):
    """Abstract base class for content transformers.

    Transformers are stateless and receive context through ``transform()``.
    """

    @abstractmethod
    def transform(self, content: str, context: TransformContext) -> str:
        """Transform content using this transformer's rules."""
        ...

    def get_name(self) -> str:
        """Get transformer name for logging/debugging."""
        return self.__class__.__name__


class TransformerPipeline:
    """Execute a sequence of transformers on content.

    Example:
        pipeline = TransformerPipeline([
            BlankPlaceholderPruner(),
            LoopExpander(),
            ContextVariableTransformer(),
        ])
        result = pipeline.execute(template, context)
    """

    def __init__(self, transformers: List[ContentTransformer]) -> None:
        self.transformers = transformers

    def execute(self, content: str, context: TransformContext) -> str:
        result = content
        for transformer in self.transformers:
            result = transformer.transform(result, context)
        return result
