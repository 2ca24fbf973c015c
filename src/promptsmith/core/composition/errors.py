"""Composition error classes."""
from __future__ import annotations

from promptsmith.core.exceptions import PromptsmithError


class CompositionError(PromptsmithError):
    """Raised when a document cannot be composed, rendered or written."""


class FragmentNotFoundError(CompositionError, FileNotFoundError):
    """Raised when a fragment path does not resolve under any store root."""


class TemplateError(CompositionError):
    """Raised when a unit template is unusable."""


class RenderError(CompositionError):
    """Raised when rendering a template fails."""


class OutputWriteError(CompositionError):
    """Raised when a compiled document cannot be written."""


__all__ = [
    "CompositionError",
    "FragmentNotFoundError",
    "TemplateError",
    "RenderError",
    "OutputWriteError",
]
