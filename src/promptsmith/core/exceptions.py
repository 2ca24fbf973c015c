"""Exception hierarchy for promptsmith.

Every error raised on purpose derives from :class:`PromptsmithError` and
carries a ``context`` mapping that the CLI serializes in ``--json`` mode.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping


class PromptsmithError(Exception):
    """Base exception for promptsmith."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigurationError(PromptsmithError):
    """Raised when settings or a profile manifest cannot be loaded.

    Always fatal: nothing is validated or written after it.
    """


__all__ = [
    "PromptsmithError",
    "ConfigurationError",
]
