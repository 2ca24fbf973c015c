"""Unified CLI output formatting utilities.

Consistent output for all promptsmith commands, in JSON or text mode.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from promptsmith.core.exceptions import PromptsmithError


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
    ) -> None:
        """Output success result.

        Args:
            data: Result data dictionary
            message: Human-readable success message (used in text mode)
            status: Status string for JSON output
        """
        if self.json_mode:
            output = {"status": status, **data}
            print(json.dumps(output, indent=self.indent, default=str))
        else:
            print(message)

    def error(
        self,
        error: Exception | str,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Output error result to stderr.

        Args:
            error: The exception that occurred (or a message)
            message: Optional human-readable message (defaults to str(error))
            error_code: Error code for JSON output
        """
        msg = message or str(error)
        if self.json_mode:
            output: Dict[str, Any] = {"error": error_code, "message": msg}
            if isinstance(error, PromptsmithError):
                output["context"] = error.context
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        """Output raw JSON data."""
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        """Output plain text message (text mode only)."""
        if not self.json_mode:
            print(message)

    def text_err(self, message: str) -> None:
        """Output plain text message on stderr (text mode only)."""
        if not self.json_mode:
            print(message, file=sys.stderr)


def artifact_line(target_path: str, ok: bool, error: Optional[str] = None) -> str:
    """Format one per-artifact status line."""
    if ok:
        return f"  ✓ {target_path}"
    return f"  ✗ {target_path} - {error}"


__all__ = ["OutputFormatter", "artifact_line"]
