"""Shared helpers for CLI commands."""
from __future__ import annotations

import argparse
from pathlib import Path

from promptsmith.core.config import CompositionSettings
from promptsmith.core.stdlib_logging import configure_logging


def build_settings(args: argparse.Namespace) -> CompositionSettings:
    """Settings for ``--source-root`` (default: cwd) with an optional ``--output-root``.

    Raises:
        ConfigurationError: If the layered configuration is invalid.
    """
    source_root = getattr(args, "source_root", None)
    output_root = getattr(args, "output_root", None)
    return CompositionSettings(
        Path(source_root) if source_root else Path.cwd(),
        output_root=Path(output_root) if output_root else None,
    )


def setup_logging(args: argparse.Namespace, settings: CompositionSettings) -> None:
    configure_logging(
        verbose=bool(getattr(args, "verbose", False)),
        level=settings.log_level,
        log_path=settings.log_file,
    )


__all__ = ["build_settings", "setup_logging"]
