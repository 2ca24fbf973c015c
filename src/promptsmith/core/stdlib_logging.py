from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

from promptsmith.core.utils.io import ensure_directory

_INSTALLED_HANDLERS: List[logging.Handler] = []
_CONFIGURED_KEY: Optional[tuple] = None

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(*, verbose: bool = False, level: str = "WARNING", log_path: Optional[Path] = None) -> None:
    """Install promptsmith's stderr handler (and optional file handler) on the root logger.

    ``verbose`` forces DEBUG. Idempotent per-process: calling again with the
    same arguments is a no-op, different arguments replace the handlers this
    function installed earlier.
    """
    global _CONFIGURED_KEY

    effective = logging.DEBUG if verbose else _level_from_name(level)
    resolved = str(Path(log_path).resolve()) if log_path else None
    key = (effective, resolved)
    if _CONFIGURED_KEY == key and _INSTALLED_HANDLERS:
        return

    root = logging.getLogger()
    _remove_installed(root)
    root.setLevel(effective)

    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(effective)
    stream.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(stream)
    _INSTALLED_HANDLERS.append(stream)

    if resolved is not None:
        ensure_directory(Path(resolved).parent)
        fh = logging.FileHandler(resolved, encoding="utf-8")
        fh.setLevel(effective)
        fh.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(fh)
        _INSTALLED_HANDLERS.append(fh)

    _CONFIGURED_KEY = key


def _remove_installed(root: logging.Logger) -> None:
    while _INSTALLED_HANDLERS:
        handler = _INSTALLED_HANDLERS.pop()
        root.removeHandler(handler)
        handler.close()


def reset_logging_for_tests() -> None:
    """Test-only: remove handlers installed by ``configure_logging``."""
    global _CONFIGURED_KEY
    _remove_installed(logging.getLogger())
    _CONFIGURED_KEY = None


__all__ = ["configure_logging", "reset_logging_for_tests"]
