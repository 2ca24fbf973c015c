"""Shared utilities (file I/O, dictionary merging, text helpers)."""
from __future__ import annotations

from .io import (
    PathLike,
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
    read_text,
    read_yaml,
    write_text,
)
from .merge import deep_merge
from .text import display_name_from_id, format_prompt_name, sanitize_skill_id

__all__ = [
    "PathLike",
    "atomic_write",
    "ensure_directory",
    "ensure_parent_dir",
    "read_text",
    "read_yaml",
    "write_text",
    "deep_merge",
    "display_name_from_id",
    "format_prompt_name",
    "sanitize_skill_id",
]
