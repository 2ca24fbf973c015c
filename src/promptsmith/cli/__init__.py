"""promptsmith command line interface.

Commands live in ``promptsmith.cli.commands``; each module exposes
``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.
"""
from __future__ import annotations

from ._args import (
    add_dry_run_flag,
    add_json_flag,
    add_output_root_flag,
    add_profile_arg,
    add_source_root_flag,
    add_verbose_flag,
)
from ._output import OutputFormatter
from ._utils import build_settings, setup_logging

__all__ = [
    "OutputFormatter",
    "add_dry_run_flag",
    "add_json_flag",
    "add_output_root_flag",
    "add_profile_arg",
    "add_source_root_flag",
    "add_verbose_flag",
    "build_settings",
    "setup_logging",
]
