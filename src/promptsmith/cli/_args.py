"""Common CLI argument registration utilities.

Reusable argument registration functions shared by the commands.
"""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_source_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --source-root flag (directory holding profiles/, prompts/, units/ ...)."""
    parser.add_argument(
        "--source-root",
        type=str,
        help="Source tree root (default: current directory)",
    )


def add_output_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --output-root flag overriding the configured output directory."""
    parser.add_argument(
        "--output-root",
        type=str,
        help="Output directory (default: output.root from configuration)",
    )


def add_profile_arg(parser: argparse.ArgumentParser) -> None:
    """Add --profile selector."""
    parser.add_argument(
        "--profile",
        "-p",
        type=str,
        help="Profile to use (default: profiles.default from configuration)",
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    """Add --dry-run flag."""
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render everything in memory without writing files",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging on stderr",
    )


__all__ = [
    "add_json_flag",
    "add_source_root_flag",
    "add_output_root_flag",
    "add_profile_arg",
    "add_dry_run_flag",
    "add_verbose_flag",
]
