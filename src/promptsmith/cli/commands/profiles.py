"""
promptsmith profiles command.

SUMMARY: List the profiles available in a source tree
"""

from __future__ import annotations

import argparse
import sys

from promptsmith.cli import OutputFormatter, add_json_flag, add_source_root_flag, build_settings
from promptsmith.core.exceptions import ConfigurationError

SUMMARY = "List the profiles available in a source tree"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)
    add_source_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        settings = build_settings(args)
    except ConfigurationError as exc:
        formatter.error(exc, error_code="configuration_error")
        return 1

    profiles = settings.available_profiles()
    if formatter.json_mode:
        formatter.json_output({"default": settings.default_profile, "profiles": profiles})
        return 0

    if not profiles:
        formatter.text(f"No profiles found under {settings.profiles_dir}")
        return 0
    for name in profiles:
        marker = " (default)" if name == settings.default_profile else ""
        formatter.text(f"  {name}{marker}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
