"""
promptsmith validate command.

SUMMARY: Validate a profile manifest without writing anything
"""

from __future__ import annotations

import argparse
import sys

from promptsmith.cli import (
    OutputFormatter,
    add_json_flag,
    add_profile_arg,
    add_source_root_flag,
    add_verbose_flag,
    build_settings,
    setup_logging,
)
from promptsmith.core.composition import ProfileCompiler
from promptsmith.core.exceptions import ConfigurationError

SUMMARY = "Validate a profile manifest without writing anything"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_profile_arg(parser)
    add_verbose_flag(parser)
    add_json_flag(parser)
    add_source_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        settings = build_settings(args)
        setup_logging(args, settings)
        compiler = ProfileCompiler(settings, args.profile)
        report = compiler.validate()
    except ConfigurationError as exc:
        formatter.error(exc, error_code="configuration_error")
        return 1

    if formatter.json_mode:
        formatter.json_output({"profile": compiler.profile, **report.to_dict()})
        return 0 if report.is_valid else 1

    for error in report.errors:
        formatter.text(f"  ✗ {error}")
    for warning in report.warnings:
        formatter.text(f"  ! {warning}")
    status = "valid" if report.is_valid else "invalid"
    formatter.text(
        f"Profile '{compiler.profile}' is {status}: "
        f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    )
    return 0 if report.is_valid else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
