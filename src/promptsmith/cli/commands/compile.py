"""
promptsmith compile command.

SUMMARY: Compile a profile into unit, skill and command documents
"""

from __future__ import annotations

import argparse
import sys

from promptsmith.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_json_flag,
    add_output_root_flag,
    add_profile_arg,
    add_source_root_flag,
    add_verbose_flag,
    build_settings,
    setup_logging,
)
from promptsmith.cli._output import artifact_line
from promptsmith.core.composition import ProfileCompiler
from promptsmith.core.exceptions import ConfigurationError, PromptsmithError

SUMMARY = "Compile a profile into unit, skill and command documents"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_profile_arg(parser)
    add_verbose_flag(parser)
    add_dry_run_flag(parser)
    add_json_flag(parser)
    add_source_root_flag(parser)
    add_output_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        settings = build_settings(args)
        setup_logging(args, settings)
        compiler = ProfileCompiler(settings, args.profile)
        result = compiler.run(dry_run=bool(getattr(args, "dry_run", False)))
    except ConfigurationError as exc:
        formatter.error(exc, error_code="configuration_error")
        return 1
    except PromptsmithError as exc:
        formatter.error(exc, error_code="composition_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(result.to_dict())
        return 0 if result.success else 1

    for warning in result.validation.warnings:
        formatter.text_err(f"Warning: {warning}")

    if not result.validation.is_valid:
        formatter.text_err(f"Validation failed for profile '{result.profile}':")
        for error in result.validation.errors:
            formatter.text_err(f"  - {error}")
        formatter.text_err("No output written.")
        return 1

    mode = " (dry run)" if result.dry_run else ""
    formatter.text(f"Compiling profile '{result.profile}' into {settings.output_root}{mode}")
    for artifact in result.artifacts:
        formatter.text(artifact_line(artifact.target_path, artifact.ok, artifact.error))
    formatter.text(result.summary())
    return 0 if result.success else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
