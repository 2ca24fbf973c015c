"""Typed accessors over the merged configuration.

``CompositionSettings`` is the single object handed to every composition
component. Directory and file names come from configuration; nothing else in
the engine hard-codes them.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, List, Optional

from .manager import ConfigManager


@dataclass(frozen=True)
class OutputLayout:
    """Names of the generated subtrees and fixed files under the output root."""

    units: str = "units"
    skills: str = "skills"
    commands: str = "commands"
    skill_file: str = "SKILL.md"
    instructions_file: str = "INSTRUCTIONS.md"


class CompositionSettings:
    """Configuration accessor for one source tree.

    Usage:
        settings = CompositionSettings(Path("/path/to/sources"))
        settings.profile_dir("home")
        settings.separator
    """

    def __init__(
        self,
        source_root: Optional[Path] = None,
        *,
        output_root: Optional[Path] = None,
        config: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.source_root = Path(source_root or Path.cwd()).resolve()
        self._output_root_override = Path(output_root) if output_root else None
        self._config = config if config is not None else ConfigManager(self.source_root).load_config()

    def section(self, name: str) -> Dict[str, Any]:
        value = self._config.get(name)
        return value if isinstance(value, dict) else {}

    # ----- profiles -----

    @cached_property
    def profiles_dir(self) -> Path:
        return self.source_root / self.section("profiles")["dir"]

    @cached_property
    def default_profile(self) -> str:
        return str(self.section("profiles")["default"])

    @cached_property
    def manifest_filename(self) -> str:
        return str(self.section("profiles")["manifest"])

    def profile_dir(self, profile: str) -> Path:
        return self.profiles_dir / profile

    def manifest_path(self, profile: str) -> Path:
        return self.profile_dir(profile) / self.manifest_filename

    def available_profiles(self) -> List[str]:
        """Profile directories that contain a manifest, sorted by name."""
        if not self.profiles_dir.is_dir():
            return []
        return sorted(
            p.name
            for p in self.profiles_dir.iterdir()
            if p.is_dir() and (p / self.manifest_filename).is_file()
        )

    # ----- fragment directories (relative to a store root) -----

    @cached_property
    def prompts_dir(self) -> str:
        return str(self.section("sources")["prompts"])

    @cached_property
    def output_formats_dir(self) -> str:
        return str(self.section("sources")["outputFormats"])

    @cached_property
    def units_dir(self) -> str:
        return str(self.section("sources")["units"])

    @cached_property
    def templates_dir(self) -> str:
        return str(self.section("sources")["templates"])

    @cached_property
    def commands_dir(self) -> str:
        return str(self.section("sources")["commands"])

    # ----- composition -----

    @cached_property
    def template_name(self) -> str:
        return str(self.section("composition")["template"])

    @cached_property
    def separator(self) -> str:
        return str(self.section("composition")["separator"])

    @cached_property
    def default_model(self) -> str:
        return str(self.section("composition")["defaultModel"])

    # ----- output -----

    @cached_property
    def output_root(self) -> Path:
        if self._output_root_override is not None:
            return self._output_root_override.resolve()
        return (self.source_root / self.section("output")["root"]).resolve()

    @cached_property
    def output_layout(self) -> OutputLayout:
        out = self.section("output")
        return OutputLayout(
            units=out["units"],
            skills=out["skills"],
            commands=out["commands"],
            skill_file=out["skillFile"],
            instructions_file=out["instructionsFile"],
        )

    # ----- logging -----

    @cached_property
    def log_level(self) -> str:
        return str(self.section("logging").get("level") or "WARNING")

    @cached_property
    def log_file(self) -> Optional[Path]:
        raw = self.section("logging").get("file")
        return self.source_root / raw if raw else None


__all__ = ["CompositionSettings", "OutputLayout"]
