"""Profile manifest model and loader.

A manifest lives at ``profiles/<profile>/config.yaml`` and declares the
prompt sets, the skill registry and every unit (agent) to compile. The loader
checks structure against ``manifest.schema.yaml``; reference checks against
the fragment store happen later in :mod:`.validation`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Tuple

import yaml

from promptsmith.core.exceptions import ConfigurationError
from promptsmith.core.schemas.validation import validate_payload_safe
from promptsmith.core.utils.io import read_yaml
from promptsmith.core.utils.text import display_name_from_id

if TYPE_CHECKING:
    from promptsmith.core.config.settings import CompositionSettings

logger = logging.getLogger(__name__)

SKILL_BODY_FILE = "SKILL.md"
SKILL_SUPPORTING_FILES: Tuple[str, ...] = ("examples.md", "reference.md")


class SkillMode(str, Enum):
    PRECOMPILED = "precompiled"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class SkillAssignment:
    """A unit's reference to a skill.

    ``path`` is profile-relative. A path ending in ``/`` names a folder
    skill whose body is ``<path>SKILL.md``.
    """

    id: str
    mode: SkillMode
    path: Optional[str] = None
    name: str = ""
    description: str = ""
    usage: str = ""

    @property
    def is_folder(self) -> bool:
        return bool(self.path) and self.path.endswith("/")

    @property
    def body_path(self) -> Optional[str]:
        if not self.path:
            return None
        return f"{self.path}{SKILL_BODY_FILE}" if self.is_folder else self.path

    @property
    def supporting_paths(self) -> List[str]:
        if not self.is_folder:
            return []
        return [f"{self.path}{name}" for name in SKILL_SUPPORTING_FILES]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "usage": self.usage,
            "path": self.path or "",
            "mode": self.mode.value,
        }


@dataclass(frozen=True)
class PromptSet:
    name: str
    prompts: List[str]
    kind: str  # "core" or "ending"


@dataclass
class UnitDefinition:
    name: str
    title: str
    description: str
    model: str
    tools: List[str] = field(default_factory=list)
    core_prompts: str = ""
    ending_prompts: Optional[str] = None
    output_format: Optional[str] = None
    skills: List[SkillAssignment] = field(default_factory=list)

    @property
    def precompiled_skills(self) -> List[SkillAssignment]:
        return [s for s in self.skills if s.mode is SkillMode.PRECOMPILED]

    @property
    def dynamic_skills(self) -> List[SkillAssignment]:
        return [s for s in self.skills if s.mode is SkillMode.DYNAMIC]


@dataclass
class ProfileManifest:
    profile: str
    name: str
    description: str
    instructions: str
    core_prompt_sets: Dict[str, PromptSet] = field(default_factory=dict)
    ending_prompt_sets: Dict[str, PromptSet] = field(default_factory=dict)
    units: Dict[str, UnitDefinition] = field(default_factory=dict)
    skill_registry: Dict[str, Dict[str, str]] = field(default_factory=dict)
    source_path: Optional[Path] = None

    def core_prompts_for(self, unit: UnitDefinition) -> List[str]:
        prompt_set = self.core_prompt_sets.get(unit.core_prompts)
        return list(prompt_set.prompts) if prompt_set else []

    def ending_prompts_for(self, unit: UnitDefinition) -> List[str]:
        if not unit.ending_prompts:
            return []
        prompt_set = self.ending_prompt_sets.get(unit.ending_prompts)
        return list(prompt_set.prompts) if prompt_set else []

    def iter_skills(self) -> Iterator[Tuple[UnitDefinition, SkillAssignment]]:
        for unit in self.units.values():
            for skill in unit.skills:
                yield unit, skill


class ManifestLoader:
    """Parse ``profiles/<profile>/<manifest>`` into a :class:`ProfileManifest`.

    Every failure here is a :class:`ConfigurationError`: the run stops before
    any validation or composition.
    """

    def __init__(self, settings: "CompositionSettings") -> None:
        self.settings = settings

    def load(self, profile: str) -> ProfileManifest:
        path = self.settings.manifest_path(profile)
        if not path.is_file():
            raise ConfigurationError(
                f"Manifest not found for profile '{profile}': {path}",
                context={"profile": profile, "path": str(path)},
            )
        try:
            data = read_yaml(path, default=None, raise_on_error=True)
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise ConfigurationError(
                f"Cannot parse manifest for profile '{profile}': {exc}",
                context={"profile": profile, "path": str(path)},
            ) from exc
        logger.debug("Loaded manifest %s", path)
        return self.from_mapping(data, profile=profile, source_path=path)

    def from_mapping(
        self,
        data: Any,
        *,
        profile: str,
        source_path: Optional[Path] = None,
    ) -> ProfileManifest:
        location = str(source_path) if source_path else profile
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Manifest {location} must be a mapping, got {type(data).__name__}",
                context={"profile": profile, "path": location},
            )

        schema_errors = validate_payload_safe(data, "manifest")
        if schema_errors:
            details = "\n".join(f"  - {e}" for e in schema_errors)
            raise ConfigurationError(
                f"Manifest {location} is invalid:\n{details}",
                context={"profile": profile, "path": location, "errors": schema_errors},
            )

        registry = {sid: dict(entry or {}) for sid, entry in (data.get("skills") or {}).items()}
        units: Dict[str, UnitDefinition] = {}
        for unit_name, raw in (data.get("agents") or {}).items():
            units[unit_name] = self._build_unit(unit_name, raw, registry)

        return ProfileManifest(
            profile=profile,
            name=data["name"],
            description=data.get("description") or "",
            instructions=data["instructions"],
            core_prompt_sets=self._build_prompt_sets(data.get("core_prompt_sets"), "core"),
            ending_prompt_sets=self._build_prompt_sets(data.get("ending_prompt_sets"), "ending"),
            units=units,
            skill_registry=registry,
            source_path=source_path,
        )

    @staticmethod
    def _build_prompt_sets(raw: Optional[Dict[str, List[str]]], kind: str) -> Dict[str, PromptSet]:
        return {
            name: PromptSet(name=name, prompts=list(prompts or []), kind=kind)
            for name, prompts in (raw or {}).items()
        }

    def _build_unit(
        self,
        name: str,
        raw: Dict[str, Any],
        registry: Dict[str, Dict[str, str]],
    ) -> UnitDefinition:
        skills_raw = raw.get("skills") or {}
        skills: List[SkillAssignment] = []
        for mode in (SkillMode.PRECOMPILED, SkillMode.DYNAMIC):
            for entry in skills_raw.get(mode.value) or []:
                skills.append(self._build_skill(entry, mode, registry))

        return UnitDefinition(
            name=name,
            title=raw["title"],
            description=raw.get("description") or "",
            model=raw.get("model") or self.settings.default_model,
            tools=list(raw.get("tools") or []),
            core_prompts=raw["core_prompts"],
            ending_prompts=raw.get("ending_prompts") or None,
            output_format=raw.get("output_format") or None,
            skills=skills,
        )

    @staticmethod
    def _build_skill(
        entry: Dict[str, Any],
        mode: SkillMode,
        registry: Dict[str, Dict[str, str]],
    ) -> SkillAssignment:
        # Fields missing on the assignment fall back to the registry entry.
        skill_id = entry["id"]
        known = registry.get(skill_id, {})
        return SkillAssignment(
            id=skill_id,
            mode=mode,
            path=entry.get("path") or known.get("path") or None,
            name=entry.get("name") or known.get("name") or display_name_from_id(skill_id),
            description=entry.get("description") or known.get("description") or "",
            usage=entry.get("usage") or "",
        )


__all__ = [
    "SkillMode",
    "SkillAssignment",
    "PromptSet",
    "UnitDefinition",
    "ProfileManifest",
    "ManifestLoader",
    "SKILL_BODY_FILE",
    "SKILL_SUPPORTING_FILES",
]
