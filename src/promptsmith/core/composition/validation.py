"""Reference validation for profile manifests.

Every reference in a manifest is checked against the fragment store before
anything is composed. Problems are aggregated across all units into one
:class:`ValidationReport`.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Tuple

from promptsmith.core.utils.text import sanitize_skill_id

from .fragments import OPTIONAL_UNIT_ROLES, REQUIRED_UNIT_ROLES, FragmentPaths, FragmentStore
from .manifest import ProfileManifest, PromptSet, SkillAssignment, SkillMode, UnitDefinition
from .report import ValidationReport

if TYPE_CHECKING:
    from promptsmith.core.config.settings import CompositionSettings

logger = logging.getLogger(__name__)


class ManifestValidator:
    """Cross-check a manifest against the fragment store.

    Usage:
        report = ManifestValidator(store, settings).validate(manifest)
        if not report.is_valid:
            ...
    """

    def __init__(self, store: FragmentStore, settings: "CompositionSettings") -> None:
        self.store = store
        self.profile_store = store.only("profile")
        self.paths = FragmentPaths(settings)
        self.skills_dir = settings.output_layout.skills

    def validate(self, manifest: ProfileManifest) -> ValidationReport:
        report = ValidationReport()

        if not self.profile_store.exists(manifest.instructions):
            report.add_error(
                f"Instructions file not found for profile '{manifest.profile}': {manifest.instructions}"
            )

        for unit in manifest.units.values():
            self._check_prompt_sets(unit, manifest, report)
            self._check_unit_fragments(unit, report)
            self._check_output_format(unit, report)
            for skill in unit.skills:
                self._check_skill(unit, skill, report)

        self._check_skill_conflicts(manifest, report)
        self._check_skill_directories(manifest, report)

        logger.debug(
            "Validated profile %s: %d error(s), %d warning(s)",
            manifest.profile,
            len(report.errors),
            len(report.warnings),
        )
        return report

    def _check_prompt_sets(
        self,
        unit: UnitDefinition,
        manifest: ProfileManifest,
        report: ValidationReport,
    ) -> None:
        refs: List[Tuple[str, str, Dict[str, PromptSet]]] = [
            ("core", unit.core_prompts, manifest.core_prompt_sets),
        ]
        if unit.ending_prompts:
            refs.append(("ending", unit.ending_prompts, manifest.ending_prompt_sets))

        for kind, key, sets in refs:
            prompt_set = sets.get(key)
            if prompt_set is None:
                report.add_error(
                    f"Unit '{unit.name}': {kind} prompt set '{key}' is not defined in {kind}_prompt_sets"
                )
                continue
            for prompt in prompt_set.prompts:
                path = self.paths.prompt(prompt)
                if not self.store.exists(path):
                    report.add_error(
                        f"Unit '{unit.name}': prompt '{prompt}' from {kind} prompt set '{key}' not found: {path}"
                    )

    def _check_unit_fragments(self, unit: UnitDefinition, report: ValidationReport) -> None:
        for role in REQUIRED_UNIT_ROLES:
            path = self.paths.unit_fragment(unit.name, role)
            if not self.store.exists(path):
                report.add_error(f"Unit '{unit.name}': required {role.value} fragment not found: {path}")
        for role in OPTIONAL_UNIT_ROLES:
            path = self.paths.unit_fragment(unit.name, role)
            if not self.store.exists(path):
                report.add_warning(f"Unit '{unit.name}': optional {role.value} fragment not found: {path}")

    def _check_output_format(self, unit: UnitDefinition, report: ValidationReport) -> None:
        if not unit.output_format:
            return
        path = self.paths.output_format(unit.output_format)
        if not self.store.exists(path):
            report.add_warning(f"Unit '{unit.name}': output format '{unit.output_format}' not found: {path}")

    def _check_skill(self, unit: UnitDefinition, skill: SkillAssignment, report: ValidationReport) -> None:
        if skill.mode is SkillMode.DYNAMIC and not skill.usage.strip():
            report.add_error(f"Unit '{unit.name}': dynamic skill '{skill.id}' has an empty usage hint")

        body = skill.body_path
        if body is None:
            if skill.mode is SkillMode.PRECOMPILED:
                report.add_error(f"Unit '{unit.name}': precompiled skill '{skill.id}' has no path")
            else:
                report.add_warning(
                    f"Unit '{unit.name}': dynamic skill '{skill.id}' has no path and will only be cataloged"
                )
            return

        if not self.profile_store.exists(body):
            report.add_error(f"Unit '{unit.name}': {skill.mode.value} skill '{skill.id}' not found: {body}")

    def _check_skill_conflicts(self, manifest: ProfileManifest, report: ValidationReport) -> None:
        first: Dict[str, Tuple[str, str]] = {}
        for unit, skill in manifest.iter_skills():
            if not skill.path:
                continue
            seen = first.get(skill.id)
            if seen is None:
                first[skill.id] = (unit.name, skill.path)
            elif seen[1] != skill.path:
                report.add_error(
                    f"Skill '{skill.id}' is declared with different paths: '{seen[1]}' (unit '{seen[0]}') "
                    f"and '{skill.path}' (unit '{unit.name}')"
                )

    def _check_skill_directories(self, manifest: ProfileManifest, report: ValidationReport) -> None:
        owners: Dict[str, str] = {}
        reported = set()
        for _, skill in manifest.iter_skills():
            if not skill.path:
                continue
            directory = sanitize_skill_id(skill.id)
            owner = owners.setdefault(directory, skill.id)
            if owner != skill.id and skill.id not in reported:
                reported.add(skill.id)
                report.add_error(
                    f"Skills '{owner}' and '{skill.id}' would both be written to "
                    f"{self.skills_dir}/{directory}"
                )


__all__ = ["ManifestValidator"]
