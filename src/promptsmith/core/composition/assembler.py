"""Content assembly: fragments to named section strings.

The assembler reads every fragment a unit references and produces its
:class:`SectionMap`. The preloaded-content summary is derived from the same
prompt and skill lists that drive embedding, so the two always agree.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List

import yaml

from promptsmith.core.utils.text import format_prompt_name

from .fragments import FragmentPaths, FragmentRole, FragmentStore
from .manifest import ProfileManifest, SkillAssignment, UnitDefinition
from .sections import CLOSING_REMINDER_LINES, EXAMPLES_FALLBACK, SectionMap, wrap_block

if TYPE_CHECKING:
    from promptsmith.core.config.settings import CompositionSettings

logger = logging.getLogger(__name__)

PRELOADED_MARKER = "(already available, do not re-fetch)"


@dataclass(frozen=True)
class SummaryEntry:
    """One line of the preloaded-content summary.

    ``kind`` is ``prompt`` or ``skill`` for embedded content and ``dynamic``
    for skills the unit fetches on demand.
    """

    kind: str
    label: str
    usage: str = ""

    @property
    def embedded(self) -> bool:
        return self.kind != "dynamic"

    def render(self) -> str:
        if self.embedded:
            return f"- {self.label} {PRELOADED_MARKER}"
        return f"- {self.label}\n  Usage: {self.usage.strip()}"


class ContentAssembler:
    """Build the canonical sections for one unit.

    Usage:
        assembler = ContentAssembler(store, settings)
        sections = assembler.assemble(manifest.units["alpha"], manifest)
    """

    def __init__(self, store: FragmentStore, settings: "CompositionSettings") -> None:
        self.store = store
        self.profile_store = store.only("profile")
        self.paths = FragmentPaths(settings)
        self.separator = settings.separator

    def assemble(self, unit: UnitDefinition, manifest: ProfileManifest) -> SectionMap:
        logger.debug("Assembling unit %s", unit.name)
        core_prompts = manifest.core_prompts_for(unit)
        ending_prompts = manifest.ending_prompts_for(unit)

        return SectionMap({
            "frontmatter": self.frontmatter(unit),
            "title_block": f"# {unit.title}",
            "role_intro": wrap_block("role", self._unit_fragment(unit, FragmentRole.ROLE_INTRO, required=True)),
            "preloaded_content": self.preloaded_summary(unit, manifest),
            "critical_requirements": wrap_block(
                "critical_requirements",
                self._unit_fragment(unit, FragmentRole.CRITICAL_REQUIREMENT),
            ),
            "core_prompts": self._join(self.store.read(self.paths.prompt(p)) for p in core_prompts),
            "workflow": self._unit_fragment(unit, FragmentRole.WORKFLOW, required=True),
            "skill_bodies": self._join(self._skill_body(s) for s in unit.precompiled_skills),
            "examples": self._unit_fragment(unit, FragmentRole.EXAMPLE) or EXAMPLES_FALLBACK,
            "output_format": self._output_format(unit),
            "ending_prompts": self._join(self.store.read(self.paths.prompt(p)) for p in ending_prompts),
            "critical_reminders": wrap_block(
                "critical_reminders",
                self._unit_fragment(unit, FragmentRole.CRITICAL_REMINDER),
            ),
            "closing_reminders": "\n".join(CLOSING_REMINDER_LINES),
        })

    def frontmatter(self, unit: UnitDefinition) -> str:
        meta: Dict[str, Any] = {
            "name": unit.name,
            "description": unit.description,
            "model": unit.model,
        }
        if unit.tools:
            meta["tools"] = ", ".join(unit.tools)
        dumped = yaml.safe_dump(meta, sort_keys=False, allow_unicode=True, width=4096)
        return f"---\n{dumped}---"

    def summary_entries(self, unit: UnitDefinition, manifest: ProfileManifest) -> List[SummaryEntry]:
        entries: List[SummaryEntry] = []
        for prompt in manifest.core_prompts_for(unit) + manifest.ending_prompts_for(unit):
            entries.append(SummaryEntry("prompt", f"Prompt: {format_prompt_name(prompt)}"))
        for skill in unit.precompiled_skills:
            entries.append(SummaryEntry("skill", f"Skill: {skill.name} ({skill.id})"))
        for skill in unit.dynamic_skills:
            entries.append(
                SummaryEntry("dynamic", f'Skill: {skill.name}: invoke with skill id "{skill.id}"', skill.usage)
            )
        return entries

    def preloaded_summary(self, unit: UnitDefinition, manifest: ProfileManifest) -> str:
        entries = self.summary_entries(unit, manifest)
        if not entries:
            return ""

        embedded = [e.render() for e in entries if e.embedded]
        dynamic = [e.render() for e in entries if not e.embedded]
        blocks: List[str] = []
        if embedded:
            blocks.append("Embedded in this document:\n" + "\n".join(embedded))
        if dynamic:
            blocks.append("Available on demand:\n" + "\n".join(dynamic))
        return "<preloaded_content>\n" + "\n\n".join(blocks) + "\n</preloaded_content>"

    def metadata(self, unit: UnitDefinition, manifest: ProfileManifest) -> Dict[str, Any]:
        """Scalars and lists available to the unit template."""
        return {
            "name": unit.name,
            "title": unit.title,
            "description": unit.description,
            "model": unit.model,
            "tools": ", ".join(unit.tools),
            "profile": manifest.profile,
            "capabilities": list(unit.tools),
            "precompiled_skills": [s.to_dict() for s in unit.precompiled_skills],
            "dynamic_skills": [s.to_dict() for s in unit.dynamic_skills],
            "core_prompt_names": [format_prompt_name(p) for p in manifest.core_prompts_for(unit)],
            "ending_prompt_names": [format_prompt_name(p) for p in manifest.ending_prompts_for(unit)],
        }

    def _unit_fragment(self, unit: UnitDefinition, role: FragmentRole, *, required: bool = False) -> str:
        path = self.paths.unit_fragment(unit.name, role)
        if required:
            return self.store.read(path).strip()
        return self.store.read_optional(path).strip()

    def _output_format(self, unit: UnitDefinition) -> str:
        if not unit.output_format:
            return ""
        return self.store.read_optional(self.paths.output_format(unit.output_format)).strip()

    def _skill_body(self, skill: SkillAssignment) -> str:
        body = self.profile_store.read(skill.body_path or "").strip()
        return f'<skill id="{skill.id}" name="{skill.name}">\n{body}\n</skill>'

    def _join(self, parts) -> str:
        return self.separator.join(part.strip() for part in parts)


__all__ = ["ContentAssembler", "SummaryEntry", "PRELOADED_MARKER"]
