"""Profile compilation.

``ProfileCompiler`` runs the whole pipeline for one profile:

1. LOAD      - parse and schema-check the manifest (fatal on failure)
2. VALIDATE  - check every reference; any error stops the run before writing
3. COMPOSE   - assemble and render each unit, collect skills and commands
4. WRITE     - stream documents into the writer (units, skills, commands, instructions)

Documents are produced lazily, so a failure at one artifact leaves the
artifacts before it written and nothing after it.
"""
from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional

from promptsmith.core.exceptions import PromptsmithError
from promptsmith.core.utils.text import sanitize_skill_id

from .assembler import ContentAssembler
from .errors import CompositionError
from .fragments import FragmentPaths, FragmentStore
from .manifest import ManifestLoader, ProfileManifest, SkillAssignment, UnitDefinition
from .renderer import TemplateRenderer, load_renderer
from .report import CompileResult, ValidationReport
from .validation import ManifestValidator
from .writer import CompiledDocument, DocumentKind, OutputWriter

if TYPE_CHECKING:
    from promptsmith.core.config.settings import CompositionSettings

logger = logging.getLogger(__name__)


class ProfileCompiler:
    """Compile one profile of a source tree.

    Usage:
        compiler = ProfileCompiler(settings, "home")
        result = compiler.run()
        if not result.success:
            ...
    """

    def __init__(self, settings: "CompositionSettings", profile: Optional[str] = None) -> None:
        self.settings = settings
        self.profile = profile or settings.default_profile
        self.store = FragmentStore.for_profile(settings, self.profile)
        self.profile_store = self.store.only("profile")
        self.paths = FragmentPaths(settings)
        self.loader = ManifestLoader(settings)
        self.validator = ManifestValidator(self.store, settings)
        self.assembler = ContentAssembler(self.store, settings)
        self.layout = settings.output_layout

    def load(self) -> ProfileManifest:
        return self.loader.load(self.profile)

    def validate(self, manifest: Optional[ProfileManifest] = None) -> ValidationReport:
        return self.validator.validate(manifest or self.load())

    def run(self, *, dry_run: bool = False) -> CompileResult:
        manifest = self.load()
        report = self.validator.validate(manifest)
        result = CompileResult(profile=self.profile, validation=report, dry_run=dry_run)
        for warning in report.warnings:
            logger.warning(warning)
        if not report.is_valid:
            logger.error("Profile %s failed validation with %d error(s); nothing written", self.profile, len(report.errors))
            return result

        renderer = load_renderer(self.store, self.paths)
        writer = OutputWriter(self.settings.output_root, self.layout)
        logger.info("Compiling profile %s into %s", self.profile, self.settings.output_root)
        result.artifacts = writer.write(self.documents(manifest, renderer), dry_run=dry_run)
        return result

    # ----- document production -----

    def documents(self, manifest: ProfileManifest, renderer: TemplateRenderer) -> Iterator[CompiledDocument]:
        """Yield every output document in write order."""
        for unit in manifest.units.values():
            target = f"{self.layout.units}/{unit.name}.md"
            yield self._guarded(target, DocumentKind.UNIT, unit.name, lambda u=unit: self.compile_unit(u, manifest, renderer))

        for skill in self.unique_skills(manifest):
            yield from self.skill_documents(skill)

        yield from self.command_documents()

        yield self._guarded(
            self.layout.instructions_file,
            DocumentKind.INSTRUCTIONS,
            manifest.profile,
            lambda: CompiledDocument(
                target_path=self.layout.instructions_file,
                rendered_text=self.profile_store.read(manifest.instructions),
                source_name=manifest.profile,
                kind=DocumentKind.INSTRUCTIONS,
            ),
        )

    def compile_unit(
        self,
        unit: UnitDefinition,
        manifest: ProfileManifest,
        renderer: TemplateRenderer,
    ) -> CompiledDocument:
        sections = self.assembler.assemble(unit, manifest)
        text = renderer.render(sections, self.assembler.metadata(unit, manifest))
        return CompiledDocument(
            target_path=f"{self.layout.units}/{unit.name}.md",
            rendered_text=text,
            source_name=unit.name,
            kind=DocumentKind.UNIT,
        )

    def unique_skills(self, manifest: ProfileManifest) -> List[SkillAssignment]:
        """Skills with a path, one per id."""
        unique: Dict[str, SkillAssignment] = {}
        for _, skill in manifest.iter_skills():
            if skill.path and skill.id not in unique:
                unique[skill.id] = skill
        return list(unique.values())

    def skill_documents(self, skill: SkillAssignment) -> Iterator[CompiledDocument]:
        out_dir = f"{self.layout.skills}/{sanitize_skill_id(skill.id)}"
        body_target = f"{out_dir}/{self.layout.skill_file}"
        body_path = skill.body_path or ""
        yield self._guarded(
            body_target,
            DocumentKind.SKILL,
            skill.id,
            lambda: CompiledDocument(body_target, self.profile_store.read(body_path), skill.id, DocumentKind.SKILL),
        )
        for support in skill.supporting_paths:
            if not self.profile_store.exists(support):
                continue
            target = f"{out_dir}/{PurePosixPath(support).name}"
            yield self._guarded(
                target,
                DocumentKind.SKILL_SUPPORT,
                skill.id,
                lambda s=support, t=target: CompiledDocument(t, self.profile_store.read(s), skill.id, DocumentKind.SKILL_SUPPORT),
            )

    def command_documents(self) -> Iterator[CompiledDocument]:
        for fragment_id in self.store.list_files(self.paths.commands()):
            name = PurePosixPath(fragment_id).name
            target = f"{self.layout.commands}/{name}"
            yield self._guarded(
                target,
                DocumentKind.COMMAND,
                name,
                lambda f=fragment_id, t=target, n=name: CompiledDocument(t, self.store.read(f), n, DocumentKind.COMMAND),
            )

    def _guarded(
        self,
        target: str,
        kind: str,
        source: str,
        build: Callable[[], CompiledDocument],
    ) -> CompiledDocument:
        # Failures carry the artifact they belong to so the writer can report them.
        try:
            return build()
        except (PromptsmithError, OSError) as exc:
            raise CompositionError(
                str(exc),
                context={"artifact": target, "kind": kind, "source": source},
            ) from exc


def compile_profile(
    settings: "CompositionSettings",
    profile: Optional[str] = None,
    *,
    dry_run: bool = False,
) -> CompileResult:
    """Convenience wrapper around :class:`ProfileCompiler`."""
    return ProfileCompiler(settings, profile).run(dry_run=dry_run)


__all__ = ["ProfileCompiler", "compile_profile"]
