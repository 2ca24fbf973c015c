"""Fragment lookup across ordered filesystem roots.

A source tree has two roots: the selected profile's directory and the system
root that holds shared prompts, unit fragments and templates. Fragment ids are
root-relative POSIX paths; the first root that contains a file wins, so a
profile can shadow any shared fragment. Skill bodies and the instructions
file belong to the profile and are read through ``store.only("profile")``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from promptsmith.core.utils.io import read_text

from .errors import CompositionError, FragmentNotFoundError

if TYPE_CHECKING:
    from promptsmith.core.config.settings import CompositionSettings

logger = logging.getLogger(__name__)


class FragmentRole(str, Enum):
    ROLE_INTRO = "role-intro"
    WORKFLOW = "workflow"
    CRITICAL_REQUIREMENT = "critical-requirement"
    CRITICAL_REMINDER = "critical-reminder"
    EXAMPLE = "example"
    SKILL_BODY = "skill-body"
    PROMPT_BODY = "prompt-body"
    OUTPUT_FORMAT = "output-format"


# Per-unit fragment files under ``<units dir>/<unit>/``.
UNIT_FRAGMENT_FILES: Dict[FragmentRole, str] = {
    FragmentRole.ROLE_INTRO: "intro.md",
    FragmentRole.WORKFLOW: "workflow.md",
    FragmentRole.CRITICAL_REQUIREMENT: "critical-requirements.md",
    FragmentRole.CRITICAL_REMINDER: "critical-reminders.md",
    FragmentRole.EXAMPLE: "examples.md",
}

REQUIRED_UNIT_ROLES: Tuple[FragmentRole, ...] = (FragmentRole.ROLE_INTRO, FragmentRole.WORKFLOW)
OPTIONAL_UNIT_ROLES: Tuple[FragmentRole, ...] = (
    FragmentRole.CRITICAL_REQUIREMENT,
    FragmentRole.CRITICAL_REMINDER,
    FragmentRole.EXAMPLE,
)


@dataclass(frozen=True)
class Fragment:
    """A located fragment. Content is read on first access through the store."""

    id: str
    role: FragmentRole
    path: Path
    store: "FragmentStore" = field(repr=False, compare=False)

    @property
    def content(self) -> str:
        return self.store.read(self.id)


class FragmentStore:
    """Read-only access to fragments under ordered ``(label, root)`` pairs.

    Reads are cached for the lifetime of the instance, so repeated reads of
    the same id within one run return identical content.

    Example:
        store = FragmentStore([("profile", profile_dir), ("system", source_root)])
        store.read("prompts/core-principles.md")
    """

    def __init__(self, roots: Sequence[Tuple[str, Path]]) -> None:
        self.roots: List[Tuple[str, Path]] = [(label, Path(root).resolve()) for label, root in roots]
        self._cache: Dict[Path, str] = {}

    @classmethod
    def for_profile(cls, settings: "CompositionSettings", profile: str) -> "FragmentStore":
        return cls([("profile", settings.profile_dir(profile)), ("system", settings.source_root)])

    def only(self, label: str) -> "FragmentStore":
        """A store over just the roots named ``label``."""
        return FragmentStore([(name, root) for name, root in self.roots if name == label])

    @staticmethod
    def _relative(path: str) -> Optional[PurePosixPath]:
        rel = PurePosixPath(str(path).replace("\\", "/"))
        if not str(path).strip() or rel.is_absolute() or ".." in rel.parts:
            return None
        return rel

    def locate(self, path: str) -> Optional[Tuple[str, Path]]:
        """Return ``(root label, file path)`` of the first root holding ``path``."""
        rel = self._relative(path)
        if rel is None:
            return None
        for label, root in self.roots:
            candidate = root.joinpath(*rel.parts)
            if not candidate.is_file():
                continue
            # Symlinks must not lead outside their root.
            try:
                candidate.resolve().relative_to(root)
            except ValueError:
                continue
            return label, candidate
        return None

    def exists(self, path: str) -> bool:
        return self.locate(path) is not None

    def resolve(self, path: str) -> Path:
        found = self.locate(path)
        if found is None:
            raise FragmentNotFoundError(
                f"Fragment not found: {path}",
                context={"path": path, "roots": [str(root) for _, root in self.roots]},
            )
        return found[1]

    def read(self, path: str) -> str:
        resolved = self.resolve(path)
        if resolved not in self._cache:
            logger.debug("Reading fragment %s", resolved)
            try:
                self._cache[resolved] = read_text(resolved)
            except UnicodeDecodeError as exc:
                raise CompositionError(
                    f"Fragment {path} is not valid UTF-8: {exc}",
                    context={"path": path},
                ) from exc
        return self._cache[resolved]

    def read_optional(self, path: str, default: str = "") -> str:
        return self.read(path) if self.exists(path) else default

    def fragment(self, path: str, role: FragmentRole) -> Fragment:
        return Fragment(id=path, role=role, path=self.resolve(path), store=self)

    def list_files(self, directory: str, suffix: str = ".md") -> List[str]:
        """List fragment ids directly inside ``directory`` across all roots.

        Names present in several roots are listed once. Sorted by id.
        """
        rel = self._relative(directory)
        if rel is None:
            return []
        names = set()
        for _, root in self.roots:
            base = root.joinpath(*rel.parts)
            if not base.is_dir():
                continue
            names.update(p.name for p in base.iterdir() if p.is_file() and p.name.endswith(suffix))
        return [f"{rel.as_posix()}/{name}" for name in sorted(names)]


class FragmentPaths:
    """Fragment ids for the fixed source locations named in settings."""

    def __init__(self, settings: "CompositionSettings") -> None:
        self.settings = settings

    def prompt(self, name: str) -> str:
        return f"{self.settings.prompts_dir}/{name}.md"

    def output_format(self, name: str) -> str:
        return f"{self.settings.output_formats_dir}/{name}.md"

    def unit_fragment(self, unit: str, role: FragmentRole) -> str:
        return f"{self.settings.units_dir}/{unit}/{UNIT_FRAGMENT_FILES[role]}"

    def template(self) -> str:
        return f"{self.settings.templates_dir}/{self.settings.template_name}"

    def commands(self) -> str:
        return self.settings.commands_dir


__all__ = [
    "Fragment",
    "FragmentRole",
    "FragmentStore",
    "FragmentPaths",
    "UNIT_FRAGMENT_FILES",
    "REQUIRED_UNIT_ROLES",
    "OPTIONAL_UNIT_ROLES",
]
