"""Builders for on-disk source trees used by the composition tests.

Everything is written as real files; nothing is mocked.
"""
from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from promptsmith.core.config import CompositionSettings


class SourceTree:
    """A source tree under ``root`` with helpers for each fragment location."""

    def __init__(self, root: Path, profile: str = "home") -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.profile = profile

    @property
    def profile_dir(self) -> Path:
        return self.root / "profiles" / self.profile

    @property
    def output_root(self) -> Path:
        return self.root / "output"

    def write(self, rel: str, content: str) -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def write_profile_file(self, rel: str, content: str, profile: Optional[str] = None) -> Path:
        return self.write(f"profiles/{profile or self.profile}/{rel}", content)

    def prompt(self, name: str, content: Optional[str] = None) -> Path:
        return self.write(f"prompts/{name}.md", content if content is not None else f"Prompt body for {name}.")

    def output_format(self, name: str, content: str) -> Path:
        return self.write(f"output-formats/{name}.md", content)

    def unit(
        self,
        name: str,
        *,
        intro: Optional[str] = None,
        workflow: Optional[str] = None,
        critical_requirements: Optional[str] = None,
        critical_reminders: Optional[str] = None,
        examples: Optional[str] = None,
    ) -> None:
        files = {
            "intro.md": intro if intro is not None else f"You are the {name} unit.",
            "workflow.md": workflow if workflow is not None else f"{name} workflow steps.",
            "critical-requirements.md": critical_requirements,
            "critical-reminders.md": critical_reminders,
            "examples.md": examples,
        }
        for filename, content in files.items():
            if content is not None:
                self.write(f"units/{name}/{filename}", content)

    def skill(self, rel: str, content: str, profile: Optional[str] = None) -> Path:
        return self.write_profile_file(rel, content, profile)

    def command(self, name: str, content: str) -> Path:
        return self.write(f"commands/{name}.md", content)

    def template(self, content: str, *, profile: Optional[str] = None) -> Path:
        if profile:
            return self.write_profile_file("templates/unit.md", content, profile)
        return self.write("templates/unit.md", content)

    def manifest(self, data: Any, profile: Optional[str] = None) -> Path:
        text = data if isinstance(data, str) else yaml.safe_dump(data, sort_keys=False)
        return self.write_profile_file("config.yaml", text, profile)

    def config(self, data: Dict[str, Any]) -> Path:
        return self.write("promptsmith.yaml", yaml.safe_dump(data, sort_keys=False))

    def settings(self, **kwargs: Any) -> CompositionSettings:
        return CompositionSettings(self.root, **kwargs)

    def output_files(self) -> Dict[str, str]:
        """Map of output-relative POSIX path to content for every written file."""
        if not self.output_root.exists():
            return {}
        return {
            p.relative_to(self.output_root).as_posix(): p.read_text(encoding="utf-8")
            for p in sorted(self.output_root.rglob("*"))
            if p.is_file()
        }


STANDARD_MANIFEST: Dict[str, Any] = {
    "name": "home",
    "description": "Home profile",
    "instructions": "instructions.md",
    "core_prompt_sets": {
        "core": ["core-principles", "investigation"],
    },
    "ending_prompt_sets": {
        "standard": ["context-management"],
    },
    "skills": {
        "frontend/testing": {
            "path": "skills/testing.md",
            "description": "Testing patterns",
        },
    },
    "agents": {
        "alpha": {
            "title": "Alpha Agent",
            "description": "Alpha does careful work",
            "tools": ["Read", "Write"],
            "core_prompts": "core",
            "ending_prompts": "standard",
            "output_format": "report",
            "skills": {
                "precompiled": [
                    {"id": "docs", "path": "skills/docs.md"},
                    {"id": "shared-review", "path": "skills/shared-review/"},
                ],
                "dynamic": [
                    {"id": "frontend/testing", "usage": "when writing or fixing tests"},
                ],
            },
        },
        "beta": {
            "title": "Beta Agent",
            "description": "Beta reviews",
            "core_prompts": "core",
            "skills": {
                "precompiled": [
                    {"id": "shared-review", "path": "skills/shared-review/"},
                ],
            },
        },
    },
}


def standard_manifest() -> Dict[str, Any]:
    """A fresh copy of the standard manifest, safe to mutate."""
    return copy.deepcopy(STANDARD_MANIFEST)


def populate_standard_tree(tree: SourceTree) -> SourceTree:
    tree.prompt("core-principles", "Core principles body.")
    tree.prompt("investigation", "Investigate before acting.")
    tree.prompt("context-management", "Ending context body.")
    tree.output_format("report", "## Output\n\nReport format body.")

    tree.unit(
        "alpha",
        intro="You are Alpha.",
        workflow="Alpha workflow body.",
        critical_requirements="Never guess.",
        critical_reminders="Re-check everything.",
        examples="## Examples\n\nAlpha example body.",
    )
    tree.unit("beta", intro="You are Beta.", workflow="Beta workflow body.")

    tree.write_profile_file("instructions.md", "# Home instructions\n")
    tree.skill("skills/docs.md", "X")
    tree.skill("skills/shared-review/SKILL.md", "Shared review body.")
    tree.skill("skills/shared-review/examples.md", "Shared review examples.")
    tree.skill("skills/testing.md", "Testing skill body.")
    tree.command("review", "Review command body.")

    tree.manifest(standard_manifest())
    return tree


__all__ = ["SourceTree", "STANDARD_MANIFEST", "standard_manifest", "populate_standard_tree"]
