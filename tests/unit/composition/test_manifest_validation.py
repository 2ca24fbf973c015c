"""Tests for ManifestValidator reference checks.

NO MOCKS - real files, real behavior.
"""
from __future__ import annotations

from typing import Any, Dict

from helpers.source_tree import SourceTree, populate_standard_tree, standard_manifest
from promptsmith.core.composition import (
    FragmentStore,
    ManifestLoader,
    ManifestValidator,
    ValidationReport,
)


def _validate(tree: SourceTree, data: Dict[str, Any] | None = None) -> ValidationReport:
    if data is not None:
        tree.manifest(data)
    settings = tree.settings()
    manifest = ManifestLoader(settings).load(tree.profile)
    return ManifestValidator(FragmentStore.for_profile(settings, tree.profile), settings).validate(manifest)


class TestValidManifest:
    def test_standard_tree_is_valid(self, standard_tree: SourceTree) -> None:
        report = _validate(standard_tree)

        assert report.is_valid
        assert report.errors == []

    def test_optional_fragments_only_warn(self, standard_tree: SourceTree) -> None:
        report = _validate(standard_tree)

        beta_warnings = [w for w in report.warnings if "'beta'" in w]
        assert len(beta_warnings) == 3
        assert any("critical-requirement" in w for w in beta_warnings)
        assert any("critical-reminder" in w for w in beta_warnings)
        assert any("units/beta/examples.md" in w for w in beta_warnings)


class TestPromptSetChecks:
    def test_missing_core_prompt_set_key(self, standard_tree: SourceTree) -> None:
        data = standard_manifest()
        data["agents"]["alpha"]["core_prompts"] = "missing-set"

        report = _validate(standard_tree, data)

        assert not report.is_valid
        assert any("'alpha'" in e and "'missing-set'" in e and "core_prompt_sets" in e for e in report.errors)

    def test_missing_ending_prompt_set_key(self, standard_tree: SourceTree) -> None:
        data = standard_manifest()
        data["agents"]["beta"]["ending_prompts"] = "nope"

        report = _validate(standard_tree, data)

        assert any("'beta'" in e and "'nope'" in e and "ending_prompt_sets" in e for e in report.errors)

    def test_missing_prompt_file_has_distinct_error(self, standard_tree: SourceTree) -> None:
        data = standard_manifest()
        data["core_prompt_sets"]["core"].append("ghost-prompt")

        report = _validate(standard_tree, data)

        ghost = [e for e in report.errors if "ghost-prompt" in e]
        # Both units use the "core" set, each gets its own error.
        assert len(ghost) == 2
        assert all("prompts/ghost-prompt.md" in e for e in ghost)
        assert not any("is not defined" in e for e in report.errors)

    def test_missing_ending_prompt_file(self, standard_tree: SourceTree) -> None:
        (standard_tree.root / "prompts" / "context-management.md").unlink()

        report = _validate(standard_tree)

        assert any("'alpha'" in e and "context-management" in e for e in report.errors)


class TestSkillChecks:
    def test_precompiled_skill_requires_path(self, standard_tree: SourceTree) -> None:
        data = standard_manifest()
        data["agents"]["beta"]["skills"]["precompiled"].append({"id": "pathless"})

        report = _validate(standard_tree, data)

        assert any("'beta'" in e and "'pathless'" in e and "no path" in e for e in report.errors)

    def test_precompiled_skill_must_exist(self, standard_tree: SourceTree) -> None:
        (standard_tree.profile_dir / "skills" / "docs.md").unlink()

        report = _validate(standard_tree)

        assert any("'docs'" in e and "skills/docs.md" in e for e in report.errors)

    def test_folder_skill_requires_skill_md(self, standard_tree: SourceTree) -> None:
        (standard_tree.profile_dir / "skills" / "shared-review" / "SKILL.md").unlink()

        report = _validate(standard_tree)

        assert any("skills/shared-review/SKILL.md" in e for e in report.errors)

    def test_dynamic_skill_without_path_warns(self, standard_tree: SourceTree) -> None:
        data = standard_manifest()
        data["agents"]["beta"]["skills"]["dynamic"] = [{"id": "catalog-only", "usage": "when cataloged"}]

        report = _validate(standard_tree, data)

        assert report.is_valid
        assert any("'catalog-only'" in w and "no path" in w for w in report.warnings)

    def test_dynamic_skill_with_missing_path_is_error(self, standard_tree: SourceTree) -> None:
        data = standard_manifest()
        data["agents"]["beta"]["skills"]["dynamic"] = [
            {"id": "broken", "path": "skills/broken.md", "usage": "when broken"},
        ]

        report = _validate(standard_tree, data)

        assert any("'broken'" in e and "skills/broken.md" in e for e in report.errors)

    def test_dynamic_skill_with_blank_usage(self, standard_tree: SourceTree) -> None:
        data = standard_manifest()
        data["agents"]["beta"]["skills"]["dynamic"] = [{"id": "frontend/testing", "usage": "   "}]

        report = _validate(standard_tree, data)

        assert any("'beta'" in e and "'frontend/testing'" in e and "usage" in e for e in report.errors)

    def test_conflicting_skill_paths_are_error(self, standard_tree: SourceTree) -> None:
        standard_tree.skill("skills/docs-v2.md", "Y")
        data = standard_manifest()
        data["agents"]["beta"]["skills"]["precompiled"].append({"id": "docs", "path": "skills/docs-v2.md"})

        report = _validate(standard_tree, data)

        assert not report.is_valid
        conflict = [e for e in report.errors if "different paths" in e]
        assert len(conflict) == 1
        assert "'skills/docs.md'" in conflict[0]
        assert "'skills/docs-v2.md'" in conflict[0]

    def test_skill_ids_sharing_output_directory_are_error(self, standard_tree: SourceTree) -> None:
        standard_tree.skill("skills/ab1.md", "First")
        standard_tree.skill("skills/ab2.md", "Second")
        data = standard_manifest()
        data["agents"]["beta"]["skills"]["precompiled"] += [
            {"id": "a/b", "path": "skills/ab1.md"},
            {"id": "a-b", "path": "skills/ab2.md"},
        ]

        report = _validate(standard_tree, data)

        clash = [e for e in report.errors if "would both be written" in e]
        assert len(clash) == 1
        assert "'a/b'" in clash[0] and "'a-b'" in clash[0]
        assert "skills/a-b" in clash[0]

    def test_same_skill_in_several_units_is_not_a_directory_clash(self, standard_tree: SourceTree) -> None:
        report = _validate(standard_tree)

        assert not any("would both be written" in e for e in report.errors)

    def test_skill_is_not_looked_up_under_source_root(self, standard_tree: SourceTree) -> None:
        (standard_tree.profile_dir / "skills" / "docs.md").unlink()
        standard_tree.write("skills/docs.md", "Shared copy outside the profile.")

        report = _validate(standard_tree)

        assert any("'docs'" in e and "skills/docs.md" in e for e in report.errors)


class TestUnitFragmentChecks:
    def test_missing_intro_is_error(self, standard_tree: SourceTree) -> None:
        (standard_tree.root / "units" / "beta" / "intro.md").unlink()

        report = _validate(standard_tree)

        assert any("'beta'" in e and "role-intro" in e for e in report.errors)

    def test_missing_workflow_is_error(self, standard_tree: SourceTree) -> None:
        (standard_tree.root / "units" / "alpha" / "workflow.md").unlink()

        report = _validate(standard_tree)

        assert any("'alpha'" in e and "units/alpha/workflow.md" in e for e in report.errors)

    def test_missing_output_format_warns(self, standard_tree: SourceTree) -> None:
        (standard_tree.root / "output-formats" / "report.md").unlink()

        report = _validate(standard_tree)

        assert report.is_valid
        assert any("output format 'report'" in w for w in report.warnings)

    def test_missing_instructions_is_error(self, standard_tree: SourceTree) -> None:
        (standard_tree.profile_dir / "instructions.md").unlink()

        report = _validate(standard_tree)

        assert any("Instructions file" in e and "instructions.md" in e for e in report.errors)

    def test_instructions_under_source_root_do_not_count(self, standard_tree: SourceTree) -> None:
        (standard_tree.profile_dir / "instructions.md").unlink()
        standard_tree.write("instructions.md", "# Shared instructions\n")

        report = _validate(standard_tree)

        assert any("Instructions file" in e for e in report.errors)


class TestAggregation:
    def test_errors_from_all_units_are_collected(self, source_tree: SourceTree) -> None:
        populate_standard_tree(source_tree)
        data = standard_manifest()
        data["agents"]["alpha"]["core_prompts"] = "missing-a"
        data["agents"]["beta"]["core_prompts"] = "missing-b"
        data["agents"]["beta"]["skills"]["dynamic"] = [{"id": "x", "usage": ""}]

        report = _validate(source_tree, data)

        assert len([e for e in report.errors if "missing-a" in e]) == 1
        assert len([e for e in report.errors if "missing-b" in e]) == 1
        assert any("'x'" in e and "usage" in e for e in report.errors)

    def test_report_serialization(self) -> None:
        report = ValidationReport()
        report.add_warning("w")

        assert report.is_valid
        assert report.to_dict() == {"valid": True, "errors": [], "warnings": ["w"]}
        report.add_error("e")
        assert not report.is_valid
        assert "ERROR: e" in report.summary()
