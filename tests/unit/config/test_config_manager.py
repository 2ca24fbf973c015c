"""Tests for ConfigManager layering and CompositionSettings accessors.

Configuration sources (highest to lowest priority):
1. PROMPTSMITH_* environment variables
2. <source_root>/promptsmith.yaml
3. Bundled defaults
"""
from __future__ import annotations

from pathlib import Path

import pytest

from helpers.source_tree import SourceTree
from promptsmith.core.config import CompositionSettings, ConfigManager, OutputLayout
from promptsmith.core.exceptions import ConfigurationError


class TestLayering:
    def test_bundled_defaults(self, source_tree: SourceTree) -> None:
        cfg = ConfigManager(source_tree.root).load_config()

        assert cfg["profiles"]["default"] == "home"
        assert cfg["output"]["root"] == "output"
        assert cfg["composition"]["separator"] == "\n\n---\n\n"

    def test_source_tree_config_is_deep_merged(self, source_tree: SourceTree) -> None:
        source_tree.config({"output": {"root": "build"}})

        cfg = ConfigManager(source_tree.root).load_config()

        assert cfg["output"]["root"] == "build"
        assert cfg["output"]["units"] == "units"

    def test_env_beats_source_tree_config(self, source_tree: SourceTree, monkeypatch: pytest.MonkeyPatch) -> None:
        source_tree.config({"output": {"root": "build"}})
        monkeypatch.setenv("PROMPTSMITH_OUTPUT__ROOT", "dist")

        assert ConfigManager(source_tree.root).get("output.root") == "dist"

    def test_env_keys_match_camel_case(self, source_tree: SourceTree, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROMPTSMITH_COMPOSITION__DEFAULTMODEL", "sonnet")

        cfg = ConfigManager(source_tree.root).load_config()

        assert cfg["composition"]["defaultModel"] == "sonnet"
        assert "defaultmodel" not in cfg["composition"]

    def test_get_returns_default_for_unknown_key(self, source_tree: SourceTree) -> None:
        assert ConfigManager(source_tree.root).get("output.nope", "fallback") == "fallback"


class TestEnvCoercion:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("true", True),
            ("FALSE", False),
            ("42", 42),
            ("-3", -3),
            ("1.5", 1.5),
            ('["a", "b"]', ["a", "b"]),
            ('{"k": 1}', {"k": 1}),
            ("plain text", "plain text"),
            ("[not json", "[not json"),
        ],
    )
    def test_coerce_type(self, tmp_path: Path, raw: str, expected) -> None:
        assert ConfigManager(tmp_path)._coerce_type(raw) == expected

    def test_coerced_value_still_schema_checked(self, source_tree: SourceTree, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROMPTSMITH_OUTPUT__UNITS", "123")

        with pytest.raises(ConfigurationError):
            ConfigManager(source_tree.root).load_config()

    def test_malformed_key_is_rejected(self, source_tree: SourceTree, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROMPTSMITH_OUTPUT____ROOT", "x")

        with pytest.raises(ConfigurationError, match="empty segment"):
            ConfigManager(source_tree.root).load_config()


class TestInvalidConfig:
    def test_invalid_yaml(self, source_tree: SourceTree) -> None:
        source_tree.write("promptsmith.yaml", "output: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Cannot parse"):
            ConfigManager(source_tree.root).load_config()

    def test_non_utf8_file(self, source_tree: SourceTree) -> None:
        source_tree.write("promptsmith.yaml", "placeholder").write_bytes(b"output: \xff\xfe\n")

        with pytest.raises(ConfigurationError, match="Cannot parse"):
            ConfigManager(source_tree.root).load_config()

    def test_non_mapping(self, source_tree: SourceTree) -> None:
        source_tree.write("promptsmith.yaml", "- a\n- b\n")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            ConfigManager(source_tree.root).load_config()

    def test_empty_file_is_ignored(self, source_tree: SourceTree) -> None:
        source_tree.write("promptsmith.yaml", "")

        assert ConfigManager(source_tree.root).load_config()["output"]["root"] == "output"

    def test_schema_violation(self, source_tree: SourceTree) -> None:
        source_tree.config({"logging": {"level": "LOUD"}})

        with pytest.raises(ConfigurationError):
            ConfigManager(source_tree.root).load_config()

    def test_validation_can_be_skipped(self, source_tree: SourceTree) -> None:
        source_tree.config({"logging": {"level": "LOUD"}})

        assert ConfigManager(source_tree.root).load_config(validate=False)["logging"]["level"] == "LOUD"


class TestCompositionSettings:
    def test_paths_resolve_against_source_root(self, source_tree: SourceTree) -> None:
        settings = source_tree.settings()

        assert settings.source_root == source_tree.root.resolve()
        assert settings.manifest_path("home") == source_tree.root.resolve() / "profiles" / "home" / "config.yaml"
        assert settings.output_root == (source_tree.root / "output").resolve()
        assert settings.prompts_dir == "prompts"
        assert settings.output_formats_dir == "output-formats"
        assert settings.default_model == "inherit"

    def test_output_root_override_wins(self, source_tree: SourceTree, tmp_path: Path) -> None:
        source_tree.config({"output": {"root": "build"}})

        settings = source_tree.settings(output_root=tmp_path / "out")

        assert settings.output_root == (tmp_path / "out").resolve()

    def test_output_layout(self, source_tree: SourceTree) -> None:
        source_tree.config({"output": {"instructionsFile": "AGENTS.md"}})

        layout = source_tree.settings().output_layout

        assert layout == OutputLayout(instructions_file="AGENTS.md")

    def test_explicit_config_skips_loading(self, tmp_path: Path) -> None:
        config = ConfigManager(tmp_path).load_config()
        config["profiles"]["default"] = "work"

        settings = CompositionSettings(tmp_path, config=config)

        assert settings.default_profile == "work"

    def test_available_profiles_need_a_manifest(self, source_tree: SourceTree) -> None:
        source_tree.manifest({"name": "b"}, profile="zeta")
        source_tree.manifest({"name": "a"}, profile="alpha")
        (source_tree.root / "profiles" / "empty").mkdir(parents=True)

        assert source_tree.settings().available_profiles() == ["alpha", "zeta"]

    def test_available_profiles_without_profiles_dir(self, source_tree: SourceTree) -> None:
        assert source_tree.settings().available_profiles() == []

    def test_log_file_is_relative_to_source_root(self, source_tree: SourceTree) -> None:
        source_tree.config({"logging": {"level": "DEBUG", "file": "logs/run.log"}})

        settings = source_tree.settings()

        assert settings.log_level == "DEBUG"
        assert settings.log_file == source_tree.root.resolve() / "logs" / "run.log"
