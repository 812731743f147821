"""Tests for configuration loading."""
from __future__ import annotations
import pytest
from pydantic import ValidationError
from changelogdsl.config.settings import ChangeLogSettings, IncludeConfig, load_settings


class TestIncludeConfig:
    def test_defaults(self) -> None:
        c = IncludeConfig()
        assert c.engine_supports_labels and c.fix_relative_paths


class TestChangeLogSettings:
    def test_defaults(self) -> None:
        s = ChangeLogSettings()
        assert s.changelog_extensions == [".yaml", ".yml"] and s.search_path == "." and s.max_expansion_passes == 10
        assert not s.strict_rollback_references and s.classpath_roots == [] and s.load_entry_points

    def test_custom_values(self) -> None:
        s = ChangeLogSettings(max_expansion_passes=3, strict_rollback_references=True)
        assert s.max_expansion_passes == 3 and s.strict_rollback_references

    def test_expansion_passes_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ChangeLogSettings(max_expansion_passes=0)


class TestLoadSettings:
    def test_load_defaults_no_file(self, tmp_path) -> None:
        assert load_settings(search_dir=tmp_path).search_path == "."

    def test_load_from_yaml(self, tmp_path) -> None:
        (tmp_path / "changelogdsl.yaml").write_text(
            "search_path: db\nstrict_rollback_references: true\ninclude:\n  fix_relative_paths: false\n"
        )
        s = load_settings(search_dir=tmp_path)
        assert s.search_path == "db" and s.strict_rollback_references and not s.include.fix_relative_paths
        assert s.include.engine_supports_labels

    def test_explicit_path_takes_precedence(self, tmp_path) -> None:
        (tmp_path / "changelogdsl.yaml").write_text("search_path: found\n")
        explicit = tmp_path / "custom.yaml"
        explicit.write_text("search_path: explicit\n")
        assert load_settings(config_path=explicit, search_dir=tmp_path).search_path == "explicit"

    def test_empty_yaml_returns_defaults(self, tmp_path) -> None:
        (tmp_path / "changelogdsl.yaml").write_text("")
        assert load_settings(search_dir=tmp_path).search_path == "."

    def test_parent_dir_search(self, tmp_path) -> None:
        (tmp_path / "changelogdsl.yaml").write_text("search_path: db\n")
        child = tmp_path / "child" / "subdir"
        child.mkdir(parents=True)
        assert load_settings(search_dir=child).search_path == "db"

    def test_hidden_config_file(self, tmp_path) -> None:
        (tmp_path / ".changelogdsl.yml").write_text("classpath_roots: [resources]\n")
        assert load_settings(search_dir=tmp_path).classpath_roots == ["resources"]
