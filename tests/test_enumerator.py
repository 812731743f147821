"""Tests for resource accessors and includeAll directory enumeration."""
from __future__ import annotations

from pathlib import Path

import pytest

from changelogdsl.core.enumerator import ResourceEnumerator
from changelogdsl.core.errors import ChangeLogResourceError
from changelogdsl.core.filters import DslOnlyResourceFilter, LexicalResourceComparator
from changelogdsl.resources.base import ResourceAccessor
from changelogdsl.resources.classpath import ClassPathResourceAccessor
from changelogdsl.resources.filesystem import FileSystemResourceAccessor


class ReverseComparator:
    def compare(self, first: str, second: str) -> int:
        return (second > first) - (second < first)


class OnlyBFilter:
    def include(self, path: str) -> bool:
        return path.endswith("b.yaml")


class AbsoluteListingAccessor(ResourceAccessor):
    def read_text(self, path: str) -> str:
        return ""

    def read_all(self, path: str) -> list[str]:
        return []

    def list(self, relative_to: str | None, path: str, recursive: bool = True) -> set[str]:
        return {"/srv/app/db/changes/b.yaml", "/srv/app/db/changes/a.yaml"}


@pytest.fixture
def sibling_tree(tmp_path: Path) -> Path:
    (tmp_path / "base").mkdir()
    include_dir = tmp_path / "tmp" / "include"
    include_dir.mkdir(parents=True)
    for name in ("b.yaml", "a.yaml", "notes.txt"):
        (include_dir / name).write_text("databaseChangeLog: []\n")
    return tmp_path


class TestFileSystemResourceAccessor:
    def test_read_text_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ChangeLogResourceError, match="missing.yaml"):
            FileSystemResourceAccessor(tmp_path).read_text("missing.yaml")

    def test_read_all_missing_is_empty(self, tmp_path: Path) -> None:
        assert FileSystemResourceAccessor(tmp_path).read_all("missing.properties") == []

    def test_list_keeps_unnormalized_search_path(self, sibling_tree: Path) -> None:
        accessor = FileSystemResourceAccessor(sibling_tree / "base")
        listed = accessor.list(None, "../tmp/include/")
        assert listed == {"../tmp/include/a.yaml", "../tmp/include/b.yaml", "../tmp/include/notes.txt"}

    def test_list_relative_to_changelog(self, tmp_path: Path) -> None:
        (tmp_path / "db" / "changes").mkdir(parents=True)
        (tmp_path / "db" / "changes" / "a.yaml").write_text("")
        accessor = FileSystemResourceAccessor(tmp_path)
        assert accessor.list("db/changelog.yaml", "changes") == {"db/changes/a.yaml"}


    def test_list_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ChangeLogResourceError):
            FileSystemResourceAccessor(tmp_path).list(None, "nowhere/")


class TestClassPathResourceAccessor:
    def test_reads_from_first_matching_root(self, tmp_path: Path) -> None:
        (tmp_path / "one").mkdir()
        (tmp_path / "two").mkdir()
        (tmp_path / "two" / "db.yaml").write_text("two")
        accessor = ClassPathResourceAccessor([tmp_path / "one", tmp_path / "two"])
        assert accessor.read_text("classpath:db.yaml") == "two"

    def test_list_returns_root_relative_ids(self, tmp_path: Path) -> None:
        (tmp_path / "root" / "db" / "include").mkdir(parents=True)
        (tmp_path / "root" / "db" / "include" / "a.yaml").write_text("")
        accessor = ClassPathResourceAccessor([tmp_path / "root"])
        assert accessor.list("db/changelog.yaml", "include/") == {"db/include/a.yaml"}


class TestResourceEnumerator:
    def test_relative_paths_are_cut_back_to_the_directory(self, sibling_tree: Path) -> None:
        enumerator = ResourceEnumerator(FileSystemResourceAccessor(sibling_tree / "base"))
        listed = enumerator.list(None, "../tmp/include", resource_filter=DslOnlyResourceFilter([".yaml"]))
        assert listed == ["../tmp/include/a.yaml", "../tmp/include/b.yaml"]

    def test_without_fix_listings_are_returned_as_listed(self, tmp_path: Path) -> None:
        (tmp_path / "db" / "changes").mkdir(parents=True)
        (tmp_path / "db" / "changes" / "a.yaml").write_text("")
        accessor = FileSystemResourceAccessor(tmp_path)
        fixed = ResourceEnumerator(accessor).list("db/changelog.yaml", "changes", relative_to_changelog_file=True)
        as_listed = ResourceEnumerator(accessor, fix_relative_paths=False).list(
            "db/changelog.yaml", "changes", relative_to_changelog_file=True
        )
        assert fixed == ["changes/a.yaml"]
        assert as_listed == ["db/changes/a.yaml"]

    def test_base_directory_sharing_the_directory_name(self, tmp_path: Path) -> None:
        project = tmp_path / "changes" / "project"
        (project / "changes").mkdir(parents=True)
        (project / "changes" / "a.yaml").write_text("")
        assert ResourceEnumerator(FileSystemResourceAccessor(project)).list(None, "changes") == ["changes/a.yaml"]

    def test_absolute_listings_from_other_accessors_are_cut(self) -> None:
        enumerator = ResourceEnumerator(AbsoluteListingAccessor())
        assert enumerator.list(None, "changes") == ["changes/a.yaml", "changes/b.yaml"]

    def test_enumeration_is_repeatable(self, sibling_tree: Path) -> None:
        enumerator = ResourceEnumerator(FileSystemResourceAccessor(sibling_tree / "base"))
        first = enumerator.list(None, "../tmp/include/", resource_filter=DslOnlyResourceFilter([".yaml"]))
        assert enumerator.list(None, "../tmp/include/", resource_filter=DslOnlyResourceFilter([".yaml"])) == first

    def test_backslashes_are_normalized(self, sibling_tree: Path) -> None:
        enumerator = ResourceEnumerator(FileSystemResourceAccessor(sibling_tree / "base"))
        listed = enumerator.list(None, "..\\tmp\\include", resource_filter=DslOnlyResourceFilter([".yaml"]))
        assert listed[0] == "../tmp/include/a.yaml"

    def test_custom_comparator_orders_results(self, sibling_tree: Path) -> None:
        enumerator = ResourceEnumerator(FileSystemResourceAccessor(sibling_tree / "base"))
        listed = enumerator.list(
            None, "../tmp/include/",
            resource_filter=DslOnlyResourceFilter([".yaml"]),
            comparator=ReverseComparator(),
        )
        assert listed == ["../tmp/include/b.yaml", "../tmp/include/a.yaml"]

    def test_dsl_filter_runs_before_user_filter(self, sibling_tree: Path) -> None:
        enumerator = ResourceEnumerator(FileSystemResourceAccessor(sibling_tree / "base"))
        listed = enumerator.list(
            None, "../tmp/include/", resource_filter=DslOnlyResourceFilter([".yaml"], OnlyBFilter())
        )
        assert listed == ["../tmp/include/b.yaml"]

    def test_missing_directory_raises_by_default(self, tmp_path: Path) -> None:
        enumerator = ResourceEnumerator(FileSystemResourceAccessor(tmp_path))
        with pytest.raises(ChangeLogResourceError):
            enumerator.list(None, "nowhere")

    def test_missing_directory_tolerated(self, tmp_path: Path) -> None:
        enumerator = ResourceEnumerator(FileSystemResourceAccessor(tmp_path))
        assert enumerator.list(None, "nowhere", error_if_missing_or_empty=False) == []

    def test_empty_after_filtering_raises(self, sibling_tree: Path) -> None:
        enumerator = ResourceEnumerator(FileSystemResourceAccessor(sibling_tree / "base"))
        with pytest.raises(ChangeLogResourceError, match="directory was empty"):
            enumerator.list(None, "../tmp/include/", resource_filter=DslOnlyResourceFilter([".sql"]))


class TestLexicalResourceComparator:
    def test_compare(self) -> None:
        comparator = LexicalResourceComparator()
        assert comparator.compare("a", "b") < 0 < comparator.compare("b", "a")
        assert comparator.compare("a", "a") == 0
