"""Tests for the changelog engine."""
from __future__ import annotations
from pathlib import Path
import pytest
from changelogdsl.config.settings import ChangeLogSettings
from changelogdsl.core.engine import ChangeLogEngine
from changelogdsl.core.errors import ChangeLogParseError
from changelogdsl.core.model import DatabaseChangeLog
from changelogdsl.resources.classpath import ClassPathResourceAccessor
from changelogdsl.resources.filesystem import FileSystemResourceAccessor

ROOT_CHANGELOG = """\
databaseChangeLog:
  - include: {file: tables.yaml, relativeToChangelogFile: true}
  - changeSet:
      id: tag
      author: stevedonie
      runAlways: true
      block:
        - tagDatabase: v1
        - rollback: SELECT 1
"""

TABLES_CHANGELOG = """\
databaseChangeLog:
  - changeSet:
      id: monkey
      author: stevedonie
      block:
        - createTable: {tableName: monkey}
        - dropTable: {tableName: banana}
"""


@pytest.fixture
def project(tmp_path) -> Path:
    db = tmp_path / "resources" / "db"
    db.mkdir(parents=True)
    (db / "changelog.yaml").write_text(ROOT_CHANGELOG)
    (db / "tables.yaml").write_text(TABLES_CHANGELOG)
    return tmp_path


class TestParse:
    def test_parse_with_search_path(self, project) -> None:
        e = ChangeLogEngine(settings=ChangeLogSettings(load_entry_points=False, search_path="resources"), root_dir=project)
        log = e.parse("db/changelog.yaml")
        assert isinstance(log, DatabaseChangeLog) and [cs.id for cs in log.change_sets] == ["monkey", "tag"]
        assert log.change_sets[0].file_path == "db/tables.yaml"

    def test_parse_with_classpath_roots(self, project) -> None:
        e = ChangeLogEngine(settings=ChangeLogSettings(load_entry_points=False, classpath_roots=["resources"]), root_dir=project)
        assert isinstance(e._resolve_accessor(), ClassPathResourceAccessor)
        assert len(e.parse("classpath:db/changelog.yaml").change_sets) == 2

    def test_explicit_accessor(self, project) -> None:
        e = ChangeLogEngine(settings=ChangeLogSettings(load_entry_points=False), root_dir=project)
        accessor = FileSystemResourceAccessor(project / "resources" / "db")
        assert len(e.parse("changelog.yaml", resource_accessor=accessor).change_sets) == 2

    def test_unsupported_extension(self, project) -> None:
        e = ChangeLogEngine(settings=ChangeLogSettings(load_entry_points=False), root_dir=project)
        with pytest.raises(ChangeLogParseError, match="No changelog parser supports"):
            e.parse("db/changelog.xml")

    def test_new_parameters_uses_settings(self, project) -> None:
        e = ChangeLogEngine(settings=ChangeLogSettings(load_entry_points=False, max_expansion_passes=4), root_dir=project)
        params = e.new_parameters({"a": "b"}, contexts="prod, test", database="MySQL")
        assert params.max_passes == 4 and params.contexts == ["prod", "test"] and params.database == "mysql"
        assert params.get_value("a") == "b"


class TestSummarize:
    def test_one_row_per_changeset(self, project) -> None:
        e = ChangeLogEngine(settings=ChangeLogSettings(load_entry_points=False, search_path="resources"), root_dir=project)
        table = e.summarize(e.parse("db/changelog.yaml"))
        assert table.row_count == 2 and len(table.columns) == 6
