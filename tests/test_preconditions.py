"""Tests for preConditions containers and nested checks."""
from __future__ import annotations

import pytest

from changelogdsl.core.errors import ChangeLogParseError
from changelogdsl.preconditions.base_precondition import (
    AndPrecondition,
    ErrorOption,
    FailOption,
    NotPrecondition,
    OnSqlOutputOption,
    OrPrecondition,
    PreconditionContainer,
)
from changelogdsl.preconditions.checks import (
    CustomPreconditionWrapper,
    DbmsPrecondition,
    RowCountPrecondition,
    SqlPrecondition,
    TableExistsPrecondition,
)


class TestPreconditionContainer:
    def test_container_attributes(self, changelog_with_changeset) -> None:
        change_set = changelog_with_changeset(
            """\
            - preConditions:
                onFail: mark_ran
                onError: warn
                onUpdateSQL: test
                onFailMessage: no monkeys here
                onErrorMessage: could not count monkeys
                block:
                  - dbms: {type: mysql}
            """
        ).change_sets[0]
        container = change_set.preconditions
        assert isinstance(container, PreconditionContainer)
        assert container.on_fail is FailOption.MARK_RAN
        assert container.on_error is ErrorOption.WARN
        assert container.on_sql_output is OnSqlOutputOption.TEST
        assert container.on_fail_message == "no monkeys here"
        assert container.on_error_message == "could not count monkeys"
        assert container.describe() == {"onFail": "MARK_RAN", "onError": "WARN", "onSqlOutput": "TEST", "checks": 1}

    def test_empty_container_defaults(self, changelog_with_changeset) -> None:
        container = changelog_with_changeset("- preConditions:\n").change_sets[0].preconditions
        assert container is not None and container.nested_preconditions == []
        assert container.on_fail is FailOption.HALT
        assert container.on_error is ErrorOption.HALT
        assert container.on_sql_output is OnSqlOutputOption.IGNORE

    def test_on_sql_output_wins_over_legacy_name(self, changelog_with_changeset) -> None:
        container = changelog_with_changeset(
            "- preConditions: {onUpdateSQL: test, onSqlOutput: fail}\n"
        ).change_sets[0].preconditions
        assert container.on_sql_output is OnSqlOutputOption.FAIL

    def test_invalid_on_fail(self, changelog_with_changeset) -> None:
        with pytest.raises(ChangeLogParseError, match="'onFail'"):
            changelog_with_changeset("- preConditions: {onFail: explode}\n")

    def test_invalid_container_attribute(self, changelog_with_changeset) -> None:
        with pytest.raises(ChangeLogParseError, match="'onSuccess' is not a valid preConditions attribute"):
            changelog_with_changeset("- preConditions: {onSuccess: HALT}\n")


class TestNestedPreconditions:
    def test_nesting_keeps_declaration_order(self, changelog_with_changeset) -> None:
        container = changelog_with_changeset(
            """\
            - preConditions:
                - dbms: {type: mysql}
                - or:
                    - tableExists: {tableName: monkey}
                    - not:
                        - sqlCheck:
                            expectedResult: 0
                            block:
                              - SELECT COUNT(*) FROM monkey
                - and:
                    - rowCount: {tableName: monkey, expectedRows: "3"}
                - customPrecondition:
                    className: org.example.MonkeyCheck
                    block:
                      - count: 2
                      - emotion: angry
            """
        ).change_sets[0].preconditions
        dbms, either, both, custom = container.nested_preconditions
        assert isinstance(dbms, DbmsPrecondition) and dbms.type == "mysql"
        assert isinstance(either, OrPrecondition)
        table_exists, negated = either.nested_preconditions
        assert isinstance(table_exists, TableExistsPrecondition) and table_exists.table_name == "monkey"
        assert isinstance(negated, NotPrecondition)
        sql_check = negated.nested_preconditions[0]
        assert isinstance(sql_check, SqlPrecondition)
        assert sql_check.expected_result == "0" and sql_check.sql == "SELECT COUNT(*) FROM monkey"
        assert isinstance(both, AndPrecondition)
        row_count = both.nested_preconditions[0]
        assert isinstance(row_count, RowCountPrecondition) and row_count.expected_rows == 3
        assert isinstance(custom, CustomPreconditionWrapper)
        assert custom.class_name == "org.example.MonkeyCheck"
        assert custom.params == {"count": 2, "emotion": "angry"}

    def test_unknown_check(self, changelog_with_changeset) -> None:
        with pytest.raises(ChangeLogParseError, match="'monkeyExists' is not a valid precondition"):
            changelog_with_changeset("- preConditions:\n    - monkeyExists: {name: x}\n")

    def test_invalid_check_property(self, changelog_with_changeset) -> None:
        with pytest.raises(ChangeLogParseError, match="'size' is an invalid property for 'tableExists' preconditions"):
            changelog_with_changeset("- preConditions:\n    - tableExists: {tableName: monkey, size: 3}\n")

    def test_composite_rejects_parameters(self, changelog_with_changeset) -> None:
        with pytest.raises(ChangeLogParseError, match="'or' does not accept the params form"):
            changelog_with_changeset("- preConditions:\n    - or: {tableName: monkey}\n")

    def test_properties_expand_in_checks(self, parse_changelog) -> None:
        change_log = parse_changelog(
            """\
            databaseChangeLog:
              - property: {name: table, value: monkey}
              - preConditions:
                  - tableExists: {tableName: "${table}"}
            """
        )
        assert change_log.preconditions.nested_preconditions[0].table_name == "monkey"
