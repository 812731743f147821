"""Built-in leaf precondition checks."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from changelogdsl.core.elements import CallForm
from changelogdsl.core.schema import BlockKind, Integer
from changelogdsl.preconditions.base_precondition import BasePrecondition

__all__ = [
    "DbmsPrecondition",
    "RunningAsPrecondition",
    "ChangeSetExecutedPrecondition",
    "ColumnExistsPrecondition",
    "TableExistsPrecondition",
    "ViewExistsPrecondition",
    "ForeignKeyExistsPrecondition",
    "IndexExistsPrecondition",
    "SequenceExistsPrecondition",
    "PrimaryKeyExistsPrecondition",
    "SqlPrecondition",
    "ChangeLogPropertyDefinedPrecondition",
    "ObjectQuotingStrategyPrecondition",
    "TableIsEmptyPrecondition",
    "RowCountPrecondition",
    "CustomPreconditionWrapper",
]


class DbmsPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "dbms"

    type: str | None = None


class RunningAsPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "runningAs"

    username: str | None = None


class ChangeSetExecutedPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "changeSetExecuted"

    id: str | None = None
    author: str | None = None
    change_log_file: str | None = None


class ColumnExistsPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "columnExists"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column_name: str | None = None


class TableExistsPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "tableExists"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None


class ViewExistsPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "viewExists"

    catalog_name: str | None = None
    schema_name: str | None = None
    view_name: str | None = None


class ForeignKeyExistsPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "foreignKeyConstraintExists"

    catalog_name: str | None = None
    schema_name: str | None = None
    foreign_key_table_name: str | None = None
    foreign_key_name: str | None = None


class IndexExistsPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "indexExists"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    index_name: str | None = None
    column_names: str | None = None


class SequenceExistsPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "sequenceExists"

    catalog_name: str | None = None
    schema_name: str | None = None
    sequence_name: str | None = None


class PrimaryKeyExistsPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "primaryKeyExists"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    primary_key_name: str | None = None


class SqlPrecondition(BasePrecondition):
    """``sqlCheck``: the query is the text of the block."""

    element_name: ClassVar[str] = "sqlCheck"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset({CallForm.PARAMS, CallForm.PARAMS_BLOCK})
    block_kind: ClassVar[BlockKind | None] = BlockKind.TEXT
    block_field: ClassVar[str | None] = "sql"
    nested_only: ClassVar[frozenset[str]] = frozenset({"sql"})

    expected_result: str | None = None
    sql: str | None = None


class ChangeLogPropertyDefinedPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "changeLogPropertyDefined"

    property: str | None = None
    value: str | None = None


class ObjectQuotingStrategyPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "expectedQuotingStrategy"

    strategy: str | None = None


class TableIsEmptyPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "tableIsEmpty"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None


class RowCountPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "rowCount"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    expected_rows: Integer = None


class CustomPreconditionWrapper(BasePrecondition):
    """Names a host-supplied precondition class and its parameters."""

    element_name: ClassVar[str] = "customPrecondition"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset({CallForm.PARAMS, CallForm.PARAMS_BLOCK})
    block_kind: ClassVar[BlockKind | None] = BlockKind.KEY_VALUE
    block_field: ClassVar[str | None] = "params"
    nested_only: ClassVar[frozenset[str]] = frozenset({"params"})

    class_name: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)
