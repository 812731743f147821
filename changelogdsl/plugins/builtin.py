"""Registration of the built-in change kinds, checks and comparators."""

from __future__ import annotations

from typing import Any

from changelogdsl.changes.base_change import BaseChange
from changelogdsl.changes.constraint_changes import (
    AddForeignKeyConstraintChange,
    AddNotNullConstraintChange,
    AddPrimaryKeyChange,
    AddUniqueConstraintChange,
    CreateIndexChange,
    DropAllForeignKeyConstraintsChange,
    DropForeignKeyConstraintChange,
    DropIndexChange,
    DropNotNullConstraintChange,
    DropPrimaryKeyChange,
    DropUniqueConstraintChange,
)
from changelogdsl.changes.data_changes import (
    DeleteDataChange,
    InsertDataChange,
    LoadDataChange,
    LoadUpdateDataChange,
    UpdateDataChange,
)
from changelogdsl.changes.sequence_changes import (
    AlterSequenceChange,
    CreateSequenceChange,
    DropSequenceChange,
    RenameSequenceChange,
)
from changelogdsl.changes.sql_changes import (
    CustomChangeWrapper,
    ExecuteCommandChange,
    OutputChange,
    SqlChange,
    SqlFileChange,
    StopChange,
    TagDatabaseChange,
)
from changelogdsl.changes.table_changes import (
    AddAutoIncrementChange,
    AddColumnChange,
    AddDefaultValueChange,
    AddLookupTableChange,
    CreateTableChange,
    DropColumnChange,
    DropDefaultValueChange,
    DropTableChange,
    MergeColumnsChange,
    ModifyDataTypeChange,
    RenameColumnChange,
    RenameTableChange,
    SetColumnRemarksChange,
    SetTableRemarksChange,
)
from changelogdsl.changes.view_changes import (
    CreateProcedureChange,
    CreateViewChange,
    DropProcedureChange,
    DropViewChange,
    RenameViewChange,
)
from changelogdsl.core.filters import LexicalResourceComparator
from changelogdsl.plugins.hookspecs import hookimpl
from changelogdsl.preconditions.base_precondition import BasePrecondition
from changelogdsl.preconditions.checks import (
    ChangeLogPropertyDefinedPrecondition,
    ChangeSetExecutedPrecondition,
    ColumnExistsPrecondition,
    CustomPreconditionWrapper,
    DbmsPrecondition,
    ForeignKeyExistsPrecondition,
    IndexExistsPrecondition,
    ObjectQuotingStrategyPrecondition,
    PrimaryKeyExistsPrecondition,
    RowCountPrecondition,
    RunningAsPrecondition,
    SequenceExistsPrecondition,
    SqlPrecondition,
    TableExistsPrecondition,
    TableIsEmptyPrecondition,
    ViewExistsPrecondition,
)

__all__ = ["BUILTIN_CHANGES", "BUILTIN_PRECONDITIONS", "BuiltinPlugin"]

BUILTIN_CHANGES: list[type[BaseChange]] = [
    AddAutoIncrementChange,
    AddColumnChange,
    AddDefaultValueChange,
    AddForeignKeyConstraintChange,
    AddLookupTableChange,
    AddNotNullConstraintChange,
    AddPrimaryKeyChange,
    AddUniqueConstraintChange,
    AlterSequenceChange,
    CreateIndexChange,
    CreateProcedureChange,
    CreateSequenceChange,
    CreateTableChange,
    CreateViewChange,
    CustomChangeWrapper,
    DeleteDataChange,
    DropAllForeignKeyConstraintsChange,
    DropColumnChange,
    DropDefaultValueChange,
    DropForeignKeyConstraintChange,
    DropIndexChange,
    DropNotNullConstraintChange,
    DropPrimaryKeyChange,
    DropProcedureChange,
    DropSequenceChange,
    DropTableChange,
    DropUniqueConstraintChange,
    DropViewChange,
    ExecuteCommandChange,
    InsertDataChange,
    LoadDataChange,
    LoadUpdateDataChange,
    MergeColumnsChange,
    ModifyDataTypeChange,
    OutputChange,
    RenameColumnChange,
    RenameSequenceChange,
    RenameTableChange,
    RenameViewChange,
    SetColumnRemarksChange,
    SetTableRemarksChange,
    SqlChange,
    SqlFileChange,
    StopChange,
    TagDatabaseChange,
    UpdateDataChange,
]

BUILTIN_PRECONDITIONS: list[type[BasePrecondition]] = [
    ChangeLogPropertyDefinedPrecondition,
    ChangeSetExecutedPrecondition,
    ColumnExistsPrecondition,
    CustomPreconditionWrapper,
    DbmsPrecondition,
    ForeignKeyExistsPrecondition,
    IndexExistsPrecondition,
    ObjectQuotingStrategyPrecondition,
    PrimaryKeyExistsPrecondition,
    RowCountPrecondition,
    RunningAsPrecondition,
    SequenceExistsPrecondition,
    SqlPrecondition,
    TableExistsPrecondition,
    TableIsEmptyPrecondition,
    ViewExistsPrecondition,
]


class BuiltinPlugin:
    """Contributes everything the DSL understands out of the box."""

    @hookimpl
    def changelogdsl_get_changes(self) -> list[type[BaseChange]]:
        return list(BUILTIN_CHANGES)

    @hookimpl
    def changelogdsl_get_preconditions(self) -> list[type[BasePrecondition]]:
        return list(BUILTIN_PRECONDITIONS)

    @hookimpl
    def changelogdsl_get_resource_comparators(self) -> dict[str, Any]:
        return {"lexical": LexicalResourceComparator}
