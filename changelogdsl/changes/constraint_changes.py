"""Constraint and index change kinds."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from pydantic import Field

from changelogdsl.changes.base_change import AddColumnConfig, BaseChange, ColumnarChange, ColumnConfig
from changelogdsl.core.schema import Flag
from changelogdsl.utils.logger import print_warning

__all__ = [
    "AddForeignKeyConstraintChange",
    "DropForeignKeyConstraintChange",
    "DropAllForeignKeyConstraintsChange",
    "AddPrimaryKeyChange",
    "DropPrimaryKeyChange",
    "AddUniqueConstraintChange",
    "DropUniqueConstraintChange",
    "AddNotNullConstraintChange",
    "DropNotNullConstraintChange",
    "CreateIndexChange",
    "DropIndexChange",
]

logger = logging.getLogger(__name__)


class AddForeignKeyConstraintChange(BaseChange):
    element_name: ClassVar[str] = "addForeignKeyConstraint"

    base_table_catalog_name: str | None = None
    base_table_schema_name: str | None = None
    base_table_name: str | None = None
    base_column_names: str | None = None
    referenced_table_catalog_name: str | None = None
    referenced_table_schema_name: str | None = None
    referenced_table_name: str | None = None
    referenced_column_names: str | None = None
    constraint_name: str | None = None
    deferrable: Flag = None
    initially_deferred: Flag = None
    on_update: str | None = None
    on_delete: str | None = None
    delete_cascade: Flag = None
    references_unique_column: Flag = None
    validate_constraint: Flag = Field(default=None, alias="validate")

    @classmethod
    def prepare_parameters(cls, params: dict[str, Any]) -> dict[str, Any]:
        if params.get("referencesUniqueColumn") is not None:
            message = (
                "addForeignKeyConstraint's referencesUniqueColumn parameter has been "
                "deprecated, and may be removed in a future release. Consider removing "
                "it, as it is ignored."
            )
            logger.warning(message)
            print_warning(message)
        return params


class DropForeignKeyConstraintChange(BaseChange):
    element_name: ClassVar[str] = "dropForeignKeyConstraint"

    base_table_catalog_name: str | None = None
    base_table_schema_name: str | None = None
    base_table_name: str | None = None
    constraint_name: str | None = None


class DropAllForeignKeyConstraintsChange(BaseChange):
    element_name: ClassVar[str] = "dropAllForeignKeyConstraints"

    base_table_catalog_name: str | None = None
    base_table_schema_name: str | None = None
    base_table_name: str | None = None


class AddPrimaryKeyChange(BaseChange):
    element_name: ClassVar[str] = "addPrimaryKey"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column_names: str | None = None
    constraint_name: str | None = None
    tablespace: str | None = None
    clustered: Flag = None
    for_index_catalog_name: str | None = None
    for_index_schema_name: str | None = None
    for_index_name: str | None = None
    validate_constraint: Flag = Field(default=None, alias="validate")


class DropPrimaryKeyChange(BaseChange):
    element_name: ClassVar[str] = "dropPrimaryKey"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    constraint_name: str | None = None
    drop_index: Flag = None


class AddUniqueConstraintChange(BaseChange):
    element_name: ClassVar[str] = "addUniqueConstraint"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column_names: str | None = None
    constraint_name: str | None = None
    tablespace: str | None = None
    deferrable: Flag = None
    initially_deferred: Flag = None
    disabled: Flag = None
    clustered: Flag = None
    for_index_catalog_name: str | None = None
    for_index_schema_name: str | None = None
    for_index_name: str | None = None
    validate_constraint: Flag = Field(default=None, alias="validate")


class DropUniqueConstraintChange(BaseChange):
    element_name: ClassVar[str] = "dropUniqueConstraint"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    constraint_name: str | None = None
    unique_columns: str | None = None


class AddNotNullConstraintChange(BaseChange):
    element_name: ClassVar[str] = "addNotNullConstraint"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column_name: str | None = None
    default_null_value: str | None = None
    column_data_type: str | None = None
    constraint_name: str | None = None
    validate_constraint: Flag = Field(default=None, alias="validate")


class DropNotNullConstraintChange(BaseChange):
    element_name: ClassVar[str] = "dropNotNullConstraint"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column_name: str | None = None
    column_data_type: str | None = None


class CreateIndexChange(ColumnarChange):
    element_name: ClassVar[str] = "createIndex"
    column_config: ClassVar[type[ColumnConfig] | None] = AddColumnConfig

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    index_name: str | None = None
    unique: Flag = None
    tablespace: str | None = None
    clustered: Flag = None
    associated_with: str | None = None
    columns: list[AddColumnConfig] = Field(default_factory=list)


class DropIndexChange(BaseChange):
    element_name: ClassVar[str] = "dropIndex"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    index_name: str | None = None
    associated_with: str | None = None
