"""Table and column level change kinds."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from changelogdsl.changes.base_change import AddColumnConfig, BaseChange, ColumnarChange, ColumnConfig
from changelogdsl.core.schema import Flag, Integer, Temporal, Number

__all__ = [
    "CreateTableChange",
    "DropTableChange",
    "RenameTableChange",
    "SetTableRemarksChange",
    "AddColumnChange",
    "DropColumnChange",
    "RenameColumnChange",
    "ModifyDataTypeChange",
    "MergeColumnsChange",
    "SetColumnRemarksChange",
    "AddAutoIncrementChange",
    "AddDefaultValueChange",
    "DropDefaultValueChange",
    "AddLookupTableChange",
]


class CreateTableChange(ColumnarChange):
    element_name: ClassVar[str] = "createTable"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    tablespace: str | None = None
    remarks: str | None = None


class DropTableChange(BaseChange):
    element_name: ClassVar[str] = "dropTable"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    cascade_constraints: Flag = None


class RenameTableChange(BaseChange):
    element_name: ClassVar[str] = "renameTable"

    catalog_name: str | None = None
    schema_name: str | None = None
    old_table_name: str | None = None
    new_table_name: str | None = None


class SetTableRemarksChange(BaseChange):
    element_name: ClassVar[str] = "setTableRemarks"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    remarks: str | None = None


class AddColumnChange(ColumnarChange):
    element_name: ClassVar[str] = "addColumn"
    column_config: ClassVar[type[ColumnConfig] | None] = AddColumnConfig

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    columns: list[AddColumnConfig] = Field(default_factory=list)


class DropColumnChange(ColumnarChange):
    element_name: ClassVar[str] = "dropColumn"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column_name: str | None = None


class RenameColumnChange(BaseChange):
    element_name: ClassVar[str] = "renameColumn"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    old_column_name: str | None = None
    new_column_name: str | None = None
    column_data_type: str | None = None
    remarks: str | None = None


class ModifyDataTypeChange(BaseChange):
    element_name: ClassVar[str] = "modifyDataType"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column_name: str | None = None
    new_data_type: str | None = None


class MergeColumnsChange(BaseChange):
    element_name: ClassVar[str] = "mergeColumns"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column1_name: str | None = Field(default=None, alias="column1Name")
    column2_name: str | None = Field(default=None, alias="column2Name")
    join_string: str | None = None
    final_column_name: str | None = None
    final_column_type: str | None = None


class SetColumnRemarksChange(BaseChange):
    element_name: ClassVar[str] = "setColumnRemarks"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column_name: str | None = None
    remarks: str | None = None


class AddAutoIncrementChange(BaseChange):
    element_name: ClassVar[str] = "addAutoIncrement"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column_name: str | None = None
    column_data_type: str | None = None
    start_with: Integer = None
    increment_by: Integer = None
    default_on_null: Flag = None
    generation_type: str | None = None


class AddDefaultValueChange(BaseChange):
    element_name: ClassVar[str] = "addDefaultValue"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column_name: str | None = None
    column_data_type: str | None = None
    default_value: str | None = None
    default_value_numeric: Number = None
    default_value_date: Temporal = None
    default_value_boolean: Flag = None
    default_value_computed: str | None = None
    default_value_sequence_next: str | None = None
    default_value_constraint_name: str | None = None


class DropDefaultValueChange(BaseChange):
    element_name: ClassVar[str] = "dropDefaultValue"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    column_name: str | None = None
    column_data_type: str | None = None


class AddLookupTableChange(BaseChange):
    element_name: ClassVar[str] = "addLookupTable"

    existing_table_catalog_name: str | None = None
    existing_table_schema_name: str | None = None
    existing_table_name: str | None = None
    existing_column_name: str | None = None
    new_table_catalog_name: str | None = None
    new_table_schema_name: str | None = None
    new_table_name: str | None = None
    new_column_name: str | None = None
    new_column_data_type: str | None = None
    constraint_name: str | None = None
