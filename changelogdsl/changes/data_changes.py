"""Row level change kinds: insert, update, delete and bulk loads."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from changelogdsl.changes.base_change import ColumnarChange, ColumnConfig, LoadDataColumnConfig
from changelogdsl.core.schema import Flag

__all__ = [
    "InsertDataChange",
    "UpdateDataChange",
    "DeleteDataChange",
    "LoadDataChange",
    "LoadUpdateDataChange",
]


class InsertDataChange(ColumnarChange):
    element_name: ClassVar[str] = "insert"

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    dbms: str | None = None


class UpdateDataChange(ColumnarChange):
    element_name: ClassVar[str] = "update"
    supports_where: ClassVar[bool] = True

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    where: str | None = None


class DeleteDataChange(ColumnarChange):
    """``delete`` takes a where clause in its block but no columns."""

    element_name: ClassVar[str] = "delete"
    column_config: ClassVar[type[ColumnConfig] | None] = None
    supports_where: ClassVar[bool] = True

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    where: str | None = None


class LoadDataChange(ColumnarChange):
    element_name: ClassVar[str] = "loadData"
    column_config: ClassVar[type[ColumnConfig] | None] = LoadDataColumnConfig

    catalog_name: str | None = None
    schema_name: str | None = None
    table_name: str | None = None
    file: str | None = None
    relative_to_changelog_file: Flag = None
    encoding: str | None = None
    separator: str | None = None
    quotchar: str | None = None
    comment_line_starts_with: str | None = None
    use_prepared_statements: Flag = None
    columns: list[LoadDataColumnConfig] = Field(default_factory=list)


class LoadUpdateDataChange(LoadDataChange):
    element_name: ClassVar[str] = "loadUpdateData"

    primary_key: str | None = None
    only_update: Flag = None
