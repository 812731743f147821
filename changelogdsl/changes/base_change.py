"""Base change interface and the column/constraint descriptors changes carry."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from changelogdsl.core.elements import CallForm
from changelogdsl.core.schema import BlockKind, DslModel, Flag, Integer, Number, Temporal

__all__ = [
    "ConstraintsConfig",
    "ColumnConfig",
    "AddColumnConfig",
    "LoadDataColumnConfig",
    "BaseChange",
    "ColumnarChange",
]


class ConstraintsConfig(DslModel):
    """Constraints declared inside a ``column`` element."""

    element_name: ClassVar[str] = "constraints"

    nullable: Flag = None
    not_null_constraint_name: str | None = None
    primary_key: Flag = None
    primary_key_name: str | None = None
    primary_key_tablespace: str | None = None
    unique: Flag = None
    unique_constraint_name: str | None = None
    check_constraint: str | None = None
    references: str | None = None
    referenced_table_catalog_name: str | None = None
    referenced_table_schema_name: str | None = None
    referenced_table_name: str | None = None
    referenced_column_names: str | None = None
    foreign_key_name: str | None = None
    delete_cascade: Flag = None
    deferrable: Flag = None
    initially_deferred: Flag = None
    validate_nullable: Flag = None
    validate_unique: Flag = None
    validate_primary_key: Flag = None
    validate_foreign_key: Flag = None

    def merge(self, other: ConstraintsConfig) -> ConstraintsConfig:
        """Combine two declarations; values set in *other* win."""
        merged = self.model_dump(exclude_none=True)
        merged.update(other.model_dump(exclude_none=True))
        return ConstraintsConfig.model_validate(merged)


class ColumnConfig(DslModel):
    """A column as described by ``column`` elements in a change's block."""

    element_name: ClassVar[str] = "column"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset({CallForm.PARAMS, CallForm.PARAMS_BLOCK})
    nested_only: ClassVar[frozenset[str]] = frozenset({"constraints"})

    name: str | None = None
    computed: Flag = None
    type: str | None = None
    value: str | None = None
    value_numeric: Number = None
    value_boolean: Flag = None
    value_date: Temporal = None
    value_computed: str | None = None
    value_sequence_next: str | None = None
    value_sequence_current: str | None = None
    value_blob_file: str | None = None
    value_clob_file: str | None = None
    encoding: str | None = None
    default_value: str | None = None
    default_value_numeric: Number = None
    default_value_date: Temporal = None
    default_value_boolean: Flag = None
    default_value_computed: str | None = None
    default_value_sequence_next: str | None = None
    default_value_constraint_name: str | None = None
    auto_increment: Flag = None
    start_with: Integer = None
    increment_by: Integer = None
    remarks: str | None = None
    descending: Flag = None
    constraints: ConstraintsConfig | None = None


class AddColumnConfig(ColumnConfig):
    """Column of ``addColumn`` and ``createIndex``, with position hints."""

    after_column: str | None = None
    before_column: str | None = None
    position: Integer = None


class LoadDataColumnConfig(ColumnConfig):
    """Column mapping of ``loadData`` and ``loadUpdateData``."""

    index: Integer = None
    header: str | None = None
    allow_update: Flag = None


class BaseChange(DslModel):
    """One typed schema operation inside a changeset."""

    column_config: ClassVar[type[ColumnConfig] | None] = None
    supports_where: ClassVar[bool] = False

    @classmethod
    def prepare_parameters(cls, params: dict[str, Any]) -> dict[str, Any]:
        """Adjust or reject raw map parameters before key validation.

        Raise ``ValueError`` with a message to reject them.
        """
        return params

    def summary(self) -> str:
        """Short human readable rendering used in changelog summaries."""
        params = ", ".join(f"{k}={v}" for k, v in self.parameters().items())
        return f"{self.element_name}({params})" if params else self.element_name


class ColumnarChange(BaseChange):
    """A change whose block holds ``column`` elements."""

    block_kind: ClassVar[BlockKind | None] = BlockKind.COLUMNS
    call_forms: ClassVar[frozenset[CallForm]] = frozenset(
        {CallForm.EMPTY, CallForm.PARAMS, CallForm.PARAMS_BLOCK, CallForm.BLOCK}
    )
    column_config: ClassVar[type[ColumnConfig] | None] = ColumnConfig
    nested_only: ClassVar[frozenset[str]] = frozenset({"columns"})

    columns: list[ColumnConfig] = Field(default_factory=list)
