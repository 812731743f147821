"""View and stored procedure change kinds."""

from __future__ import annotations

from typing import ClassVar

from pydantic import model_validator

from changelogdsl.changes.base_change import BaseChange
from changelogdsl.core.elements import CallForm
from changelogdsl.core.schema import BlockKind, Flag

__all__ = [
    "CreateViewChange",
    "DropViewChange",
    "RenameViewChange",
    "CreateProcedureChange",
    "DropProcedureChange",
]


class CreateViewChange(BaseChange):
    """``createView``; the select query is the text of its block."""

    element_name: ClassVar[str] = "createView"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset({CallForm.PARAMS, CallForm.PARAMS_BLOCK})
    block_kind: ClassVar[BlockKind | None] = BlockKind.TEXT
    block_field: ClassVar[str | None] = "select_query"

    catalog_name: str | None = None
    schema_name: str | None = None
    view_name: str | None = None
    select_query: str | None = None
    replace_if_exists: Flag = None
    full_definition: Flag = None
    path: str | None = None
    relative_to_changelog_file: Flag = None
    encoding: str | None = None
    remarks: str | None = None

    @model_validator(mode="after")
    def _query_or_path(self) -> CreateViewChange:
        if self.path and self.select_query:
            raise ValueError("createView cannot have both a 'path' and an inline select query")
        return self


class DropViewChange(BaseChange):
    element_name: ClassVar[str] = "dropView"

    catalog_name: str | None = None
    schema_name: str | None = None
    view_name: str | None = None


class RenameViewChange(BaseChange):
    element_name: ClassVar[str] = "renameView"

    catalog_name: str | None = None
    schema_name: str | None = None
    old_view_name: str | None = None
    new_view_name: str | None = None


class CreateProcedureChange(BaseChange):
    """``createProcedure``; the body is a bare value or the text of its block."""

    element_name: ClassVar[str] = "createProcedure"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset(
        {CallForm.VALUE, CallForm.BLOCK, CallForm.PARAMS, CallForm.PARAMS_BLOCK}
    )
    value_field: ClassVar[str | None] = "procedure_text"
    block_kind: ClassVar[BlockKind | None] = BlockKind.TEXT
    block_field: ClassVar[str | None] = "procedure_text"

    catalog_name: str | None = None
    schema_name: str | None = None
    procedure_name: str | None = None
    procedure_text: str | None = None
    path: str | None = None
    relative_to_changelog_file: Flag = None
    encoding: str | None = None
    dbms: str | None = None
    comments: str | None = None
    replace_if_exists: Flag = None

    @model_validator(mode="after")
    def _text_or_path(self) -> CreateProcedureChange:
        if self.path and self.procedure_text:
            raise ValueError("createProcedure cannot have both a 'path' and inline procedure text")
        return self


class DropProcedureChange(BaseChange):
    element_name: ClassVar[str] = "dropProcedure"

    catalog_name: str | None = None
    schema_name: str | None = None
    procedure_name: str | None = None
