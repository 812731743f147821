"""Raw SQL, command, messaging and custom change kinds."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from changelogdsl.changes.base_change import BaseChange
from changelogdsl.core.elements import CallForm
from changelogdsl.core.schema import BlockKind, Flag

__all__ = [
    "SqlChange",
    "SqlFileChange",
    "ExecuteCommandChange",
    "OutputChange",
    "StopChange",
    "TagDatabaseChange",
    "CustomChangeWrapper",
]

DEFAULT_OUTPUT_TARGET = "STDERR"


class SqlChange(BaseChange):
    """Inline SQL. The body may carry a ``comment`` element."""

    element_name: ClassVar[str] = "sql"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset(
        {CallForm.VALUE, CallForm.BLOCK, CallForm.PARAMS, CallForm.PARAMS_BLOCK}
    )
    value_field: ClassVar[str | None] = "sql"
    block_kind: ClassVar[BlockKind | None] = BlockKind.SQL
    block_field: ClassVar[str | None] = "sql"

    sql: str | None = None
    comment: str | None = None
    dbms: str | None = None
    end_delimiter: str | None = None
    split_statements: Flag = None
    strip_comments: Flag = None


class SqlFileChange(BaseChange):
    element_name: ClassVar[str] = "sqlFile"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset({CallForm.PARAMS})

    path: str | None = None
    relative_to_changelog_file: Flag = None
    encoding: str | None = None
    dbms: str | None = None
    end_delimiter: str | None = None
    split_statements: Flag = None
    strip_comments: Flag = None

    @classmethod
    def prepare_parameters(cls, params: dict[str, Any]) -> dict[str, Any]:
        if "sql" in params:
            raise ValueError("'sql' is an invalid property for 'sqlFile' changes.")
        return params


class ExecuteCommandChange(BaseChange):
    """Runs an external executable; ``arg`` elements in the block are its arguments."""

    element_name: ClassVar[str] = "executeCommand"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset({CallForm.PARAMS, CallForm.PARAMS_BLOCK})
    block_kind: ClassVar[BlockKind | None] = BlockKind.ARGUMENTS
    block_field: ClassVar[str | None] = "args"
    nested_only: ClassVar[frozenset[str]] = frozenset({"args"})

    executable: str | None = None
    os: str | None = None
    timeout: str | None = None
    args: list[str] = Field(default_factory=list)


class OutputChange(BaseChange):
    element_name: ClassVar[str] = "output"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset({CallForm.VALUE, CallForm.PARAMS})
    value_field: ClassVar[str | None] = "message"

    message: str | None = None
    target: str | None = None

    @classmethod
    def prepare_parameters(cls, params: dict[str, Any]) -> dict[str, Any]:
        if params.get("target") is None:
            params["target"] = DEFAULT_OUTPUT_TARGET
        return params


class StopChange(BaseChange):
    element_name: ClassVar[str] = "stop"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset(
        {CallForm.EMPTY, CallForm.VALUE, CallForm.PARAMS}
    )
    value_field: ClassVar[str | None] = "message"

    message: str | None = None


class TagDatabaseChange(BaseChange):
    element_name: ClassVar[str] = "tagDatabase"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset({CallForm.VALUE, CallForm.PARAMS})
    value_field: ClassVar[str | None] = "tag"

    tag: str | None = None


class CustomChangeWrapper(BaseChange):
    """Names a host-supplied change class; the block holds its parameters.

    The class is recorded by name only. Instantiating it is the migration
    engine's job.
    """

    element_name: ClassVar[str] = "customChange"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset({CallForm.PARAMS, CallForm.PARAMS_BLOCK})
    block_kind: ClassVar[BlockKind | None] = BlockKind.KEY_VALUE
    block_field: ClassVar[str | None] = "params"
    nested_only: ClassVar[frozenset[str]] = frozenset({"params"})

    class_name: str = Field(alias="class")
    params: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def prepare_parameters(cls, params: dict[str, Any]) -> dict[str, Any]:
        if not params.get("class"):
            raise ValueError("customChange requires a 'class' attribute")
        return params
