"""Schema base shared by change kinds, column descriptors and precondition checks."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from changelogdsl.core.elements import CallForm

__all__ = ["BlockKind", "DslModel", "Flag", "Integer", "Number", "Temporal"]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


Flag = Annotated[bool | None, BeforeValidator(_blank_to_none)]
Integer = Annotated[int | None, BeforeValidator(_blank_to_none)]
Number = Annotated[int | float | None, BeforeValidator(_blank_to_none)]
Temporal = Annotated[datetime | date | str | None, BeforeValidator(_blank_to_none)]


class BlockKind(str, Enum):
    """What the nested block of an element collects."""

    COLUMNS = "columns"
    ARGUMENTS = "arguments"
    SQL = "sql"
    TEXT = "text"
    KEY_VALUE = "key_value"


class DslModel(BaseModel):
    """A typed DSL element whose parameters are validated eagerly.

    Field aliases are the camelCase parameter names used in changelogs.
    Unknown parameters are rejected before construction.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        validate_assignment=True,
        coerce_numbers_to_str=True,
    )

    element_name: ClassVar[str] = ""
    call_forms: ClassVar[frozenset[CallForm]] = frozenset({CallForm.EMPTY, CallForm.PARAMS})
    value_field: ClassVar[str | None] = None
    block_kind: ClassVar[BlockKind | None] = None
    block_field: ClassVar[str | None] = None
    nested_only: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def parameter_names(cls) -> tuple[str, ...]:
        """Parameter names accepted in the map form, in declaration order."""
        return tuple(
            info.alias or name
            for name, info in cls.model_fields.items()
            if name not in cls.nested_only
        )

    def parameters(self) -> dict[str, Any]:
        """Set parameters keyed by their DSL names."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude=set(self.nested_only))
