"""Precondition containers, boolean composites and the leaf check base."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from changelogdsl.core.schema import DslModel

__all__ = [
    "FailOption",
    "ErrorOption",
    "OnSqlOutputOption",
    "BasePrecondition",
    "CompositePrecondition",
    "AndPrecondition",
    "OrPrecondition",
    "NotPrecondition",
    "PreconditionContainer",
    "Precondition",
]


class FailOption(str, Enum):
    HALT = "HALT"
    CONTINUE = "CONTINUE"
    MARK_RAN = "MARK_RAN"
    WARN = "WARN"


class ErrorOption(str, Enum):
    HALT = "HALT"
    CONTINUE = "CONTINUE"
    MARK_RAN = "MARK_RAN"
    WARN = "WARN"


class OnSqlOutputOption(str, Enum):
    IGNORE = "IGNORE"
    TEST = "TEST"
    FAIL = "FAIL"


class BasePrecondition(DslModel):
    """A leaf check. Evaluating it is left to the migration engine."""


@dataclass
class CompositePrecondition:
    """A boolean combination of nested preconditions, kept in declaration order."""

    element_name: ClassVar[str] = ""

    nested_preconditions: list[Precondition] = field(default_factory=list)

    def add_nested(self, precondition: Precondition) -> None:
        self.nested_preconditions.append(precondition)


@dataclass
class AndPrecondition(CompositePrecondition):
    element_name: ClassVar[str] = "and"


@dataclass
class OrPrecondition(CompositePrecondition):
    element_name: ClassVar[str] = "or"


@dataclass
class NotPrecondition(CompositePrecondition):
    element_name: ClassVar[str] = "not"


@dataclass
class PreconditionContainer(AndPrecondition):
    """Top level ``preConditions`` of a changelog or changeset."""

    element_name: ClassVar[str] = "preConditions"

    on_fail: FailOption = FailOption.HALT
    on_error: ErrorOption = ErrorOption.HALT
    on_sql_output: OnSqlOutputOption = OnSqlOutputOption.IGNORE
    on_fail_message: str | None = None
    on_error_message: str | None = None

    def describe(self) -> dict[str, Any]:
        return {
            "onFail": self.on_fail.value,
            "onError": self.on_error.value,
            "onSqlOutput": self.on_sql_output.value,
            "checks": len(self.nested_preconditions),
        }


Precondition = BasePrecondition | CompositePrecondition
