"""Builds ``preConditions`` containers and their nested checks."""

from __future__ import annotations

from enum import Enum
from typing import Any

from changelogdsl.builders.context import BuildContext, check_form, check_keys, construct
from changelogdsl.builders.nested_builders import KeyValueBuilder, TextBodyBuilder
from changelogdsl.core.elements import CallForm, Element, evaluate_block
from changelogdsl.core.errors import ChangeLogParseError
from changelogdsl.core.schema import BlockKind
from changelogdsl.preconditions.base_precondition import (
    AndPrecondition,
    BasePrecondition,
    CompositePrecondition,
    ErrorOption,
    FailOption,
    NotPrecondition,
    OnSqlOutputOption,
    OrPrecondition,
    Precondition,
    PreconditionContainer,
)

__all__ = ["PreconditionBuilder"]

_COMPOSITES: dict[str, type[CompositePrecondition]] = {
    "and": AndPrecondition,
    "or": OrPrecondition,
    "not": NotPrecondition,
}

_CONTAINER_FORMS = frozenset({CallForm.EMPTY, CallForm.BLOCK, CallForm.PARAMS, CallForm.PARAMS_BLOCK})


class PreconditionBuilder:
    """Builds one precondition container; nested checks keep declaration order."""

    CONTAINER_PARAMETERS = ("onFail", "onError", "onUpdateSQL", "onSqlOutput", "onFailMessage", "onErrorMessage")

    def __init__(self, context: BuildContext, owner: str) -> None:
        self.context = context
        self.owner = owner

    def build(self, element: Element) -> PreconditionContainer:
        check_form(element, _CONTAINER_FORMS, self.owner)
        check_keys(
            element.params,
            self.CONTAINER_PARAMETERS,
            lambda key: f"{self.owner}: '{key}' is not a valid preConditions attribute",
        )
        params = {key: self.context.evaluate(value) for key, value in element.params.items()}
        container = PreconditionContainer()
        if params.get("onFail") is not None:
            container.on_fail = self._option(FailOption, params["onFail"], "onFail")
        if params.get("onError") is not None:
            container.on_error = self._option(ErrorOption, params["onError"], "onError")
        sql_output = params.get("onSqlOutput", params.get("onUpdateSQL"))
        if sql_output is not None:
            container.on_sql_output = self._option(OnSqlOutputOption, sql_output, "onSqlOutput")
        if params.get("onFailMessage") is not None:
            container.on_fail_message = str(params["onFailMessage"])
        if params.get("onErrorMessage") is not None:
            container.on_error_message = str(params["onErrorMessage"])

        self._fill(container, element.block)
        return container

    def _option(self, enum_cls: type[Enum], value: Any, attribute: str) -> Any:
        try:
            return enum_cls(str(value).upper())
        except ValueError as exc:
            choices = ", ".join(member.value for member in enum_cls)
            raise ChangeLogParseError(
                f"{self.owner}: '{value}' is not a valid value for '{attribute}' (expected one of {choices})"
            ) from exc

    def _fill(self, composite: CompositePrecondition, block: list[Any]) -> None:
        evaluate_block(block, lambda nested: composite.add_nested(self._nested(nested)), self.context.evaluate, self.owner)

    def _nested(self, element: Element) -> Precondition:
        composite_cls = _COMPOSITES.get(element.name)
        if composite_cls is not None:
            check_form(element, frozenset({CallForm.EMPTY, CallForm.BLOCK}), self.owner)
            composite = composite_cls()
            self._fill(composite, element.block)
            return composite

        check_cls = self.context.plugins.get_precondition(element.name)
        if check_cls is None:
            raise ChangeLogParseError(f"{self.owner}: '{element.name}' is not a valid precondition")
        return self._leaf(check_cls, element)

    def _leaf(self, check_cls: type[BasePrecondition], element: Element) -> BasePrecondition:
        check_form(element, check_cls.call_forms, self.owner)
        check_keys(
            element.params,
            check_cls.parameter_names(),
            lambda key: f"{self.owner}: '{key}' is an invalid property for '{element.name}' preconditions",
        )
        values: dict[str, Any] = {key: self.context.evaluate(value) for key, value in element.params.items()}
        if element.form is CallForm.VALUE and check_cls.value_field is not None:
            values[check_cls.value_field] = self.context.evaluate_text(element.value)
        if element.has_block:
            if check_cls.block_kind is BlockKind.KEY_VALUE:
                values[check_cls.block_field] = KeyValueBuilder(self.context, self.owner).build(element.block)
            elif check_cls.block_kind is BlockKind.TEXT:
                text = TextBodyBuilder(self.context, self.owner, element.name).build(element.block)
                if text is not None:
                    values[check_cls.block_field] = text
            else:
                raise ChangeLogParseError(f"{self.owner}: '{element.name}' does not accept a nested block")
        return construct(check_cls, values, self.owner)
