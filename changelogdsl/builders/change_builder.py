"""Turns a change element into a validated change object."""

from __future__ import annotations

import logging
from typing import Any

from changelogdsl.builders.context import BuildContext, check_form, check_keys, construct
from changelogdsl.builders.nested_builders import (
    ArgumentBuilder,
    ColumnBuilder,
    KeyValueBuilder,
    SqlBodyBuilder,
    TextBodyBuilder,
)
from changelogdsl.changes.base_change import BaseChange, ColumnConfig
from changelogdsl.core.elements import CallForm, Element
from changelogdsl.core.errors import ChangeLogParseError
from changelogdsl.core.schema import BlockKind

__all__ = ["ChangeBuilder"]

logger = logging.getLogger(__name__)


class ChangeBuilder:
    """Builds changes for one changeset.

    The kind is looked up by element name in the plugin registry. Parameters
    are checked against the kind's schema before any value is evaluated, so
    the first unknown key is the one reported.
    """

    def __init__(self, context: BuildContext, change_set_id: str | None) -> None:
        self.context = context
        self.change_set_id = change_set_id

    @property
    def _where(self) -> str:
        return f"ChangeSet '{self.change_set_id}'"

    def build(self, element: Element) -> BaseChange:
        change_cls = self.context.plugins.get_change(element.name)
        if change_cls is None:
            raise ChangeLogParseError(f"{self._where}: '{element.name}' is not a valid element of a ChangeSet")
        check_form(element, change_cls.call_forms, self._where)

        try:
            params = change_cls.prepare_parameters(dict(element.params))
        except ValueError as exc:
            raise ChangeLogParseError(f"{self._where}: {exc}") from exc
        check_keys(
            params,
            change_cls.parameter_names(),
            lambda key: f"{self._where}: '{key}' is an invalid property for '{element.name}' changes.",
        )

        values: dict[str, Any] = {key: self.context.evaluate(value) for key, value in params.items()}
        if element.form is CallForm.VALUE:
            values[self._value_field(change_cls)] = self.context.evaluate_text(element.value)
        if element.has_block:
            values.update(self._block_values(change_cls, element))

        change = construct(change_cls, values, self._where)
        logger.debug("Built %s change in changeset %s", element.name, self.change_set_id)
        return change

    def _value_field(self, change_cls: type[BaseChange]) -> str:
        if change_cls.value_field is None:
            raise ChangeLogParseError(
                f"{self._where}: '{change_cls.element_name}' changes do not accept a bare value"
            )
        return change_cls.value_field

    def _block_values(self, change_cls: type[BaseChange], element: Element) -> dict[str, Any]:
        kind = change_cls.block_kind
        if kind is None:
            raise ChangeLogParseError(f"{self._where}: '{element.name}' changes do not accept a nested block")

        if kind is BlockKind.COLUMNS:
            column_class = change_cls.column_config or ColumnConfig
            columns, where = ColumnBuilder(self.context, column_class, self.change_set_id, element.name).build(
                element.block
            )
            values: dict[str, Any] = {}
            if columns:
                if change_cls.column_config is None:
                    raise ChangeLogParseError(
                        f"{self._where}: columns are not allowed in '{element.name}' changes"
                    )
                values["columns"] = columns
            if where is not None:
                if not change_cls.supports_where:
                    raise ChangeLogParseError(
                        f"{self._where}: a where clause is invalid for '{element.name}' changes"
                    )
                values["where"] = where
            return values

        if kind is BlockKind.ARGUMENTS:
            return {change_cls.block_field: ArgumentBuilder(self.context, self.change_set_id).build(element.block)}

        if kind is BlockKind.KEY_VALUE:
            return {change_cls.block_field: KeyValueBuilder(self.context, self._where).build(element.block)}

        if kind is BlockKind.SQL:
            text, comment = SqlBodyBuilder(self.context, self.change_set_id).build(element.block)
            values = {}
            if text is not None:
                values[change_cls.block_field] = text
            if comment is not None:
                values["comment"] = comment
            return values

        text = TextBodyBuilder(self.context, self._where, element.name).build(element.block)
        return {} if text is None else {change_cls.block_field: text}
