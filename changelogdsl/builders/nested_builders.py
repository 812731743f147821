"""Builders for the nested blocks of changes and changesets.

Each builder walks one block and hands back what it collected; none of them
touch the change or changeset that owns the block.
"""

from __future__ import annotations

from typing import Any

from changelogdsl.builders.context import BuildContext, check_form, check_keys, construct
from changelogdsl.changes.base_change import ColumnConfig, ConstraintsConfig
from changelogdsl.core.elements import CallForm, Element, evaluate_block
from changelogdsl.core.errors import ChangeLogParseError
from changelogdsl.core.model import (
    AppendSqlVisitor,
    PrependSqlVisitor,
    RegExpReplaceSqlVisitor,
    ReplaceSqlVisitor,
    SqlVisitor,
    split_dbms,
)
from changelogdsl.core.scopes import ContextExpression, Labels
from changelogdsl.core.truth import parse_truth

__all__ = [
    "ColumnBuilder",
    "ArgumentBuilder",
    "KeyValueBuilder",
    "SqlBodyBuilder",
    "TextBodyBuilder",
    "ModifySqlBuilder",
]

_VALUE_FORMS = frozenset({CallForm.VALUE, CallForm.PARAMS})


class ColumnBuilder:
    """Collects ``column`` elements and an optional ``where`` clause."""

    def __init__(
        self,
        context: BuildContext,
        column_class: type[ColumnConfig],
        change_set_id: str | None,
        change_name: str,
    ) -> None:
        self.context = context
        self.column_class = column_class
        self.change_set_id = change_set_id
        self.change_name = change_name
        self.columns: list[ColumnConfig] = []
        self.where: str | None = None

    @property
    def _where(self) -> str:
        return f"ChangeSet '{self.change_set_id}'"

    def build(self, block: list[Any]) -> tuple[list[ColumnConfig], str | None]:
        evaluate_block(block, self._dispatch, self.context.evaluate, self._where)
        return self.columns, self.where

    def _dispatch(self, element: Element) -> None:
        if element.name == "column":
            self.columns.append(self._column(element))
        elif element.name == "where":
            check_form(element, frozenset({CallForm.VALUE}), self._where)
            self.where = self.context.evaluate_text(element.value)
        else:
            raise ChangeLogParseError(
                f"{self._where}: '{element.name}' is not a valid child element of '{self.change_name}' changes"
            )

    def _column(self, element: Element) -> ColumnConfig:
        check_form(element, self.column_class.call_forms, self._where)
        check_keys(
            element.params,
            self.column_class.parameter_names(),
            lambda key: f"{self._where}: '{key}' is an invalid property for '{self.change_name}' columns",
        )
        values = {key: self.context.evaluate(value) for key, value in element.params.items()}
        constraints: ConstraintsConfig | None = None

        def _nested(nested: Element) -> None:
            nonlocal constraints
            if nested.name != "constraints":
                raise ChangeLogParseError(
                    f"{self._where}: '{nested.name}' is not a valid child element of a column"
                )
            check_form(nested, frozenset({CallForm.PARAMS}), self._where)
            check_keys(
                nested.params,
                ConstraintsConfig.parameter_names(),
                lambda key: f"{self._where}: '{key}' is an invalid property for column constraints",
            )
            declared = construct(
                ConstraintsConfig,
                {key: self.context.evaluate(value) for key, value in nested.params.items()},
                self._where,
            )
            constraints = declared if constraints is None else constraints.merge(declared)

        evaluate_block(element.block, _nested, self.context.evaluate, self._where)
        if constraints is not None:
            values["constraints"] = constraints
        return construct(self.column_class, values, self._where)


class ArgumentBuilder:
    """Collects ``arg`` elements of ``executeCommand`` in order."""

    def __init__(self, context: BuildContext, change_set_id: str | None) -> None:
        self.context = context
        self.where = f"ChangeSet '{change_set_id}'"
        self.args: list[str] = []

    def build(self, block: list[Any]) -> list[str]:
        evaluate_block(block, self._dispatch, self.context.evaluate, self.where)
        return self.args

    def _dispatch(self, element: Element) -> None:
        if element.name != "arg":
            raise ChangeLogParseError(f"{self.where}: '{element.name}' is not a valid executeCommand argument")
        check_form(element, _VALUE_FORMS, self.where)
        if element.form is CallForm.PARAMS:
            check_keys(element.params, ("value",), lambda key: f"{self.where}: '{key}' is not a valid arg attribute")
            raw = element.params.get("value")
        else:
            raw = element.value
        self.args.append(self.context.evaluate_text(raw) or "")


class KeyValueBuilder:
    """Collects ``{name: value}`` items, as used by custom changes and checks."""

    def __init__(self, context: BuildContext, where: str) -> None:
        self.context = context
        self.where = where
        self.values: dict[str, Any] = {}

    def build(self, block: list[Any]) -> dict[str, Any]:
        evaluate_block(block, self._dispatch, self.context.evaluate, self.where)
        return self.values

    def _dispatch(self, element: Element) -> None:
        check_form(element, frozenset({CallForm.VALUE, CallForm.EMPTY}), self.where)
        self.values[element.name] = self.context.evaluate(element.value)


class SqlBodyBuilder:
    """Reads an SQL body: the trailing text plus an optional ``comment`` element."""

    def __init__(self, context: BuildContext, change_set_id: str | None) -> None:
        self.context = context
        self.where = f"ChangeSet '{change_set_id}'"
        self.comment: str | None = None

    def build(self, block: list[Any]) -> tuple[str | None, str | None]:
        text = evaluate_block(block, self._dispatch, self.context.evaluate, self.where, values=True)
        return (None if text is None else str(text)), self.comment

    def _dispatch(self, element: Element) -> None:
        if element.name != "comment":
            raise ChangeLogParseError(f"{self.where}: '{element.name}' is not valid inside an SQL body")
        check_form(element, frozenset({CallForm.VALUE}), self.where)
        self.comment = self.context.evaluate_text(element.value)


class TextBodyBuilder:
    """Reads a block that holds nothing but text."""

    def __init__(self, context: BuildContext, where: str, owner: str) -> None:
        self.context = context
        self.where = where
        self.owner = owner

    def build(self, block: list[Any]) -> str | None:
        text = evaluate_block(block, self._reject, self.context.evaluate, self.where, values=True)
        return None if text is None else str(text)

    def _reject(self, element: Element) -> None:
        raise ChangeLogParseError(f"{self.where}: '{element.name}' is not valid inside a '{self.owner}' body")


class ModifySqlBuilder:
    """Builds the SQL visitors declared by one ``modifySql`` element."""

    PARAMETERS = ("dbms", "context", "labels", "applyToRollback")
    REPLACE_PARAMETERS = ("replace", "with")

    def __init__(self, context: BuildContext, change_set_id: str | None) -> None:
        self.context = context
        self.where = f"ChangeSet '{change_set_id}'"
        self.visitors: list[SqlVisitor] = []
        self._scope: dict[str, Any] = {}

    def build(self, element: Element) -> list[SqlVisitor]:
        check_form(element, frozenset({CallForm.BLOCK, CallForm.PARAMS_BLOCK}), self.where)
        check_keys(
            element.params,
            self.PARAMETERS,
            lambda key: f"{self.where}: '{key}' is not a valid modifySql attribute",
        )
        params = {key: self.context.evaluate(value) for key, value in element.params.items()}
        context_text = params.get("context")
        labels_text = params.get("labels")
        self._scope = {
            "dbms": split_dbms(params.get("dbms")),
            "contexts": ContextExpression(str(context_text)) if context_text is not None else None,
            "labels": Labels(str(labels_text)) if labels_text is not None else None,
            "apply_to_rollback": parse_truth(params.get("applyToRollback"), False, "applyToRollback"),
        }
        evaluate_block(element.block, self._dispatch, self.context.evaluate, self.where)
        return self.visitors

    def _dispatch(self, element: Element) -> None:
        if element.name in ("prepend", "append"):
            check_form(element, _VALUE_FORMS, self.where)
            if element.form is CallForm.PARAMS:
                check_keys(
                    element.params, ("value",),
                    lambda key: f"{self.where}: '{key}' is not a valid {element.name} attribute",
                )
                raw = element.params.get("value")
            else:
                raw = element.value
            visitor_cls = PrependSqlVisitor if element.name == "prepend" else AppendSqlVisitor
            self.visitors.append(visitor_cls(value=self.context.evaluate_text(raw), **self._scope))
        elif element.name in ("replace", "regExpReplace"):
            check_form(element, frozenset({CallForm.PARAMS}), self.where)
            check_keys(
                element.params,
                self.REPLACE_PARAMETERS,
                lambda key: f"{self.where}: '{key}' is not a valid {element.name} attribute",
            )
            visitor_cls = ReplaceSqlVisitor if element.name == "replace" else RegExpReplaceSqlVisitor
            self.visitors.append(
                visitor_cls(
                    replace=self.context.evaluate_text(element.params.get("replace")),
                    with_=self.context.evaluate_text(element.params.get("with")),
                    **self._scope,
                )
            )
        else:
            raise ChangeLogParseError(f"{self.where}: '{element.name}' is not a valid modifySql element")
