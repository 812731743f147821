"""Builds changesets: their attributes, changes, rollbacks and metadata."""

from __future__ import annotations

import logging
from typing import Any

from changelogdsl.builders.change_builder import ChangeBuilder
from changelogdsl.builders.context import BuildContext, check_form, check_keys
from changelogdsl.builders.nested_builders import ModifySqlBuilder
from changelogdsl.builders.precondition_builder import PreconditionBuilder
from changelogdsl.core.elements import CallForm, Element, evaluate_block
from changelogdsl.core.errors import ChangeLogParseError, RollbackImpossibleError
from changelogdsl.core.model import ChangeSet, ObjectQuotingStrategy, ValidationFailOption
from changelogdsl.core.scopes import ContextExpression, Labels
from changelogdsl.core.truth import parse_truth

__all__ = ["ChangeSetBuilder", "ChangeSetScope"]

logger = logging.getLogger(__name__)

_PARAMETER_FORMS = frozenset({CallForm.EMPTY, CallForm.BLOCK, CallForm.PARAMS, CallForm.PARAMS_BLOCK})


def parse_enum(enum_cls: type, value: Any, attribute: str, where: str) -> Any:
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_cls)
        raise ChangeLogParseError(
            f"{where}: '{value}' is not a valid value for '{attribute}' (expected one of {choices})"
        ) from exc


class ChangeSetBuilder:
    """Builds a changeset from a ``changeSet`` element of the current changelog."""

    PARAMETERS = (
        "id",
        "author",
        "dbms",
        "runAlways",
        "runOnChange",
        "context",
        "labels",
        "runInTransaction",
        "failOnError",
        "onValidationFail",
        "objectQuotingStrategy",
        "logicalFilePath",
        "filePath",
        "created",
        "runOrder",
        "ignore",
    )

    def __init__(self, context: BuildContext) -> None:
        self.context = context

    def build(self, element: Element) -> ChangeSet:
        raw_id = element.params.get("id")
        where = f"ChangeSet '{raw_id}'"
        check_form(element, _PARAMETER_FORMS, where)
        if "alwaysRun" in element.params:
            raise ChangeLogParseError(
                f"{where}: the 'alwaysRun' attribute of a changeSet has been removed. Please use 'runAlways' instead."
            )
        check_keys(
            element.params,
            self.PARAMETERS,
            lambda key: f"{where}: '{key}' is not a valid changeSet attribute",
        )
        params = {key: self.context.evaluate(value) for key, value in element.params.items()}
        change_log = self.context.change_log

        quoting = change_log.object_quoting_strategy
        if params.get("objectQuotingStrategy") is not None:
            quoting = parse_enum(ObjectQuotingStrategy, params["objectQuotingStrategy"], "objectQuotingStrategy", where)

        file_path = change_log.file_path
        if params.get("filePath") is not None:
            file_path = str(params["filePath"])
        if params.get("logicalFilePath") is not None:
            file_path = str(params["logicalFilePath"])

        change_set = ChangeSet(
            id=_text(params.get("id")),
            author=_text(params.get("author")),
            always_run=parse_truth(params.get("runAlways"), False, "runAlways"),
            run_on_change=parse_truth(params.get("runOnChange"), False, "runOnChange"),
            file_path=file_path,
            contexts=ContextExpression(_text(params.get("context"))),
            dbms=_text(params.get("dbms")),
            run_in_transaction=parse_truth(params.get("runInTransaction"), True, "runInTransaction"),
            object_quoting_strategy=quoting,
            change_log=change_log,
        )
        if params.get("labels") is not None:
            change_set.labels = Labels(str(params["labels"]))
        if params.get("failOnError") is not None:
            change_set.fail_on_error = parse_truth(params["failOnError"], False, "failOnError")
        if params.get("onValidationFail") is not None:
            change_set.on_validation_fail = parse_enum(
                ValidationFailOption, params["onValidationFail"], "onValidationFail", where
            )
        if params.get("created") is not None:
            change_set.created = str(params["created"])
        if params.get("runOrder") is not None:
            change_set.run_order = str(params["runOrder"])
        change_set.ignore = parse_truth(params.get("ignore"), False, "ignore")

        ChangeSetScope(self.context, change_set).run(element.block)
        logger.debug("Built changeset %s with %d changes", change_set, len(change_set.changes))
        return change_set


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


class ChangeSetScope:
    """Walks the block of one changeset, or of one of its rollbacks.

    A fresh scope is used per changeset. In rollback mode changes go to the
    rollback list instead of the forward list.
    """

    def __init__(self, context: BuildContext, change_set: ChangeSet, in_rollback: bool = False) -> None:
        self.context = context
        self.change_set = change_set
        self.in_rollback = in_rollback
        self.change_builder = ChangeBuilder(context, change_set.id)
        self.where = f"ChangeSet '{change_set.id}'"

    def run(self, block: list[Any]) -> Any:
        return evaluate_block(block, self._dispatch, self.context.evaluate, self.where, values=self.in_rollback)

    def _dispatch(self, element: Element) -> None:
        handler = {
            "comment": self._comment,
            "preConditions": self._preconditions,
            "validCheckSum": self._valid_checksum,
            "rollback": self._rollback,
            "modifySql": self._modify_sql,
            "empty": self._empty,
        }.get(element.name)
        if handler is not None:
            handler(element)
            return
        change = self.change_builder.build(element)
        if self.in_rollback:
            self.change_set.add_rollback_change(change)
        else:
            self.change_set.add_change(change)

    def _comment(self, element: Element) -> None:
        check_form(element, frozenset({CallForm.VALUE}), self.where)
        self.change_set.comments = self.context.evaluate_text(element.value)

    def _preconditions(self, element: Element) -> None:
        self.change_set.preconditions = PreconditionBuilder(self.context, self.where).build(element)

    def _valid_checksum(self, element: Element) -> None:
        check_form(element, frozenset({CallForm.VALUE}), self.where)
        checksum = self.context.evaluate_text(element.value)
        if checksum:
            self.change_set.add_valid_checksum(checksum)

    def _modify_sql(self, element: Element) -> None:
        for visitor in ModifySqlBuilder(self.context, self.change_set.id).build(element):
            self.change_set.add_sql_visitor(visitor)

    def _empty(self, element: Element) -> None:
        check_form(element, frozenset({CallForm.EMPTY}), self.where)

    def _rollback(self, element: Element) -> None:
        if self.in_rollback:
            raise ChangeLogParseError(f"{self.where}: a rollback cannot contain another rollback")
        if element.form is CallForm.EMPTY:
            return
        if element.form is CallForm.VALUE:
            sql = self.context.evaluate_text(element.value)
            if sql:
                self.change_set.add_rollback_sql(sql)
            return
        if element.form is CallForm.BLOCK or (element.form is CallForm.PARAMS_BLOCK and not element.params):
            text = ChangeSetScope(self.context, self.change_set, in_rollback=True).run(element.block)
            if text is not None and str(text).strip():
                self.change_set.add_rollback_sql(str(text))
            return
        if element.form is CallForm.PARAMS:
            self._rollback_reference(element.params)
            return
        raise ChangeLogParseError(
            f"{self.where}: a rollback takes either changeSet reference attributes or a block, not both"
        )

    def _rollback_reference(self, raw_params: dict[str, Any]) -> None:
        """Copy the changes of an earlier changeset into this changeset's rollback."""
        for key in raw_params:
            if key == "id":
                raise ChangeLogParseError(
                    f"{self.where}: the 'id' attribute of a rollback has been removed. Please use 'changeSetId' instead."
                )
            if key == "author":
                raise ChangeLogParseError(
                    f"{self.where}: the 'author' attribute of a rollback has been removed. "
                    "Please use 'changeSetAuthor' instead."
                )
        check_keys(
            raw_params,
            ("changeSetId", "changeSetAuthor", "changeSetPath"),
            lambda key: f"{self.where}: '{key}' is not a valid rollback attribute",
        )
        params = {key: self.context.evaluate_text(value) for key, value in raw_params.items()}
        referenced_id = params.get("changeSetId")
        if not referenced_id:
            raise ChangeLogParseError(f"{self.where}: a rollback reference requires a 'changeSetId' attribute")

        author = params.get("changeSetAuthor")
        path = params.get("changeSetPath")
        if self.context.settings.strict_rollback_references and (author is None or path is None):
            raise ChangeLogParseError(
                f"{self.where}: a rollback reference requires 'changeSetAuthor' and 'changeSetPath'"
            )
        author = author if author is not None else self.change_set.author
        path = path if path is not None else self.context.change_log.file_path

        referenced = self.context.change_log.get_change_set(path, author, referenced_id)
        if referenced is None:
            raise RollbackImpossibleError(
                f"Could not find changeSet to use for rollback: {path}:{author}:{referenced_id}",
                file_path=path,
                author=author,
                change_set_id=referenced_id,
            )
        for change in referenced.changes:
            self.change_set.add_rollback_change(change.model_copy(deep=True))
