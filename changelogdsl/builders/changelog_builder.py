"""Builds the root of a changelog file: changesets, includes, properties, preconditions."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import yaml

from changelogdsl.builders.changeset_builder import ChangeSetBuilder, parse_enum
from changelogdsl.builders.context import BuildContext, check_form, check_keys
from changelogdsl.builders.precondition_builder import PreconditionBuilder
from changelogdsl.core.elements import CallForm, Element, evaluate_block
from changelogdsl.core.enumerator import ResourceEnumerator
from changelogdsl.core.errors import ChangeLogParseError, ChangeLogResourceError
from changelogdsl.core.expander import has_unresolved_tokens
from changelogdsl.core.filters import DslOnlyResourceFilter
from changelogdsl.core.model import DatabaseChangeLog, ObjectQuotingStrategy
from changelogdsl.core.scopes import ContextExpression, LabelExpression, Labels
from changelogdsl.core.truth import parse_truth

__all__ = ["ChangeLogBuilder", "load_property_file"]

logger = logging.getLogger(__name__)

_PARAMS_ONLY = frozenset({CallForm.EMPTY, CallForm.PARAMS})


def load_property_file(text: str, source: str) -> dict[str, Any]:
    """Parse a property file: a flat YAML mapping of names to scalar values."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ChangeLogResourceError(f"Unable to load file with properties: {source}: {exc}", path=source) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ChangeLogParseError(f"Property file {source} must hold a mapping of names to values")
    properties: dict[str, Any] = {}
    for name, value in data.items():
        if isinstance(value, (dict, list)):
            raise ChangeLogParseError(f"Property '{name}' in {source} must be a scalar value")
        properties[str(name)] = value
    return properties


class ChangeLogBuilder:
    """Walks the root block of one changelog file."""

    ROOT_PARAMETERS = ("logicalFilePath", "context", "objectQuotingStrategy")
    PROPERTY_PARAMETERS = ("name", "value", "context", "labels", "dbms", "global", "file")
    INCLUDE_PARAMETERS = ("file", "relativeToChangelogFile", "context", "labels", "ignore")
    LEGACY_INCLUDE_PARAMETERS = ("file", "relativeToChangelogFile", "context")
    INCLUDE_ALL_PARAMETERS = (
        "path",
        "relativeToChangelogFile",
        "errorIfMissingOrEmpty",
        "resourceComparator",
        "filter",
        "context",
        "labels",
        "ignore",
    )

    def __init__(self, context: BuildContext) -> None:
        self.context = context

    @property
    def change_log(self) -> DatabaseChangeLog:
        return self.context.change_log

    @property
    def where(self) -> str:
        return f"DatabaseChangeLog '{self.change_log.physical_file_path}'"

    def build(self, params: Mapping[str, Any], block: list[Any]) -> DatabaseChangeLog:
        self._apply_root_parameters(params)
        evaluate_block(block, self._dispatch, self.context.evaluate, self.where)
        return self.change_log

    def _apply_root_parameters(self, raw: Mapping[str, Any]) -> None:
        check_keys(raw, self.ROOT_PARAMETERS, lambda key: f"{self.where}: '{key}' is not a valid changelog attribute")
        params = {key: self.context.evaluate(value) for key, value in raw.items()}
        if params.get("logicalFilePath") is not None:
            self.change_log.logical_file_path = str(params["logicalFilePath"])
        if params.get("context") is not None:
            self.change_log.contexts = ContextExpression(str(params["context"]))
        if params.get("objectQuotingStrategy") is not None:
            self.change_log.object_quoting_strategy = parse_enum(
                ObjectQuotingStrategy, params["objectQuotingStrategy"], "objectQuotingStrategy", self.where
            )

    def _dispatch(self, element: Element) -> None:
        handler = {
            "changeSet": self._change_set,
            "include": self._include,
            "includeAll": self._include_all,
            "preConditions": self._preconditions,
            "property": self._property,
        }.get(element.name)
        if handler is None:
            raise ChangeLogParseError(f"{self.where}: '{element.name}' is not a valid element of a DatabaseChangeLog")
        handler(element)

    def _change_set(self, element: Element) -> None:
        self.change_log.add_change_set(ChangeSetBuilder(self.context).build(element))

    def _preconditions(self, element: Element) -> None:
        container = PreconditionBuilder(self.context, self.where).build(element)
        existing = self.change_log.preconditions
        if existing is not None:
            container.nested_preconditions[:0] = existing.nested_preconditions
        self.change_log.preconditions = container

    def _property(self, element: Element) -> None:
        check_form(element, _PARAMS_ONLY, self.where)
        check_keys(
            element.params,
            self.PROPERTY_PARAMETERS,
            lambda key: f"{self.where}: '{key}' is not a supported property attribute",
        )
        params = element.params
        context_text = self.context.evaluate_text(params.get("context"))
        labels_text = self.context.evaluate_text(params.get("labels"))
        contexts = ContextExpression(context_text) if context_text is not None else None
        labels = Labels(labels_text) if labels_text is not None else None
        dbms = self.context.evaluate_text(params.get("dbms")) or None
        is_global = parse_truth(self.context.evaluate(params.get("global")), True, "global")
        parameters = self.change_log.parameters
        owner = None if is_global else self.change_log

        file_name = self.context.evaluate_text(params.get("file"))
        if not file_name:
            name = self.context.evaluate_text(params.get("name"))
            if not name:
                raise ChangeLogParseError(f"{self.where}: the 'property' element requires a 'name' or 'file' attribute")
            value = self.context.resolve_references(params.get("value"))
            parameters.set(name, value, contexts, labels, dbms, is_global, owner)
            return

        sources = self.context.resource_accessor.read_all(file_name)
        if not sources:
            raise ChangeLogResourceError(f"Unable to load file with properties: {file_name}", path=file_name)
        for text in sources:
            for name, value in load_property_file(text, file_name).items():
                parameters.set(name, value, contexts, labels, dbms, is_global, owner)
        logger.debug("Loaded properties from %s", file_name)

    def _include(self, element: Element) -> None:
        supports_labels = self.context.settings.include.engine_supports_labels
        allowed = self.INCLUDE_PARAMETERS if supports_labels else self.LEGACY_INCLUDE_PARAMETERS
        check_form(element, _PARAMS_ONLY, self.where)
        check_keys(
            element.params,
            allowed,
            lambda key: f"{self.where}: '{key}' is not a supported attribute of the 'include' element.",
        )
        params = {key: self.context.evaluate(value) for key, value in element.params.items()}
        file_name = params.get("file")
        if file_name is None:
            raise ChangeLogParseError(f"{self.where}: the 'include' element requires a 'file' attribute")
        relative = parse_truth(params.get("relativeToChangelogFile"), False, "relativeToChangelogFile")
        contexts, labels, ignore = self._include_scope(params, supports_labels)

        self.change_log.include(
            str(file_name), relative, self.context.resource_accessor, contexts, labels, ignore
        )

    def _include_all(self, element: Element) -> None:
        check_form(element, _PARAMS_ONLY, self.where)
        if "resourceFilter" in element.params:
            raise ChangeLogParseError(
                f"{self.where}: the 'resourceFilter' attribute of includeAll has been removed. "
                "Please use 'filter' instead."
            )
        check_keys(
            element.params,
            self.INCLUDE_ALL_PARAMETERS,
            lambda key: f"{self.where}: '{key}' is not a supported attribute of the 'includeAll' element.",
        )
        params = {key: self.context.evaluate(value) for key, value in element.params.items()}
        path = params.get("path")
        if path is None:
            raise ChangeLogParseError(f"{self.where}: the 'includeAll' element requires a 'path' attribute")
        path = str(path)
        if has_unresolved_tokens(path):
            raise ChangeLogParseError(
                f"{self.where}: 'path' contains an invalid property in an 'includeAll' element: {path}"
            )

        relative = parse_truth(params.get("relativeToChangelogFile"), False, "relativeToChangelogFile")
        error_if_missing = parse_truth(params.get("errorIfMissingOrEmpty"), True, "errorIfMissingOrEmpty")
        plugins = self.context.plugins
        comparator = None
        if params.get("resourceComparator") is not None:
            comparator = plugins.get_resource_comparator(str(params["resourceComparator"]))
        user_filter = None
        if params.get("filter") is not None:
            user_filter = plugins.get_resource_filter(str(params["filter"]))
        contexts, labels, ignore = self._include_scope(params, True)

        enumerator = ResourceEnumerator(
            self.context.resource_accessor,
            fix_relative_paths=self.context.settings.include.fix_relative_paths,
        )
        resources = enumerator.list(
            self.change_log.physical_file_path,
            path,
            relative_to_changelog_file=relative,
            recursive=True,
            resource_filter=DslOnlyResourceFilter(self.context.settings.changelog_extensions, user_filter),
            comparator=comparator,
            error_if_missing_or_empty=error_if_missing,
        )
        logger.debug("includeAll %s matched %d changelogs", path, len(resources))
        for resource in resources:
            self.change_log.include(resource, relative, self.context.resource_accessor, contexts, labels, ignore)

    @staticmethod
    def _include_scope(
        params: Mapping[str, Any], supports_labels: bool
    ) -> tuple[ContextExpression | None, LabelExpression | None, bool]:
        contexts = ContextExpression(str(params["context"])) if params.get("context") is not None else None
        if not supports_labels:
            return contexts, None, False
        labels = LabelExpression(str(params["labels"])) if params.get("labels") is not None else None
        ignore = parse_truth(params.get("ignore"), False, "ignore")
        return contexts, labels, ignore
