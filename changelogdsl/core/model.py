"""Changelog object model produced by the DSL builders."""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from changelogdsl.changes.sql_changes import SqlChange
from changelogdsl.core.errors import ChangeLogParseError
from changelogdsl.core.parameters import ChangeLogParameters
from changelogdsl.core.paths import normalize_separators, resolve_relative
from changelogdsl.core.scopes import ContextExpression, LabelExpression, Labels
from changelogdsl.preconditions.base_precondition import PreconditionContainer

if TYPE_CHECKING:
    from changelogdsl.changes.base_change import BaseChange
    from changelogdsl.core.parser import ChangeLogParserFactory
    from changelogdsl.resources.base import ResourceAccessor

__all__ = [
    "ObjectQuotingStrategy",
    "ValidationFailOption",
    "SqlVisitor",
    "PrependSqlVisitor",
    "AppendSqlVisitor",
    "ReplaceSqlVisitor",
    "RegExpReplaceSqlVisitor",
    "ChangeSet",
    "DatabaseChangeLog",
]

logger = logging.getLogger(__name__)


class ObjectQuotingStrategy(str, Enum):
    LEGACY = "LEGACY"
    QUOTE_ALL_OBJECTS = "QUOTE_ALL_OBJECTS"
    QUOTE_ONLY_RESERVED_WORDS = "QUOTE_ONLY_RESERVED_WORDS"


class ValidationFailOption(str, Enum):
    HALT = "HALT"
    MARK_RAN = "MARK_RAN"


@dataclass
class SqlVisitor:
    """Rewrites generated SQL. Declared by ``modifySql`` blocks."""

    element_name: ClassVar[str] = ""

    dbms: frozenset[str] | None = None
    contexts: ContextExpression | None = None
    labels: Labels | None = None
    apply_to_rollback: bool = False


@dataclass
class PrependSqlVisitor(SqlVisitor):
    element_name: ClassVar[str] = "prepend"

    value: str | None = None


@dataclass
class AppendSqlVisitor(SqlVisitor):
    element_name: ClassVar[str] = "append"

    value: str | None = None


@dataclass
class ReplaceSqlVisitor(SqlVisitor):
    element_name: ClassVar[str] = "replace"

    replace: str | None = None
    with_: str | None = None


@dataclass
class RegExpReplaceSqlVisitor(SqlVisitor):
    element_name: ClassVar[str] = "regExpReplace"

    replace: str | None = None
    with_: str | None = None


def split_dbms(dbms: str | None) -> frozenset[str] | None:
    if dbms is None:
        return None
    names = frozenset(d.strip() for d in str(dbms).split(",") if d.strip())
    return names or None


class ChangeSet:
    """An atomically identified unit of forward and rollback changes."""

    def __init__(
        self,
        id: str | None,
        author: str | None,
        always_run: bool = False,
        run_on_change: bool = False,
        file_path: str | None = None,
        contexts: ContextExpression | str | None = None,
        dbms: str | None = None,
        run_in_transaction: bool = True,
        object_quoting_strategy: ObjectQuotingStrategy | None = None,
        change_log: DatabaseChangeLog | None = None,
    ) -> None:
        self.id = id
        self.author = author
        self.always_run = always_run
        self.run_on_change = run_on_change
        self.file_path = file_path
        if not isinstance(contexts, ContextExpression):
            contexts = ContextExpression(contexts)
        self.contexts = contexts
        self.dbms = split_dbms(dbms)
        self.run_in_transaction = run_in_transaction
        self.object_quoting_strategy = object_quoting_strategy
        self.change_log = change_log

        self.fail_on_error: bool | None = None
        self.on_validation_fail = ValidationFailOption.HALT
        self.labels: Labels | None = None
        self.created: str | None = None
        self.run_order: str | None = None
        self.ignore = False
        self.comments: str | None = None
        self.preconditions: PreconditionContainer | None = None
        self.changes: list[BaseChange] = []
        self.rollback_changes: list[BaseChange] = []
        self.valid_checksums: list[str] = []
        self.sql_visitors: list[SqlVisitor] = []

    @property
    def is_ignored(self) -> bool:
        """Ignored on its own account or because its changelog was included with ``ignore``."""
        if self.ignore:
            return True
        return bool(self.change_log is not None and self.change_log.include_ignore)

    @property
    def rollback_sql(self) -> list[str]:
        return [c.sql for c in self.rollback_changes if isinstance(c, SqlChange) and c.sql]

    def add_change(self, change: BaseChange) -> None:
        self.changes.append(change)

    def add_rollback_change(self, change: BaseChange) -> None:
        self.rollback_changes.append(change)

    def add_rollback_sql(self, sql: str) -> None:
        """Record raw rollback SQL as an inline ``sql`` rollback change."""
        self.rollback_changes.append(SqlChange(sql=sql))

    def add_valid_checksum(self, checksum: str) -> None:
        if checksum not in self.valid_checksums:
            self.valid_checksums.append(checksum)

    def add_sql_visitor(self, visitor: SqlVisitor) -> None:
        self.sql_visitors.append(visitor)

    def matches(self, file_path: str | None, author: str | None, id: str | None) -> bool:
        if str(self.id) != str(id):
            return False
        if author is not None and (self.author or "").lower() != author.lower():
            return False
        if file_path is None:
            return True
        return _normalize(self.file_path) == _normalize(file_path)

    def __str__(self) -> str:
        return f"{self.file_path}::{self.id}::{self.author}"

    def __repr__(self) -> str:
        return f"ChangeSet({str(self)!r})"


def _normalize(path: str | None) -> str:
    if path is None:
        return ""
    return posixpath.normpath(normalize_separators(path)).lower()


class DatabaseChangeLog:
    """Root of the model: ordered changesets plus changelog level metadata."""

    def __init__(
        self,
        physical_file_path: str | None = None,
        parameters: ChangeLogParameters | None = None,
        parent: DatabaseChangeLog | None = None,
        parser_factory: ChangeLogParserFactory | None = None,
    ) -> None:
        self.physical_file_path = physical_file_path
        self.logical_file_path: str | None = None
        self.parameters = parameters if parameters is not None else ChangeLogParameters()
        self.parent = parent
        self.parser_factory = parser_factory
        self.contexts: ContextExpression | None = None
        self.object_quoting_strategy: ObjectQuotingStrategy | None = None
        self.preconditions: PreconditionContainer | None = None
        self.change_sets: list[ChangeSet] = []
        self.include_contexts: ContextExpression | None = None
        self.include_labels: LabelExpression | None = None
        self.include_ignore = False

    @property
    def file_path(self) -> str | None:
        """The logical path when one is declared, otherwise the physical path."""
        return self.logical_file_path or self.physical_file_path

    def add_change_set(self, change_set: ChangeSet) -> None:
        self.change_sets.append(change_set)

    def get_change_set(self, file_path: str | None, author: str | None, id: str | None) -> ChangeSet | None:
        for change_set in self.change_sets:
            if change_set.matches(file_path, author, id):
                return change_set
        return None

    def expand(self, value: Any) -> Any:
        """Expand ``${token}`` references in *value* using this changelog's scope."""
        if isinstance(value, (date, datetime)):
            return value
        return self.parameters.expand(value, self)

    def include(
        self,
        file_name: str,
        relative_to_changelog_file: bool,
        resource_accessor: ResourceAccessor,
        contexts: ContextExpression | None = None,
        labels: LabelExpression | None = None,
        ignore: bool = False,
    ) -> DatabaseChangeLog:
        """Parse *file_name* and splice its changesets and preconditions into this changelog."""
        path = normalize_separators(file_name)
        if relative_to_changelog_file:
            path = resolve_relative(self.physical_file_path, path)

        if self._is_ancestor_path(path):
            raise ChangeLogParseError(
                f"Circular include of '{path}' from '{self.physical_file_path}'"
            )

        factory = self.parser_factory
        if factory is None:
            from changelogdsl.core.parser import ChangeLogParserFactory

            factory = ChangeLogParserFactory.default()

        logger.debug("Including changelog %s from %s", path, self.physical_file_path)
        child = factory.get_parser(path).parse(
            path,
            self.parameters,
            resource_accessor,
            parent=self,
            include_contexts=contexts,
            include_labels=labels,
            include_ignore=ignore,
        )

        if child.preconditions is not None:
            if self.preconditions is None:
                self.preconditions = PreconditionContainer()
            self.preconditions.add_nested(child.preconditions)
        for change_set in child.change_sets:
            self.add_change_set(change_set)
        return child

    def _is_ancestor_path(self, path: str) -> bool:
        target = _normalize(path)
        change_log: DatabaseChangeLog | None = self
        while change_log is not None:
            if change_log.physical_file_path is not None and _normalize(change_log.physical_file_path) == target:
                return True
            change_log = change_log.parent
        return False

    def __repr__(self) -> str:
        return f"DatabaseChangeLog({self.physical_file_path!r}, change_sets={len(self.change_sets)})"
