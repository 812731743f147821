"""Append-only property table consulted by expression expansion."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from changelogdsl.core.expander import DEFAULT_MAX_PASSES, expand_expressions
from changelogdsl.core.scopes import ContextExpression, LabelExpression, Labels

if TYPE_CHECKING:
    from changelogdsl.core.model import DatabaseChangeLog

__all__ = ["ChangeLogProperty", "ChangeLogParameters"]


@dataclass(frozen=True)
class ChangeLogProperty:
    """One registered property and the scope it applies to."""

    name: str | None
    value: Any
    contexts: ContextExpression | None = None
    labels: Labels | None = None
    dbms: tuple[str, ...] | None = None
    is_global: bool = True
    change_log: DatabaseChangeLog | None = field(default=None, compare=False, repr=False)


class ChangeLogParameters:
    """Property table shared by a changelog and everything it includes.

    Entries are never replaced. Lookups prefer the newest matching entry
    declared locally in the requesting changelog, then the newest matching
    global entry. Entries whose context, label or dbms scope does not match
    the runtime filters given here are invisible.
    """

    def __init__(
        self,
        initial: Mapping[str, Any] | None = None,
        contexts: str | Iterable[str] | None = None,
        labels: str | None = None,
        database: str | None = None,
        max_passes: int = DEFAULT_MAX_PASSES,
    ) -> None:
        if isinstance(contexts, str):
            contexts = [c for c in contexts.split(",")]
        self.contexts: list[str] = [c.strip() for c in (contexts or []) if c and c.strip()]
        self.label_expression = LabelExpression(labels)
        self.database = database.lower() if database else None
        self.max_passes = max_passes
        self._properties: list[ChangeLogProperty] = []
        for name, value in (initial or {}).items():
            self.set(name, value)

    @property
    def properties(self) -> tuple[ChangeLogProperty, ...]:
        return tuple(self._properties)

    def set(
        self,
        name: str | None,
        value: Any,
        contexts: ContextExpression | None = None,
        labels: Labels | None = None,
        dbms: str | Iterable[str] | None = None,
        is_global: bool = True,
        change_log: DatabaseChangeLog | None = None,
    ) -> ChangeLogProperty:
        if isinstance(dbms, str):
            dbms_names: tuple[str, ...] | None = tuple(
                d.strip().lower() for d in dbms.split(",") if d.strip()
            ) or None
        elif dbms is not None:
            dbms_names = tuple(d.strip().lower() for d in dbms) or None
        else:
            dbms_names = None
        prop = ChangeLogProperty(
            name=name, value=value, contexts=contexts, labels=labels,
            dbms=dbms_names, is_global=is_global, change_log=change_log,
        )
        self._properties.append(prop)
        return prop

    def resolve(self, name: str, change_log: DatabaseChangeLog | None = None) -> tuple[Any, bool]:
        """Return ``(value, found)`` for *name* as seen from *change_log*."""
        candidates = [p for p in reversed(self._properties) if p.name == name and self._applies(p)]
        for prop in candidates:
            if not prop.is_global and change_log is not None and prop.change_log is change_log:
                return prop.value, True
        for prop in candidates:
            if prop.is_global:
                return prop.value, True
        return None, False

    def has_value(self, name: str, change_log: DatabaseChangeLog | None = None) -> bool:
        return self.resolve(name, change_log)[1]

    def get_value(self, name: str, change_log: DatabaseChangeLog | None = None) -> Any:
        return self.resolve(name, change_log)[0]

    def expand(self, raw: Any, change_log: DatabaseChangeLog | None = None) -> Any:
        return expand_expressions(raw, self, change_log, self.max_passes)

    def _applies(self, prop: ChangeLogProperty) -> bool:
        if prop.contexts is not None and not prop.contexts.matches(self.contexts):
            return False
        if prop.labels is not None and not self.label_expression.matches_labels(prop.labels):
            return False
        if prop.dbms and self.database and "all" not in prop.dbms:
            return self.database in prop.dbms
        return True
