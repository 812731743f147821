"""Plugin manager: registration and name lookup of DSL extensions.

Uses pluggy for hook-based registration.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable
from typing import Any

import pluggy

from changelogdsl.changes.base_change import BaseChange
from changelogdsl.core.errors import ChangeLogParseError
from changelogdsl.core.filters import ResourceComparator, ResourceFilter
from changelogdsl.plugins.builtin import BuiltinPlugin
from changelogdsl.plugins.hookspecs import PROJECT_NAME, ChangeLogDslSpec
from changelogdsl.preconditions.base_precondition import BasePrecondition

__all__ = ["PluginManager"]

logger = logging.getLogger(__name__)


class PluginManager:
    """Tracks the change kinds, precondition checks, filters and comparators in use.

    Usage::

        manager = PluginManager()
        manager.register_builtin_plugins()
        manager.register(MyPlugin())
        change_cls = manager.get_change("createTable")
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ChangeLogDslSpec)

        self._changes: dict[str, type[BaseChange]] = {}
        self._preconditions: dict[str, type[BasePrecondition]] = {}
        self._filters: dict[str, Any] = {}
        self._comparators: dict[str, Any] = {}

    def register_builtin_plugins(self) -> None:
        self.register(BuiltinPlugin())

    def register(self, plugin: Any) -> None:
        """Register a plugin object or module implementing the hooks."""
        self._pm.register(plugin)
        self._refresh_caches()

    def load_modules(self, module_names: Iterable[str]) -> None:
        """Import each named module and register it as a plugin."""
        for name in module_names:
            try:
                module = importlib.import_module(name)
            except ImportError as exc:
                raise ChangeLogParseError(f"Plugin module '{name}' could not be imported: {exc}") from exc
            logger.debug("Registering plugin module %s", name)
            self.register(module)

    def load_entry_points(self) -> int:
        """Register plugins advertised under the ``changelogdsl`` entry point group."""
        count = self._pm.load_setuptools_entrypoints(PROJECT_NAME)
        if count:
            self._refresh_caches()
        return count

    def _refresh_caches(self) -> None:
        """Rebuild name lookups from every registered plugin.

        Raises:
            ValueError: If two plugins contribute the same name
        """
        new_changes: dict[str, type[BaseChange]] = {}
        new_preconditions: dict[str, type[BasePrecondition]] = {}
        new_filters: dict[str, Any] = {}
        new_comparators: dict[str, Any] = {}

        for changes in self._pm.hook.changelogdsl_get_changes():
            for cls in changes:
                name = cls.element_name
                if name in new_changes:
                    raise ValueError(
                        f"Duplicate change name: '{name}'. Already registered by {new_changes[name].__name__}"
                    )
                new_changes[name] = cls

        for preconditions in self._pm.hook.changelogdsl_get_preconditions():
            for cls in preconditions:
                name = cls.element_name
                if name in new_preconditions:
                    raise ValueError(
                        f"Duplicate precondition name: '{name}'. "
                        f"Already registered by {new_preconditions[name].__name__}"
                    )
                new_preconditions[name] = cls

        for filters in self._pm.hook.changelogdsl_get_resource_filters():
            for name, impl in filters.items():
                if name in new_filters:
                    raise ValueError(f"Duplicate resource filter name: '{name}'")
                new_filters[name] = impl

        for comparators in self._pm.hook.changelogdsl_get_resource_comparators():
            for name, impl in comparators.items():
                if name in new_comparators:
                    raise ValueError(f"Duplicate resource comparator name: '{name}'")
                new_comparators[name] = impl

        self._changes = new_changes
        self._preconditions = new_preconditions
        self._filters = new_filters
        self._comparators = new_comparators

    def get_change(self, name: str) -> type[BaseChange] | None:
        return self._changes.get(name)

    def get_precondition(self, name: str) -> type[BasePrecondition] | None:
        return self._preconditions.get(name)

    def change_names(self) -> list[str]:
        return sorted(self._changes)

    def precondition_names(self) -> list[str]:
        return sorted(self._preconditions)

    def get_resource_filter(self, name: str) -> ResourceFilter:
        """Return a ready filter registered as *name*.

        Raises:
            ChangeLogParseError: If *name* is unknown or lacks ``include(path)``
        """
        return self._instantiate(name, self._filters, ResourceFilter, "resource filter", "include(path)")

    def get_resource_comparator(self, name: str) -> ResourceComparator:
        """Return a ready comparator registered as *name*.

        Raises:
            ChangeLogParseError: If *name* is unknown or lacks ``compare(a, b)``
        """
        return self._instantiate(
            name, self._comparators, ResourceComparator, "resource comparator", "compare(first, second)"
        )

    @staticmethod
    def _instantiate(name: str, registry: dict[str, Any], capability: type, kind: str, method: str) -> Any:
        if name not in registry:
            known = ", ".join(sorted(registry)) or "none"
            raise ChangeLogParseError(f"Unknown {kind} '{name}' (registered: {known})")
        impl = registry[name]
        if isinstance(impl, type):
            try:
                impl = impl()
            except TypeError as exc:
                raise ChangeLogParseError(f"Could not create {kind} '{name}': {exc}") from exc
        if not isinstance(impl, capability):
            raise ChangeLogParseError(f"{kind.capitalize()} '{name}' does not provide {method}")
        return impl
