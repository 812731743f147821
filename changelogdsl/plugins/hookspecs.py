"""pluggy hook specifications for changelog DSL extensions.

Extensions implement these hooks to contribute change kinds, precondition
checks, and named ``includeAll`` filters and comparators::

    from changelogdsl.plugins.hookspecs import hookimpl

    class MyPlugin:
        @hookimpl
        def changelogdsl_get_changes(self):
            return [MyChange]
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from changelogdsl.changes.base_change import BaseChange
    from changelogdsl.preconditions.base_precondition import BasePrecondition

__all__ = ["PROJECT_NAME", "hookspec", "hookimpl", "ChangeLogDslSpec"]

PROJECT_NAME = "changelogdsl"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ChangeLogDslSpec:
    """Hook specifications for changelog DSL extensions."""

    @hookspec
    def changelogdsl_get_changes(self) -> list[type[BaseChange]]:  # type: ignore[empty-body]
        """Return change classes, keyed by their ``element_name``."""

    @hookspec
    def changelogdsl_get_preconditions(self) -> list[type[BasePrecondition]]:  # type: ignore[empty-body]
        """Return leaf precondition classes, keyed by their ``element_name``."""

    @hookspec
    def changelogdsl_get_resource_filters(self) -> dict[str, Any]:  # type: ignore[empty-body]
        """Return ``includeAll`` filters by name, as classes or instances."""

    @hookspec
    def changelogdsl_get_resource_comparators(self) -> dict[str, Any]:  # type: ignore[empty-body]
        """Return ``includeAll`` comparators by name, as classes or instances."""
