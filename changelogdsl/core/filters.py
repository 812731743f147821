"""Capabilities for filtering and ordering resources found by ``includeAll``."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

__all__ = [
    "ResourceFilter",
    "ResourceComparator",
    "LexicalResourceComparator",
    "DslOnlyResourceFilter",
]


@runtime_checkable
class ResourceFilter(Protocol):
    def include(self, path: str) -> bool:
        """Return ``True`` to keep *path*."""
        ...


@runtime_checkable
class ResourceComparator(Protocol):
    def compare(self, first: str, second: str) -> int:
        """Negative, zero or positive as *first* sorts before, with or after *second*."""
        ...


class LexicalResourceComparator:
    """Default ordering: plain lexicographic comparison of the full path."""

    def compare(self, first: str, second: str) -> int:
        return (first > second) - (first < second)


class DslOnlyResourceFilter:
    """Keeps only files with a DSL extension, then defers to a user filter."""

    def __init__(self, extensions: Iterable[str], user_filter: ResourceFilter | None = None) -> None:
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.user_filter = user_filter

    def include(self, path: str) -> bool:
        if not path.lower().endswith(self.extensions):
            return False
        if self.user_filter is None:
            return True
        return bool(self.user_filter.include(path))
