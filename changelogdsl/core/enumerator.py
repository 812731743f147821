"""Directory enumeration for ``includeAll``."""

from __future__ import annotations

import logging
import posixpath
from functools import cmp_to_key

from changelogdsl.core.errors import ChangeLogResourceError
from changelogdsl.core.filters import LexicalResourceComparator, ResourceComparator, ResourceFilter
from changelogdsl.core.paths import (
    ensure_trailing_separator,
    is_absolute_path,
    is_virtual_root_path,
    normalize_separators,
)
from changelogdsl.resources.base import ResourceAccessor

__all__ = ["ResourceEnumerator"]

logger = logging.getLogger(__name__)


class ResourceEnumerator:
    """Lists, filters and orders the changelog files of a directory.

    With *fix_relative_paths* set, every result of a relative, non-classpath
    directory is cut back to start at that directory, so it can be included
    again relative to the changelog. Results under the listed search path are
    cut at its end; any other shape is cut at the first occurrence of the
    directory.
    """

    def __init__(self, resource_accessor: ResourceAccessor, fix_relative_paths: bool = True) -> None:
        self.resource_accessor = resource_accessor
        self.fix_relative_paths = fix_relative_paths

    def list(
        self,
        change_log_path: str | None,
        directory: str,
        relative_to_changelog_file: bool = False,
        recursive: bool = True,
        resource_filter: ResourceFilter | None = None,
        comparator: ResourceComparator | None = None,
        error_if_missing_or_empty: bool = True,
    ) -> list[str]:
        directory = ensure_trailing_separator(normalize_separators(directory))
        relative_to = change_log_path if relative_to_changelog_file else None

        try:
            unsorted = self.resource_accessor.list(relative_to, directory, recursive)
        except ChangeLogResourceError:
            if error_if_missing_or_empty:
                raise
            logger.debug("includeAll directory %s is missing; skipping", directory)
            unsorted = set()

        kept = {
            normalize_separators(path)
            for path in unsorted
            if resource_filter is None or resource_filter.include(path)
        }
        order = comparator or LexicalResourceComparator()
        ordered = sorted(kept, key=cmp_to_key(order.compare))

        if not ordered and error_if_missing_or_empty:
            raise ChangeLogResourceError(
                f"Could not find directory or directory was empty for includeAll '{directory}'",
                path=directory,
            )

        if self.fix_relative_paths and not is_virtual_root_path(directory) and not is_absolute_path(directory):
            listed_prefix = self._listed_prefix(relative_to, directory)
            ordered = [self._truncate(path, directory, listed_prefix) for path in ordered]
        return list(dict.fromkeys(ordered))

    @staticmethod
    def _listed_prefix(relative_to: str | None, directory: str) -> str:
        if relative_to is None:
            return directory
        base = posixpath.dirname(normalize_separators(relative_to))
        return ensure_trailing_separator(posixpath.join(base, directory)) if base else directory

    @staticmethod
    def _truncate(path: str, directory: str, listed_prefix: str) -> str:
        if path.startswith(listed_prefix):
            return directory + path[len(listed_prefix):]
        index = path.find(directory)
        return path[index:] if index >= 0 else path
