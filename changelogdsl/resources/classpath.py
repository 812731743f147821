"""Resource accessor over a search path of root directories (a virtual root)."""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Iterable
from pathlib import Path

from changelogdsl.core.errors import ChangeLogResourceError
from changelogdsl.core.paths import CLASSPATH_PREFIX, normalize_separators
from changelogdsl.resources.base import ResourceAccessor

__all__ = ["ClassPathResourceAccessor"]

logger = logging.getLogger(__name__)


def _strip(path: str) -> str:
    path = normalize_separators(path)
    if path.startswith(CLASSPATH_PREFIX):
        path = path[len(CLASSPATH_PREFIX):]
    return posixpath.normpath(path.lstrip("/")) if path.strip("/") else ""


class ClassPathResourceAccessor(ResourceAccessor):
    """Identifiers are root-relative and may carry a ``classpath:`` prefix.

    Roots are searched in order. Listings return root-relative identifiers.
    """

    def __init__(self, roots: Iterable[Path]) -> None:
        self.roots = [Path(root).resolve() for root in roots]

    def _candidates(self, path: str) -> list[Path]:
        relative = _strip(path)
        return [root / relative for root in self.roots if (root / relative).is_file()]

    def read_text(self, path: str) -> str:
        candidates = self._candidates(path)
        if not candidates:
            raise ChangeLogResourceError(f"Resource not found on search path: {path}", path=path)
        try:
            return candidates[0].read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ChangeLogResourceError(f"Unable to read {path}: {exc}", path=path) from exc

    def read_all(self, path: str) -> list[str]:
        return [candidate.read_text(encoding="utf-8") for candidate in self._candidates(path)]

    def list(self, relative_to: str | None, path: str, recursive: bool = True) -> set[str]:
        relative = _strip(path)
        if relative_to is not None:
            base = posixpath.dirname(_strip(relative_to))
            relative = posixpath.normpath(posixpath.join(base, relative)) if base else relative
        if relative == ".":
            relative = ""

        found: set[str] = set()
        matched_directory = False
        for root in self.roots:
            directory = root / relative if relative else root
            if not directory.is_dir():
                continue
            matched_directory = True
            candidates = directory.rglob("*") if recursive else directory.glob("*")
            for candidate in candidates:
                if candidate.is_file():
                    found.add(candidate.relative_to(root).as_posix())
        if not matched_directory:
            raise ChangeLogResourceError(f"Directory not found on search path: {path}", path=path)
        logger.debug("Listed %d resources under %s", len(found), relative or "/")
        return found
