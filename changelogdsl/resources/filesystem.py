"""Resource accessor backed by the local filesystem."""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path

from changelogdsl.core.errors import ChangeLogResourceError
from changelogdsl.core.paths import ensure_trailing_separator, is_absolute_path, normalize_separators
from changelogdsl.resources.base import ResourceAccessor

__all__ = ["FileSystemResourceAccessor"]

logger = logging.getLogger(__name__)


class FileSystemResourceAccessor(ResourceAccessor):
    """Resolves relative paths against *base_dir*.

    Listings keep the search path as given, so a listing of ``../sql/``
    yields ``../sql/a.yaml`` rather than a normalized or absolute path.
    """

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir = (base_dir or Path.cwd()).resolve()

    def _locate(self, path: str) -> Path:
        path = normalize_separators(path)
        if is_absolute_path(path):
            return Path(path)
        return self.base_dir / path

    def read_text(self, path: str) -> str:
        located = self._locate(path)
        if not located.is_file():
            raise ChangeLogResourceError(f"File not found: {path}", path=path)
        try:
            return located.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ChangeLogResourceError(f"Unable to read {path}: {exc}", path=path) from exc

    def read_all(self, path: str) -> list[str]:
        if not self._locate(path).is_file():
            return []
        return [self.read_text(path)]

    def list(self, relative_to: str | None, path: str, recursive: bool = True) -> set[str]:
        search = normalize_separators(path)
        if relative_to is not None and not is_absolute_path(search):
            base = posixpath.dirname(normalize_separators(relative_to))
            search = posixpath.join(base, search) if base else search
        prefix = ensure_trailing_separator(search)
        directory = self._locate(prefix)
        if not directory.is_dir():
            raise ChangeLogResourceError(f"Directory not found: {path}", path=path)

        candidates = directory.rglob("*") if recursive else directory.glob("*")
        found = {
            prefix + candidate.relative_to(directory).as_posix()
            for candidate in candidates
            if candidate.is_file()
        }
        logger.debug("Listed %d files under %s", len(found), prefix)
        return found
