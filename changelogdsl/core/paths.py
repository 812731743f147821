"""Path helpers for changelog resource identifiers.

Identifiers always use ``/`` separators, whatever the host platform.
"""

from __future__ import annotations

import posixpath
import re

__all__ = [
    "CLASSPATH_PREFIX",
    "normalize_separators",
    "ensure_trailing_separator",
    "is_absolute_path",
    "is_virtual_root_path",
    "resolve_relative",
]

CLASSPATH_PREFIX = "classpath:"

_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:/")


def normalize_separators(path: str) -> str:
    return path.replace("\\", "/")


def ensure_trailing_separator(path: str) -> str:
    return path if path.endswith("/") else path + "/"


def is_absolute_path(path: str) -> bool:
    path = normalize_separators(path)
    return path.startswith("/") or bool(_WINDOWS_DRIVE_RE.match(path))


def is_virtual_root_path(path: str) -> bool:
    """True for paths addressed against the classpath-style virtual root."""
    return path.startswith("classpath")


def resolve_relative(base_file: str | None, path: str) -> str:
    """Resolve *path* against the directory holding *base_file*."""
    path = normalize_separators(path)
    if base_file is None or is_absolute_path(path):
        return path
    prefix = ""
    base = normalize_separators(base_file)
    if base.startswith(CLASSPATH_PREFIX):
        prefix, base = CLASSPATH_PREFIX, base[len(CLASSPATH_PREFIX):]
    base_dir = posixpath.dirname(base)
    joined = posixpath.join(base_dir, path) if base_dir else path
    return prefix + posixpath.normpath(joined)
