"""Coercion of boolean-like DSL values."""

from __future__ import annotations

from typing import Any

from changelogdsl.core.errors import ChangeLogParseError

__all__ = ["parse_truth"]

_TRUE = "true"
_FALSE = "false"


def parse_truth(value: Any, default: bool, attribute: str | None = None) -> bool:
    """Return *value* as a strict boolean, or *default* when it is absent.

    Native booleans pass through. Strings are compared case-insensitively
    against ``true`` and ``false``. Anything else is a parse error naming
    *attribute* when one is given.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == _TRUE:
            return True
        if lowered == _FALSE:
            return False
    name = f"'{attribute}'" if attribute else "value"
    raise ChangeLogParseError(f"{name} must be a boolean (true or false), got '{value}'")
