"""``${token}`` substitution against the changelog property table."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from changelogdsl.core.model import DatabaseChangeLog
    from changelogdsl.core.parameters import ChangeLogParameters

__all__ = ["DEFAULT_MAX_PASSES", "expand_expressions", "has_unresolved_tokens", "format_value"]

DEFAULT_MAX_PASSES = 10

_TOKEN_RE = re.compile(r"\$\{([^${}]+)\}")


def format_value(value: Any) -> str:
    """Render a property value the way it appears inside expanded text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def expand_expressions(
    raw: Any,
    parameters: ChangeLogParameters | None,
    change_log: DatabaseChangeLog | None = None,
    max_passes: int = DEFAULT_MAX_PASSES,
) -> Any:
    """Substitute every resolvable ``${name}`` token in *raw*.

    Substitution repeats until the text stops changing or *max_passes* is
    reached, so property values may themselves contain tokens. Unknown tokens
    are left in place. Non-string input is returned unchanged.
    """
    if not isinstance(raw, str) or parameters is None or "${" not in raw:
        return raw

    def _substitute(match: re.Match[str]) -> str:
        value, found = parameters.resolve(match.group(1).strip(), change_log)
        if not found or value is None:
            return match.group(0)
        return format_value(value)

    text = raw
    for _ in range(max_passes):
        expanded = _TOKEN_RE.sub(_substitute, text)
        if expanded == text:
            break
        text = expanded
    return text


def has_unresolved_tokens(value: Any) -> bool:
    """Return ``True`` if *value* is a string still containing a ``${...}`` token."""
    return isinstance(value, str) and _TOKEN_RE.search(value) is not None
