"""Context expressions, label sets and label expressions."""

from __future__ import annotations

import re
from collections.abc import Iterable

__all__ = ["ContextExpression", "LabelExpression", "Labels"]

_TOKEN_RE = re.compile(r"\s*(\(|\)|,|!|[^\s(),!]+)")


class _FilterExpression:
    """A boolean expression over names (``a and !b, c or (d and e)``).

    A comma is a low-precedence ``or``. An empty expression matches anything,
    and so does any expression evaluated against an empty runtime set.
    """

    def __init__(self, expression: str | None = None) -> None:
        self.expression = (expression or "").strip() or None

    @property
    def is_empty(self) -> bool:
        return self.expression is None

    @property
    def names(self) -> frozenset[str]:
        if self.expression is None:
            return frozenset()
        return frozenset(
            tok for tok in _tokenize(self.expression)
            if tok not in {"(", ")", ",", "!", "and", "or", "not"}
        )

    def matches(self, runtime: Iterable[str] | None) -> bool:
        active = {name.strip().lower() for name in (runtime or []) if name and name.strip()}
        if self.expression is None or not active:
            return True
        parser = _ExpressionParser(_tokenize(self.expression), active)
        return parser.parse()

    def __str__(self) -> str:
        return self.expression or ""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.expression!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _FilterExpression):
            return NotImplemented
        return type(self) is type(other) and self.expression == other.expression

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.expression))


class ContextExpression(_FilterExpression):
    """Context filter attached to changesets, properties and includes."""

    @property
    def contexts(self) -> frozenset[str]:
        return self.names


class LabelExpression(_FilterExpression):
    """Label filter attached to includes."""

    def matches_labels(self, labels: Labels | None) -> bool:
        if labels is None or labels.is_empty:
            return True
        return self.matches(labels.labels)


class Labels:
    """An unordered set of labels declared on a changeset or property."""

    def __init__(self, labels: str | Iterable[str] | None = None) -> None:
        if labels is None:
            items: list[str] = []
        elif isinstance(labels, str):
            items = labels.split(",")
        else:
            items = list(labels)
        self._labels: list[str] = []
        for label in items:
            cleaned = label.strip()
            if cleaned and cleaned not in self._labels:
                self._labels.append(cleaned)

    @property
    def labels(self) -> frozenset[str]:
        return frozenset(self._labels)

    @property
    def is_empty(self) -> bool:
        return not self._labels

    def __contains__(self, label: object) -> bool:
        return label in self._labels

    def __str__(self) -> str:
        return ",".join(self._labels)

    def __repr__(self) -> str:
        return f"Labels({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Labels):
            return NotImplemented
        return self.labels == other.labels

    def __hash__(self) -> int:
        return hash(self.labels)


def _tokenize(expression: str) -> list[str]:
    return [m.group(1).lower() for m in _TOKEN_RE.finditer(expression)]


class _ExpressionParser:
    """Recursive-descent evaluator: or/comma < and < not < atom."""

    def __init__(self, tokens: list[str], active: set[str]) -> None:
        self.tokens = tokens
        self.active = active
        self.pos = 0

    def parse(self) -> bool:
        return self._or()

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _take(self) -> str | None:
        tok = self._peek()
        self.pos += 1
        return tok

    def _or(self) -> bool:
        result = self._and()
        while self._peek() in {"or", ","}:
            self._take()
            rhs = self._and()
            result = result or rhs
        return result

    def _and(self) -> bool:
        result = self._not()
        while self._peek() == "and":
            self._take()
            rhs = self._not()
            result = result and rhs
        return result

    def _not(self) -> bool:
        if self._peek() in {"!", "not"}:
            self._take()
            return not self._not()
        return self._atom()

    def _atom(self) -> bool:
        tok = self._take()
        if tok == "(":
            result = self._or()
            if self._peek() == ")":
                self._take()
            return result
        if tok is None:
            return True
        return tok in self.active
