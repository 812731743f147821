"""YAML surface of the changelog DSL: loading, elements and block evaluation.

Every element inside a block is a single-key mapping ``{name: args}``. The
shape of *args* selects the call form:

* ``null``    -> :attr:`CallForm.EMPTY`
* a scalar    -> :attr:`CallForm.VALUE`  (``sql: "SELECT 1"``)
* a list      -> :attr:`CallForm.BLOCK`  (``rollback: [...]``)
* a mapping   -> :attr:`CallForm.PARAMS`, or :attr:`CallForm.PARAMS_BLOCK`
  when it carries the reserved ``block`` key.

A block item that is not a mapping is an expression value, allowed only in
blocks whose value is used (SQL and text bodies, rollbacks). The value of a
block is its last item when that item is an expression, mirroring a closure
whose final statement is a string.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import yaml

from changelogdsl.core.errors import ChangeLogParseError

__all__ = [
    "BLOCK_KEY",
    "CallForm",
    "Element",
    "PropertyReference",
    "ChangeLogLoader",
    "load_document",
    "as_block",
    "evaluate_block",
]

BLOCK_KEY = "block"
PROPERTY_TAG = "!property"


class CallForm(str, Enum):
    EMPTY = "empty"
    VALUE = "value"
    PARAMS = "params"
    BLOCK = "block"
    PARAMS_BLOCK = "params+block"


@dataclass(frozen=True)
class PropertyReference:
    """A bare identifier (``!property name``) resolved against the property table."""

    name: str


class ChangeLogLoader(yaml.SafeLoader):
    """Safe YAML loader that understands the ``!property`` tag."""


def _construct_property(loader: yaml.SafeLoader, node: yaml.Node) -> PropertyReference:
    return PropertyReference(str(loader.construct_scalar(node)).strip())


ChangeLogLoader.add_constructor(PROPERTY_TAG, _construct_property)


def load_document(text: str, source: str) -> Any:
    """Parse YAML *text* read from *source*."""
    try:
        return yaml.load(text, Loader=ChangeLogLoader)
    except yaml.YAMLError as exc:
        raise ChangeLogParseError(f"{source}: invalid changelog YAML: {exc}") from exc


def as_block(raw: Any) -> list[Any]:
    if raw is None:
        return []
    if isinstance(raw, list):
        return list(raw)
    return [raw]


@dataclass(frozen=True)
class Element:
    """One normalized DSL element."""

    name: str
    form: CallForm
    params: dict[str, Any] = field(default_factory=dict)
    value: Any = None
    block: list[Any] = field(default_factory=list)

    @property
    def has_block(self) -> bool:
        return self.form in (CallForm.BLOCK, CallForm.PARAMS_BLOCK)

    @classmethod
    def from_node(cls, node: Any, where: str) -> Element:
        if not isinstance(node, dict) or len(node) != 1:
            raise ChangeLogParseError(f"{where}: expected a single element, got {node!r}")
        name, args = next(iter(node.items()))
        if not isinstance(name, str):
            raise ChangeLogParseError(f"{where}: element names must be strings, got {name!r}")
        if args is None:
            return cls(name=name, form=CallForm.EMPTY)
        if isinstance(args, list):
            return cls(name=name, form=CallForm.BLOCK, block=list(args))
        if isinstance(args, dict):
            params = {str(k): v for k, v in args.items()}
            if BLOCK_KEY in params:
                block = as_block(params.pop(BLOCK_KEY))
                return cls(name=name, form=CallForm.PARAMS_BLOCK, params=params, block=block)
            return cls(name=name, form=CallForm.PARAMS, params=params)
        return cls(name=name, form=CallForm.VALUE, value=args)


def evaluate_block(
    items: list[Any],
    handle: Callable[[Element], None],
    evaluate: Callable[[Any], Any],
    where: str,
    values: bool = False,
) -> Any:
    """Dispatch each element of *items* to *handle* in declaration order.

    Expression items are only allowed when *values* is set, for blocks whose
    value is used. They go through *evaluate* as they are reached, so a bad
    property reference fails at its position. Returns the evaluated last item
    when it is an expression, otherwise ``None``.
    """
    result: Any = None
    for item in items:
        if isinstance(item, dict):
            handle(Element.from_node(item, where))
            result = None
        elif isinstance(item, list):
            raise ChangeLogParseError(f"{where}: unexpected nested list {item!r}")
        elif not values:
            raise ChangeLogParseError(
                f"{where}: '{item}' is not a valid element here; elements are written as 'name: arguments'"
            )
        else:
            result = evaluate(item)
    return result
