"""State shared by every builder working on one changelog file."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from changelogdsl.config.settings import ChangeLogSettings
from changelogdsl.core.elements import CallForm, Element, PropertyReference
from changelogdsl.core.errors import ChangeLogParseError, MissingPropertyError
from changelogdsl.core.model import DatabaseChangeLog
from changelogdsl.core.schema import DslModel
from changelogdsl.plugins.manager import PluginManager
from changelogdsl.resources.base import ResourceAccessor

__all__ = ["BuildContext", "check_form", "check_keys", "construct"]


@dataclass
class BuildContext:
    change_log: DatabaseChangeLog
    resource_accessor: ResourceAccessor
    plugins: PluginManager
    settings: ChangeLogSettings

    def resolve_property(self, name: str) -> Any:
        value, found = self.change_log.parameters.resolve(name, self.change_log)
        if not found:
            raise MissingPropertyError(name)
        return value

    def resolve_references(self, value: Any) -> Any:
        """Replace property references without expanding ``${...}`` tokens."""
        if isinstance(value, PropertyReference):
            return self.resolve_property(value.name)
        if isinstance(value, list):
            return [self.resolve_references(v) for v in value]
        if isinstance(value, dict):
            return {k: self.resolve_references(v) for k, v in value.items()}
        return value

    def evaluate(self, value: Any) -> Any:
        """Resolve property references, then expand every string."""
        if isinstance(value, PropertyReference):
            value = self.resolve_property(value.name)
        if isinstance(value, list):
            return [self.evaluate(v) for v in value]
        if isinstance(value, dict):
            return {k: self.evaluate(v) for k, v in value.items()}
        return self.change_log.expand(value)

    def evaluate_text(self, value: Any) -> str | None:
        value = self.evaluate(value)
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


def check_form(element: Element, allowed: frozenset[CallForm], describe: str) -> None:
    if element.form not in allowed:
        forms = ", ".join(sorted(f.value for f in allowed))
        raise ChangeLogParseError(
            f"{describe}: '{element.name}' does not accept the {element.form.value} form (accepted: {forms})"
        )


def check_keys(params: Mapping[str, Any], allowed: Iterable[str], invalid: Callable[[str], str]) -> None:
    """Reject the first key of *params* that is not in *allowed*."""
    allowed_set = set(allowed)
    for key in params:
        if key not in allowed_set:
            raise ChangeLogParseError(invalid(key))


def construct(model: type[DslModel], values: Mapping[str, Any], describe: str) -> Any:
    """Build *model* from *values*, turning validation failures into parse errors."""
    try:
        return model.model_validate(dict(values))
    except ValidationError as exc:
        error = exc.errors()[0]
        location = error.get("loc") or ()
        parameter = str(location[0]) if location else model.element_name
        raise ChangeLogParseError(
            f"{describe}: '{parameter}' has an invalid value for '{model.element_name}': {error.get('msg')}"
        ) from exc
