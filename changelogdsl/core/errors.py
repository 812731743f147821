"""Error taxonomy raised while building a changelog."""

from __future__ import annotations

__all__ = [
    "ChangeLogError",
    "ChangeLogParseError",
    "MissingPropertyError",
    "ChangeLogResourceError",
    "RollbackImpossibleError",
]


class ChangeLogError(Exception):
    """Base class for every failure reported by a changelog build."""


class ChangeLogParseError(ChangeLogError):
    """Malformed or unknown element, attribute, kind or enumeration value."""


class MissingPropertyError(ChangeLogParseError):
    """A bare property reference named a property that was never declared."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No such property: '{name}' is not a declared changelog property")
        self.name = name


class ChangeLogResourceError(ChangeLogError):
    """An included file, property file or directory could not be read."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class RollbackImpossibleError(ChangeLogError):
    """A map-based rollback could not be resolved to an existing changeset."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        author: str | None = None,
        change_set_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.author = author
        self.change_set_id = change_set_id
