"""Sequence change kinds."""

from __future__ import annotations

from typing import ClassVar

from changelogdsl.changes.base_change import BaseChange
from changelogdsl.core.schema import Flag, Integer

__all__ = [
    "CreateSequenceChange",
    "AlterSequenceChange",
    "DropSequenceChange",
    "RenameSequenceChange",
]


class CreateSequenceChange(BaseChange):
    element_name: ClassVar[str] = "createSequence"

    catalog_name: str | None = None
    schema_name: str | None = None
    sequence_name: str | None = None
    start_value: Integer = None
    increment_by: Integer = None
    max_value: Integer = None
    min_value: Integer = None
    ordered: Flag = None
    cycle: Flag = None
    cache_size: Integer = None
    data_type: str | None = None


class AlterSequenceChange(BaseChange):
    element_name: ClassVar[str] = "alterSequence"

    catalog_name: str | None = None
    schema_name: str | None = None
    sequence_name: str | None = None
    increment_by: Integer = None
    max_value: Integer = None
    min_value: Integer = None
    ordered: Flag = None
    cycle: Flag = None
    cache_size: Integer = None
    data_type: str | None = None


class DropSequenceChange(BaseChange):
    element_name: ClassVar[str] = "dropSequence"

    catalog_name: str | None = None
    schema_name: str | None = None
    sequence_name: str | None = None


class RenameSequenceChange(BaseChange):
    element_name: ClassVar[str] = "renameSequence"

    catalog_name: str | None = None
    schema_name: str | None = None
    old_sequence_name: str | None = None
    new_sequence_name: str | None = None
