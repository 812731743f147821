"""Pydantic-based configuration model and YAML loader for the changelog DSL."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from changelogdsl.core.expander import DEFAULT_MAX_PASSES

__all__ = ["IncludeConfig", "ChangeLogSettings", "load_settings"]

_CONFIG_FILE_NAMES: list[str] = [
    "changelogdsl.yaml",
    "changelogdsl.yml",
    ".changelogdsl.yaml",
    ".changelogdsl.yml",
]


class IncludeConfig(BaseModel):
    """Behaviour of ``include`` and ``includeAll``."""

    engine_supports_labels: bool = Field(
        default=True,
        description="Pass labels and ignore flags to the include primitive; "
        "when false, include only accepts file, relativeToChangelogFile and context.",
    )
    fix_relative_paths: bool = Field(
        default=True,
        description="Cut includeAll results back to start at the requested relative directory.",
    )


class ChangeLogSettings(BaseModel):
    """Top-level changelog DSL configuration."""

    changelog_extensions: list[str] = Field(
        default_factory=lambda: [".yaml", ".yml"],
        description="File extensions recognised as DSL changelogs.",
    )
    max_expansion_passes: int = Field(
        default=DEFAULT_MAX_PASSES,
        ge=1,
        description="Upper bound on repeated ${token} substitution passes.",
    )
    strict_rollback_references: bool = Field(
        default=False,
        description="Require changeSetAuthor and changeSetPath in map-form rollbacks.",
    )
    search_path: str = Field(
        default=".",
        description="Directory that relative changelog paths are resolved against.",
    )
    classpath_roots: list[str] = Field(
        default_factory=list,
        description="Root directories of a virtual search path; used instead of search_path when set.",
    )
    plugins: list[str] = Field(
        default_factory=list,
        description="Modules to import and register as DSL plugins.",
    )
    load_entry_points: bool = Field(
        default=True,
        description="Register plugins advertised under the 'changelogdsl' entry point group.",
    )
    include: IncludeConfig = Field(
        default_factory=IncludeConfig,
        description="Include and includeAll behaviour.",
    )


def _find_config_file(search_dir: Path) -> Path | None:
    """Walk up from *search_dir* looking for a config file."""
    current = search_dir.resolve()
    while True:
        for name in _CONFIG_FILE_NAMES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_settings(
    config_path: Path | None = None,
    search_dir: Path | None = None,
) -> ChangeLogSettings:
    """Load settings from a YAML file, falling back to defaults."""
    raw: dict[str, Any] = {}

    if config_path is not None:
        resolved = Path(config_path).resolve()
        if resolved.is_file():
            raw = yaml.safe_load(resolved.read_text(encoding="utf-8")) or {}
    else:
        found = _find_config_file(search_dir or Path.cwd())
        if found is not None:
            raw = yaml.safe_load(found.read_text(encoding="utf-8")) or {}

    return ChangeLogSettings(**raw)
