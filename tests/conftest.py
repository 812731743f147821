"""Shared pytest fixtures for the changelog DSL test suite."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from changelogdsl.config.settings import ChangeLogSettings
from changelogdsl.core.engine import ChangeLogEngine
from changelogdsl.core.model import DatabaseChangeLog


@pytest.fixture
def settings() -> ChangeLogSettings:
    return ChangeLogSettings(load_entry_points=False)


@pytest.fixture
def engine(tmp_path: Path, settings: ChangeLogSettings) -> ChangeLogEngine:
    return ChangeLogEngine(settings, root_dir=tmp_path)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write dedented *text* to *name* under the test directory."""

    def _write(name: str, text: str) -> Path:
        target = tmp_path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(textwrap.dedent(text), encoding="utf-8")
        return target

    return _write


@pytest.fixture
def parse_changelog(
    engine: ChangeLogEngine, write_file: Callable[[str, str], Path]
) -> Callable[..., DatabaseChangeLog]:
    """Write a root changelog and parse it with the default engine."""

    def _parse(text: str, name: str = "changelog.yaml", **kwargs) -> DatabaseChangeLog:
        write_file(name, text)
        return engine.parse(name, **kwargs)

    return _parse


@pytest.fixture
def changelog_with_changeset(parse_changelog) -> Callable[[str], DatabaseChangeLog]:
    """Parse a changelog holding one changeset whose block is *block_yaml*.

    *block_yaml* is indented to sit under the changeset's ``block`` key.
    """

    def _parse(block_yaml: str) -> DatabaseChangeLog:
        body = textwrap.indent(textwrap.dedent(block_yaml), " " * 12)
        text = (
            "databaseChangeLog:\n"
            "  - changeSet:\n"
            "      id: monkey-change\n"
            "      author: stevedonie\n"
            "      block:\n"
            f"{body}"
        )
        return parse_changelog(text)

    return _parse
