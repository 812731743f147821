"""Tests for the plugin manager and extension change kinds."""
from __future__ import annotations

from typing import ClassVar

import pytest

from changelogdsl.changes.base_change import BaseChange
from changelogdsl.changes.sql_changes import SqlChange
from changelogdsl.config.settings import ChangeLogSettings
from changelogdsl.core.elements import CallForm
from changelogdsl.core.engine import ChangeLogEngine
from changelogdsl.core.errors import ChangeLogParseError
from changelogdsl.core.filters import LexicalResourceComparator
from changelogdsl.core.schema import BlockKind
from changelogdsl.plugins.hookspecs import hookimpl
from changelogdsl.plugins.manager import PluginManager
from changelogdsl.preconditions.base_precondition import BasePrecondition


class FeedMonkeyChange(BaseChange):
    element_name: ClassVar[str] = "feedMonkey"
    call_forms: ClassVar[frozenset[CallForm]] = frozenset(
        {CallForm.VALUE, CallForm.PARAMS, CallForm.PARAMS_BLOCK}
    )
    value_field: ClassVar[str | None] = "food"
    block_kind: ClassVar[BlockKind | None] = BlockKind.TEXT
    block_field: ClassVar[str | None] = "note"

    food: str | None = None
    amount: int | None = None
    note: str | None = None


class MonkeyHungryPrecondition(BasePrecondition):
    element_name: ClassVar[str] = "monkeyHungry"

    monkey: str | None = None


class MonkeyPlugin:
    @hookimpl
    def changelogdsl_get_changes(self):
        return [FeedMonkeyChange]

    @hookimpl
    def changelogdsl_get_preconditions(self):
        return [MonkeyHungryPrecondition]


class ShadowSqlPlugin:
    @hookimpl
    def changelogdsl_get_changes(self):
        return [SqlChange]


@pytest.fixture
def manager() -> PluginManager:
    pm = PluginManager()
    pm.register_builtin_plugins()
    return pm


class TestPluginManager:
    def test_builtin_registrations(self, manager) -> None:
        assert manager.get_change("createTable") is not None
        assert manager.get_change("sql") is SqlChange
        assert manager.get_precondition("sqlCheck") is not None
        assert "tagDatabase" in manager.change_names()
        assert "tableExists" in manager.precondition_names()
        assert isinstance(manager.get_resource_comparator("lexical"), LexicalResourceComparator)

    def test_unknown_names(self, manager) -> None:
        assert manager.get_change("feedMonkey") is None
        assert manager.get_precondition("monkeyHungry") is None

    def test_register_extension(self, manager) -> None:
        manager.register(MonkeyPlugin())
        assert manager.get_change("feedMonkey") is FeedMonkeyChange
        assert manager.get_precondition("monkeyHungry") is MonkeyHungryPrecondition

    def test_duplicate_change_name(self, manager) -> None:
        with pytest.raises(ValueError, match="Duplicate change name: 'sql'"):
            manager.register(ShadowSqlPlugin())

    def test_unknown_plugin_module(self, manager) -> None:
        with pytest.raises(ChangeLogParseError, match="could not be imported"):
            manager.load_modules(["changelogdsl_missing_plugin_module"])

    def test_settings_plugin_modules_load_at_engine_start(self, tmp_path) -> None:
        settings = ChangeLogSettings(load_entry_points=False, plugins=["changelogdsl_missing_plugin_module"])
        with pytest.raises(ChangeLogParseError):
            ChangeLogEngine(settings, root_dir=tmp_path)


class TestExtensionChanges:
    @pytest.fixture
    def monkey_engine(self, tmp_path) -> ChangeLogEngine:
        return ChangeLogEngine(ChangeLogSettings(load_entry_points=False), root_dir=tmp_path, plugins=[MonkeyPlugin()])

    def _parse(self, engine, write_file, block: str):
        write_file(
            "changelog.yaml",
            "databaseChangeLog:\n"
            "  - changeSet:\n"
            "      id: feed\n"
            "      author: stevedonie\n"
            "      block:\n" + block,
        )
        return engine.parse("changelog.yaml").change_sets[0]

    def test_value_form(self, monkey_engine, write_file) -> None:
        change = self._parse(monkey_engine, write_file, "        - feedMonkey: banana\n").changes[0]
        assert isinstance(change, FeedMonkeyChange) and change.food == "banana"

    def test_params_and_text_block(self, monkey_engine, write_file) -> None:
        change = self._parse(
            monkey_engine,
            write_file,
            "        - feedMonkey:\n"
            "            food: mango\n"
            "            amount: '2'\n"
            "            block:\n"
            "              - ripe ones only\n",
        ).changes[0]
        assert (change.food, change.amount, change.note) == ("mango", 2, "ripe ones only")

    def test_extension_precondition(self, monkey_engine, write_file) -> None:
        change_set = self._parse(
            monkey_engine,
            write_file,
            "        - preConditions:\n"
            "            - monkeyHungry: {monkey: bobo}\n",
        )
        check = change_set.preconditions.nested_preconditions[0]
        assert isinstance(check, MonkeyHungryPrecondition) and check.monkey == "bobo"

    def test_unregistered_form_rejected(self, monkey_engine, write_file) -> None:
        with pytest.raises(ChangeLogParseError, match="does not accept the empty form"):
            self._parse(monkey_engine, write_file, "        - feedMonkey:\n")
