"""Entry point tying settings, plugins, resource access and parsing together."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from rich.table import Table

from changelogdsl.config.settings import ChangeLogSettings
from changelogdsl.core.model import DatabaseChangeLog
from changelogdsl.core.parameters import ChangeLogParameters
from changelogdsl.core.parser import ChangeLogParserFactory, YamlChangeLogParser
from changelogdsl.plugins.manager import PluginManager
from changelogdsl.resources.base import ResourceAccessor
from changelogdsl.resources.classpath import ClassPathResourceAccessor
from changelogdsl.resources.filesystem import FileSystemResourceAccessor
from changelogdsl.utils.logger import create_changelog_table

__all__ = ["ChangeLogEngine"]

logger = logging.getLogger(__name__)


class ChangeLogEngine:
    """Central entry point for turning changelog files into a model."""

    def __init__(
        self,
        settings: ChangeLogSettings | None = None,
        root_dir: Path | None = None,
        plugins: Iterable[Any] = (),
    ) -> None:
        self.settings = settings or ChangeLogSettings()
        self.root_dir = (root_dir or Path.cwd()).resolve()
        self.plugin_manager = self._build_plugin_manager(plugins)
        self.parser_factory = ChangeLogParserFactory()
        self.parser_factory.register(YamlChangeLogParser(self.settings, self.plugin_manager))
        self._accessor: ResourceAccessor | None = None

    def _build_plugin_manager(self, plugins: Iterable[Any]) -> PluginManager:
        manager = PluginManager()
        manager.register_builtin_plugins()
        for plugin in plugins:
            manager.register(plugin)
        manager.load_modules(self.settings.plugins)
        if self.settings.load_entry_points:
            loaded = manager.load_entry_points()
            if loaded:
                logger.debug("Loaded %d plugins from entry points", loaded)
        return manager

    def _resolve_accessor(self) -> ResourceAccessor:
        if self._accessor is not None:
            return self._accessor
        if self.settings.classpath_roots:
            self._accessor = ClassPathResourceAccessor(
                self.root_dir / root for root in self.settings.classpath_roots
            )
        else:
            self._accessor = FileSystemResourceAccessor(self.root_dir / self.settings.search_path)
        return self._accessor

    def new_parameters(
        self,
        initial: Mapping[str, Any] | None = None,
        contexts: str | Iterable[str] | None = None,
        labels: str | None = None,
        database: str | None = None,
    ) -> ChangeLogParameters:
        """A property table seeded with host values and runtime filters."""
        return ChangeLogParameters(
            initial=initial,
            contexts=contexts,
            labels=labels,
            database=database,
            max_passes=self.settings.max_expansion_passes,
        )

    def parse(
        self,
        changelog_file: str,
        parameters: ChangeLogParameters | None = None,
        resource_accessor: ResourceAccessor | None = None,
    ) -> DatabaseChangeLog:
        """Parse *changelog_file* and everything it includes."""
        accessor = resource_accessor or self._resolve_accessor()
        parser = self.parser_factory.get_parser(changelog_file)
        change_log = parser.parse(changelog_file, parameters or self.new_parameters(), accessor)
        logger.info("Parsed %s with %d changesets", changelog_file, len(change_log.change_sets))
        return change_log

    def summarize(self, change_log: DatabaseChangeLog) -> Table:
        return create_changelog_table(change_log)
