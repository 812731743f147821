"""Changelog parsers and extension-based parser selection."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from changelogdsl.builders.changelog_builder import ChangeLogBuilder
from changelogdsl.builders.context import BuildContext
from changelogdsl.config.settings import ChangeLogSettings
from changelogdsl.core.elements import BLOCK_KEY, as_block, load_document
from changelogdsl.core.errors import ChangeLogParseError
from changelogdsl.core.model import DatabaseChangeLog
from changelogdsl.core.parameters import ChangeLogParameters
from changelogdsl.core.scopes import ContextExpression, LabelExpression
from changelogdsl.plugins.manager import PluginManager
from changelogdsl.resources.base import ResourceAccessor

__all__ = ["ChangeLogParser", "YamlChangeLogParser", "ChangeLogParserFactory"]

logger = logging.getLogger(__name__)


class ChangeLogParser(ABC):
    """Interface every changelog format parser must implement."""

    @abstractmethod
    def supports(self, path: str) -> bool:
        """Return ``True`` if this parser reads files like *path*."""

    @abstractmethod
    def parse(
        self,
        physical_path: str,
        parameters: ChangeLogParameters | None,
        resource_accessor: ResourceAccessor,
        parent: DatabaseChangeLog | None = None,
        include_contexts: ContextExpression | None = None,
        include_labels: LabelExpression | None = None,
        include_ignore: bool = False,
    ) -> DatabaseChangeLog:
        """Read *physical_path* and build its changelog model."""


class YamlChangeLogParser(ChangeLogParser):
    """Parses the YAML changelog DSL rooted at ``databaseChangeLog``."""

    ROOT_KEY = "databaseChangeLog"

    def __init__(
        self,
        settings: ChangeLogSettings,
        plugins: PluginManager,
        factory: ChangeLogParserFactory | None = None,
    ) -> None:
        self.settings = settings
        self.plugins = plugins
        self.factory = factory
        self.extensions = tuple(ext.lower() for ext in settings.changelog_extensions)

    def supports(self, path: str) -> bool:
        return path.lower().endswith(self.extensions)

    def parse(
        self,
        physical_path: str,
        parameters: ChangeLogParameters | None,
        resource_accessor: ResourceAccessor,
        parent: DatabaseChangeLog | None = None,
        include_contexts: ContextExpression | None = None,
        include_labels: LabelExpression | None = None,
        include_ignore: bool = False,
    ) -> DatabaseChangeLog:
        document = load_document(resource_accessor.read_text(physical_path), physical_path)
        params, block = self._split_root(document, physical_path)

        if parameters is None:
            parameters = ChangeLogParameters(max_passes=self.settings.max_expansion_passes)
        change_log = DatabaseChangeLog(physical_path, parameters, parent=parent, parser_factory=self.factory)
        change_log.include_contexts = include_contexts
        change_log.include_labels = include_labels
        change_log.include_ignore = include_ignore

        context = BuildContext(change_log, resource_accessor, self.plugins, self.settings)
        ChangeLogBuilder(context).build(params, block)
        logger.debug("Parsed %s: %d changesets", physical_path, len(change_log.change_sets))
        return change_log

    def _split_root(self, document: Any, path: str) -> tuple[dict[str, Any], list[Any]]:
        if not isinstance(document, dict) or self.ROOT_KEY not in document:
            raise ChangeLogParseError(f"{path}: a changelog must have a '{self.ROOT_KEY}' element")
        extra = [key for key in document if key != self.ROOT_KEY]
        if extra:
            raise ChangeLogParseError(f"{path}: unexpected top-level element '{extra[0]}'")
        root = document[self.ROOT_KEY]
        if root is None:
            raise ChangeLogParseError(f"{path}: the '{self.ROOT_KEY}' element has no content")
        if isinstance(root, list):
            return {}, list(root)
        if isinstance(root, dict):
            params = {str(k): v for k, v in root.items()}
            block = as_block(params.pop(BLOCK_KEY, None))
            return params, block
        raise ChangeLogParseError(f"{path}: the '{self.ROOT_KEY}' element must be a list or a mapping")


class ChangeLogParserFactory:
    """Picks the parser for a changelog path by its extension."""

    def __init__(self, parsers: Iterable[ChangeLogParser] = ()) -> None:
        self._parsers: list[ChangeLogParser] = []
        for parser in parsers:
            self.register(parser)

    @classmethod
    def default(cls, settings: ChangeLogSettings | None = None) -> ChangeLogParserFactory:
        """A factory holding the YAML parser with built-in plugins only."""
        plugins = PluginManager()
        plugins.register_builtin_plugins()
        factory = cls()
        factory.register(YamlChangeLogParser(settings or ChangeLogSettings(), plugins))
        return factory

    def register(self, parser: ChangeLogParser) -> None:
        if isinstance(parser, YamlChangeLogParser) and parser.factory is None:
            parser.factory = self
        self._parsers.append(parser)

    def get_parser(self, path: str) -> ChangeLogParser:
        for parser in self._parsers:
            if parser.supports(path):
                return parser
        raise ChangeLogParseError(f"No changelog parser supports '{path}'")
