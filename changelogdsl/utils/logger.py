"""Rich-based terminal output for changelog diagnostics and summaries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

if TYPE_CHECKING:
    from changelogdsl.core.model import DatabaseChangeLog

__all__ = [
    "console",
    "print_warning",
    "create_table",
    "create_changelog_table",
]

_THEME = Theme(
    {
        "warning": "bold yellow",
        "info": "bold cyan",
        "muted": "dim",
        "accent": "bold magenta",
    }
)

console = Console(theme=_THEME, stderr=True)


def print_warning(message: str) -> None:
    """Print a warning message with a caution sign."""
    console.print(f"[warning]⚠[/warning] {message}")


def create_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: list[list[str]],
) -> Table:
    """Create a Rich table with the given columns and rows."""
    table = Table(title=title, show_lines=True, expand=True)
    for header, style in columns:
        table.add_column(header, style=style)
    for row in rows:
        table.add_row(*row)
    return table


def create_changelog_table(change_log: DatabaseChangeLog) -> Table:
    """One row per changeset: identity, changes and rollback."""
    rows: list[list[str]] = []
    for change_set in change_log.change_sets:
        changes = "\n".join(change.summary() for change in change_set.changes) or "-"
        rollback = ", ".join(change.element_name for change in change_set.rollback_changes) or "-"
        flags = []
        if change_set.is_ignored:
            flags.append("ignored")
        if change_set.always_run:
            flags.append("runAlways")
        if change_set.run_on_change:
            flags.append("runOnChange")
        rows.append([
            str(change_set.id),
            str(change_set.author),
            str(change_set.file_path),
            changes,
            rollback,
            ", ".join(flags),
        ])
    return create_table(
        title=f"Changelog {change_log.file_path}",
        columns=[
            ("ID", "accent"),
            ("Author", "info"),
            ("Path", "muted"),
            ("Changes", ""),
            ("Rollback", ""),
            ("Flags", "warning"),
        ],
        rows=rows,
    )
