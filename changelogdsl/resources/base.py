"""Abstract resource accessor: where changelog files live."""

from __future__ import annotations

from abc import ABC, abstractmethod

__all__ = ["ResourceAccessor"]


class ResourceAccessor(ABC):
    """Interface each resource backend must implement."""

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Return the text of *path*; raise ``ChangeLogResourceError`` if it is missing."""

    @abstractmethod
    def read_all(self, path: str) -> list[str]:
        """Return the text of every resource matching *path*, possibly none."""

    @abstractmethod
    def list(self, relative_to: str | None, path: str, recursive: bool = True) -> set[str]:
        """List files under the directory *path*.

        When *relative_to* names a file, *path* is taken relative to the
        directory holding it. A missing directory raises
        ``ChangeLogResourceError``.
        """
