"""File lookup protocols.

A file provider is any object with this shape::

    class MyProvider:
        def get_file_info(self, subpath: str | None) -> FileInfo: ...
        def get_directory_contents(self, subpath: str | None) -> DirectoryContents: ...
        def watch(self, filter: str) -> ChangeToken: ...

No base class required. Providers are checked by shape, not lineage,
so decorators such as ``FilteredFileProvider`` can wrap any backend.

Missing files are values, not exceptions: every provider answers every
query with an object whose ``exists`` flag says whether anything was
found.
"""

from collections.abc import Callable, Iterator
from datetime import datetime
from typing import BinaryIO, Protocol, TypeAlias, runtime_checkable

# Callback invoked with the state object passed at registration
ChangeCallback: TypeAlias = Callable[[object], None]


@runtime_checkable
class FileInfo(Protocol):
    """A file or directory entry returned by a provider."""

    @property
    def exists(self) -> bool: ...

    @property
    def name(self) -> str: ...

    @property
    def length(self) -> int:
        """Size in bytes, ``-1`` for directories and missing files."""
        ...

    @property
    def last_modified(self) -> datetime | None: ...

    @property
    def is_directory(self) -> bool: ...

    @property
    def physical_path(self) -> str | None:
        """Path on disk, or ``None`` when the entry is not a plain file."""
        ...

    def open_read(self) -> BinaryIO: ...


@runtime_checkable
class DirectoryContents(Protocol):
    """Entries of a directory, plus whether the directory exists."""

    @property
    def exists(self) -> bool: ...

    def __iter__(self) -> Iterator[FileInfo]: ...


@runtime_checkable
class Disposable(Protocol):
    def dispose(self) -> None: ...


@runtime_checkable
class ChangeToken(Protocol):
    """Signals that files matching a watch filter have changed.

    Tokens are single-use: once ``has_changed`` is true it stays true,
    and callers watch again to observe further changes.
    """

    @property
    def has_changed(self) -> bool: ...

    @property
    def active_change_callbacks(self) -> bool:
        """True when callbacks fire without the consumer polling."""
        ...

    def register_change_callback(self, callback: ChangeCallback, state: object = None) -> Disposable: ...


@runtime_checkable
class FileProvider(Protocol):
    """Read-only lookup over a virtual filesystem."""

    def get_file_info(self, subpath: str | None) -> FileInfo: ...

    def get_directory_contents(self, subpath: str | None) -> DirectoryContents: ...

    def watch(self, filter: str) -> ChangeToken: ...
