"""Shared lookup results: not-found sentinels, listings, the null token.

Every provider answers with these when nothing matched, so callers can
treat all lookups uniformly::

    info = provider.get_file_info("/static/site.css")
    if info.exists:
        ...
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, ClassVar

from bundlefs.changes import ChangeRegistration
from bundlefs.protocols import ChangeCallback, FileInfo


@dataclass(frozen=True, slots=True)
class NotFoundFileInfo:
    """A file that does not exist. ``name`` is the requested subpath."""

    name: str

    def __init__(self, name: str | None) -> None:
        object.__setattr__(self, "name", name or "")

    @property
    def exists(self) -> bool:
        return False

    @property
    def length(self) -> int:
        return -1

    @property
    def last_modified(self) -> datetime | None:
        return None

    @property
    def is_directory(self) -> bool:
        return False

    @property
    def physical_path(self) -> str | None:
        return None

    def open_read(self) -> BinaryIO:
        msg = f"The file {self.name!r} does not exist."
        raise FileNotFoundError(msg)


class NotFoundDirectoryContents:
    """A directory that does not exist. Use ``SINGLETON``."""

    __slots__ = ()

    SINGLETON: ClassVar["NotFoundDirectoryContents"]

    @property
    def exists(self) -> bool:
        return False

    def __iter__(self) -> Iterator[FileInfo]:
        return iter(())

    def __repr__(self) -> str:
        return "NotFoundDirectoryContents()"


NotFoundDirectoryContents.SINGLETON = NotFoundDirectoryContents()


class DirectoryListing:
    """Contents of an existing directory, iterated in name order."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[FileInfo]) -> None:
        self._entries = tuple(sorted(entries, key=lambda entry: entry.name))

    @property
    def exists(self) -> bool:
        return True

    def __iter__(self) -> Iterator[FileInfo]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        names = ", ".join(entry.name for entry in self._entries)
        return f"DirectoryListing([{names}])"


class NullChangeToken:
    """A change token that never changes. Use ``SINGLETON``."""

    __slots__ = ()

    SINGLETON: ClassVar["NullChangeToken"]

    @property
    def has_changed(self) -> bool:
        return False

    @property
    def active_change_callbacks(self) -> bool:
        return False

    def register_change_callback(self, callback: ChangeCallback, state: object = None) -> ChangeRegistration:
        return ChangeRegistration.EMPTY

    def __repr__(self) -> str:
        return "NullChangeToken()"


NullChangeToken.SINGLETON = NullChangeToken()
