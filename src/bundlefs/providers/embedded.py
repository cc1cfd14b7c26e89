"""Lookup over resources bundled inside a Python package.

Resources are reached through ``importlib.resources`` traversables, so
the same provider works for packages installed as plain directories,
zip files, or anything else with a resource reader::

    provider = EmbeddedFileProvider.from_package("myapp", "static")
    info = provider.get_file_info("/css/site.css")
"""

import logging
from datetime import UTC, datetime
from importlib.resources import files
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import BinaryIO

from bundlefs.errors import EmptyArgumentError, InvalidArgumentError
from bundlefs.protocols import DirectoryContents, FileInfo
from bundlefs.providers._paths import split_subpath
from bundlefs.results import DirectoryListing, NotFoundDirectoryContents, NotFoundFileInfo, NullChangeToken

logger = logging.getLogger("bundlefs.providers")


class EmbeddedFileInfo:
    """A bundled resource or resource directory.

    Bundled files carry no trustworthy timestamps; ``last_modified`` is
    whatever the owning provider was given (its creation time by default).
    """

    __slots__ = ("_is_directory", "_last_modified", "_length", "_resource")

    def __init__(self, resource: Traversable, last_modified: datetime) -> None:
        self._resource = resource
        self._last_modified = last_modified
        self._is_directory = resource.is_dir()
        self._length: int | None = None

    @property
    def exists(self) -> bool:
        return True

    @property
    def name(self) -> str:
        return self._resource.name

    @property
    def length(self) -> int:
        if self._is_directory:
            return -1
        if self._length is None:
            self._length = len(self._resource.read_bytes())
        return self._length

    @property
    def last_modified(self) -> datetime:
        return self._last_modified

    @property
    def is_directory(self) -> bool:
        return self._is_directory

    @property
    def physical_path(self) -> str | None:
        # Only resources extracted to a plain directory have a real path
        if isinstance(self._resource, Path):
            return str(self._resource)
        return None

    def open_read(self) -> BinaryIO:
        if self._is_directory:
            msg = f"{self.name!r} is a directory."
            raise IsADirectoryError(msg)
        return self._resource.open("rb")

    def __repr__(self) -> str:
        kind = "dir" if self._is_directory else "file"
        return f"EmbeddedFileInfo({self.name!r}, {kind})"


class EmbeddedFileProvider:
    """Read-only lookup over a package's bundled resources.

    Subpaths are ``/``-separated and relative to *root*; a leading ``/``
    is optional. Directories are only visible through
    ``get_directory_contents``; ``get_file_info`` reports them as
    not found. ``watch`` always returns the null token.
    """

    __slots__ = ("_last_modified", "_root")

    def __init__(self, root: Traversable, *, last_modified: datetime | None = None) -> None:
        if root is None:
            raise InvalidArgumentError("root", "a resource root is required")
        self._root = root
        self._last_modified = last_modified or datetime.now(UTC)

    @classmethod
    def from_package(
        cls,
        package: str,
        subdirectory: str = "",
        *,
        last_modified: datetime | None = None,
    ) -> "EmbeddedFileProvider":
        """Build a provider over *package*'s resources, optionally below *subdirectory*."""
        if package is None:
            raise InvalidArgumentError("package", "a package name is required")
        if not package.strip():
            raise EmptyArgumentError("package")

        root = files(package)
        parts = split_subpath(subdirectory)
        if parts is None:
            raise InvalidArgumentError("subdirectory", f"{subdirectory!r} escapes the package")
        if parts:
            root = root.joinpath(*parts)
            if not root.is_dir():
                raise InvalidArgumentError("subdirectory", f"{package}/{subdirectory} is not a directory")

        logger.debug("Embedded resources for %s rooted at %s", package, root)
        return cls(root, last_modified=last_modified)

    @property
    def root(self) -> Traversable:
        return self._root

    def get_file_info(self, subpath: str | None) -> FileInfo:
        resource = self._resolve(subpath)
        if resource is None or not resource.is_file():
            return NotFoundFileInfo(subpath)
        return EmbeddedFileInfo(resource, self._last_modified)

    def get_directory_contents(self, subpath: str | None) -> DirectoryContents:
        resource = self._resolve(subpath)
        if resource is None or not resource.is_dir():
            return NotFoundDirectoryContents.SINGLETON
        return DirectoryListing(EmbeddedFileInfo(child, self._last_modified) for child in resource.iterdir())

    def watch(self, filter: str) -> NullChangeToken:
        return NullChangeToken.SINGLETON

    def _resolve(self, subpath: str | None) -> Traversable | None:
        parts = split_subpath(subpath)
        if parts is None:
            return None
        if not parts:
            return self._root
        resource = self._root.joinpath(*parts)
        return resource if resource.is_file() or resource.is_dir() else None
