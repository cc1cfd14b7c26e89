"""Lookup over a directory on the local filesystem.

Used as the override layer: deployers drop files into a directory and
they shadow the bundled copies. Paths are resolved (symlinks included)
and must stay inside the root, so a request can never read outside it.
"""

import logging
import os
import stat
from datetime import UTC, datetime
from pathlib import Path
from typing import BinaryIO

from bundlefs.changes import PollingChangeToken
from bundlefs.errors import InvalidArgumentError
from bundlefs.protocols import ChangeToken, DirectoryContents, FileInfo
from bundlefs.providers._paths import split_subpath
from bundlefs.results import DirectoryListing, NotFoundDirectoryContents, NotFoundFileInfo, NullChangeToken

logger = logging.getLogger("bundlefs.providers")


class PhysicalFileInfo:
    """A file or directory on disk, described by one ``stat()`` call."""

    __slots__ = ("_path", "_stat")

    def __init__(self, path: Path, stat_result: os.stat_result | None = None) -> None:
        self._path = path
        self._stat = stat_result if stat_result is not None else path.stat()

    @property
    def exists(self) -> bool:
        return True

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def length(self) -> int:
        return -1 if self.is_directory else self._stat.st_size

    @property
    def last_modified(self) -> datetime:
        return datetime.fromtimestamp(self._stat.st_mtime, UTC)

    @property
    def is_directory(self) -> bool:
        return stat.S_ISDIR(self._stat.st_mode)

    @property
    def physical_path(self) -> str:
        return str(self._path)

    def open_read(self) -> BinaryIO:
        if self.is_directory:
            msg = f"{self.name!r} is a directory."
            raise IsADirectoryError(msg)
        return self._path.open("rb")

    def __repr__(self) -> str:
        return f"PhysicalFileInfo({str(self._path)!r})"


class PhysicalFileProvider:
    """Read-only lookup rooted at a local directory.

    Usage::

        overrides = PhysicalFileProvider("./public")
        info = overrides.get_file_info("/static/site.css")

    With ``exclude_dot_prefixed`` (the default), any path segment that
    starts with ``.`` is treated as missing and hidden from listings.
    """

    __slots__ = ("_exclude_dot_prefixed", "_poll_interval", "_root")

    def __init__(
        self,
        root: str | Path,
        *,
        exclude_dot_prefixed: bool = True,
        poll_interval: float = 4.0,
    ) -> None:
        if root is None:
            raise InvalidArgumentError("root", "a directory is required")
        resolved = Path(root).resolve()
        if not resolved.is_dir():
            raise InvalidArgumentError("root", f"{resolved} is not an existing directory")
        self._root = resolved
        self._exclude_dot_prefixed = exclude_dot_prefixed
        self._poll_interval = poll_interval
        logger.debug("Physical files rooted at %s", resolved)

    @property
    def root(self) -> Path:
        return self._root

    def get_file_info(self, subpath: str | None) -> FileInfo:
        path = self._resolve(subpath)
        if path is None:
            return NotFoundFileInfo(subpath)
        try:
            if not path.is_file():
                return NotFoundFileInfo(subpath)
            return PhysicalFileInfo(path)
        except OSError:
            return NotFoundFileInfo(subpath)

    def get_directory_contents(self, subpath: str | None) -> DirectoryContents:
        path = self._resolve(subpath)
        if path is None:
            return NotFoundDirectoryContents.SINGLETON
        try:
            if not path.is_dir():
                return NotFoundDirectoryContents.SINGLETON
            children = list(path.iterdir())
        except OSError:
            return NotFoundDirectoryContents.SINGLETON
        entries = []
        for child in children:
            if self._is_excluded(child.name):
                continue
            try:
                if not child.resolve().is_relative_to(self._root):
                    continue
                entries.append(PhysicalFileInfo(child))
            except (OSError, RuntimeError):
                # Broken or looping symlink, or entry removed while listing
                continue
        return DirectoryListing(entries)

    def watch(self, filter: str) -> ChangeToken:
        """Watch files matching a glob *filter* relative to the root.

        Leading slashes are ignored. Filters that are then empty, contain
        backslashes, or climb above the root with ``..`` get the null
        token.
        """
        pattern = (filter or "").lstrip("/")
        if not pattern or "\\" in pattern or ".." in pattern.split("/"):
            return NullChangeToken.SINGLETON
        return PollingChangeToken(self._root, pattern, interval=self._poll_interval)

    def _is_excluded(self, name: str) -> bool:
        return self._exclude_dot_prefixed and name.startswith(".")

    def _resolve(self, subpath: str | None) -> Path | None:
        parts = split_subpath(subpath)
        if parts is None or any(self._is_excluded(part) for part in parts):
            return None
        try:
            path = self._root.joinpath(*parts).resolve()
        except (OSError, RuntimeError):
            # Symlink loop (RuntimeError before 3.13) or unusable path
            return None
        if not path.is_relative_to(self._root):
            return None
        return path
