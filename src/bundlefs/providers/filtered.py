"""Path-restricted lookup with optional local overrides.

Wraps a provider over bundled resources so only one subtree of it is
reachable, and lets a second provider (usually a directory on disk)
shadow individual files inside that subtree::

    provider = FilteredFileProvider(
        EmbeddedFileProvider.from_package("myapp.admin"),
        "/admin/static",
        override=PhysicalFileProvider("./public"),
    )

    provider.get_file_info("/admin/static/js/app.js")  # override, else bundled
    provider.get_file_info("/secrets.txt")             # NotFoundFileInfo

Requests outside the subtree are answered with not-found results; none
of the lookups ever raise.
"""

import logging

from bundlefs.errors import EmptyArgumentError, InvalidArgumentError
from bundlefs.protocols import ChangeToken, DirectoryContents, FileInfo, FileProvider
from bundlefs.results import NotFoundDirectoryContents, NotFoundFileInfo

logger = logging.getLogger("bundlefs.providers")


class FilteredFileProvider:
    """A file provider restricted to paths below ``restrict_to_path``.

    Args:
        primary: Provider over the bundled resources to serve.
        restrict_to_path: Path prefix to allow, e.g. ``/parent/child``.
            Leading ``~`` characters are stripped; the result must start
            with ``/`` and cannot be the root directory.
        override: Optional provider consulted first by
            ``get_file_info``. Files that exist there win over the
            primary's copy. Directory listings and watches only ever use
            the primary.

    Raises:
        InvalidArgumentError: ``primary`` or ``restrict_to_path`` is
            missing, or the path is not ``/``-rooted or is ``/`` itself.
        EmptyArgumentError: ``restrict_to_path`` is empty or whitespace.
    """

    __slots__ = ("_override", "_primary", "_restrict_to_path", "_restrict_to_path_folded")

    def __init__(
        self,
        primary: FileProvider,
        restrict_to_path: str,
        override: FileProvider | None = None,
    ) -> None:
        if primary is None:
            raise InvalidArgumentError("primary", "a file provider is required")
        if restrict_to_path is None or not isinstance(restrict_to_path, str):
            raise InvalidArgumentError("restrict_to_path", "a path string is required")
        if not restrict_to_path.strip():
            raise EmptyArgumentError("restrict_to_path")

        normalized = restrict_to_path.lstrip("~")
        if not normalized.startswith("/"):
            raise InvalidArgumentError("restrict_to_path", "must start with a forward slash")
        if len(normalized) <= 1:
            raise InvalidArgumentError("restrict_to_path", "cannot be the root directory")

        self._primary = primary
        self._override = override
        self._restrict_to_path = normalized
        self._restrict_to_path_folded = _fold_case(normalized)
        logger.debug(
            "Restricting %r to %s%s",
            primary,
            normalized,
            " with overrides" if override is not None else "",
        )

    @property
    def restrict_to_path(self) -> str:
        return self._restrict_to_path

    @property
    def primary(self) -> FileProvider:
        return self._primary

    @property
    def override(self) -> FileProvider | None:
        return self._override

    def get_directory_contents(self, subpath: str | None) -> DirectoryContents:
        # Case-sensitive, unlike get_file_info
        if subpath is None or not subpath.startswith(self._restrict_to_path):
            return NotFoundDirectoryContents.SINGLETON
        return self._primary.get_directory_contents(subpath)

    def get_file_info(self, subpath: str | None) -> FileInfo:
        if not subpath or not _fold_case(subpath).startswith(self._restrict_to_path_folded):
            return NotFoundFileInfo(subpath)

        if self._override is not None:
            override_file = self._override.get_file_info(subpath)
            if override_file is not None and override_file.exists:
                return override_file

        return self._primary.get_file_info(subpath)

    def watch(self, filter: str) -> ChangeToken:
        return self._primary.watch(filter)

    def __repr__(self) -> str:
        return f"FilteredFileProvider({self._restrict_to_path!r})"


def _fold_case(text: str) -> str:
    """Uppercase *text* one character at a time.

    Characters whose uppercase form is longer than one character (``ß``)
    are left alone, so ``/straße`` matches ``/STRAßE`` but not
    ``/STRASSE``.
    """
    return "".join(upper if len(upper := char.upper()) == 1 else char for char in text)
