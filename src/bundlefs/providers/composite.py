"""Several providers presented as one.

Earlier providers win: the first existing file is returned, and in
merged directory listings the first entry with a given name is kept.
"""

from collections.abc import Iterable

from bundlefs.changes import CompositeChangeToken
from bundlefs.protocols import ChangeToken, DirectoryContents, FileInfo, FileProvider
from bundlefs.results import DirectoryListing, NotFoundDirectoryContents, NotFoundFileInfo, NullChangeToken


class CompositeFileProvider:
    """Looks files up in each provider in turn."""

    __slots__ = ("_providers",)

    def __init__(self, *providers: FileProvider | Iterable[FileProvider]) -> None:
        flattened: list[FileProvider] = []
        for provider in providers:
            if isinstance(provider, FileProvider):
                flattened.append(provider)
            else:
                flattened.extend(provider)
        self._providers = tuple(flattened)

    @property
    def providers(self) -> tuple[FileProvider, ...]:
        return self._providers

    def get_file_info(self, subpath: str | None) -> FileInfo:
        for provider in self._providers:
            info = provider.get_file_info(subpath)
            if info is not None and info.exists:
                return info
        return NotFoundFileInfo(subpath)

    def get_directory_contents(self, subpath: str | None) -> DirectoryContents:
        entries: dict[str, FileInfo] = {}
        found = False
        for provider in self._providers:
            contents = provider.get_directory_contents(subpath)
            if contents is None or not contents.exists:
                continue
            found = True
            for entry in contents:
                entries.setdefault(entry.name, entry)
        if not found:
            return NotFoundDirectoryContents.SINGLETON
        return DirectoryListing(entries.values())

    def watch(self, filter: str) -> ChangeToken:
        tokens = [
            token
            for token in (provider.watch(filter) for provider in self._providers)
            if token is not None and token is not NullChangeToken.SINGLETON
        ]
        if not tokens:
            return NullChangeToken.SINGLETON
        if len(tokens) == 1:
            return tokens[0]
        return CompositeChangeToken(tokens)

    def __repr__(self) -> str:
        return f"CompositeFileProvider({', '.join(map(repr, self._providers))})"
