"""Test helpers for code built on bundlefs.

``MemoryFileProvider`` is an in-memory provider that records every
lookup, so tests can assert which collaborators were consulted.
``ASGITestClient`` drives an ASGI app directly, with no HTTP involved::

    provider = MemoryFileProvider({"/static/site.css": "body {}"})
    client = ASGITestClient(StaticResources(provider))
    response = await client.get("/static/site.css")
    assert response.status == 200
"""

import io
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, BinaryIO

from bundlefs._internal.asgi import ASGIApp
from bundlefs.protocols import ChangeToken, DirectoryContents, FileInfo
from bundlefs.providers._paths import split_subpath
from bundlefs.results import DirectoryListing, NotFoundDirectoryContents, NotFoundFileInfo, NullChangeToken


@dataclass(frozen=True, slots=True)
class MemoryFileInfo:
    """A file (or directory) held in memory."""

    name: str
    content: bytes = b""
    last_modified: datetime | None = None
    is_directory: bool = False

    @property
    def exists(self) -> bool:
        return True

    @property
    def length(self) -> int:
        return -1 if self.is_directory else len(self.content)

    @property
    def physical_path(self) -> str | None:
        return None

    def open_read(self) -> BinaryIO:
        if self.is_directory:
            msg = f"{self.name!r} is a directory."
            raise IsADirectoryError(msg)
        return io.BytesIO(self.content)


class MemoryFileProvider:
    """In-memory provider keyed by ``/``-rooted paths.

    Every call is appended to ``calls`` as ``(operation, argument)``.
    ``watch`` returns *token* (the null token by default) so tests can
    check which provider's token comes back.
    """

    def __init__(
        self,
        files: Mapping[str, bytes | str] | None = None,
        *,
        token: ChangeToken | None = None,
        last_modified: datetime | None = None,
    ) -> None:
        self.token: ChangeToken = token if token is not None else NullChangeToken.SINGLETON
        self.last_modified = last_modified or datetime(2024, 1, 1, tzinfo=UTC)
        self.calls: list[tuple[str, str | None]] = []
        self._files: dict[tuple[str, ...], bytes] = {}
        for path, content in (files or {}).items():
            parts = split_subpath(path)
            if not parts:
                msg = f"Invalid file path {path!r}"
                raise ValueError(msg)
            self._files[parts] = content.encode("utf-8") if isinstance(content, str) else content

    def get_file_info(self, subpath: str | None) -> FileInfo:
        self.calls.append(("get_file_info", subpath))
        parts = split_subpath(subpath)
        if not parts or parts not in self._files:
            return NotFoundFileInfo(subpath)
        return MemoryFileInfo(parts[-1], self._files[parts], self.last_modified)

    def get_directory_contents(self, subpath: str | None) -> DirectoryContents:
        self.calls.append(("get_directory_contents", subpath))
        parts = split_subpath(subpath)
        if parts is None:
            return NotFoundDirectoryContents.SINGLETON

        depth = len(parts)
        entries: dict[str, MemoryFileInfo] = {}
        for path, content in self._files.items():
            if len(path) <= depth or path[:depth] != parts:
                continue
            name = path[depth]
            if len(path) == depth + 1:
                entries[name] = MemoryFileInfo(name, content, self.last_modified)
            else:
                entries.setdefault(name, MemoryFileInfo(name, is_directory=True))

        if not entries:
            return NotFoundDirectoryContents.SINGLETON
        return DirectoryListing(entries.values())

    def watch(self, filter: str) -> ChangeToken:
        self.calls.append(("watch", filter))
        return self.token


@dataclass(slots=True)
class TestResponse:
    """Status, headers and body captured from an ASGI app."""

    __test__ = False

    status: int = 0
    headers: list[tuple[bytes, bytes]] = field(default_factory=list)
    body: bytes = b""

    def header(self, name: str) -> str | None:
        key = name.lower().encode("latin-1")
        for raw_name, value in self.headers:
            if raw_name.lower() == key:
                return value.decode("latin-1")
        return None

    @property
    def content_type(self) -> str:
        return self.header("content-type") or ""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")


class ASGITestClient:
    """Async test client that calls an ASGI app in-process."""

    __slots__ = ("app",)

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> TestResponse:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> TestResponse:
        """Send a HEAD request."""
        return await self.request("HEAD", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
    ) -> TestResponse:
        """Send a request and collect the complete response."""
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        raw_headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in (headers or {}).items()
        ]
        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method,
            "path": path_part,
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return {"type": "http.disconnect"}

        response = TestResponse()
        chunks: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                response.status = message["status"]
                response.headers.extend(message.get("headers", []))
            elif message["type"] == "http.response.body":
                chunks.append(message.get("body", b""))

        await self.app(scope, receive, send)
        response.body = b"".join(chunks)
        return response
