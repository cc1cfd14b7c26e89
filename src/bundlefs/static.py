"""ASGI endpoint serving files from a file provider.

Serves GET and HEAD requests under a URL prefix from any
``FileProvider``: bundled resources, a local directory, or a
filtered/composite stack of them. Requests the provider cannot answer
fall through to an optional fallback ASGI app, or get a plain 404.
"""

import email.utils
import logging
import mimetypes
from collections.abc import Iterable

from anyio import to_thread

from bundlefs._internal.asgi import ASGIApp, HTTPScope, Receive, Scope, Send
from bundlefs.config import ResourceFilesConfig
from bundlefs.protocols import FileInfo, FileProvider
from bundlefs.registration import EmbeddedResourceRouteRegistration, build_resource_provider

logger = logging.getLogger("bundlefs.static")

_ALLOWED_METHODS = ("GET", "HEAD")


class StaticResources:
    """ASGI app that serves files looked up in a provider.

    Usage::

        provider = build_resource_provider(registrations, config)
        app = StaticResources(provider, prefix="/", fallback=main_app)

        # Or straight from registrations
        app = StaticResources.from_registrations(registrations, config, fallback=main_app)

    The request path with the prefix removed, still ``/``-rooted, is
    the provider subpath. Paths ending in ``/`` look up the index file.
    """

    __slots__ = ("_cache_control", "_fallback", "_index", "_prefix", "_provider")

    def __init__(
        self,
        provider: FileProvider,
        *,
        prefix: str = "/",
        fallback: ASGIApp | None = None,
        cache_control: str = "public, max-age=3600",
        index: str = "index.html",
    ) -> None:
        self._provider = provider
        self._fallback = fallback
        self._cache_control = cache_control
        self._index = index

        # Normalize prefix: ensure leading slash, strip trailing.
        # Root prefix "/" normalizes to "" (serve everything).
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    @classmethod
    def from_registrations(
        cls,
        registrations: Iterable[EmbeddedResourceRouteRegistration],
        config: ResourceFilesConfig | None = None,
        *,
        fallback: ASGIApp | None = None,
    ) -> "StaticResources":
        """Build the provider stack for *registrations* and serve it."""
        config = config or ResourceFilesConfig()
        return cls(
            build_resource_provider(registrations, config),
            prefix=config.url_prefix,
            fallback=fallback,
            cache_control=config.cache_control,
            index=config.index,
        )

    @property
    def provider(self) -> FileProvider:
        return self._provider

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self._fall_through(scope, receive, send)
            return

        request = HTTPScope.from_scope(scope)
        subpath = self._subpath(request.path)
        if subpath is None:
            await self._fall_through(scope, receive, send)
            return

        if request.method not in _ALLOWED_METHODS:
            await _send_plain(
                send,
                405,
                "Method Not Allowed",
                [(b"allow", ", ".join(_ALLOWED_METHODS).encode("latin-1"))],
            )
            return

        if subpath.endswith("/"):
            subpath += self._index

        info = self._provider.get_file_info(subpath)
        if not info.exists or info.is_directory:
            logger.debug("No resource for %s, falling through", subpath)
            await self._fall_through(scope, receive, send)
            return

        await self._serve_file(request, info, send)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _subpath(self, path: str) -> str | None:
        """Strip the prefix from *path*, or ``None`` when it does not match."""
        if not self._prefix:
            return path or "/"
        if path == self._prefix:
            return "/"
        if not path.startswith(self._prefix + "/"):
            return None
        return path[len(self._prefix) :]

    async def _serve_file(self, request: HTTPScope, info: FileInfo, send: Send) -> None:
        """Send a file, or a 304 when the client's ETag still matches."""
        content_type, _ = mimetypes.guess_type(info.name)
        if content_type is None:
            content_type = "application/octet-stream"

        headers: list[tuple[bytes, bytes]] = [
            (b"content-type", content_type.encode("latin-1")),
            (b"cache-control", self._cache_control.encode("latin-1")),
        ]

        etag = _etag(info)
        if info.last_modified is not None:
            last_modified = email.utils.format_datetime(info.last_modified, usegmt=True)
            headers.append((b"last-modified", last_modified.encode("latin-1")))
        if etag is not None:
            headers.append((b"etag", etag.encode("latin-1")))
            if _etag_matches(request.header("if-none-match"), etag):
                await _send_response(send, 304, headers, b"")
                return

        if request.method == "HEAD" and info.length >= 0:
            headers.append((b"content-length", str(info.length).encode("latin-1")))
            await _send_response(send, 200, headers, b"")
            return

        body = await to_thread.run_sync(_read_all, info)
        headers.append((b"content-length", str(len(body)).encode("latin-1")))
        logger.debug("Serving %s (%d bytes)", info.name, len(body))
        await _send_response(send, 200, headers, b"" if request.method == "HEAD" else body)

    async def _fall_through(self, scope: Scope, receive: Receive, send: Send) -> None:
        if self._fallback is not None:
            await self._fallback(scope, receive, send)
            return
        if scope["type"] != "http":
            # Nothing to answer a websocket or lifespan scope with
            msg = f"StaticResources cannot handle {scope['type']!r} scopes without a fallback."
            raise RuntimeError(msg)
        await _send_plain(send, 404, "Not Found")


def _read_all(info: FileInfo) -> bytes:
    with info.open_read() as stream:
        return stream.read()


def _etag(info: FileInfo) -> str | None:
    if info.last_modified is None:
        return None
    return f'W/"{int(info.last_modified.timestamp()):x}-{info.length:x}"'


def _etag_matches(header: str | None, etag: str) -> bool:
    if not header:
        return False
    if header.strip() == "*":
        return True
    # Weak comparison: W/ prefixes are ignored
    wanted = etag.removeprefix("W/")
    return any(candidate.strip().removeprefix("W/") == wanted for candidate in header.split(","))


async def _send_response(send: Send, status: int, headers: list[tuple[bytes, bytes]], body: bytes) -> None:
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body})


async def _send_plain(send: Send, status: int, text: str, headers: Iterable[tuple[bytes, bytes]] = ()) -> None:
    body = text.encode("utf-8")
    await _send_response(
        send,
        status,
        [
            *headers,
            (b"content-type", b"text/plain; charset=utf-8"),
            (b"content-length", str(len(body)).encode("latin-1")),
        ],
        body,
    )
