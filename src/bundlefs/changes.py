"""Change tokens for watched files.

``PollingChangeToken`` snapshots matching files when created and
rescans lazily when ``has_changed`` is read, at most once per interval.
Consumers poll it::

    token = provider.watch("**/*.css")
    ...
    if token.has_changed:
        reload_styles()
        token = provider.watch("**/*.css")

Tokens are single-use: once changed they stay changed.
"""

import itertools
import logging
import threading
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import ClassVar, TypeAlias

from bundlefs.protocols import ChangeCallback, ChangeToken

logger = logging.getLogger("bundlefs.changes")

# (mtime_ns, size) per matching file, keyed by path relative to the root
Snapshot: TypeAlias = dict[str, tuple[int, int]]


class ChangeRegistration:
    """Handle returned by ``register_change_callback``.

    Call ``dispose()`` (or leave a ``with`` block) to stop receiving
    the callback. Disposing twice is harmless.
    """

    __slots__ = ("_dispose", "_lock")

    EMPTY: ClassVar["ChangeRegistration"]

    def __init__(self, dispose: Callable[[], None] | None = None) -> None:
        self._dispose = dispose
        self._lock = threading.Lock()

    def dispose(self) -> None:
        with self._lock:
            dispose, self._dispose = self._dispose, None
        if dispose is not None:
            dispose()

    def __enter__(self) -> "ChangeRegistration":
        return self

    def __exit__(self, *args: object) -> None:
        self.dispose()


ChangeRegistration.EMPTY = ChangeRegistration()


class PollingChangeToken:
    """Detects changes to files under *root* matching a glob *pattern*.

    A file counts as changed when it appears, disappears, or its
    modification time or size differs from the snapshot taken at
    construction. Callbacks fire once, from whichever thread first
    observes the change.
    """

    __slots__ = (
        "_callbacks",
        "_changed",
        "_clock",
        "_ids",
        "_interval",
        "_last_poll",
        "_lock",
        "_pattern",
        "_root",
        "_snapshot",
    )

    def __init__(
        self,
        root: str | Path,
        pattern: str,
        *,
        interval: float = 4.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._root = Path(root)
        self._pattern = pattern.lstrip("/")
        self._interval = interval
        self._clock = clock
        self._lock = threading.Lock()
        self._callbacks: dict[int, tuple[ChangeCallback, object]] = {}
        self._ids = itertools.count()
        self._changed = False
        self._snapshot = self._scan()
        self._last_poll = clock()

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def active_change_callbacks(self) -> bool:
        return False

    @property
    def has_changed(self) -> bool:
        with self._lock:
            if self._changed:
                return True
            now = self._clock()
            if now - self._last_poll < self._interval:
                return False
            self._last_poll = now
            if self._scan() == self._snapshot:
                return False
            self._changed = True
            callbacks = list(self._callbacks.values())
            self._callbacks.clear()

        logger.debug("Change detected under %s matching %r", self._root, self._pattern)
        for callback, state in callbacks:
            callback(state)
        return True

    def register_change_callback(self, callback: ChangeCallback, state: object = None) -> ChangeRegistration:
        """Register *callback*; it runs with *state* when a change is observed.

        Registering on a token that has already changed invokes the
        callback immediately.
        """
        with self._lock:
            if not self._changed:
                key_id = next(self._ids)
                self._callbacks[key_id] = (callback, state)
                return ChangeRegistration(lambda: self._unregister(key_id))
        callback(state)
        return ChangeRegistration.EMPTY

    def _unregister(self, key_id: int) -> None:
        with self._lock:
            self._callbacks.pop(key_id, None)

    def _scan(self) -> Snapshot:
        snapshot: Snapshot = {}
        if not self._pattern or not self._root.is_dir():
            return snapshot
        for path in self._root.glob(self._pattern):
            try:
                stat = path.stat()
            except OSError:
                # Removed between glob and stat
                continue
            if path.is_file():
                snapshot[path.relative_to(self._root).as_posix()] = (stat.st_mtime_ns, stat.st_size)
        return snapshot


class CompositeChangeToken:
    """Changed as soon as any of its child tokens has changed."""

    __slots__ = ("_tokens",)

    def __init__(self, tokens: Iterable[ChangeToken]) -> None:
        self._tokens = tuple(tokens)

    @property
    def tokens(self) -> tuple[ChangeToken, ...]:
        return self._tokens

    @property
    def has_changed(self) -> bool:
        return any(token.has_changed for token in self._tokens)

    @property
    def active_change_callbacks(self) -> bool:
        return any(token.active_change_callbacks for token in self._tokens)

    def register_change_callback(self, callback: ChangeCallback, state: object = None) -> ChangeRegistration:
        registrations = [token.register_change_callback(callback, state) for token in self._tokens]

        def dispose_all() -> None:
            for registration in registrations:
                registration.dispose()

        return ChangeRegistration(dispose_all)
