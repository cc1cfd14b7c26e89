"""Tests for bundlefs.results — not-found sentinels, listings, null token."""

import pytest

from bundlefs.changes import ChangeRegistration
from bundlefs.protocols import ChangeToken, DirectoryContents, FileInfo
from bundlefs.results import DirectoryListing, NotFoundDirectoryContents, NotFoundFileInfo, NullChangeToken
from bundlefs.testing import MemoryFileInfo


class TestNotFoundFileInfo:
    def test_fields(self) -> None:
        info = NotFoundFileInfo("/static/a.png")

        assert info.name == "/static/a.png"
        assert info.exists is False
        assert info.length == -1
        assert info.is_directory is False
        assert info.physical_path is None
        assert info.last_modified is None

    def test_none_name_becomes_empty(self) -> None:
        assert NotFoundFileInfo(None).name == ""

    def test_open_read_raises(self) -> None:
        with pytest.raises(FileNotFoundError, match="a.png"):
            NotFoundFileInfo("/static/a.png").open_read()

    def test_frozen(self) -> None:
        info = NotFoundFileInfo("x")
        with pytest.raises(AttributeError):
            info.name = "y"  # type: ignore[misc]

    def test_equality(self) -> None:
        assert NotFoundFileInfo("x") == NotFoundFileInfo("x")

    def test_satisfies_protocol(self) -> None:
        assert isinstance(NotFoundFileInfo("x"), FileInfo)


class TestNotFoundDirectoryContents:
    def test_singleton_is_empty(self) -> None:
        contents = NotFoundDirectoryContents.SINGLETON

        assert contents.exists is False
        assert list(contents) == []

    def test_satisfies_protocol(self) -> None:
        assert isinstance(NotFoundDirectoryContents.SINGLETON, DirectoryContents)


class TestDirectoryListing:
    def test_sorted_by_name(self) -> None:
        listing = DirectoryListing([MemoryFileInfo("b.css"), MemoryFileInfo("a.js"), MemoryFileInfo("c.png")])

        assert listing.exists is True
        assert [entry.name for entry in listing] == ["a.js", "b.css", "c.png"]
        assert len(listing) == 3

    def test_empty_directory_exists(self) -> None:
        listing = DirectoryListing([])
        assert listing.exists is True
        assert list(listing) == []

    def test_repr_lists_names(self) -> None:
        assert repr(DirectoryListing([MemoryFileInfo("a")])) == "DirectoryListing([a])"


class TestNullChangeToken:
    def test_never_changes(self) -> None:
        token = NullChangeToken.SINGLETON

        assert token.has_changed is False
        assert token.active_change_callbacks is False

    def test_registration_is_noop(self) -> None:
        fired: list[object] = []
        registration = NullChangeToken.SINGLETON.register_change_callback(fired.append, "state")

        assert registration is ChangeRegistration.EMPTY
        registration.dispose()
        assert fired == []

    def test_satisfies_protocol(self) -> None:
        assert isinstance(NullChangeToken.SINGLETON, ChangeToken)
