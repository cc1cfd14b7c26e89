"""Tests for bundlefs.providers.embedded — bundled package resources."""

import sys
from datetime import UTC, datetime

import pytest

from bundlefs.errors import EmptyArgumentError, InvalidArgumentError
from bundlefs.providers.embedded import EmbeddedFileInfo, EmbeddedFileProvider
from bundlefs.results import NotFoundDirectoryContents, NotFoundFileInfo, NullChangeToken

STAMP = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def resources(tmp_path):
    """A resource tree laid out like a package's bundled files."""
    root = tmp_path / "bundle"
    static = root / "static"
    (static / "css").mkdir(parents=True)
    (static / "site.js").write_text("init();")
    (static / "css" / "site.css").write_text("body { margin: 0; }")
    (root / "readme.txt").write_text("hello")
    return root


@pytest.fixture
def provider(resources) -> EmbeddedFileProvider:
    return EmbeddedFileProvider(resources, last_modified=STAMP)


@pytest.fixture
def package(tmp_path, monkeypatch):
    """An importable package with bundled static files."""
    pkg = tmp_path / "site" / "bundled_assets_pkg"
    (pkg / "static" / "img").mkdir(parents=True)
    (pkg / "__init__.py").write_text("")
    (pkg / "static" / "app.css").write_text("h1 {}")
    (pkg / "static" / "img" / "logo.svg").write_text("<svg/>")
    monkeypatch.syspath_prepend(str(tmp_path / "site"))
    monkeypatch.delitem(sys.modules, "bundled_assets_pkg", raising=False)
    return "bundled_assets_pkg"


class TestFileInfo:
    def test_finds_file(self, provider) -> None:
        info = provider.get_file_info("/static/css/site.css")

        assert isinstance(info, EmbeddedFileInfo)
        assert info.exists
        assert info.name == "site.css"
        assert info.length == len("body { margin: 0; }")
        assert info.is_directory is False
        assert info.last_modified == STAMP

    def test_reads_content(self, provider) -> None:
        with provider.get_file_info("/static/site.js").open_read() as stream:
            assert stream.read() == b"init();"

    def test_leading_slash_optional(self, provider) -> None:
        assert provider.get_file_info("readme.txt").exists
        assert provider.get_file_info("/readme.txt").exists

    def test_redundant_segments_skipped(self, provider) -> None:
        assert provider.get_file_info("/static//./css/site.css").exists

    def test_missing_file(self, provider) -> None:
        info = provider.get_file_info("/static/nope.css")

        assert isinstance(info, NotFoundFileInfo)
        assert info.name == "/static/nope.css"

    def test_directory_is_not_a_file(self, provider) -> None:
        assert not provider.get_file_info("/static/css").exists

    @pytest.mark.parametrize("subpath", [None, "", "/"])
    def test_root_is_not_a_file(self, provider, subpath) -> None:
        assert not provider.get_file_info(subpath).exists

    @pytest.mark.parametrize("subpath", ["/static/../readme.txt", "/../bundle/readme.txt", "\\readme.txt"])
    def test_escaping_paths_not_found(self, provider, subpath: str) -> None:
        assert not provider.get_file_info(subpath).exists

    def test_default_last_modified_is_creation_time(self, resources) -> None:
        before = datetime.now(UTC)
        provider = EmbeddedFileProvider(resources)
        after = datetime.now(UTC)

        stamp = provider.get_file_info("/readme.txt").last_modified
        assert before <= stamp <= after

    def test_physical_path_for_directory_roots(self, provider, resources) -> None:
        info = provider.get_file_info("/readme.txt")
        assert info.physical_path == str(resources / "readme.txt")


class TestDirectoryContents:
    def test_lists_children(self, provider) -> None:
        contents = provider.get_directory_contents("/static")

        assert contents.exists
        entries = {entry.name: entry for entry in contents}
        assert sorted(entries) == ["css", "site.js"]
        assert entries["css"].is_directory
        assert entries["css"].length == -1
        assert not entries["site.js"].is_directory

    @pytest.mark.parametrize("subpath", [None, "", "/"])
    def test_root_listing(self, provider, subpath) -> None:
        names = [entry.name for entry in provider.get_directory_contents(subpath)]
        assert names == ["readme.txt", "static"]

    def test_missing_directory(self, provider) -> None:
        assert provider.get_directory_contents("/nope") is NotFoundDirectoryContents.SINGLETON

    def test_file_is_not_a_directory(self, provider) -> None:
        assert provider.get_directory_contents("/readme.txt") is NotFoundDirectoryContents.SINGLETON

    def test_escaping_path(self, provider) -> None:
        assert provider.get_directory_contents("/static/..") is NotFoundDirectoryContents.SINGLETON

    def test_directory_entry_cannot_be_opened(self, provider) -> None:
        css = next(entry for entry in provider.get_directory_contents("/static") if entry.name == "css")
        with pytest.raises(IsADirectoryError):
            css.open_read()


class TestWatch:
    def test_always_null_token(self, provider) -> None:
        assert provider.watch("**/*") is NullChangeToken.SINGLETON


class TestFromPackage:
    def test_package_root(self, package) -> None:
        provider = EmbeddedFileProvider.from_package(package)

        info = provider.get_file_info("/static/app.css")
        assert info.exists
        with info.open_read() as stream:
            assert stream.read() == b"h1 {}"

    def test_subdirectory(self, package) -> None:
        provider = EmbeddedFileProvider.from_package(package, "static")

        assert provider.get_file_info("/img/logo.svg").exists
        assert not provider.get_file_info("/static/app.css").exists

    def test_missing_subdirectory(self, package) -> None:
        with pytest.raises(InvalidArgumentError, match="not a directory"):
            EmbeddedFileProvider.from_package(package, "nope")

    def test_escaping_subdirectory(self, package) -> None:
        with pytest.raises(InvalidArgumentError, match="escapes"):
            EmbeddedFileProvider.from_package(package, "../elsewhere")

    @pytest.mark.parametrize("name", ["", "  "])
    def test_empty_package_name(self, name: str) -> None:
        with pytest.raises(EmptyArgumentError):
            EmbeddedFileProvider.from_package(name)

    def test_missing_package(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            EmbeddedFileProvider.from_package("no_such_bundlefs_package")

    def test_missing_root(self) -> None:
        with pytest.raises(InvalidArgumentError):
            EmbeddedFileProvider(None)  # type: ignore[arg-type]
