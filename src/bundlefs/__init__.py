"""bundlefs — Serve resources bundled in Python packages, with local overrides.

Expose one subtree of a package's bundled resources, let files on disk
shadow individual resources, and serve the result over ASGI.

Basic usage::

    from bundlefs import (
        EmbeddedFileProvider,
        FilteredFileProvider,
        PhysicalFileProvider,
        StaticResources,
    )

    provider = FilteredFileProvider(
        EmbeddedFileProvider.from_package("myapp"),
        "/static",
        override=PhysicalFileProvider("./public"),
    )
    app = StaticResources(provider)

Route registrations::

    from bundlefs import EmbeddedResourcePath, ResourceFilesConfig, StaticResources

    class AdminResources:
        def get_embedded_resource_paths(self):
            yield EmbeddedResourcePath("myapp.admin", "/admin/static")

    app = StaticResources.from_registrations(
        [AdminResources()],
        ResourceFilesConfig(override_dir="./public"),
    )
"""

__version__ = "0.1.0-dev"
__all__ = [
    "BundleFSError",
    "ChangeToken",
    "CompositeChangeToken",
    "CompositeFileProvider",
    "ConfigurationError",
    "DirectoryContents",
    "EmbeddedFileProvider",
    "EmbeddedResourcePath",
    "EmbeddedResourceRouteRegistration",
    "EmptyArgumentError",
    "FileInfo",
    "FileProvider",
    "FilteredFileProvider",
    "InvalidArgumentError",
    "NotFoundDirectoryContents",
    "NotFoundFileInfo",
    "NullChangeToken",
    "PhysicalFileProvider",
    "PollingChangeToken",
    "ResourceFilesConfig",
    "StaticResources",
    "build_resource_provider",
]

# Public name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "BundleFSError": "bundlefs.errors",
    "ConfigurationError": "bundlefs.errors",
    "EmptyArgumentError": "bundlefs.errors",
    "InvalidArgumentError": "bundlefs.errors",
    "ChangeToken": "bundlefs.protocols",
    "DirectoryContents": "bundlefs.protocols",
    "FileInfo": "bundlefs.protocols",
    "FileProvider": "bundlefs.protocols",
    "NotFoundDirectoryContents": "bundlefs.results",
    "NotFoundFileInfo": "bundlefs.results",
    "NullChangeToken": "bundlefs.results",
    "CompositeChangeToken": "bundlefs.changes",
    "PollingChangeToken": "bundlefs.changes",
    "CompositeFileProvider": "bundlefs.providers.composite",
    "EmbeddedFileProvider": "bundlefs.providers.embedded",
    "FilteredFileProvider": "bundlefs.providers.filtered",
    "PhysicalFileProvider": "bundlefs.providers.physical",
    "ResourceFilesConfig": "bundlefs.config",
    "EmbeddedResourcePath": "bundlefs.registration",
    "EmbeddedResourceRouteRegistration": "bundlefs.registration",
    "build_resource_provider": "bundlefs.registration",
    "StaticResources": "bundlefs.static",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import bundlefs`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
