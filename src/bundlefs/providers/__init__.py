"""File providers — Protocol-based, no inheritance required.

A provider is any object matching ``bundlefs.protocols.FileProvider``.

Built-in providers:
    CompositeFileProvider -- Several providers presented as one
    EmbeddedFileProvider -- Resources bundled inside a Python package
    FilteredFileProvider -- Restrict a provider to one subtree, with overrides
    PhysicalFileProvider -- A directory on the local filesystem
"""

from bundlefs.providers.composite import CompositeFileProvider
from bundlefs.providers.embedded import EmbeddedFileInfo, EmbeddedFileProvider
from bundlefs.providers.filtered import FilteredFileProvider
from bundlefs.providers.physical import PhysicalFileInfo, PhysicalFileProvider

__all__ = [
    "CompositeFileProvider",
    "EmbeddedFileInfo",
    "EmbeddedFileProvider",
    "FilteredFileProvider",
    "PhysicalFileInfo",
    "PhysicalFileProvider",
]
