"""bundlefs exception hierarchy.

Raised only while building providers and endpoints. Lookups never
raise for a missing file or an out-of-scope path; they return a
not-found result instead.
"""


class BundleFSError(Exception):
    """Base for all bundlefs-specific errors."""


class InvalidArgumentError(BundleFSError, ValueError):
    """Raised when a constructor argument is missing or malformed.

    ``argument`` names the offending parameter so callers wiring many
    providers together can tell which one was rejected.
    """

    def __init__(self, argument: str, detail: str = "") -> None:
        self.argument = argument
        self.detail = detail
        super().__init__(f"{argument}: {detail}" if detail else argument)


class EmptyArgumentError(InvalidArgumentError):
    """Raised when a string argument is present but empty or whitespace."""

    def __init__(self, argument: str) -> None:
        super().__init__(argument, "cannot be empty or whitespace")


class ConfigurationError(BundleFSError):
    """Raised when resource routes or configuration are invalid.

    Typically raised by ``build_resource_provider()`` at startup.
    """
