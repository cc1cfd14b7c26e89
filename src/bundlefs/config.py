"""Resource serving configuration.

ResourceFilesConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ResourceFilesConfig:
    """Configuration for serving bundled resources. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ResourceFilesConfig(override_dir="./public", cache_control="no-cache")
    """

    # Mount point of the static endpoint
    url_prefix: str = "/"

    # Overrides
    allow_overrides: bool = True
    override_dir: str | Path | None = None  # Local files here shadow bundled ones
    exclude_dot_prefixed: bool = True

    # Change detection
    poll_interval: float = 4.0  # Seconds between rescans of watched files

    # Responses
    cache_control: str = "public, max-age=3600"
    index: str = "index.html"

    @property
    def overrides_enabled(self) -> bool:
        return self.allow_overrides and self.override_dir is not None
