"""Route registration for bundled resources.

Packages declare which of their resource paths are public by providing
a registration — any object with ``get_embedded_resource_paths()``::

    class AdminResources:
        def get_embedded_resource_paths(self):
            yield EmbeddedResourcePath("myapp.admin", "/admin/static")

    provider = build_resource_provider([AdminResources()], ResourceFilesConfig())

Each path becomes a ``FilteredFileProvider`` over the package's
resources, layered under the configured override directory, and all
of them are combined into one provider.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from bundlefs.config import ResourceFilesConfig
from bundlefs.errors import ConfigurationError, InvalidArgumentError
from bundlefs.protocols import FileProvider
from bundlefs.providers.composite import CompositeFileProvider
from bundlefs.providers.embedded import EmbeddedFileProvider
from bundlefs.providers.filtered import FilteredFileProvider
from bundlefs.providers.physical import PhysicalFileProvider

logger = logging.getLogger("bundlefs.registration")


@dataclass(frozen=True, slots=True)
class EmbeddedResourcePath:
    """A public path inside a package's bundled resources.

    ``path`` is both the URL-side restriction and the resource path:
    ``/admin/static`` exposes ``<package>/<subdirectory>/admin/static``.
    """

    package: str
    path: str
    subdirectory: str = ""


@runtime_checkable
class EmbeddedResourceRouteRegistration(Protocol):
    """Declares the resource paths a package makes public."""

    def get_embedded_resource_paths(self) -> Iterable[EmbeddedResourcePath]: ...


def build_resource_provider(
    registrations: Iterable[EmbeddedResourceRouteRegistration],
    config: ResourceFilesConfig | None = None,
) -> CompositeFileProvider:
    """Combine every registered path into one provider.

    Providers are composed in registration order. One
    ``EmbeddedFileProvider`` is shared per package and subdirectory, and
    one ``PhysicalFileProvider`` over ``config.override_dir`` is shared
    by every path when overrides are enabled.

    Raises:
        ConfigurationError: Nothing was registered, a path was registered
            for two different packages, or a path is not a valid
            restriction path.
    """
    config = config or ResourceFilesConfig()
    override = _build_override(config)

    embedded: dict[tuple[str, str], EmbeddedFileProvider] = {}
    owners: dict[str, EmbeddedResourcePath] = {}
    filtered: list[FileProvider] = []

    for registration in registrations:
        for resource_path in registration.get_embedded_resource_paths():
            existing = owners.get(resource_path.path)
            if existing == resource_path:
                logger.debug("Skipping duplicate resource path %s (%s)", resource_path.path, resource_path.package)
                continue
            if existing is not None:
                msg = (
                    f"Resource path {resource_path.path!r} is registered by both "
                    f"{existing.package!r} and {resource_path.package!r}."
                )
                raise ConfigurationError(msg)

            key = (resource_path.package, resource_path.subdirectory)
            if key not in embedded:
                embedded[key] = _build_embedded(resource_path)

            try:
                provider = FilteredFileProvider(embedded[key], resource_path.path, override)
            except InvalidArgumentError as exc:
                msg = f"Invalid resource path {resource_path.path!r} for {resource_path.package!r}: {exc}"
                raise ConfigurationError(msg) from exc

            owners[resource_path.path] = resource_path
            filtered.append(provider)
            logger.debug("Registered resource path %s from %s", provider.restrict_to_path, resource_path.package)

    if not filtered:
        msg = "No embedded resource paths were registered."
        raise ConfigurationError(msg)

    return CompositeFileProvider(filtered)


def _build_override(config: ResourceFilesConfig) -> PhysicalFileProvider | None:
    if not config.overrides_enabled:
        return None
    try:
        return PhysicalFileProvider(
            config.override_dir,  # type: ignore[arg-type]
            exclude_dot_prefixed=config.exclude_dot_prefixed,
            poll_interval=config.poll_interval,
        )
    except InvalidArgumentError as exc:
        msg = f"Override directory {config.override_dir!r} is not usable: {exc}"
        raise ConfigurationError(msg) from exc


def _build_embedded(resource_path: EmbeddedResourcePath) -> EmbeddedFileProvider:
    try:
        return EmbeddedFileProvider.from_package(resource_path.package, resource_path.subdirectory)
    except (InvalidArgumentError, ModuleNotFoundError) as exc:
        msg = f"Cannot load resources from package {resource_path.package!r}: {exc}"
        raise ConfigurationError(msg) from exc
