"\"\"\"Dependency injection container for compatibility checks.\"\"\""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import CompatibilityValidator
from .loader import ManifestLoader
from .pipeline import CompatibilityPipeline, MetadataReader, OutputWriter
from .registry import RegistryEntry, ViewerRegistry, default_registry


class CompatibilityContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    registry = providers.Singleton(default_registry)

    manifest_loader = providers.Singleton(
        ManifestLoader,
        timeout=config.loader.timeout,
        max_workers=config.loader.max_workers,
    )

    validator = providers.Singleton(CompatibilityValidator)
    metadata_reader = providers.Singleton(MetadataReader)
    writer = providers.Singleton(OutputWriter)

    pipeline = providers.Factory(
        CompatibilityPipeline,
        loader=manifest_loader,
        registry=registry,
        validator=validator,
        metadata_reader=metadata_reader,
        writer=writer,
    )


def create_container(*, settings: dict | None = None) -> CompatibilityContainer:
    """Instantiate container with optional overrides."""

    container = CompatibilityContainer()

    if not settings:
        return container

    loader_settings = settings.get("loader", {}) if isinstance(settings, dict) else {}
    if loader_settings:
        container.config.override({"loader": loader_settings})

    registry_settings = settings.get("registry") if isinstance(settings, dict) else None
    if registry_settings is not None:
        entries = [RegistryEntry(**entry) for entry in registry_settings]
        container.registry.override(providers.Singleton(ViewerRegistry, entries=entries))

    return container
