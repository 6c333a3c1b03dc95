"\"\"\"Compatibility check assembly and execution.\"\"\""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

import pendulum
import structlog

from .core import CompatibilityValidator, ValidationResult, resolve_dataset_version
from .launch import build_launch_url
from .loader import ManifestLoader, ManifestLoadResult
from .metadata import load_metadata, load_metadata_file
from .registry import ViewerRegistry
from .schemas import OmeZarrMetadata, ViewerManifest
from . import __version__


class MetadataReader:
    """Read dataset metadata from a local store or a normalized JSON file."""

    def read(self, path: Path) -> OmeZarrMetadata:
        if path.is_dir():
            return load_metadata(path)
        return load_metadata_file(path)


class OutputWriter:
    """Persist compatibility reports."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


class CompatibilityPipeline:
    """End-to-end viewer compatibility check for one dataset."""

    def __init__(
        self,
        *,
        loader: ManifestLoader,
        registry: ViewerRegistry,
        validator: CompatibilityValidator | None = None,
        metadata_reader: MetadataReader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._loader = loader
        self._registry = registry
        self._validator = validator or CompatibilityValidator()
        self._metadata = metadata_reader or MetadataReader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        *,
        dataset: Path,
        sources: Sequence[str | Path] | None = None,
        data_url: str | None = None,
        output_path: Path | None = None,
        include_incompatible: bool = False,
    ) -> dict[str, Any]:
        metadata = self._metadata.read(dataset)
        loaded = self._load_manifests(sources)

        results: list[dict[str, Any]] = []
        for manifest in loaded.manifests:
            validation = self._validator.validate(manifest, metadata)
            if validation.compatible or include_incompatible:
                results.append(self._serialize(manifest, validation, data_url))
            self._logger.info(
                "compatibility.result",
                viewer=manifest.name,
                compatible=validation.compatible,
                errors=[error.capability for error in validation.errors],
                warnings=[warning.capability for warning in validation.warnings],
            )

        report = {
            "metadata": {
                "dataset": str(dataset),
                "data_version": resolve_dataset_version(metadata),
                "viewers_checked": len(loaded.manifests),
                "failures": [
                    {"source": failure.source, "reason": failure.reason}
                    for failure in loaded.failures
                ],
                "timestamp": pendulum.now().to_iso8601_string(),
                "app_version": __version__,
            },
            "results": results,
        }

        if output_path is not None:
            self._writer.write(output_path, report)
        return report

    def _load_manifests(self, sources: Sequence[str | Path] | None) -> ManifestLoadResult:
        if sources:
            return self._loader.load_all(list(sources))
        return self._loader.load_registry(self._registry)

    @staticmethod
    def _serialize(
        manifest: ViewerManifest,
        validation: ValidationResult,
        data_url: str | None,
    ) -> dict[str, Any]:
        return {
            "name": manifest.name,
            "version": manifest.viewer.version,
            "repo": manifest.viewer.repo,
            "launch_url": build_launch_url(manifest, data_url, validation),
            **validation.to_dict(),
        }


__all__ = ["CompatibilityPipeline", "MetadataReader", "OutputWriter"]
