"\"\"\"Batch selection of compatible viewers for one dataset.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..schemas import OmeZarrMetadata, ViewerManifest
from .validation import ValidationResult
from .validator import CompatibilityValidator, _as_manifest, _as_metadata, validate_viewer


@dataclass(slots=True)
class ViewerMatch:
    """Compatible viewer paired with its full validation result."""

    name: str
    validation: ValidationResult


def get_compatible_viewers(
    manifests: Iterable[ViewerManifest | Mapping[str, Any]],
    metadata: OmeZarrMetadata | Mapping[str, Any],
) -> list[str]:
    """Return the names of viewers able to open the dataset, in input order."""
    return [match.name for match in get_compatible_viewers_with_details(manifests, metadata)]


def get_compatible_viewers_with_details(
    manifests: Iterable[ViewerManifest | Mapping[str, Any]],
    metadata: OmeZarrMetadata | Mapping[str, Any],
    *,
    validator: CompatibilityValidator | None = None,
) -> list[ViewerMatch]:
    """Return compatible viewers with their validation, so warnings stay visible."""
    manifests = [_as_manifest(manifest) for manifest in manifests]
    if not manifests:
        return []
    metadata = _as_metadata(metadata)

    matches: list[ViewerMatch] = []
    for manifest in manifests:
        validation = (
            validator.validate(manifest, metadata)
            if validator is not None
            else validate_viewer(manifest, metadata)
        )
        if validation.compatible:
            matches.append(ViewerMatch(name=manifest.name, validation=validation))
    return matches


__all__ = [
    "ViewerMatch",
    "get_compatible_viewers",
    "get_compatible_viewers_with_details",
]
