"\"\"\"Pydantic schema definitions for manifests and dataset metadata.\"\"\""

from __future__ import annotations

from .manifest import (
    DATA_URL_PLACEHOLDER,
    ViewerCapabilities,
    ViewerInfo,
    ViewerManifest,
)
from .metadata import AxisMetadata, MultiscaleMetadata, OmeZarrMetadata

__all__ = [
    "DATA_URL_PLACEHOLDER",
    "AxisMetadata",
    "MultiscaleMetadata",
    "OmeZarrMetadata",
    "ViewerCapabilities",
    "ViewerInfo",
    "ViewerManifest",
]
