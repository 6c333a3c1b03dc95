"\"\"\"OME-Zarr viewer compatibility checks driven by capability manifests.\"\"\""

from __future__ import annotations

__version__ = "0.1.0"

from .core import (
    ValidationResult,
    ViewerMatch,
    get_compatible_viewers,
    get_compatible_viewers_with_details,
    is_compatible,
    validate_viewer,
)
from .schemas import OmeZarrMetadata, ViewerManifest

__all__ = [
    "__version__",
    "OmeZarrMetadata",
    "ValidationResult",
    "ViewerManifest",
    "ViewerMatch",
    "get_compatible_viewers",
    "get_compatible_viewers_with_details",
    "is_compatible",
    "validate_viewer",
]
