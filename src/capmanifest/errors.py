"\"\"\"Exception types raised by manifest and metadata collaborators.\"\"\""

from __future__ import annotations


class CapabilityManifestError(Exception):
    """Base class for errors raised outside the pure validation core."""


class ManifestFormatError(CapabilityManifestError, ValueError):
    """Raised when a manifest document is not a usable capability declaration."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Invalid manifest {source}: {reason}")
        self.source = source
        self.reason = reason


class ManifestLoadError(CapabilityManifestError):
    """Raised when a manifest cannot be retrieved from its source."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Failed to fetch manifest {source}: {reason}")
        self.source = source
        self.reason = reason


class MetadataLoadError(CapabilityManifestError):
    """Raised when dataset metadata cannot be read or normalized."""


__all__ = [
    "CapabilityManifestError",
    "ManifestFormatError",
    "ManifestLoadError",
    "MetadataLoadError",
]
