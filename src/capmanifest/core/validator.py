"\"\"\"Rule-based viewer compatibility validation.\"\"\""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Protocol, Union, runtime_checkable

from ..schemas import OmeZarrMetadata, ViewerCapabilities, ViewerManifest
from .validation import ValidationError, ValidationResult, ValidationWarning

Finding = Union[ValidationError, ValidationWarning]


@runtime_checkable
class CompatibilityRule(Protocol):
    """Single check comparing dataset features with declared capabilities."""

    capability: str

    def check(
        self,
        capabilities: ViewerCapabilities,
        metadata: OmeZarrMetadata,
    ) -> Iterable[Finding]:
        """Yield errors and warnings for this capability."""


def resolve_dataset_version(metadata: OmeZarrMetadata) -> str | None:
    """Return the declared OME-Zarr version, root first, then ``multiscales[0]``."""
    if metadata.version:
        return metadata.version
    if metadata.multiscales and metadata.multiscales[0].version:
        return metadata.multiscales[0].version
    return None


def resolve_codec(compressor: Any) -> Any | None:
    """Return the codec identifier of a compressor, or None when unresolvable."""
    if compressor is None:
        return None
    if isinstance(compressor, Mapping):
        return compressor.get("id") or None
    return compressor or None


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


class VersionRule:
    capability = "ome_zarr_versions"

    def check(
        self,
        capabilities: ViewerCapabilities,
        metadata: OmeZarrMetadata,
    ) -> Iterator[Finding]:
        version_text = resolve_dataset_version(metadata)
        if version_text is None:
            yield ValidationError(
                capability=self.capability,
                message="Metadata does not specify an OME-Zarr version",
                required="version",
                found=None,
            )
            return

        supported = capabilities.ome_zarr_versions or []
        try:
            version = float(version_text)
        except ValueError:
            # not a number, so it cannot match any declared version
            yield ValidationError(
                capability=self.capability,
                message=f"Metadata declares an unrecognized OME-Zarr version: {version_text!r}",
                required=version_text,
                found=list(supported),
            )
            return

        label = _format_number(version)
        if not supported:
            yield ValidationError(
                capability=self.capability,
                message=f"Viewer does not specify OME-Zarr version support (data is v{label})",
                required=version,
                found=[],
            )
        elif version not in supported:
            listed = ", ".join(_format_number(item) for item in supported)
            yield ValidationError(
                capability=self.capability,
                message=f"Viewer does not support OME-Zarr v{label} (supports: {listed})",
                required=version,
                found=list(supported),
            )


class CompressionCodecRule:
    capability = "compression_codecs"

    def check(
        self,
        capabilities: ViewerCapabilities,
        metadata: OmeZarrMetadata,
    ) -> Iterator[Finding]:
        codec = resolve_codec(metadata.compressor)
        if codec is None:
            return
        declared = capabilities.compression_codecs
        if declared is None:
            yield ValidationWarning(
                capability=self.capability,
                message=(
                    f"Data uses codec '{codec}' but viewer doesn't declare codec support"
                    " - compatibility unknown"
                ),
            )
        elif codec not in declared:
            yield ValidationError(
                capability=self.capability,
                message=f"Viewer does not support compression codec: {codec}",
                required=codec,
                found=list(declared),
            )


class AxesRule:
    capability = "axes"

    def check(
        self,
        capabilities: ViewerCapabilities,
        metadata: OmeZarrMetadata,
    ) -> Iterator[Finding]:
        if metadata.axes is not None and not capabilities.axes:
            yield ValidationWarning(
                capability=self.capability,
                message="Dataset has axis metadata but viewer may not respect it",
            )


class AxisFeatureRule:
    """Hard requirement triggered by an axis with a given name or type."""

    def __init__(self, *, capability: str, axis_name: str, axis_type: str, feature: str):
        self.capability = capability
        self._axis_name = axis_name
        self._axis_type = axis_type
        self._feature = feature

    def check(
        self,
        capabilities: ViewerCapabilities,
        metadata: OmeZarrMetadata,
    ) -> Iterator[Finding]:
        present = any(
            axis.name == self._axis_name or axis.type == self._axis_type
            for axis in metadata.axes or []
        )
        if present and not getattr(capabilities, self.capability):
            yield ValidationError(
                capability=self.capability,
                message=f"Dataset has multiple {self._feature} but viewer does not support them",
                required=True,
                found=False,
            )


class LabelsRule:
    capability = "labels"

    def check(
        self,
        capabilities: ViewerCapabilities,
        metadata: OmeZarrMetadata,
    ) -> Iterator[Finding]:
        if metadata.labels and not capabilities.labels:
            yield ValidationWarning(
                capability=self.capability,
                message="Dataset has labels but viewer may not display them",
            )


class PlateRule:
    capability = "hcs_plates"

    def check(
        self,
        capabilities: ViewerCapabilities,
        metadata: OmeZarrMetadata,
    ) -> Iterator[Finding]:
        if metadata.plate is not None and not capabilities.hcs_plates:
            yield ValidationError(
                capability=self.capability,
                message="Dataset is an HCS plate but viewer does not support plates",
                required=True,
                found=False,
            )


class OmeroRule:
    capability = "omero_metadata"

    def check(
        self,
        capabilities: ViewerCapabilities,
        metadata: OmeZarrMetadata,
    ) -> Iterator[Finding]:
        if metadata.omero is not None and not capabilities.omero_metadata:
            yield ValidationWarning(
                capability=self.capability,
                message="Dataset has OMERO metadata but viewer may not use it",
            )


def default_rules() -> list[CompatibilityRule]:
    """Return the built-in rules in evaluation order."""
    return [
        VersionRule(),
        CompressionCodecRule(),
        AxesRule(),
        AxisFeatureRule(capability="channels", axis_name="c", axis_type="channel", feature="channels"),
        AxisFeatureRule(capability="timepoints", axis_name="t", axis_type="time", feature="timepoints"),
        LabelsRule(),
        PlateRule(),
        OmeroRule(),
    ]


class CompatibilityValidator:
    """Runs every rule against a manifest and collects the findings.

    Rules never short-circuit each other: each one contributes its errors and
    warnings independently, and the verdict only depends on whether any error
    was produced.
    """

    def __init__(self, rules: Iterable[CompatibilityRule] | None = None) -> None:
        self._rules = list(rules) if rules is not None else default_rules()

    @property
    def rules(self) -> list[CompatibilityRule]:
        return list(self._rules)

    def validate(
        self,
        manifest: ViewerManifest | Mapping[str, Any],
        metadata: OmeZarrMetadata | Mapping[str, Any],
    ) -> ValidationResult:
        manifest = _as_manifest(manifest)
        metadata = _as_metadata(metadata)

        errors: list[ValidationError] = []
        warnings: list[ValidationWarning] = []
        for rule in self._rules:
            for finding in rule.check(manifest.capabilities, metadata):
                if isinstance(finding, ValidationError):
                    errors.append(finding)
                else:
                    warnings.append(finding)

        return ValidationResult.from_findings(errors, warnings)


def _as_manifest(value: ViewerManifest | Mapping[str, Any]) -> ViewerManifest:
    if isinstance(value, ViewerManifest):
        return value
    return ViewerManifest.model_validate(value)


def _as_metadata(value: OmeZarrMetadata | Mapping[str, Any]) -> OmeZarrMetadata:
    if isinstance(value, OmeZarrMetadata):
        return value
    return OmeZarrMetadata.model_validate(value)


_default_validator = CompatibilityValidator()


def validate_viewer(
    manifest: ViewerManifest | Mapping[str, Any],
    metadata: OmeZarrMetadata | Mapping[str, Any],
) -> ValidationResult:
    """Check whether a viewer can open a dataset, explaining the decision."""
    return _default_validator.validate(manifest, metadata)


def is_compatible(
    manifest: ViewerManifest | Mapping[str, Any],
    metadata: OmeZarrMetadata | Mapping[str, Any],
) -> bool:
    return validate_viewer(manifest, metadata).compatible


__all__ = [
    "AxesRule",
    "AxisFeatureRule",
    "CompatibilityRule",
    "CompatibilityValidator",
    "CompressionCodecRule",
    "LabelsRule",
    "OmeroRule",
    "PlateRule",
    "VersionRule",
    "default_rules",
    "is_compatible",
    "resolve_codec",
    "resolve_dataset_version",
    "validate_viewer",
]
