from __future__ import annotations

from typing import Any

from capmanifest.core import (
    CompatibilityValidator,
    ViewerMatch,
    get_compatible_viewers,
    get_compatible_viewers_with_details,
)
from capmanifest.schemas import OmeZarrMetadata, ViewerManifest


def build_manifest(name: str, **capabilities: Any) -> ViewerManifest:
    defaults: dict[str, Any] = {
        "ome_zarr_versions": [0.4, 0.5],
        "axes": True,
        "scale": True,
        "translation": True,
        "channels": True,
        "timepoints": True,
        "labels": False,
        "hcs_plates": False,
        "omero_metadata": False,
    }
    defaults.update(capabilities)
    return ViewerManifest(viewer={"name": name, "version": "1.0.0"}, capabilities=defaults)


SPATIAL_AXES = [
    {"name": "z", "type": "space"},
    {"name": "y", "type": "space"},
    {"name": "x", "type": "space"},
]


class CountingValidator(CompatibilityValidator):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def validate(self, manifest, metadata):
        self.calls += 1
        return super().validate(manifest, metadata)


def test_returns_names_of_compatible_viewers():
    manifests = [build_manifest("ViewerA"), build_manifest("ViewerB")]
    metadata = OmeZarrMetadata(version="0.4", axes=SPATIAL_AXES)

    assert get_compatible_viewers(manifests, metadata) == ["ViewerA", "ViewerB"]


def test_filters_out_incompatible_viewers():
    manifests = [
        build_manifest("FullViewer", ome_zarr_versions=[0.4, 0.5], channels=True),
        build_manifest("LimitedViewer", ome_zarr_versions=[0.4], channels=False),
    ]
    metadata = OmeZarrMetadata(
        version="0.4",
        axes=[{"name": "c", "type": "channel"}, {"name": "y"}, {"name": "x"}],
    )

    assert get_compatible_viewers(manifests, metadata) == ["FullViewer"]


def test_preserves_input_order():
    manifests = [
        build_manifest("Zeta"),
        build_manifest("Old", ome_zarr_versions=[0.3]),
        build_manifest("Alpha"),
        build_manifest("Mid"),
    ]
    metadata = OmeZarrMetadata(version="0.5")

    assert get_compatible_viewers(manifests, metadata) == ["Zeta", "Alpha", "Mid"]


def test_returns_empty_when_nothing_is_compatible():
    manifests = [build_manifest("ViewerA", ome_zarr_versions=[0.4])]
    metadata = OmeZarrMetadata(version="0.5", axes=SPATIAL_AXES[1:])

    assert get_compatible_viewers(manifests, metadata) == []


def test_empty_manifest_list_skips_validation():
    validator = CountingValidator()
    metadata = OmeZarrMetadata(version="0.4")

    assert get_compatible_viewers([], metadata) == []
    assert get_compatible_viewers_with_details([], metadata, validator=validator) == []
    assert validator.calls == 0


def test_details_include_validation_result():
    metadata = OmeZarrMetadata(version="0.4", axes=SPATIAL_AXES)

    results = get_compatible_viewers_with_details([build_manifest("TestViewer")], metadata)

    assert len(results) == 1
    assert isinstance(results[0], ViewerMatch)
    assert results[0].name == "TestViewer"
    assert results[0].validation.compatible is True
    assert results[0].validation.errors == []


def test_details_only_return_compatible_viewers():
    manifests = [
        build_manifest("Compatible", ome_zarr_versions=[0.4]),
        build_manifest("Incompatible", ome_zarr_versions=[0.5]),
    ]

    results = get_compatible_viewers_with_details(manifests, {"version": "0.4"})

    assert [match.name for match in results] == ["Compatible"]


def test_details_keep_warnings_of_compatible_viewers():
    manifests = [build_manifest("PartialViewer", ome_zarr_versions=[0.4], axes=False)]
    metadata = OmeZarrMetadata(version="0.4", axes=SPATIAL_AXES[1:], omero={"name": "test"})

    results = get_compatible_viewers_with_details(manifests, metadata)

    assert results[0].validation.compatible is True
    assert [w.capability for w in results[0].validation.warnings] == ["axes", "omero_metadata"]


def test_each_manifest_is_validated_once():
    validator = CountingValidator()
    manifests = [build_manifest("A"), build_manifest("B", ome_zarr_versions=[0.1]), build_manifest("C")]

    results = get_compatible_viewers_with_details(
        manifests, OmeZarrMetadata(version="0.4"), validator=validator
    )

    assert [match.name for match in results] == ["A", "C"]
    assert validator.calls == 3
