"\"\"\"Normalization of OME-Zarr group attributes into dataset descriptors.\"\"\""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import MetadataLoadError
from .schemas import OmeZarrMetadata

# Zarr v3 stores carry OME-Zarr 0.5, Zarr v2 stores carry 0.4 and earlier
ZARR_FORMAT_VERSIONS: dict[int, str] = {3: "0.5", 2: "0.4"}

_NON_COMPRESSION_CODECS = frozenset({"bytes", "transpose", "crc32c", "endian"})


def extract_metadata(
    attrs: dict[str, Any],
    *,
    zarr_format: int | None = None,
    array_meta: dict[str, Any] | None = None,
) -> OmeZarrMetadata:
    """Build a descriptor from raw group attributes.

    ``attrs`` is the ``.zattrs`` document of a v2 group or the ``attributes``
    block of a v3 ``zarr.json``. ``array_meta`` is the metadata of the
    highest-resolution array and only contributes the compressor.
    """
    ome = attrs.get("ome")
    source = ome if isinstance(ome, dict) else attrs

    multiscales = _multiscales_of(source)
    axes = None
    if multiscales:
        multiscales = [
            {**entry, "axes": _axes_of(entry)} if entry.get("axes") is not None else entry
            for entry in multiscales
        ]
        axes = multiscales[0].get("axes")

    version = source.get("version")
    nested_version = multiscales[0].get("version") if multiscales else None
    if version is None and nested_version is None and zarr_format:
        version = ZARR_FORMAT_VERSIONS.get(zarr_format)

    payload = {
        "version": version,
        "axes": axes,
        "multiscales": multiscales,
        "omero": source.get("omero"),
        "labels": source.get("labels"),
        "plate": source.get("plate"),
        "compressor": _extract_compressor(array_meta) if array_meta else None,
    }
    try:
        return OmeZarrMetadata.model_validate(payload)
    except ValidationError as exc:
        raise MetadataLoadError(f"Unsupported OME-Zarr attributes: {exc}") from exc


def load_metadata(path: str | Path) -> OmeZarrMetadata:
    """Read a local OME-Zarr group and normalize its metadata."""
    root = Path(path)
    v3_doc = root / "zarr.json"
    v2_attrs = root / ".zattrs"

    if v3_doc.is_file():
        group = _read_json(v3_doc)
        zarr_format = _zarr_format_of(group, 3)
        attributes = group.get("attributes") or {}
        if not isinstance(attributes, dict):
            raise MetadataLoadError(f"'attributes' in {v3_doc} must be an object")
        attrs = dict(attributes)
    elif v2_attrs.is_file():
        attrs = dict(_read_json(v2_attrs))
        zgroup = root / ".zgroup"
        zarr_format = _zarr_format_of(_read_json(zgroup), 2) if zgroup.is_file() else 2
    else:
        raise MetadataLoadError(f"No OME-Zarr group metadata found at {root}")

    labels = _read_labels(root, zarr_format)
    if labels is not None:
        target = attrs["ome"] if isinstance(attrs.get("ome"), dict) else attrs
        target.setdefault("labels", labels)

    array_meta = _read_first_array(root, attrs, zarr_format)
    return extract_metadata(attrs, zarr_format=zarr_format, array_meta=array_meta)


def load_metadata_file(path: str | Path) -> OmeZarrMetadata:
    """Load an already-normalized descriptor from a JSON file."""
    data = _read_json(Path(path))
    try:
        return OmeZarrMetadata.model_validate(data)
    except ValidationError as exc:
        raise MetadataLoadError(f"Invalid metadata document {path}: {exc}") from exc


def _multiscales_of(source: dict[str, Any]) -> list[dict[str, Any]] | None:
    multiscales = source.get("multiscales")
    if not multiscales:
        return None
    if not isinstance(multiscales, list) or not all(isinstance(entry, dict) for entry in multiscales):
        raise MetadataLoadError("'multiscales' must be a list of objects")
    return multiscales


def _axes_of(entry: dict[str, Any]) -> list[dict[str, Any]]:
    axes = entry["axes"]
    if not isinstance(axes, list):
        raise MetadataLoadError("'axes' must be a list")
    return [_normalize_axis(axis) for axis in axes]


def _normalize_axis(axis: Any) -> dict[str, Any]:
    # OME-Zarr 0.3 lists axes as bare names
    if isinstance(axis, str):
        return {"name": axis}
    return axis


def _extract_compressor(array_meta: dict[str, Any]) -> str | dict[str, Any] | None:
    if "compressor" in array_meta:
        return array_meta["compressor"] or None
    for codec in array_meta.get("codecs") or []:
        if not isinstance(codec, dict):
            raise MetadataLoadError("array 'codecs' must be a list of objects")
        name = codec.get("name")
        if name == "sharding_indexed":
            configuration = codec.get("configuration") or {}
            nested = (configuration.get("codecs") or []) if isinstance(configuration, dict) else []
            found = _extract_compressor({"codecs": nested})
            if found:
                return found
            continue
        if name and name not in _NON_COMPRESSION_CODECS:
            return {"id": name}
    return None


def _read_labels(root: Path, zarr_format: int) -> list[str] | None:
    labels_dir = root / "labels"
    if zarr_format >= 3:
        doc = labels_dir / "zarr.json"
        if not doc.is_file():
            return None
        attrs = _read_json(doc).get("attributes") or {}
        if isinstance(attrs, dict) and isinstance(attrs.get("ome"), dict):
            attrs = attrs["ome"]
    else:
        doc = labels_dir / ".zattrs"
        if not doc.is_file():
            return None
        attrs = _read_json(doc)
    labels = attrs.get("labels") if isinstance(attrs, dict) else None
    if not labels:
        return None
    if not isinstance(labels, list):
        raise MetadataLoadError(f"'labels' in {doc} must be a list")
    return list(labels)


def _zarr_format_of(document: dict[str, Any], default: int) -> int:
    value = document.get("zarr_format", default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MetadataLoadError(f"Unsupported zarr_format: {value!r}")
    return value


def _read_first_array(root: Path, attrs: dict[str, Any], zarr_format: int) -> dict[str, Any] | None:
    source = attrs["ome"] if isinstance(attrs.get("ome"), dict) else attrs
    multiscales = _multiscales_of(source)
    if not multiscales:
        return None
    datasets = multiscales[0].get("datasets") or []
    if not isinstance(datasets, list) or not all(isinstance(item, dict) for item in datasets):
        raise MetadataLoadError("'datasets' must be a list of objects")
    if not datasets or not isinstance(datasets[0].get("path"), str) or not datasets[0]["path"]:
        return None
    array_dir = root / datasets[0]["path"]
    doc = array_dir / ("zarr.json" if zarr_format >= 3 else ".zarray")
    return _read_json(doc) if doc.is_file() else None


def _read_json(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise MetadataLoadError(f"Invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise MetadataLoadError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise MetadataLoadError(f"Expected a JSON object in {path}")
    return data


__all__ = [
    "ZARR_FORMAT_VERSIONS",
    "extract_metadata",
    "load_metadata",
    "load_metadata_file",
]
