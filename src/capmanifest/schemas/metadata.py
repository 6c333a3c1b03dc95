from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


def _version_to_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class AxisMetadata(BaseModel):
    """Single axis of an OME-Zarr image."""

    name: str
    type: str | None = None
    unit: str | None = None

    model_config = ConfigDict(extra="allow", frozen=True)


class MultiscaleMetadata(BaseModel):
    """One entry of the ``multiscales`` list."""

    version: str | None = None
    axes: list[AxisMetadata] | None = None
    datasets: list[Any] | None = None

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        return _version_to_text(value)


class OmeZarrMetadata(BaseModel):
    """Normalized, read-only summary of a dataset's structural metadata."""

    version: str | None = None
    axes: list[AxisMetadata] | None = None
    multiscales: list[MultiscaleMetadata] | None = None
    omero: Any | None = None
    labels: list[str] | None = None
    plate: Any | None = None
    compressor: str | dict[str, Any] | None = None

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        return _version_to_text(value)
