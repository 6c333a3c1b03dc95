from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATA_URL_PLACEHOLDER = "{DATA_URL}"


class ViewerInfo(BaseModel):
    """Identity block of a viewer capability manifest."""

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    repo: str | None = None
    template_url: str | None = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        # YAML reads `version: 1.0` as a float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("name", "version")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ViewerCapabilities(BaseModel):
    """Fixed set of capabilities a viewer can declare.

    Every field is optional; an omitted flag means the capability is not
    supported.
    """

    ome_zarr_versions: list[float] | None = None
    rfcs_supported: list[float] | None = None
    compression_codecs: list[str] | None = None
    axes: bool | None = None
    scale: bool | None = None
    translation: bool | None = None
    channels: bool | None = None
    timepoints: bool | None = None
    labels: bool | None = None
    hcs_plates: bool | None = None
    bioformats2raw_layout: bool | None = None
    omero_metadata: bool | None = None

    model_config = ConfigDict(extra="ignore", frozen=True)


class ViewerManifest(BaseModel):
    """Capability declaration published by an image viewer."""

    viewer: ViewerInfo
    capabilities: ViewerCapabilities

    model_config = ConfigDict(extra="ignore", frozen=True)

    @property
    def name(self) -> str:
        return self.viewer.name
