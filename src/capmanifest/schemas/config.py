"\"\"\"Pydantic configuration schema for CLI YAML input.\"\"\""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError


class RegistryEntryConfig(BaseModel):
    name: str = Field(min_length=1)
    manifest_url: str = Field(min_length=1)


class LoaderConfig(BaseModel):
    timeout: float | None = Field(default=None, gt=0)
    max_workers: int | None = Field(default=None, ge=1)


class AppConfig(BaseModel):
    registry: list[RegistryEntryConfig] | None = None
    loader: LoaderConfig = Field(default_factory=LoaderConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        if self.registry is not None:
            settings["registry"] = [entry.model_dump() for entry in self.registry]
        loader_settings = self.loader.model_dump(exclude_none=True)
        if loader_settings:
            settings["loader"] = loader_settings
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
