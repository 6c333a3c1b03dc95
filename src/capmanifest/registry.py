"\"\"\"Registry of known viewers and where their manifests are published.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

MANIFEST_BASE_URL = (
    "https://raw.githubusercontent.com/BioImageTools/capability-manifest/main/public/viewers/"
)


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    name: str
    manifest_url: str


DEFAULT_ENTRIES: tuple[RegistryEntry, ...] = (
    RegistryEntry("vizarr", f"{MANIFEST_BASE_URL}vizarr.yaml"),
    RegistryEntry("neuroglancer", f"{MANIFEST_BASE_URL}neuroglancer.yaml"),
    RegistryEntry("n5-ij", f"{MANIFEST_BASE_URL}n5-ij.yaml"),
)


class ViewerRegistry:
    """Registry mapping viewer names to manifest locations."""

    def __init__(self, entries: Iterable[RegistryEntry | dict] | None = None):
        source = DEFAULT_ENTRIES if entries is None else entries
        self._entries = {
            entry.name: entry
            for entry in (
                item if isinstance(item, RegistryEntry) else RegistryEntry(**item)
                for item in source
            )
        }

    def get(self, name: str) -> RegistryEntry:
        try:
            return self._entries[name]
        except KeyError as exc:
            raise KeyError(f"Unknown viewer: {name!r}") from exc

    def names(self) -> List[str]:
        return list(self._entries.keys())

    def urls(self) -> List[str]:
        return [entry.manifest_url for entry in self._entries.values()]

    def __iter__(self):
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


def default_registry() -> ViewerRegistry:
    """Return the registry of published viewer manifests."""
    return ViewerRegistry(DEFAULT_ENTRIES)


__all__ = ["MANIFEST_BASE_URL", "RegistryEntry", "ViewerRegistry", "default_registry"]
