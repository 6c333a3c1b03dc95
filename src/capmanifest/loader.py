"\"\"\"Fetching and parsing viewer capability manifests.\"\"\""

from __future__ import annotations

import http.client
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence
from urllib import error, request

import structlog
import yaml
from pydantic import ValidationError

from .errors import CapabilityManifestError, ManifestFormatError, ManifestLoadError
from .registry import ViewerRegistry
from .schemas import ViewerManifest

Opener = Callable[[str, float], bytes]

_REMOTE_SCHEMES = ("http://", "https://", "file://")

DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_WORKERS = 8


@dataclass(slots=True)
class ManifestFailure:
    source: str
    reason: str


@dataclass(slots=True)
class ManifestLoadResult:
    """Manifests that loaded, plus the sources that did not."""

    manifests: list[ViewerManifest] = field(default_factory=list)
    failures: list[ManifestFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def parse_manifest(text: str, source: str = "<string>") -> ViewerManifest:
    """Parse a YAML manifest and reject documents that cannot be evaluated."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ManifestFormatError(source, f"invalid YAML ({exc})") from exc

    if not isinstance(document, dict):
        raise ManifestFormatError(source, "document must be a mapping")
    viewer = document.get("viewer")
    if not isinstance(viewer, dict):
        raise ManifestFormatError(source, "missing 'viewer' section")
    if not isinstance(document.get("capabilities"), dict):
        raise ManifestFormatError(source, "'capabilities' must be a mapping")

    try:
        return ViewerManifest.model_validate(document)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
            for item in exc.errors()
        )
        raise ManifestFormatError(source, problems) from exc


def _urlopen(url: str, timeout: float) -> bytes:
    with request.urlopen(url, timeout=timeout) as resp:
        return resp.read()


class ManifestLoader:
    """Load manifests from local files or URLs.

    Every source is fetched independently; a failure is recorded and never
    prevents the remaining sources from loading.
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        max_workers: int | None = None,
        opener: Opener | None = None,
    ) -> None:
        self._timeout = timeout or DEFAULT_TIMEOUT
        self._max_workers = max_workers or DEFAULT_MAX_WORKERS
        self._opener = opener or _urlopen
        self._logger = structlog.get_logger(__name__)

    def fetch(self, source: str | Path) -> str:
        location = str(source)
        try:
            if isinstance(source, str) and source.startswith(_REMOTE_SCHEMES):
                raw = self._opener(location, self._timeout)
            else:
                raw = Path(source).read_bytes()
        except error.HTTPError as exc:
            raise ManifestLoadError(location, f"{exc.code} {exc.reason}") from exc
        except (OSError, ValueError, http.client.HTTPException) as exc:
            raise ManifestLoadError(location, str(exc)) from exc

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ManifestFormatError(location, "manifest is not UTF-8 text") from exc

    def load(self, source: str | Path) -> ViewerManifest:
        return parse_manifest(self.fetch(source), str(source))

    def load_all(self, sources: Sequence[str | Path]) -> ManifestLoadResult:
        result = ManifestLoadResult()
        if not sources:
            return result

        workers = max(1, min(self._max_workers, len(sources)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [(source, executor.submit(self.load, source)) for source in sources]
            for source, future in futures:
                try:
                    result.manifests.append(future.result())
                except CapabilityManifestError as exc:
                    reason = getattr(exc, "reason", str(exc))
                    result.failures.append(ManifestFailure(source=str(source), reason=reason))

        if result.failures:
            self._logger.warning(
                "manifests.load_failed",
                failed=len(result.failures),
                loaded=len(result.manifests),
                failures=[{"source": f.source, "reason": f.reason} for f in result.failures],
            )
        return result

    def load_registry(self, registry: ViewerRegistry) -> ManifestLoadResult:
        return self.load_all(registry.urls())


__all__ = [
    "ManifestFailure",
    "ManifestLoadResult",
    "ManifestLoader",
    "parse_manifest",
]
