"\"\"\"Viewer launch links.\"\"\""

from __future__ import annotations

from urllib.parse import quote

from .core import ValidationResult
from .schemas import DATA_URL_PLACEHOLDER, ViewerManifest


def build_launch_url(
    manifest: ViewerManifest,
    data_url: str | None,
    validation: ValidationResult | None = None,
) -> str | None:
    """Return the viewer URL for a dataset, or None when it cannot be launched.

    Incompatible viewers and viewers without a ``template_url`` get no link.
    The data URL is percent-encoded as a URI component before substitution.
    """
    template = manifest.viewer.template_url
    if not template:
        return None
    if validation is not None and not validation.compatible:
        return None
    if not data_url:
        return template
    return template.replace(DATA_URL_PLACEHOLDER, quote(data_url, safe="!*'()"))


__all__ = ["build_launch_url"]
