"\"\"\"Core compatibility validation components.\"\"\""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .validation import ValidationError, ValidationResult, ValidationWarning
from .validator import (
    CompatibilityRule,
    CompatibilityValidator,
    default_rules,
    is_compatible,
    resolve_codec,
    resolve_dataset_version,
    validate_viewer,
)
from .selection import (
    ViewerMatch,
    get_compatible_viewers,
    get_compatible_viewers_with_details,
)

__all__ = [
    "CompatibilityRule",
    "CompatibilityValidator",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "ViewerMatch",
    "default_rules",
    "get_compatible_viewers",
    "get_compatible_viewers_with_details",
    "is_compatible",
    "resolve_codec",
    "resolve_dataset_version",
    "validate_viewer",
]
