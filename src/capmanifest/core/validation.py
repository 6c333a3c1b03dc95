"\"\"\"Validation result types.\"\"\""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(slots=True, frozen=True)
class ValidationError:
    """Hard blocker: the viewer cannot open the dataset."""

    capability: str
    message: str
    required: Any
    found: Any


@dataclass(slots=True, frozen=True)
class ValidationWarning:
    """Advisory note that does not affect compatibility."""

    capability: str
    message: str


@dataclass(slots=True)
class ValidationResult:
    """Compatibility verdict for one viewer against one dataset."""

    compatible: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @classmethod
    def from_findings(
        cls,
        errors: list[ValidationError],
        warnings: list[ValidationWarning],
    ) -> "ValidationResult":
        return cls(compatible=not errors, errors=list(errors), warnings=list(warnings))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


__all__ = ["ValidationError", "ValidationResult", "ValidationWarning"]
