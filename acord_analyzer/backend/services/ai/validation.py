"""
Validation of model answers against the ACORD 25 certificate schema.

Handles:
- The "not an ACORD 25" null answer
- Structural validation into typed records
- Data cleaning (null removal from arrays)
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

# Handle both package imports and standalone imports
try:
    from ...models import AcordCertificate
except ImportError:
    from models import AcordCertificate

logger = logging.getLogger(__name__)

__all__ = [
    "ValidationResult",
    "validate_extraction",
]


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating one model answer.

    Exactly one of the two shapes holds:
    - valid: `errors` is empty and `certificate` is the parsed record, or
      None when the model said the document is not an ACORD 25;
    - invalid: `errors` lists what did not match and `certificate` is None.
    """

    certificate: AcordCertificate | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _clean_null_from_arrays(
    data: dict[str, Any] | list[Any] | Any,
) -> dict[str, Any] | list[Any] | Any:
    """
    Recursively remove None/null values from arrays in the data structure.

    Models sometimes pad lists with null rows.
    """
    if isinstance(data, dict):
        return {k: _clean_null_from_arrays(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_clean_null_from_arrays(item) for item in data if item is not None]
    else:
        return data


def _format_errors(exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        messages.append(f"{location}: {error['msg']}")
    return messages


def validate_extraction(
    candidate: Any, schema: type[AcordCertificate] = AcordCertificate
) -> ValidationResult:
    """
    Validate a decoded model answer.

    A top-level None is always valid and means the document is not the
    target form; it bypasses structural validation.

    Args:
        candidate: The decoded JSON value returned by the model.
        schema: Record type to validate against.

    Returns:
        ValidationResult with either the certificate or the list of errors.
    """
    if candidate is None:
        return ValidationResult(certificate=None)

    if not isinstance(candidate, dict):
        return ValidationResult(
            errors=[f"<root>: expected a JSON object or null, got {type(candidate).__name__}"]
        )

    try:
        certificate = schema.model_validate(_clean_null_from_arrays(candidate))
    except ValidationError as e:
        errors = _format_errors(e)
        logger.warning("Model answer failed validation: %s", "; ".join(errors))
        return ValidationResult(errors=errors)

    return ValidationResult(certificate=certificate)
