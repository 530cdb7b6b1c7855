"""Parameter validation utilities."""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for callers.

    Removes internal fields like:
    - url
    - ctx
    - input
    - internal exception details
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "params"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        # Friendly rewrites for common cases
        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "extra inputs" in msg_lower:
            msg = "Unknown parameter"
        elif "valid integer" in msg_lower or "valid number" in msg_lower:
            msg = "Must be a number"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_params(
    model: type[ModelT],
    data: Mapping[str, Any],
) -> tuple[bool, ModelT | list[dict[str, str]]]:
    """Validate transformation parameters against a Pydantic model.

    Args:
        model: Pydantic model class
        data: Raw parameters to validate

    Returns:
        (True, validated_model) on success
        (False, sanitized_errors) on validation failure
    """
    try:
        validated = model(**data)
        return True, validated

    except ValidationError as exc:
        return False, sanitize_validation_errors(exc.errors())
