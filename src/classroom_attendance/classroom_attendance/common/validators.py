from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str, *, strip: bool = True) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip() if strip else value


def require_coordinate(value: Any, field_name: str, *, limit: float) -> float:
    """Parse a latitude/longitude value and check it lies within +/- limit."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not -limit <= number <= limit:
        raise ValidationError(f"{field_name} must be between -{limit:g} and {limit:g}")
    return number
