"""Input validation helpers."""

from __future__ import annotations

from pydantic import ValidationError


def first_error_message(exc: ValidationError, labels: dict[str, str] | None = None) -> str:
    """Turn the first pydantic error into a short sentence for a flash notice."""
    errors = exc.errors()
    if not errors:
        return "Please check the form and try again."
    err = errors[0]
    field = str(err["loc"][0]) if err.get("loc") else ""
    label = (labels or {}).get(field, field.replace("_", " ").capitalize())
    if err.get("type") in ("missing", "string_too_short") and label:
        return f"{label} is required."
    return f"{label}: {err.get('msg', 'invalid value')}" if label else err.get("msg", "Invalid value")
