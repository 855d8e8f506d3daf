# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError


def _field_label(loc: tuple) -> str:
    return ".".join(str(part) for part in loc if part is not None)


def format_pydantic_errors(exc: PydanticValidationError) -> list[str]:
    """Flatten pydantic errors into user-facing messages, one per failure."""
    messages: list[str] = []
    for error in exc.errors():
        if error.get("type") == "missing":
            label = _field_label(error.get("loc", ())) or "value"
            messages.append(f"The {label.capitalize()} field is required.")
        else:
            messages.append(error.get("msg", "Invalid value."))
    return messages


def error_fields(exc: PydanticValidationError) -> list[str]:
    return sorted({_field_label(error.get("loc", ())) for error in exc.errors()} - {""})


__all__ = [
    "error_fields",
    "format_pydantic_errors",
]
