from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_positive_int(value: Any, field_name: str) -> int:
    """Accept ints and ASCII digit strings (form/JSON input); reject bools, floats and blanks."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdecimal():
        number = int(value.strip())
    else:
        raise ValidationError(f"{field_name} must be an integer")

    if number <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return number


def optional_positive_int(value: Any, field_name: str) -> int | None:
    if value is None or value == "":
        return None
    return require_positive_int(value, field_name)


def optional_text(value: Any, field_name: str) -> Optional[str]:
    """Stripped text, or None when missing. Numbers and other JSON types are rejected."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value.strip()
