"""
Validation utilities for input validation and error handling.
"""
import enum
import re
from typing import Any

from .error_handlers import ValidationError

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def validate_email(email: str) -> str:
    """Validate email format. Emails are case-sensitive keys, so only whitespace is trimmed."""
    if not email or not isinstance(email, str):
        raise ValidationError("Email is required")

    email = email.strip()
    if len(email) > 255:
        raise ValidationError("Email too long (max 255 characters)")

    # Basic email regex
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    if not re.match(pattern, email):
        raise ValidationError("Invalid email format")

    return email


def validate_password(password: str) -> None:
    """Validate password strength."""
    if not password or not isinstance(password, str):
        raise ValidationError("Password is required")

    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters")

    # bcrypt only looks at the first 72 bytes.
    if len(password.encode("utf-8")) > 72:
        raise ValidationError("Password too long (max 72 bytes)")


def validate_string_field(
    value: Any,
    field_name: str,
    min_length: int = 1,
    max_length: int = 1000,
    required: bool = True,
    pattern: str | None = None,
) -> str | None:
    """Validate a string field with common rules."""
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")

    value = value.strip()

    if not value:
        if required:
            raise ValidationError(f"{field_name} cannot be empty")
        return None

    if len(value) < min_length:
        raise ValidationError(f"{field_name} must be at least {min_length} characters")

    if len(value) > max_length:
        raise ValidationError(f"{field_name} must not exceed {max_length} characters")

    if pattern and not re.match(pattern, value):
        raise ValidationError(f"{field_name} format is invalid")

    return value


def validate_enum(value: Any, enum_cls: type[enum.Enum], field_name: str) -> str:
    """Normalize `value` to a member value of `enum_cls` (case-insensitive)."""
    if isinstance(value, enum_cls):
        return value.value
    if not value or not isinstance(value, str):
        raise ValidationError(f"{field_name} is required")

    normalized = value.strip().upper()
    valid = [member.value for member in enum_cls]
    if normalized not in valid:
        raise ValidationError(f"Invalid {field_name.lower()}. Must be one of: {', '.join(valid)}")

    return normalized


def validate_slug(slug: Any) -> str:
    """Slugs are lowercase URL-safe words separated by single hyphens."""
    return validate_string_field(slug, "Slug", min_length=2, max_length=100, pattern=SLUG_PATTERN)


def validate_string_list(values: Any, field_name: str, max_item_length: int = 500) -> list[str]:
    """Clean an ordered list of strings, dropping blank entries."""
    if values is None:
        return []
    if not isinstance(values, list):
        raise ValidationError(f"{field_name} must be a list")

    cleaned: list[str] = []
    for item in values:
        text = str(item).strip()
        if not text:
            continue
        if len(text) > max_item_length:
            raise ValidationError(f"{field_name} entries must not exceed {max_item_length} characters")
        cleaned.append(text)
    return cleaned
