"""
System label normalization and field rules.

A system label is a machine-stable code such as ``MONTHLY``: it starts
with an uppercase letter, continues with uppercase letters, digits or
underscores, and is at most 255 characters long. A label is the
human-readable text paired with it.
"""

import re

from .errors import ValidationError

MAX_LENGTH = 255

SYSTEM_LABEL_PATTERN = re.compile(r"^[A-Z][_A-Z0-9]*$")


def canonicalize(value: object) -> str | None:
    """
    Strip and uppercase a raw system label without validating it.

    This is the transformation applied whenever a system label is
    assigned; None passes through so that presence checks can report it.

    Args:
        value: The raw value

    Returns:
        The stripped, uppercased string, or None
    """
    if value is None:
        return None
    return str(value).strip().upper()


def check_system_label(value: object, field: str = "system_label") -> list[ValidationError]:
    """
    Check a system label against the presence, length and format rules.

    Args:
        value: The value to check, as stored on the entity
        field: Attribute name used in error messages

    Returns:
        List of validation errors, empty when the value is valid
    """
    if value is None or value == "":
        return [ValidationError(f"{field} can't be blank", field=field, value=value)]

    if not isinstance(value, str):
        return [ValidationError(f"{field} must be a string", field=field, value=value)]

    errors: list[ValidationError] = []
    if len(value) > MAX_LENGTH:
        errors.append(
            ValidationError(
                f"{field} is too long (maximum is {MAX_LENGTH} characters)", field=field, value=value
            )
        )

    # fullmatch so that a trailing newline is rejected
    if not SYSTEM_LABEL_PATTERN.fullmatch(value):
        errors.append(ValidationError(f"{field} is invalid: {value!r}", field=field, value=value))

    return errors


def check_label(value: object, field: str = "label") -> list[ValidationError]:
    """
    Check a friendly label against the presence and length rules.

    Args:
        value: The value to check
        field: Attribute name used in error messages

    Returns:
        List of validation errors, empty when the value is valid
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return [ValidationError(f"{field} can't be blank", field=field, value=value)]

    if not isinstance(value, str):
        return [ValidationError(f"{field} must be a string", field=field, value=value)]

    if len(value) > MAX_LENGTH:
        return [
            ValidationError(
                f"{field} is too long (maximum is {MAX_LENGTH} characters)", field=field, value=value
            )
        ]

    return []


def normalize(raw_code: object) -> str:
    """
    Normalize a raw code into a valid system label.

    Args:
        raw_code: The code as supplied by a caller, e.g. ``" customer "``

    Returns:
        The normalized system label, e.g. ``"CUSTOMER"``

    Raises:
        ValidationError: If the result is empty, too long or malformed
    """
    code = canonicalize(raw_code)
    errors = check_system_label(code, field="system label")
    if errors:
        raise errors[0]
    return code
