"""
Input validation for publishing sync.

Checks base paths and locale codes before they reach the publishing API
or the job queue.
"""

import re

_LOCALE_PATTERN = re.compile(r"^[a-z]{2,3}(-[A-Za-z0-9]{2,8})*$")


def format_validation_error(field_name: str, reason: str) -> str:
    """
    Generate consistent error message for validation failures.

    Args:
        field_name: Human-readable field name (e.g., "Base path")
        reason: Description of validation failure (e.g., "cannot be empty")

    Returns:
        Formatted error message string
    """
    return f"{field_name} {reason}"


def validate_base_path(base_path: str) -> tuple[bool, str]:
    """
    Validate a content base path.

    Args:
        base_path: The path to validate, e.g. ``/government/case-studies/x``

    Returns:
        Tuple of (is_valid, error_message).
        Returns (True, "") if valid, (False, reason) if invalid.

    Validation rules:
        - Cannot be empty
        - Must start with '/'
        - Cannot contain '..' (path traversal protection)
        - Cannot have empty path segments (e.g., '/a//b')
        - Cannot contain whitespace
    """
    if not base_path or not base_path.strip():
        return (
            False,
            format_validation_error("Base path", "cannot be empty"),
        )

    if not base_path.startswith("/"):
        return (
            False,
            format_validation_error("Base path", "must start with '/'"),
        )

    if ".." in base_path:
        return (
            False,
            format_validation_error("Base path", "cannot contain '..'"),
        )

    if "//" in base_path:
        return (
            False,
            format_validation_error(
                "Base path", "cannot have empty path segments"
            ),
        )

    if any(ch.isspace() for ch in base_path):
        return (
            False,
            format_validation_error(
                "Base path", "cannot contain whitespace"
            ),
        )

    return (True, "")


def validate_locale(locale: str) -> tuple[bool, str]:
    """
    Validate a locale code such as ``en``, ``fr`` or ``zh-tw``.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not locale:
        return (
            False,
            format_validation_error("Locale", "cannot be empty"),
        )

    if not _LOCALE_PATTERN.match(locale):
        return (
            False,
            format_validation_error(
                "Locale", f"'{locale}' is not a valid locale code"
            ),
        )

    return (True, "")
