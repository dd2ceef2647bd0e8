"""Sanitization utilities for structured log events.

Used by the ``sanitize_sensitive_data`` structlog processor so password
hashes, connection strings and similar values never reach log output.
"""

from typing import Any


# Sensitive field patterns that should be redacted
SENSITIVE_PATTERNS = {
    # Authentication
    "password",
    "passwd",
    "pwd",
    "pw",
    "secret",
    "token",
    "credentials",
    # Database
    "connection_string",
    "database_url",
    "db_password",
    "db_statement",
    "db_query_parameters",
}


def is_sensitive_key(key: str, patterns: set[str] | None = None) -> bool:
    """Check if a key matches any sensitive pattern.

    Args:
        key: The key to check (case-insensitive, normalized)
        patterns: Optional custom patterns (defaults to SENSITIVE_PATTERNS)

    Returns:
        True if key matches any sensitive pattern, False otherwise

    Example:
        >>> is_sensitive_key("pw")
        True
        >>> is_sensitive_key("nickname")
        False
    """
    if patterns is None:
        patterns = SENSITIVE_PATTERNS

    # Normalize key: lowercase, replace separators with underscores
    normalized_key = key.lower().replace("-", "_").replace(".", "_").replace(" ", "_")

    for pattern in patterns:
        normalized_pattern = pattern.replace(".", "_").replace("-", "_")
        if normalized_pattern in normalized_key:
            return True

    return False


def sanitize_dict(
    data: dict[str, Any],
    patterns: set[str] | None = None,
    recursive: bool = True,
) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive values redacted.

    Args:
        data: Dictionary to sanitize
        patterns: Optional custom patterns (defaults to SENSITIVE_PATTERNS)
        recursive: Whether to recursively sanitize nested dicts/lists

    Returns:
        New dictionary with sensitive values redacted

    Example:
        >>> sanitize_dict({"pw": "hash", "id": "alice"})
        {'pw': '***REDACTED***', 'id': 'alice'}
    """
    sanitized = {}

    for key, value in data.items():
        if is_sensitive_key(key, patterns):
            sanitized[key] = "***REDACTED***"
        elif recursive and isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, patterns, recursive)
        elif recursive and isinstance(value, list):
            sanitized[key] = [
                sanitize_dict(item, patterns, recursive) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            sanitized[key] = value

    return sanitized
