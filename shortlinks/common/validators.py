"""Validation utilities for short links."""

import re
from urllib.parse import urlsplit, urlunsplit
from typing import Optional, Pattern, Tuple, Union

MAX_URL_LENGTH = 2048
MIN_SHORT_CODE_LENGTH = 1
MAX_SHORT_CODE_LENGTH = 50

DEFAULT_RESERVED_PATTERN = r"^(admin|api|wp-|health|favicon|robots|static)"

_SHORT_CODE_RE = re.compile(r'^[a-zA-Z0-9_-]+$')


def compile_reserved_pattern(pattern: Union[str, Pattern, None]) -> Optional[Pattern]:
    """Compile a reserved-path pattern (case-insensitive). Empty disables the guard."""
    if pattern is None or pattern == "":
        return None
    if isinstance(pattern, str):
        return re.compile(pattern, re.IGNORECASE)
    return pattern


def is_reserved_path(path: str, pattern: Union[str, Pattern, None] = DEFAULT_RESERVED_PATTERN) -> bool:
    """Check whether a trimmed path belongs to the host application's own routes."""
    compiled = compile_reserved_pattern(pattern)
    if compiled is None:
        return False
    return compiled.match(path) is not None


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str) or not url.strip():
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    try:
        result = urlsplit(url.strip())

        # Check if scheme is http or https
        if result.scheme.lower() not in ["http", "https"]:
            return False, "URL must use http or https protocol"

        # Check if netloc (domain) exists
        if not result.netloc or not result.hostname:
            return False, "URL must have a valid domain"

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def normalize_url(url: str) -> str:
    """Normalize a valid URL: strip whitespace, lower-case scheme and host.

    User info (``user:password@``) is kept exactly as given.
    """
    parts = urlsplit(url.strip())
    userinfo, at, hostport = parts.netloc.rpartition("@")
    return urlunsplit((
        parts.scheme.lower(),
        f"{userinfo}{at}{hostport.lower()}",
        parts.path,
        parts.query,
        parts.fragment,
    ))


def is_valid_title(title: str) -> Tuple[bool, str]:
    """Validate a link title."""
    if not title or not isinstance(title, str) or not title.strip():
        return False, "Title is required"
    return True, ""


def is_valid_short_code(
    short_code: str,
    min_length: int = MIN_SHORT_CODE_LENGTH,
    max_length: int = MAX_SHORT_CODE_LENGTH,
    reserved_pattern: Union[str, Pattern, None] = DEFAULT_RESERVED_PATTERN,
) -> Tuple[bool, str]:
    """Validate a short code.

    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code
        reserved_pattern: Paths matching this pattern cannot be used as codes

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if len(short_code) < min_length:
        return False, f"Short code must be at least {min_length} characters"

    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"

    # Only allow alphanumeric characters, hyphens, and underscores
    if not _SHORT_CODE_RE.match(short_code):
        return False, "Short code can only contain letters, numbers, hyphens, and underscores"

    if is_reserved_path(short_code, reserved_pattern):
        return False, f"'{short_code}' is reserved and cannot be used"

    return True, ""
