"""Common utilities for the short link service."""

from .validators import is_valid_url, is_valid_short_code, is_reserved_path, normalize_url
from .headers import extract_forwarded_headers, build_base_url
from .url_builder import build_short_url, build_qr_code_url
from .logging_config import setup_logging

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "is_reserved_path",
    "normalize_url",
    "extract_forwarded_headers",
    "build_base_url",
    "build_short_url",
    "build_qr_code_url",
    "setup_logging",
]
