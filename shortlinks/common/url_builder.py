"""URL building utilities for short links."""

from urllib.parse import quote

QR_CODE_SERVICE_URL = "https://quickchart.io/qr"


def build_short_url(
    short_code: str,
    base_url: str,
    path_prefix: str = "",
) -> str:
    """Build complete short URL.

    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Complete short URL
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{short_code}"
    return f"{base}/{short_code}"


def build_qr_code_url(short_url: str, size: int = 150) -> str:
    """Build a QR code image URL encoding the short URL."""
    return f"{QR_CODE_SERVICE_URL}?text={quote(short_url, safe='')}&size={size}"
