"""Request header helpers used to build public short URLs."""

from typing import Dict, Mapping, Optional


def _lower_keys(headers: Mapping[str, str]) -> Dict[str, str]:
    return {k.lower(): v for k, v in headers.items()}


def extract_forwarded_headers(headers: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* values from request headers.

    Args:
        headers: Request headers mapping

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for, forwarded_prefix
    """
    lowered = _lower_keys(headers)
    return {
        "forwarded_proto": lowered.get("x-forwarded-proto"),
        "forwarded_host": lowered.get("x-forwarded-host"),
        "forwarded_for": lowered.get("x-forwarded-for"),
        "forwarded_prefix": lowered.get("x-forwarded-prefix"),
    }


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
    short_domain: Optional[str] = None,
) -> str:
    """Build the base URL short links are published under.

    Priority:
    1. Configured short domain
    2. X-Forwarded-Proto + X-Forwarded-Host
    3. Request scheme + host
    4. Fallback base URL from config

    Returns:
        Base URL without trailing slash (e.g., https://sho.rt)
    """
    if short_domain:
        return short_domain.rstrip("/")

    forwarded = extract_forwarded_headers(headers)
    if forwarded["forwarded_proto"] and forwarded["forwarded_host"]:
        return f"{forwarded['forwarded_proto']}://{forwarded['forwarded_host']}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def get_forwarded_path_prefix(headers: Mapping[str, str]) -> str:
    """Path prefix from X-Forwarded-Prefix, normalized to '/prefix' or ''."""
    value = extract_forwarded_headers(headers)["forwarded_prefix"]
    if not value:
        return ""
    p = value.strip().strip("/")
    return "/" + p if p else ""
