"""Middleware for the short link web app."""

from .headers import ForwardedHeadersMiddleware
from .logging import LoggingMiddleware
from .redirect import ShortLinkRedirectMiddleware

__all__ = ["ForwardedHeadersMiddleware", "LoggingMiddleware", "ShortLinkRedirectMiddleware"]
