"""Forwarded headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortlinks.common.headers import extract_forwarded_headers


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Copy X-Forwarded-* headers onto request.state."""

    async def dispatch(self, request: Request, call_next: Callable):
        for name, value in extract_forwarded_headers(request.headers).items():
            setattr(request.state, name, value)
        return await call_next(request)
