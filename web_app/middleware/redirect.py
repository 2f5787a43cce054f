"""Offer inbound paths to the resolver before normal routing."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse
from typing import Callable


def strip_path_prefix(path: str, path_prefix: str) -> str:
    """Remove a configured prefix such as '/s' from '/s/abc123'."""
    prefix = (path_prefix or "").strip("/")
    if not prefix:
        return path
    head = f"/{prefix}/"
    if path.startswith(head):
        return path[len(head) - 1:]
    return path


class ShortLinkRedirectMiddleware(BaseHTTPMiddleware):
    """Answer GET/HEAD requests for known short codes with a 301.

    Anything the resolver declines (reserved, unknown, store error) continues
    to the router unchanged.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        resolver = getattr(request.app.state, "resolver", None)
        if resolver is None or request.method not in ("GET", "HEAD"):
            return await call_next(request)

        config = getattr(request.app.state, "config", None)
        path = strip_path_prefix(request.url.path, getattr(config, "path_prefix", ""))

        link = await resolver.resolve(path)
        if link is None:
            return await call_next(request)

        return RedirectResponse(url=link.target_url, status_code=301)
