"""Request logging middleware."""

import logging
import time
from typing import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

QUIET_PATHS = ("/health",)


class LoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request: status, duration and, for redirects, the target.

    Server errors log at ERROR, client errors at WARNING. Load balancer
    health probes only log at DEBUG.
    """

    def __init__(self, app, logger: logging.Logger = None, quiet_paths: Iterable[str] = QUIET_PATHS):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortlinks.web")
        self.quiet_paths = frozenset(quiet_paths)

    def _level(self, path: str, status_code: int) -> int:
        if status_code >= 500:
            return logging.ERROR
        if status_code >= 400:
            return logging.WARNING
        if path in self.quiet_paths:
            return logging.DEBUG
        return logging.INFO

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"
        message = f"{request.method} {path} {response.status_code} {duration_ms:.2f}ms client={client_ip}"
        location = response.headers.get("location")
        if location:
            message = f"{message} -> {location}"

        self.logger.log(self._level(path, response.status_code), message)
        return response
