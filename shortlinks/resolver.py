"""Short path resolution and click accounting."""

import asyncio
import logging
from typing import Optional, Set

from .common.validators import (
    DEFAULT_RESERVED_PATTERN,
    compile_reserved_pattern,
    is_valid_short_code,
)
from .database.base import LinkStoreBase
from .database.cache import LookupCache
from .database.models import Link
from .errors import StorageFailure


class Resolver:
    """Map an inbound path to a stored Link.

    The resolver holds no per-request state. A hit schedules the click
    increment as a background task, so callers can answer with the redirect
    without waiting on the store write.
    """

    def __init__(
        self,
        store: LinkStoreBase,
        cache: Optional[LookupCache] = None,
        reserved_pattern: Optional[str] = DEFAULT_RESERVED_PATTERN,
        cache_ttl_seconds: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.cache = cache
        self.reserved_pattern = compile_reserved_pattern(reserved_pattern)
        self.cache_ttl_seconds = cache_ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self._pending: Set[asyncio.Task] = set()

    @staticmethod
    def normalize_path(path: str) -> str:
        """Strip leading and trailing slashes."""
        return (path or "").strip("/")

    def is_reserved(self, path: str) -> bool:
        """True when the trimmed path belongs to the host application."""
        if self.reserved_pattern is None:
            return False
        return self.reserved_pattern.match(self.normalize_path(path)) is not None

    async def resolve(self, path: str) -> Optional[Link]:
        """Resolve a request path.

        Returns:
            The Link to redirect to, or None when the path should be passed
            through (empty, reserved, malformed, unknown, or store error)
        """
        code = self.normalize_path(path)
        if not code or self.is_reserved(code):
            return None
        # Only the charset/length part; reserved paths were handled above.
        valid, _ = is_valid_short_code(code, reserved_pattern=None)
        if not valid:
            return None

        link = await self._lookup(code)
        if link is None:
            return None

        self._schedule_click(link)
        return link

    async def _lookup(self, code: str) -> Optional[Link]:
        if self.cache is not None:
            link = await self.cache.get(code)
            if link is not None:
                self.logger.debug(f"Cache hit for {code}")
                return link

        try:
            link = await self.store.get_by_code(code)
        except StorageFailure as e:
            self.logger.error(f"Lookup failed for short code {code}: {e}")
            return None

        if link is None:
            self.logger.debug(f"Short code not found: {code}")
            return None

        if self.cache is not None:
            await self.cache.set(code, link, self.cache_ttl_seconds)
            link = await self._confirm_fill(code, link)
        return link

    async def _confirm_fill(self, code: str, link: Link) -> Optional[Link]:
        """Re-read the row after a cache fill.

        A delete or slug reuse that ran while the lookup was in flight has
        already invalidated the cache before this fill wrote to it. If the row
        changed, drop the entry again and answer with what the store holds now.
        """
        try:
            current = await self.store.get_by_code(code)
        except StorageFailure as e:
            self.logger.error(f"Lookup failed for short code {code}: {e}")
            await self.cache.invalidate(code)
            return None

        if current is not None and current.id == link.id:
            return link

        self.logger.debug(f"Short code {code} changed during lookup, dropping cache entry")
        await self.cache.invalidate(code)
        return current

    def _schedule_click(self, link: Link) -> None:
        task = asyncio.create_task(self._record_click(link))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _record_click(self, link: Link) -> None:
        try:
            await self.store.increment_clicks(link.id)
        except StorageFailure as e:
            self.logger.warning(f"Click not recorded for {link.short_code} (id={link.id}): {e}")

    @property
    def pending_clicks(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for scheduled click increments to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
