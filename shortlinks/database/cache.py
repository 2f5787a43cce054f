"""Lookup cache in front of the link store.

The cache is an accelerator only: every backend treats its own failures as a
miss, and callers always fall through to the store.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

import redis.asyncio as redis
from redis.exceptions import RedisError

from .models import Link

DEFAULT_TTL_SECONDS = 3600


class LookupCache(ABC):
    """Cache of short code -> Link."""

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS, logger: Optional[logging.Logger] = None):
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return True

    @abstractmethod
    async def get(self, short_code: str) -> Optional[Link]:
        """Return the cached Link or None on miss."""
        pass

    @abstractmethod
    async def set(self, short_code: str, link: Link, ttl: Optional[int] = None) -> bool:
        """Cache a Link. Returns True if stored.

        ``ttl=None`` uses the default TTL; a TTL of zero or less stores nothing.
        """
        pass

    @abstractmethod
    async def invalidate(self, short_code: str) -> bool:
        """Drop a cached entry. Returns True if something was removed."""
        pass

    def _effective_ttl(self, ttl: Optional[int]) -> int:
        return self.ttl_seconds if ttl is None else ttl

    async def connect(self) -> None:
        pass

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        pass


class MemoryCache(LookupCache):
    """Per-process cache with monotonic-clock expiry."""

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_entries: int = 10000,
        logger: Optional[logging.Logger] = None,
        clock=time.monotonic,
    ):
        super().__init__(ttl_seconds=ttl_seconds, logger=logger)
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Link]] = {}

    async def get(self, short_code: str) -> Optional[Link]:
        entry = self._entries.get(short_code)
        if entry is None:
            return None
        expires_at, link = entry
        if expires_at <= self._clock():
            self._entries.pop(short_code, None)
            return None
        return link

    async def set(self, short_code: str, link: Link, ttl: Optional[int] = None) -> bool:
        ttl = self._effective_ttl(ttl)
        if ttl <= 0:
            return False
        if short_code not in self._entries and len(self._entries) >= self.max_entries:
            self._evict()
        self._entries[short_code] = (self._clock() + ttl, link)
        return True

    async def invalidate(self, short_code: str) -> bool:
        return self._entries.pop(short_code, None) is not None

    def _evict(self) -> None:
        now = self._clock()
        for code in [c for c, (expires_at, _) in self._entries.items() if expires_at <= now]:
            del self._entries[code]
        if len(self._entries) >= self.max_entries:
            # dicts keep insertion order; drop the oldest entry
            self._entries.pop(next(iter(self._entries)))

    def __len__(self) -> int:
        return len(self._entries)


class RedisCache(LookupCache):
    """Redis cache for link lookups."""

    KEY_PREFIX = "shortlinks:link:"

    def __init__(
        self,
        redis_url: str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: Default TTL for cached items
            logger: Optional logger instance
        """
        super().__init__(ttl_seconds=ttl_seconds, logger=logger)
        self.redis_url = redis_url
        self.client: Optional[redis.Redis] = None
        self._enabled = False
        self.logger.info(f"Redis cache configured with TTL={ttl_seconds}s")

    @property
    def enabled(self) -> bool:
        return self._enabled and self.client is not None

    async def connect(self) -> None:
        """Connect to Redis. On failure the cache stays disabled."""
        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self._enabled = True
            self.logger.info("Connected to Redis")
        except (RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self._enabled = False

    def get_cache_key(self, short_code: str) -> str:
        return f"{self.KEY_PREFIX}{short_code}"

    async def get(self, short_code: str) -> Optional[Link]:
        if not self.enabled:
            return None

        try:
            raw = await self.client.get(self.get_cache_key(short_code))
        except (RedisError, OSError) as e:
            self.logger.error(f"Cache get error for {short_code}: {e}")
            return None

        if raw is None:
            return None
        try:
            return Link.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            self.logger.warning(f"Discarding malformed cache entry for {short_code}: {e}")
            return None

    async def set(self, short_code: str, link: Link, ttl: Optional[int] = None) -> bool:
        if not self.enabled:
            return False

        ttl = self._effective_ttl(ttl)
        if ttl <= 0:
            return False

        try:
            await self.client.setex(
                self.get_cache_key(short_code),
                ttl,
                json.dumps(link.to_dict()),
            )
            return True
        except (RedisError, OSError) as e:
            self.logger.error(f"Cache set error for {short_code}: {e}")
            return False

    async def invalidate(self, short_code: str) -> bool:
        if not self.enabled:
            return False

        try:
            return await self.client.delete(self.get_cache_key(short_code)) > 0
        except (RedisError, OSError) as e:
            self.logger.error(f"Cache delete error for {short_code}: {e}")
            return False

    async def ping(self) -> bool:
        if not self.enabled:
            return False
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.logger.info("Redis connection closed")
