"""Link administration: create, list, delete."""

import logging
from typing import Optional, Dict, Any, List

from .common.url_builder import build_qr_code_url, build_short_url
from .database.base import LinkStoreBase
from .database.cache import LookupCache
from .database.models import Link
from .errors import InvalidInput

DEFAULT_API_TITLE = "API Link"


class LinkAdminService:
    """Service layer over the link store used by the admin API and CLI."""

    def __init__(
        self,
        store: LinkStoreBase,
        cache: Optional[LookupCache] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize admin service.

        Args:
            store: Link store instance
            cache: Optional lookup cache to keep consistent on writes
            logger: Optional logger
        """
        self.store = store
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)

    async def create(self, title: str, url: str, slug: Optional[str] = None) -> Link:
        """Create a link.

        Args:
            title: Display label
            url: Target URL
            slug: Optional explicit short code

        Returns:
            The created Link

        Raises:
            InvalidInput, DuplicateCode, CodeGenerationExhausted, StorageFailure
        """
        slug = slug.strip() if slug and slug.strip() else None
        link = await self.store.create(title, url, slug)

        # A code can be reused after a delete; never serve an older entry.
        if self.cache is not None:
            await self.cache.invalidate(link.short_code)

        self.logger.info(f"Created link {link.short_code} -> {link.target_url}")
        return link

    async def list(self, sort_col: Optional[str] = None, direction: Optional[str] = None) -> List[Link]:
        """List links sorted by an allow-listed column."""
        return await self.store.list(sort_col, direction)

    async def get(self, short_code: str) -> Optional[Link]:
        """Get a link with its current click count."""
        return await self.store.get_by_code(short_code)

    async def delete(self, link_id: int) -> bool:
        """Delete a link by id. Deleting a missing id returns False."""
        link = await self.store.get_by_id(link_id)
        if link is None:
            self.logger.debug(f"Delete of missing link {link_id} ignored")
            return False

        deleted = await self.store.delete(link_id)
        if self.cache is not None:
            await self.cache.invalidate(link.short_code)

        if deleted:
            self.logger.info(f"Deleted link {link_id}: {link.short_code}")
        return deleted

    async def shorten(
        self,
        url: Optional[str],
        base_url: str,
        title: Optional[str] = None,
        alias: Optional[str] = None,
        path_prefix: str = "",
    ) -> Dict[str, Any]:
        """Create a link for the programmatic endpoint.

        Returns:
            Dictionary with link, short_url, qr_code_url

        Raises:
            InvalidInput: code ``no_url`` when url is missing
        """
        if not url or not url.strip():
            raise InvalidInput("Missing URL", code="no_url")

        title = title.strip() if title and title.strip() else DEFAULT_API_TITLE
        link = await self.create(title, url, alias)

        short_url = build_short_url(link.short_code, base_url, path_prefix)
        return {
            "link": link,
            "short_url": short_url,
            "qr_code_url": build_qr_code_url(short_url),
        }

    async def statistics(self) -> Dict[str, Any]:
        stats = await self.store.get_statistics()
        return {
            **stats,
            "cache_enabled": self.cache is not None and self.cache.enabled,
        }

    async def health_check(self) -> Dict[str, bool]:
        """Check store and cache health."""
        db_healthy = await self.store.health_check()

        cache_healthy = True
        if self.cache is not None and self.cache.enabled:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close store and cache connections."""
        await self.store.close()
        if self.cache is not None:
            await self.cache.close()
