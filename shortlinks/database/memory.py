"""In-process link store, used for development and tests."""

import asyncio
import itertools
import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional, List, Dict, Any

from ..common.validators import DEFAULT_RESERVED_PATTERN
from ..errors import DuplicateCode, StorageFailure
from ..shortcode import ShortCodeGenerator
from .base import LinkStoreBase, resolve_ordering
from .models import Link


class InMemoryLinkStore(LinkStoreBase):
    """Dict-backed link store.

    Links are indexed by id and by short code. Mutations happen under an
    asyncio lock, so concurrent increments never lose updates.
    """

    def __init__(
        self,
        db_config: str = "memory://",
        short_code_generator: Optional[ShortCodeGenerator] = None,
        max_collision_retries: int = 5,
        reserved_pattern: Optional[str] = DEFAULT_RESERVED_PATTERN,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(
            db_config,
            short_code_generator=short_code_generator,
            max_collision_retries=max_collision_retries,
            reserved_pattern=reserved_pattern,
            logger=logger,
        )
        self._links: Dict[int, Link] = {}
        self._codes: Dict[str, int] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()
        self.available = True

    def _check_available(self, operation: str) -> None:
        # Lets tests simulate an outage.
        if not self.available:
            raise StorageFailure(operation, "store unavailable")

    async def _insert(
        self,
        title: str,
        target_url: str,
        short_code: str,
        created_at: datetime,
    ) -> Link:
        self._check_available("create")
        async with self._lock:
            if short_code in self._codes:
                raise DuplicateCode(short_code)
            link = Link(
                id=next(self._ids),
                title=title,
                target_url=target_url,
                short_code=short_code,
                created_at=created_at,
                clicks=0,
            )
            self._links[link.id] = link
            self._codes[short_code] = link.id
        self.logger.info(f"Created link {link.id}: {short_code} -> {target_url}")
        return link

    async def get_by_code(self, short_code: str) -> Optional[Link]:
        self._check_available("get_by_code")
        link_id = self._codes.get(short_code)
        if link_id is None:
            return None
        return self._links.get(link_id)

    async def get_by_id(self, link_id: int) -> Optional[Link]:
        self._check_available("get_by_id")
        return self._links.get(link_id)

    async def increment_clicks(self, link_id: int) -> None:
        self._check_available("increment_clicks")
        async with self._lock:
            link = self._links.get(link_id)
            if link is None:
                self.logger.warning(f"Cannot increment clicks - link not found: {link_id}")
                return
            self._links[link_id] = replace(link, clicks=link.clicks + 1)

    async def list(self, order_by: Optional[str] = None, direction: Optional[str] = None) -> List[Link]:
        self._check_available("list")
        column, dir_ = resolve_ordering(order_by, direction)
        reverse = dir_ == "DESC"
        return sorted(
            self._links.values(),
            key=lambda link: (getattr(link, column), link.id),
            reverse=reverse,
        )

    async def delete(self, link_id: int) -> bool:
        self._check_available("delete")
        async with self._lock:
            link = self._links.pop(link_id, None)
            if link is None:
                return False
            self._codes.pop(link.short_code, None)
        self.logger.info(f"Deleted link {link_id}: {link.short_code}")
        return True

    async def get_statistics(self) -> Dict[str, Any]:
        self._check_available("get_statistics")
        return {
            "total_links": len(self._links),
            "total_clicks": sum(link.clicks for link in self._links.values()),
            "database": "memory",
        }

    async def health_check(self) -> bool:
        return self.available
