"""Build store, cache and services from configuration."""

import logging
from typing import Optional

from .admin import LinkAdminService
from .database.base import LinkStoreBase
from .database.cache import LookupCache, MemoryCache, RedisCache
from .database.memory import InMemoryLinkStore
from .database.postgres import PostgresLinkStore
from .domain_check import DomainChecker
from .resolver import Resolver
from .shortcode import ShortCodeGenerator


def create_store(config, logger: Optional[logging.Logger] = None) -> LinkStoreBase:
    """Pick the store backend from ``config.database_url``."""
    generator = ShortCodeGenerator(default_length=config.short_code_length)
    if config.database_url.startswith("memory://"):
        return InMemoryLinkStore(
            short_code_generator=generator,
            max_collision_retries=config.max_collision_retries,
            reserved_pattern=config.reserved_path_pattern,
            logger=logger,
        )
    return PostgresLinkStore(
        db_config=config.database_url,
        short_code_generator=generator,
        max_collision_retries=config.max_collision_retries,
        reserved_pattern=config.reserved_path_pattern,
        pool_max_size=config.database_pool_max_size,
        create_tables=config.database_create_tables,
        logger=logger,
    )


async def create_cache(config, logger: Optional[logging.Logger] = None) -> Optional[LookupCache]:
    """Redis if configured, otherwise an in-process cache unless disabled."""
    if config.redis_url:
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
        return cache
    if config.memory_cache_enabled:
        return MemoryCache(ttl_seconds=config.cache_ttl_seconds, logger=logger)
    return None


def create_resolver(config, store: LinkStoreBase, cache: Optional[LookupCache],
                    logger: Optional[logging.Logger] = None) -> Resolver:
    return Resolver(
        store=store,
        cache=cache,
        reserved_pattern=config.reserved_path_pattern,
        cache_ttl_seconds=config.cache_ttl_seconds,
        logger=logger,
    )


def create_admin(store: LinkStoreBase, cache: Optional[LookupCache],
                 logger: Optional[logging.Logger] = None) -> LinkAdminService:
    return LinkAdminService(store=store, cache=cache, logger=logger)


def create_domain_checker(config, logger: Optional[logging.Logger] = None) -> Optional[DomainChecker]:
    """A DomainChecker when enabled and a short domain is configured."""
    if not config.domain_check_enabled or not config.short_domain:
        return None
    return DomainChecker(
        domain=config.short_domain,
        expected_ip=config.server_ip,
        interval_seconds=config.domain_check_interval_seconds,
        logger=logger,
    )
