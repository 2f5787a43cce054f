"""Storage layer for short links."""

from .base import LinkStoreBase, SORTABLE_COLUMNS
from .cache import LookupCache, MemoryCache, RedisCache
from .memory import InMemoryLinkStore
from .models import Link
from .postgres import PostgresLinkStore

__all__ = [
    "LinkStoreBase",
    "SORTABLE_COLUMNS",
    "LookupCache",
    "MemoryCache",
    "RedisCache",
    "InMemoryLinkStore",
    "Link",
    "PostgresLinkStore",
]
