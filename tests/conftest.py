"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortlinks.admin import LinkAdminService
from shortlinks.common.logging_config import setup_logging
from shortlinks.database.cache import MemoryCache
from shortlinks.database.memory import InMemoryLinkStore
from shortlinks.resolver import Resolver
from shortlinks.shortcode import ShortCodeGenerator
from web_app import create_app


class FixedCodeGenerator(ShortCodeGenerator):
    """Always returns the same code, to force collisions."""

    def __init__(self, code: str):
        super().__init__(default_length=len(code))
        self.code = code
        self.calls = 0

    def generate_random(self, length=None) -> str:
        self.calls += 1
        return self.code


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def short_code_generator():
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def store(short_code_generator, logger):
    return InMemoryLinkStore(short_code_generator=short_code_generator, logger=logger)


@pytest.fixture
def cache(logger):
    return MemoryCache(ttl_seconds=3600, logger=logger)


@pytest.fixture
def resolver(store, cache, logger):
    return Resolver(store=store, cache=cache, logger=logger)


@pytest.fixture
def admin(store, cache, logger):
    return LinkAdminService(store=store, cache=cache, logger=logger)


@pytest.fixture
def config():
    return Config(database_url="memory://", base_url="http://testserver", redis_url=None)


@pytest.fixture
def app(config, store, cache, resolver, admin):
    """Create test FastAPI app."""
    return create_app(
        config=config,
        store=store,
        cache=cache,
        resolver=resolver,
        admin=admin,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def fixed_generator():
    """Factory for generators that always return the given code."""
    return FixedCodeGenerator
