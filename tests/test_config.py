"""Tests for configuration and component wiring."""

import pytest
from pydantic import ValidationError

from config import Config
from shortlinks.bootstrap import create_admin, create_cache, create_domain_checker, create_resolver, create_store
from shortlinks.common.validators import DEFAULT_RESERVED_PATTERN
from shortlinks.database.cache import MemoryCache, RedisCache
from shortlinks.database.memory import InMemoryLinkStore
from shortlinks.database.postgres import PostgresLinkStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # Keep a developer's .env or exported variables out of these tests.
    monkeypatch.chdir(tmp_path)
    for name in ("DATABASE_URL", "REDIS_URL", "PORT", "ADMIN_API_KEY", "SHORT_CODE_LENGTH", "PATH_PREFIX"):
        monkeypatch.delenv(name, raising=False)


class TestConfig:

    def test_defaults(self):
        config = Config()

        assert config.database_url == "memory://"
        assert config.redis_url is None
        assert config.cache_ttl_seconds == 3600
        assert config.short_code_length == 6
        assert config.max_collision_retries == 5
        assert config.reserved_path_pattern == DEFAULT_RESERVED_PATTERN
        assert config.admin_api_key is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/links")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("PATH_PREFIX", "/s")

        config = Config()

        assert config.database_url == "postgresql://u:p@db:5432/links"
        assert config.port == 8080
        assert config.path_prefix == "/s"

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("SHORT_CODE_LENGTH=8\n")
        assert Config().short_code_length == 8

    def test_rejects_invalid_values(self):
        with pytest.raises(ValidationError):
            Config(short_code_length=0)

    def test_safe_dump_masks_api_key(self):
        data = Config(admin_api_key="s3cret").safe_dump()
        assert data["admin_api_key"] == "***"
        assert Config().safe_dump()["admin_api_key"] is None

    def test_safe_dump_masks_url_passwords(self):
        data = Config(
            database_url="postgresql://app:s3cret@db:5432/links",
            redis_url="redis://:hunter2@cache:6379/0",
        ).safe_dump()

        assert data["database_url"] == "postgresql://app:***@db:5432/links"
        assert data["redis_url"] == "redis://:***@cache:6379/0"
        assert "s3cret" not in str(data)
        assert "hunter2" not in str(data)

    def test_safe_dump_leaves_urls_without_password(self):
        data = Config(database_url="postgresql://app@db:5432/links").safe_dump()
        assert data["database_url"] == "postgresql://app@db:5432/links"
        assert Config().safe_dump()["redis_url"] is None


class TestBootstrap:

    def test_memory_store(self, logger):
        store = create_store(Config(database_url="memory://", short_code_length=8), logger)

        assert isinstance(store, InMemoryLinkStore)
        assert store.generator.default_length == 8

    def test_postgres_store(self, logger):
        config = Config(database_url="postgresql://u:p@localhost:5432/links", database_create_tables=True)
        store = create_store(config, logger)

        assert isinstance(store, PostgresLinkStore)
        assert store.create_tables is True

    async def test_memory_cache_by_default(self, logger):
        cache = await create_cache(Config(cache_ttl_seconds=60), logger)

        assert isinstance(cache, MemoryCache)
        assert cache.ttl_seconds == 60

    async def test_cache_disabled(self, logger):
        assert await create_cache(Config(memory_cache_enabled=False), logger) is None

    async def test_redis_unreachable_disables_cache(self, logger):
        cache = await create_cache(Config(redis_url="redis://127.0.0.1:1/0"), logger)

        assert isinstance(cache, RedisCache)
        assert cache.enabled is False
        await cache.close()

    async def test_services_share_store(self, logger):
        config = Config()
        store = create_store(config, logger)
        cache = await create_cache(config, logger)

        resolver = create_resolver(config, store, cache, logger)
        admin = create_admin(store, cache, logger)

        link = await admin.create("T", "https://example.com/x", "abc")
        assert (await resolver.resolve("abc")).id == link.id
        await resolver.drain()

    def test_domain_checker_requires_domain(self, logger):
        assert create_domain_checker(Config(domain_check_enabled=True), logger) is None
        assert create_domain_checker(Config(short_domain="https://sho.rt"), logger) is None

        checker = create_domain_checker(
            Config(domain_check_enabled=True, short_domain="https://sho.rt", server_ip="1.2.3.4"),
            logger,
        )
        assert checker.domain == "sho.rt"
        assert checker.expected_ip == "1.2.3.4"
