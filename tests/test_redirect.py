"""Tests for short link redirects served ahead of routing."""

import asyncio
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from web_app import create_app
from web_app.middleware.redirect import strip_path_prefix


@pytest.mark.asyncio
class TestRedirects:

    async def test_known_code_redirects(self, client, store, resolver):
        await store.create("T", "https://example.com/landing", "abc")

        response = await client.get("/abc", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == "https://example.com/landing"

        await resolver.drain()
        assert (await store.get_by_code("abc")).clicks == 1

    async def test_trailing_slash(self, client, store, resolver):
        await store.create("T", "https://example.com/landing", "abc")

        response = await client.get("/abc/", follow_redirects=False)

        assert response.status_code == 301
        await resolver.drain()

    async def test_unknown_code_falls_through(self, client, store):
        response = await client.get("/nope", follow_redirects=False)

        assert response.status_code == 404
        assert (await store.get_statistics())["total_clicks"] == 0

    async def test_reserved_path_is_not_shadowed(self, client, store, resolver):
        await store._insert("Shadow", "https://evil.example.com", "admin-login", datetime.now(timezone.utc))
        await store._insert("Shadow", "https://evil.example.com", "health", datetime.now(timezone.utc))

        assert (await client.get("/admin-login", follow_redirects=False)).status_code == 404
        health = await client.get("/health", follow_redirects=False)
        assert health.status_code == 200
        assert health.json() == {"status": "healthy"}

        await resolver.drain()
        assert (await store.get_by_code("admin-login")).clicks == 0

    async def test_post_is_not_redirected(self, client, store, resolver):
        await store.create("T", "https://example.com/landing", "abc")

        response = await client.post("/abc", follow_redirects=False)

        assert response.status_code != 301
        assert resolver.pending_clicks == 0

    async def test_store_outage_falls_through(self, client, store):
        await store.create("T", "https://example.com/landing", "abc")
        store.available = False

        response = await client.get("/abc", follow_redirects=False)

        assert response.status_code == 404

    async def test_path_prefix(self, store, cache, resolver, admin):
        config = Config(database_url="memory://", path_prefix="/s")
        app = create_app(config=config, store=store, cache=cache, resolver=resolver, admin=admin)
        await store.create("T", "https://example.com/landing", "abc")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.get("/s/abc", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == "https://example.com/landing"
        await resolver.drain()

    async def test_concurrent_redirects_count_every_click(self, client, store, resolver):
        await store.create("T", "https://example.com/landing", "hot")

        responses = await asyncio.gather(
            *[client.get("/hot", follow_redirects=False) for _ in range(50)]
        )
        await resolver.drain()

        assert all(r.status_code == 301 for r in responses)
        assert (await store.get_by_code("hot")).clicks == 50

    async def test_api_routes_still_served(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200


class TestStripPathPrefix:

    @pytest.mark.parametrize("path,prefix,expected", [
        ("/s/abc", "/s", "/abc"),
        ("/s/abc", "s/", "/abc"),
        ("/abc", "/s", "/abc"),
        ("/sabc", "/s", "/sabc"),
        ("/abc", "", "/abc"),
        ("/abc", None, "/abc"),
    ])
    def test_strip(self, path, prefix, expected):
        assert strip_path_prefix(path, prefix) == expected
