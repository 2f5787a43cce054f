"""Tests for the PostgreSQL store's SQL and error mapping, using a fake connection."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import asyncpg
import pytest

from shortlinks.database.postgres import PostgresLinkStore
from shortlinks.errors import DuplicateCode, StorageFailure


def _row(**overrides):
    row = {
        "id": 1,
        "title": "T",
        "target_url": "https://example.com/x",
        "short_code": "abc",
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "clicks": 0,
    }
    row.update(overrides)
    return row


class FakeConnection:
    def __init__(self, fetchrow_result=None, fetch_result=None, execute_result="UPDATE 1", error=None):
        self.fetchrow_result = fetchrow_result
        self.fetch_result = fetch_result or []
        self.execute_result = execute_result
        self.error = error
        self.queries = []

    async def _record(self, query, args):
        self.queries.append((" ".join(query.split()), args))
        if self.error is not None:
            raise self.error

    async def fetchrow(self, query, *args):
        await self._record(query, args)
        return self.fetchrow_result

    async def fetch(self, query, *args):
        await self._record(query, args)
        return self.fetch_result

    async def fetchval(self, query, *args):
        await self._record(query, args)
        return 1

    async def execute(self, query, *args):
        await self._record(query, args)
        return self.execute_result


@pytest.fixture
def make_store(logger):
    def factory(conn):
        store = PostgresLinkStore(db_config="postgresql://u:p@localhost:5432/test", logger=logger)

        @asynccontextmanager
        async def fake_connection():
            yield conn

        store._get_connection = fake_connection
        return store
    return factory


class TestPostgresLinkStore:

    async def test_create_returns_link(self, make_store):
        conn = FakeConnection(fetchrow_result=_row())
        store = make_store(conn)

        link = await store.create("T", "https://example.com/x", "abc")

        assert link.id == 1
        assert link.short_code == "abc"
        query, args = conn.queries[0]
        assert query.startswith("INSERT INTO short_links")
        assert args[:3] == ("T", "https://example.com/x", "abc")

    async def test_unique_violation_maps_to_duplicate(self, make_store):
        conn = FakeConnection(error=asyncpg.UniqueViolationError("duplicate key"))
        store = make_store(conn)

        with pytest.raises(DuplicateCode):
            await store.create("T", "https://example.com/x", "abc")

    async def test_driver_error_maps_to_storage_failure(self, make_store):
        conn = FakeConnection(error=ConnectionRefusedError("refused"))
        store = make_store(conn)

        with pytest.raises(StorageFailure) as exc_info:
            await store.get_by_code("abc")
        assert exc_info.value.operation == "get_by_code"

    async def test_increment_is_single_atomic_update(self, make_store):
        conn = FakeConnection()
        store = make_store(conn)

        await store.increment_clicks(7)

        assert conn.queries == [("UPDATE short_links SET clicks = clicks + 1 WHERE id = $1", (7,))]

    async def test_list_uses_allow_listed_order(self, make_store):
        conn = FakeConnection(fetch_result=[_row(), _row(id=2, short_code="def")])
        store = make_store(conn)

        links = await store.list("clicks", "asc")
        assert [link.id for link in links] == [1, 2]
        assert conn.queries[-1][0].endswith("ORDER BY clicks ASC, id ASC")

        await store.list("id; DROP TABLE links", "ASC")
        assert conn.queries[-1][0].endswith("ORDER BY created_at DESC, id DESC")
        assert "DROP" not in conn.queries[-1][0]

    async def test_delete_reports_missing_row(self, make_store):
        store = make_store(FakeConnection(execute_result="DELETE 0"))
        assert await store.delete(99) is False

        store = make_store(FakeConnection(execute_result="DELETE 1"))
        assert await store.delete(1) is True

    async def test_statistics(self, make_store):
        store = make_store(FakeConnection(fetchrow_result={"total_links": 3, "total_clicks": 10}))

        stats = await store.get_statistics()
        assert stats == {"total_links": 3, "total_clicks": 10, "database": "postgresql"}

    async def test_health_check_false_on_error(self, make_store):
        store = make_store(FakeConnection(error=OSError("down")))
        assert await store.health_check() is False

    async def test_initialize_skips_without_flag(self, make_store):
        conn = FakeConnection()
        store = make_store(conn)

        await store.initialize()
        assert conn.queries == []

        store.create_tables = True
        await store.initialize()
        assert "CREATE TABLE IF NOT EXISTS short_links" in conn.queries[0][0]
