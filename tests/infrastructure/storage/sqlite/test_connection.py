"""Tests for the SQLite connection pool."""

from pathlib import Path

import pytest

from src.infrastructure.storage.sqlite.connection import ConnectionPool


@pytest.fixture
async def pool(db_path: Path):
    pool = ConnectionPool(db_path, pool_size=2, busy_timeout=1000)
    await pool.open()
    async with pool.connection() as conn:
        await conn.execute("CREATE TABLE counters (name TEXT PRIMARY KEY, value INTEGER)")
        await conn.commit()
    yield pool
    await pool.close()


class TestConnectionPoolLifecycle:
    def test_rejects_empty_pool(self, db_path: Path):
        with pytest.raises(ValueError):
            ConnectionPool(db_path, pool_size=0)

    async def test_open_creates_parent_directory(self, tmp_path: Path):
        pool = ConnectionPool(tmp_path / "nested" / "ledger.db", pool_size=1)

        await pool.open()

        assert pool.is_open
        assert (tmp_path / "nested").is_dir()
        await pool.close()
        assert not pool.is_open

    async def test_connections_return_to_pool(self, pool: ConnectionPool):
        assert pool.available == 2
        async with pool.connection():
            assert pool.available == 1
        assert pool.available == 2

    async def test_pragmas_applied(self, pool: ConnectionPool):
        async with pool.connection() as conn:
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            cursor = await conn.execute("PRAGMA busy_timeout")
            assert (await cursor.fetchone())[0] == 1000


class TestTransaction:
    async def test_commits_on_success(self, pool: ConnectionPool):
        async with pool.transaction() as conn:
            await conn.execute("INSERT INTO counters VALUES ('a', 1)")

        async with pool.connection() as conn:
            cursor = await conn.execute("SELECT value FROM counters WHERE name = 'a'")
            assert (await cursor.fetchone())["value"] == 1

    async def test_rolls_back_on_error(self, pool: ConnectionPool):
        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO counters VALUES ('b', 1)")
                raise RuntimeError("guard failed")

        async with pool.connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM counters")
            assert (await cursor.fetchone())[0] == 0
        assert pool.available == 2
