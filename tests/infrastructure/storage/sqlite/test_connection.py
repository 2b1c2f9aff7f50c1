"""Tests for the SQLite connection pool."""

from pathlib import Path

import pytest

from srecha.config.settings import StorageSettings
from srecha.infrastructure.storage.sqlite import ConnectionPool


class TestConnectionPool:
    async def test_initialize_and_close(self, tmp_path: Path):
        pool = ConnectionPool(tmp_path / "db" / "pool.db", pool_size=2)
        assert not pool.is_initialized

        await pool.initialize()
        assert pool.is_initialized
        assert (tmp_path / "db" / "pool.db").exists()

        await pool.close()
        assert not pool.is_initialized

    async def test_acquire_initializes_lazily(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT 1")
            assert (await cursor.fetchone())[0] == 1
        assert pool.is_initialized
        await pool.close()

    async def test_pragmas(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1, busy_timeout=1234)
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0] == "wal"
            cursor = await conn.execute("PRAGMA busy_timeout")
            assert (await cursor.fetchone())[0] == 1234
        await pool.close()

    async def test_transaction_commits(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")

        async with pool.transaction() as conn:
            await conn.execute("INSERT INTO t VALUES (1)")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 1
        await pool.close()

    async def test_transaction_rolls_back_on_error(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")

        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("abort")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0
            assert not conn.in_transaction
        await pool.close()

    async def test_snapshot_leaves_no_open_transaction(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.snapshot() as conn:
            await conn.execute("SELECT 1")
            assert conn.in_transaction

        async with pool.acquire() as conn:
            assert not conn.in_transaction
        await pool.close()

    def test_from_settings(self, tmp_path: Path):
        settings = StorageSettings(data_dir=tmp_path, db_name="x.db", pool_size=3)
        pool = ConnectionPool.from_settings(settings)
        assert pool.db_path == tmp_path / "x.db"
        assert pool.pool_size == 3
