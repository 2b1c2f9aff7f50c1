"""Tests for database migrations."""

from pathlib import Path

import aiosqlite

from srecha.infrastructure.storage.sqlite.migrations import (
    REQUIRED_TABLES,
    SchemaMigrator,
    discover_migrations,
    get_migration_status,
    initialize_database,
    verify_schema_integrity,
)


async def _count(db_path: Path, table: str) -> int:
    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute(f"SELECT COUNT(*) FROM {table}")
        return (await cursor.fetchone())[0]


class TestDiscoverMigrations:
    def test_versions_sorted(self):
        migrations = discover_migrations()
        versions = [m.version for m in migrations]
        assert versions == sorted(versions)
        assert versions[:2] == ["001", "002"]

    def test_checksum_stable(self):
        first = discover_migrations()
        second = discover_migrations()
        assert [m.checksum for m in first] == [m.checksum for m in second]


class TestInitializeDatabase:
    async def test_creates_required_tables(self, temp_db_path: Path):
        results = await initialize_database(temp_db_path, create_backup_before=False)
        assert results
        assert all(r.success for r in results)

        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row[0] for row in await cursor.fetchall()}
        assert set(REQUIRED_TABLES) <= tables

    async def test_seeds_reference_data(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)

        assert await _count(temp_db_path, "categories") == 5
        assert await _count(temp_db_path, "supplier_sectors") == 5
        assert await _count(temp_db_path, "countries") == 194
        assert await _count(temp_db_path, "invoices") == 0

    async def test_rerun_applies_nothing(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        results = await initialize_database(temp_db_path)

        assert results == []
        assert await _count(temp_db_path, "countries") == 194
        # Backup is removed once the run succeeds
        assert list(temp_db_path.parent.glob("*.backup*")) == []

    async def test_status_and_integrity(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)

        status = await get_migration_status(temp_db_path)
        assert status["pending_migrations"] == []
        assert status["current_version"] == "002"

        issues = await verify_schema_integrity(temp_db_path)
        assert all(check["status"] == "PASS" for check in issues)


class TestFailedMigration:
    async def test_failed_script_is_not_recorded(self, temp_db_path: Path, broken_migrations_dir):
        results = await initialize_database(temp_db_path, create_backup_before=False)

        assert [r.success for r in results] == [True, True, False]
        assert results[-1].version == "999"
        assert "syntax error" in results[-1].error

        status = await get_migration_status(temp_db_path)
        assert status["current_version"] == "002"
        assert status["pending_migrations"] == ["999"]

    async def test_failed_run_restores_and_drops_backup(
        self, temp_db_path: Path, broken_migrations_dir
    ):
        healthy = [m for m in discover_migrations() if m.version != "999"]
        await SchemaMigrator(temp_db_path, healthy).migrate(backup=False)

        results = await initialize_database(temp_db_path)

        assert not results[-1].success
        assert list(temp_db_path.parent.glob("*.backup*")) == []
        assert await _count(temp_db_path, "countries") == 194
