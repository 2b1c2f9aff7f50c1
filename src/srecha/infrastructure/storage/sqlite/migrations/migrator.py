"""
Versioned schema migrations for the invoice database.

Migration scripts live next to this module as ``vNNN_<name>.sql`` and are
applied in version order. Each applied script is recorded in
``schema_migrations`` together with a checksum of its text; recorded
versions are never executed again.

Before touching an existing database file a copy is taken through the
SQLite online backup API. The copy is restored when a script fails or the
run raises, and removed once the run is over.
"""

import argparse
import asyncio
import hashlib
import re
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import aiosqlite

from srecha.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"^v(?P<version>\d+)_(?P<name>\w+)\.sql$")

REQUIRED_TABLES = [
    "schema_migrations",
    "users",
    "clients",
    "products",
    "categories",
    "subcategories",
    "countries",
    "supplier_sectors",
    "supplier_products",
    "suppliers",
    "invoices",
    "invoice_items",
    "deliveries",
    "delivery_items",
    "warehouse_groups",
    "warehouse_items",
]


@dataclass(frozen=True)
class MigrationInfo:
    """One migration script on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.match(path.name)
        if match is None:
            raise ValueError(f"Not a migration script: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(match["version"], match["name"], path, digest[:16])

    def read(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path | None = None) -> list[MigrationInfo]:
    """Migration scripts found in ``directory``, lowest version first."""
    found: list[MigrationInfo] = []
    for path in (directory or MIGRATIONS_DIR).glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Map of recorded version to checksum; empty before the first run."""
    try:
        async with conn.execute("SELECT version, checksum FROM schema_migrations") as cursor:
            return {version: checksum async for version, checksum in cursor}
    except aiosqlite.OperationalError:
        return {}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied, key=int) if applied else None


async def create_backup(db_path: Path) -> Path:
    """Copy ``db_path`` next to itself, WAL contents included."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    async with aiosqlite.connect(db_path) as source, aiosqlite.connect(backup_path) as target:
        await source.backup(target)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


async def restore_backup(db_path: Path, backup_path: Path) -> None:
    async with aiosqlite.connect(backup_path) as source, aiosqlite.connect(db_path) as target:
        await source.backup(target)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


@dataclass
class SchemaMigrator:
    """Applies pending migration scripts to one database file."""

    db_path: Path
    migrations: list[MigrationInfo] = field(default_factory=discover_migrations)

    async def _open(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        return conn

    async def _apply(self, conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
        logger.info("applying_migration", version=migration.version, name=migration.name)
        started = time.perf_counter()

        def elapsed_ms() -> int:
            return int((time.perf_counter() - started) * 1000)

        try:
            # The script and its bookkeeping row share one transaction
            await conn.executescript(f"BEGIN;\n{migration.read()}\n")
            await conn.execute(
                "INSERT OR REPLACE INTO schema_migrations "
                "(version, name, checksum, execution_time_ms) VALUES (?, ?, ?, ?)",
                (migration.version, migration.name, migration.checksum, elapsed_ms()),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            await conn.rollback()
            logger.error(
                "migration_failed", version=migration.version, name=migration.name, error=str(e)
            )
            return MigrationResult(migration.version, migration.name, False, elapsed_ms(), str(e))

        logger.info(
            "migration_applied",
            version=migration.version,
            name=migration.name,
            execution_time_ms=elapsed_ms(),
        )
        return MigrationResult(migration.version, migration.name, True, elapsed_ms())

    async def _foreign_key_violations(self, conn: aiosqlite.Connection) -> int:
        async with conn.execute("PRAGMA foreign_key_check") as cursor:
            return len(await cursor.fetchall())

    async def migrate(self, backup: bool = True) -> list[MigrationResult]:
        """Apply every pending script, stopping at the first failure."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("initializing_database", db_path=str(self.db_path))

        if not self.migrations:
            logger.warning("no_migrations_found")
            return []

        backup_path = None
        if backup and self.db_path.exists():
            backup_path = await create_backup(self.db_path)
        results: list[MigrationResult] = []
        try:
            conn = await self._open()
            try:
                applied = await get_applied_migrations(conn)
                for migration in self.migrations:
                    if migration.version in applied:
                        if applied[migration.version] != migration.checksum:
                            logger.warning("migration_checksum_changed", version=migration.version)
                        continue

                    result = await self._apply(conn, migration)
                    results.append(result)
                    if not result.success:
                        break

                    violations = await self._foreign_key_violations(conn)
                    if violations:
                        logger.error(
                            "post_migration_validation_failed",
                            version=migration.version,
                            foreign_key_violations=violations,
                        )
                        result.success = False
                        result.error = f"{violations} foreign key violations"
                        break
            finally:
                await conn.close()
        except Exception as e:
            logger.error("database_initialization_failed", error=str(e))
            if backup_path is not None:
                await restore_backup(self.db_path, backup_path)
            raise

        if backup_path is not None:
            if not all(r.success for r in results):
                await restore_backup(self.db_path, backup_path)
            backup_path.unlink()
            logger.info("backup_cleaned_up")
        return results

    async def status(self) -> dict:
        versions = [m.version for m in self.migrations]
        if not self.db_path.exists():
            return {
                "exists": False,
                "current_version": None,
                "applied_migrations": [],
                "pending_migrations": versions,
                "total_migrations": len(versions),
            }

        async with aiosqlite.connect(self.db_path) as conn:
            applied = await get_applied_migrations(conn)
            current = await get_current_version(conn)

        return {
            "exists": True,
            "current_version": current,
            "applied_migrations": sorted(applied, key=int),
            "pending_migrations": [v for v in versions if v not in applied],
            "total_migrations": len(versions),
        }

    async def verify(self) -> list[dict]:
        """Foreign key, page integrity and required-table checks."""
        async with aiosqlite.connect(self.db_path) as conn:
            violations = await self._foreign_key_violations(conn)
            async with conn.execute("PRAGMA integrity_check") as cursor:
                (integrity,) = await cursor.fetchone()
            tables = {
                name for (name,) in await conn.execute_fetchall(
                    "SELECT name FROM sqlite_master WHERE type = 'table'"
                )
            }

        missing = [t for t in REQUIRED_TABLES if t not in tables]
        return [
            {
                "check": "foreign_keys",
                "status": "FAIL" if violations else "PASS",
                "violations": violations,
            },
            {
                "check": "integrity",
                "status": "PASS" if integrity == "ok" else "FAIL",
                "result": integrity,
            },
            {
                "check": "required_tables",
                "status": "FAIL" if missing else "PASS",
                "missing": missing,
            },
        ]


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the database at ``db_path`` up to the latest schema.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Copy an existing file before migrating

    Returns:
        Results of the scripts that were run, in order
    """
    migrator = SchemaMigrator(db_path or get_settings().storage.db_path)
    return await migrator.migrate(backup=create_backup_before)


async def get_migration_status(db_path: Path | None = None) -> dict:
    return await SchemaMigrator(db_path or get_settings().storage.db_path).status()


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    return await SchemaMigrator(db_path or get_settings().storage.db_path).verify()


def _print_report(command: str, payload) -> None:
    if command == "status":
        for key in ("exists", "current_version", "applied_migrations", "pending_migrations"):
            print(f"{key.replace('_', ' ').capitalize()}: {payload[key]}")
    elif command == "verify":
        for check in payload:
            extra = {k: v for k, v in check.items() if k not in ("check", "status")}
            print(f"[{check['status']}] {check['check']}")
            if check["status"] != "PASS":
                print(f"    {extra}")
    else:
        if not payload:
            print("Schema is up to date")
        for result in payload:
            outcome = "OK" if result.success else "FAILED"
            print(f"[{outcome}] v{result.version} {result.name} ({result.execution_time_ms}ms)")
            if result.error:
                print(f"    {result.error}")


def main() -> None:
    """Command line entry point: migrate, or report status / integrity."""
    parser = argparse.ArgumentParser(description="Srecha database migrator")
    parser.add_argument("--db-path", type=Path, help="Database file (default from settings)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="Show applied and pending versions")
    group.add_argument("--verify", action="store_true", help="Run schema integrity checks")
    parser.add_argument("--no-backup", action="store_true", help="Skip the pre-migration copy")
    args = parser.parse_args()

    configure_logging()
    migrator = SchemaMigrator(args.db_path or get_settings().storage.db_path)

    if args.status:
        _print_report("status", asyncio.run(migrator.status()))
    elif args.verify:
        _print_report("verify", asyncio.run(migrator.verify()))
    else:
        _print_report("migrate", asyncio.run(migrator.migrate(backup=not args.no_backup)))


if __name__ == "__main__":
    main()
