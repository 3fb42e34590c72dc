"""
Versioned schema migrations for the ledger database.

Scripts live next to this module as ``vNNN_name.sql`` and are applied in
version order. Each applied script is recorded in ``schema_migrations``
with a checksum; an applied script whose checksum later changes halts the
run instead of being re-applied.

Usage:
    python -m src.infrastructure.storage.sqlite.migrations.migrator
    python -m src.infrastructure.storage.sqlite.migrations.migrator --status
    python -m src.infrastructure.storage.sqlite.migrations.migrator --verify
"""

import asyncio
import hashlib
import re
import shutil
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
MIGRATION_PATTERN = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = (
    "tenants",
    "parties",
    "items",
    "stock_movements",
    "invoices",
    "invoice_lines",
    "payments",
    "payment_allocations",
    "ledger_entries",
    "sequences",
    "adjustments",
    "schema_migrations",
)

# Ledger consistency checks: each query counts offending rows.
CONSISTENCY_CHECKS: dict[str, str] = {
    "non_negative_stock": "SELECT COUNT(*) FROM items WHERE quantity < 0",
    "invoice_balances": """
        SELECT COUNT(*) FROM invoices
        WHERE due_amount < -0.005
           OR ABS(grand_total - paid_amount - due_amount) > 0.005
    """,
    "allocations_within_payment": """
        SELECT COUNT(*) FROM payments p
        WHERE p.amount + 0.005 < (
            SELECT COALESCE(SUM(a.amount), 0)
            FROM payment_allocations a WHERE a.payment_id = p.id
        )
    """,
}


@dataclass
class MigrationInfo:
    """A migration script on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = MIGRATION_PATTERN.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=digest)

    @property
    def label(self) -> str:
        return f"v{self.version}_{self.name}"


@dataclass
class MigrationResult:
    """Outcome of applying one script."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class MigrationPlan:
    """Scripts split by whether the database already has them."""

    applied: dict[str, str] = field(default_factory=dict)
    pending: list[MigrationInfo] = field(default_factory=list)
    tampered: list[MigrationInfo] = field(default_factory=list)


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration scripts in version order; badly named files are skipped."""
    found = []
    for path in sorted(directory.glob("v*.sql")):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return found


async def _recorded_versions(conn: aiosqlite.Connection) -> dict[str, str]:
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # No tracking table yet
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def plan_migrations(conn: aiosqlite.Connection) -> MigrationPlan:
    plan = MigrationPlan(applied=await _recorded_versions(conn))
    for migration in discover_migrations():
        recorded = plan.applied.get(migration.version)
        if recorded is None:
            plan.pending.append(migration)
        elif recorded != migration.checksum:
            plan.tampered.append(migration)
    return plan


async def _foreign_key_violations(conn: aiosqlite.Connection) -> int:
    cursor = await conn.execute("PRAGMA foreign_key_check")
    return len(await cursor.fetchall())


async def _apply(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    started = time.monotonic()

    def elapsed() -> int:
        return int((time.monotonic() - started) * 1000)

    logger.info("applying_migration", migration=migration.label)
    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", migration=migration.label, error=str(e))
        return MigrationResult(migration.version, migration.name, False, elapsed(), str(e))

    logger.info("migration_applied", migration=migration.label, execution_time_ms=elapsed())
    return MigrationResult(migration.version, migration.name, True, elapsed())


def create_backup(db_path: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Apply every pending migration.

    An existing database file is copied aside first (unless
    ``create_backup_before`` is false) and put back if the run raises.
    The run stops at the first failed script, at the first script that
    leaves foreign key violations, or before anything is applied when a
    recorded script was edited.

    Returns:
        One result per script that was attempted; empty when up to date.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    backup_path = create_backup(db_path) if create_backup_before and db_path.exists() else None
    results: list[MigrationResult] = []

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            plan = await plan_migrations(conn)
            if plan.tampered:
                logger.error(
                    "migration_checksum_changed",
                    migrations=[m.label for m in plan.tampered],
                )
                return results

            for migration in plan.pending:
                result = await _apply(conn, migration)
                results.append(result)
                if not result.success:
                    break
                violations = await _foreign_key_violations(conn)
                if violations:
                    logger.error(
                        "post_migration_validation_failed",
                        migration=migration.label,
                        foreign_key_violations=violations,
                    )
                    break
    except Exception as e:
        logger.error("database_initialization_failed", db_path=str(db_path), error=str(e))
        if backup_path is not None:
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None and all(r.success for r in results):
        backup_path.unlink()

    logger.info(
        "database_initialized",
        db_path=str(db_path),
        applied=[r.version for r in results if r.success],
    )
    return results


# Used by the API lifespan
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Applied and pending versions for the database at ``db_path``."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
            "total_migrations": len(discovered),
        }

    async with aiosqlite.connect(db_path) as conn:
        plan = await plan_migrations(conn)
    return {
        "exists": True,
        "current_version": max(plan.applied) if plan.applied else None,
        "applied_migrations": sorted(plan.applied),
        "pending_migrations": [m.version for m in plan.pending],
        "modified_migrations": [m.version for m in plan.tampered],
        "total_migrations": len(discovered),
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """SQLite integrity, foreign keys, required tables and ledger consistency."""
    db_path = db_path or get_settings().storage.db_path
    checks: list[dict] = []

    def record(name: str, ok: bool, **extra) -> None:
        checks.append({"check": name, "status": "PASS" if ok else "FAIL", **extra})

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()
        record("integrity", integrity == "ok", result=integrity)

        violations = await _foreign_key_violations(conn)
        record("foreign_keys", not violations, violations=violations)

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        existing = {name for (name,) in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in existing]
        record("required_tables", not missing, missing=missing)

        if not missing:
            for name, query in CONSISTENCY_CHECKS.items():
                cursor = await conn.execute(query)
                (offending,) = await cursor.fetchone()
                record(name, not offending, rows=offending)

    return checks


def main() -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Ledgerline schema migrator")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="Show applied and pending migrations")
    group.add_argument("--verify", action="store_true", help="Run integrity and consistency checks")
    parser.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    args = parser.parse_args()

    if args.status:
        status = asyncio.run(get_migration_status(args.db_path))
        for key, value in status.items():
            print(f"{key}: {value}")
        return

    if args.verify:
        checks = asyncio.run(verify_schema_integrity(args.db_path))
        for check in checks:
            details = {k: v for k, v in check.items() if k not in ("check", "status")}
            print(f"[{check['status']}] {check['check']} {details if check['status'] != 'PASS' else ''}")
        raise SystemExit(0 if all(c["status"] == "PASS" for c in checks) else 1)

    results = asyncio.run(
        initialize_database(args.db_path, create_backup_before=not args.no_backup)
    )
    if not results:
        print("Database is up to date")
    for result in results:
        outcome = "OK" if result.success else "FAILED"
        print(f"[{outcome}] v{result.version} {result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"    {result.error}")


if __name__ == "__main__":
    main()
