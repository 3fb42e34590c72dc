"""Schema migrations for the SQLite ledger database."""

from src.infrastructure.storage.sqlite.migrations.migrator import (
    REQUIRED_TABLES,
    MigrationInfo,
    MigrationPlan,
    MigrationResult,
    discover_migrations,
    get_migration_status,
    initialize_database,
    plan_migrations,
    run_migrations,
    verify_schema_integrity,
)

__all__ = [
    "REQUIRED_TABLES",
    "MigrationInfo",
    "MigrationPlan",
    "MigrationResult",
    "discover_migrations",
    "get_migration_status",
    "initialize_database",
    "plan_migrations",
    "run_migrations",
    "verify_schema_integrity",
]
