#!/usr/bin/env python3
"""
Ledgerline management CLI.

Usage:
    python manage.py migrate                     Apply pending database migrations
    python manage.py serve                       Start the API server
    python manage.py status                      Show migration status and counters
    python manage.py statement TENANT PARTY_ID   Print a party ledger statement
"""

import argparse
import asyncio
import sys
from datetime import date

from src.config import configure_logging, get_settings


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date: {value}") from None


def cmd_migrate(args: argparse.Namespace) -> None:
    from src.infrastructure.storage.sqlite.migrations import initialize_database

    results = asyncio.run(initialize_database(create_backup_before=not args.no_backup))
    if not results:
        print("Database is up to date.")
        return
    for result in results:
        state = "ok" if result.success else f"FAILED: {result.error}"
        print(f"  v{result.version} {result.name}: {state} ({result.execution_time_ms}ms)")
    if not all(r.success for r in results):
        sys.exit(1)


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    print(f"Starting server on {args.host}:{args.port}...")
    uvicorn.run(
        "src.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


def cmd_status(args: argparse.Namespace) -> None:
    from src.infrastructure.storage.sqlite import close_pool, get_sequence_store
    from src.infrastructure.storage.sqlite.migrations import get_migration_status

    async def run() -> None:
        status = await get_migration_status()
        print(f"Database: {get_settings().storage.db_path}")
        print(f"Current version: {status['current_version'] or 'none'}")
        print(f"Applied: {len(status['applied_migrations'])}  Pending: {len(status['pending_migrations'])}")
        for version in status["pending_migrations"]:
            print(f"  pending: {version}")

        if status["current_version"] is None:
            return
        store = await get_sequence_store()
        try:
            counters = await store.list_counters(args.tenant)
        finally:
            await close_pool()
        if counters:
            print("Sequences:")
        for counter in counters:
            print(
                f"  {counter.tenant_id:<12} {counter.series_code:<4} "
                f"{counter.period:<6} last={counter.last_value}"
            )

    asyncio.run(run())


def cmd_statement(args: argparse.Namespace) -> None:
    from src.application.use_cases import PartyStatementUseCase
    from src.core.exceptions import LedgerlineError
    from src.infrastructure.storage.sqlite import close_pool

    async def run() -> int:
        use_case = PartyStatementUseCase()
        try:
            statement = await use_case.execute(args.tenant, args.party_id, args.start, args.end)
        except LedgerlineError as e:
            print(f"Error [{e.code}]: {e.message}")
            return 1
        finally:
            await close_pool()

        print(f"{statement.party_name} ({statement.role.value})")
        print(f"{'Date':<12}{'Type':<16}{'Ref':<22}{'Debit':>12}{'Credit':>12}{'Balance':>14}")
        print(f"{'':<50}{'Opening':>24}{statement.opening_balance:>14.2f}")
        for line in statement.lines:
            entry = line.entry
            print(
                f"{entry.entry_date.isoformat():<12}{entry.entry_type.value:<16}"
                f"{(entry.ref_no or ''):<22}{entry.debit:>12.2f}{entry.credit:>12.2f}"
                f"{line.balance_after:>14.2f}"
            )
        print(
            f"{'':<50}{statement.total_debit:>12.2f}{statement.total_credit:>12.2f}"
            f"{statement.closing_balance:>14.2f}"
        )
        return 0

    sys.exit(asyncio.run(run()))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Ledgerline management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Override LOG_LEVEL"
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending database migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip backup before migrating")
    p_migrate.set_defaults(func=cmd_migrate)

    # serve
    settings = get_settings()
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=settings.api.host, help="Bind host")
    p_serve.add_argument("--port", type=int, default=settings.api.port, help="Bind port")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # status
    p_status = sub.add_parser("status", help="Show migration status and sequence counters")
    p_status.add_argument("--tenant", default=None, help="Only show counters for this tenant")
    p_status.set_defaults(func=cmd_status)

    # statement
    p_statement = sub.add_parser("statement", help="Print a party ledger statement")
    p_statement.add_argument("tenant", help="Tenant ID")
    p_statement.add_argument("party_id", type=int, help="Party ID")
    p_statement.add_argument("--start", type=_parse_date, default=None, help="First date (YYYY-MM-DD)")
    p_statement.add_argument("--end", type=_parse_date, default=None, help="Last date (YYYY-MM-DD)")
    p_statement.set_defaults(func=cmd_statement)

    args = parser.parse_args()
    configure_logging(level=args.log_level, json_output=True if args.json_logs else None)
    args.func(args)


if __name__ == "__main__":
    main()
