"""SQLite implementation of ledger entry storage."""

from datetime import date, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.amounts import round_money
from src.core.entities.ledger import (
    LedgerEntry,
    LedgerEntryType,
    LedgerRefType,
    LedgerTotals,
)
from src.core.interfaces.ledger_store import ILedgerStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


async def insert_ledger_entries(
    conn: aiosqlite.Connection,
    entries: list[LedgerEntry],
    ref_id: int | None = None,
) -> list[LedgerEntry]:
    """
    Insert entries on an open transaction.

    Entries without a ``ref_id`` (and reversals without a
    ``reversed_ref_id``) are linked to ``ref_id``.
    """
    for entry in entries:
        if entry.ref_id is None:
            entry.ref_id = ref_id
        if entry.is_reversal and entry.reversed_ref_id is None:
            entry.reversed_ref_id = ref_id
        cursor = await conn.execute(
            """
            INSERT INTO ledger_entries (
                tenant_id, party_id, entry_date, entry_type, debit, credit,
                ref_type, ref_id, ref_no, narration, payment_mode,
                reversed_ref_id, is_reversal, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.tenant_id,
                entry.party_id,
                entry.entry_date.isoformat(),
                entry.entry_type.value,
                round_money(entry.debit),
                round_money(entry.credit),
                entry.ref_type.value if entry.ref_type else None,
                entry.ref_id,
                entry.ref_no,
                entry.narration,
                entry.payment_mode,
                entry.reversed_ref_id,
                int(entry.is_reversal),
                entry.created_at.isoformat(),
            ),
        )
        entry.id = cursor.lastrowid
    return entries


def row_to_ledger_entry(row: aiosqlite.Row) -> LedgerEntry:
    return LedgerEntry(
        id=row["id"],
        tenant_id=row["tenant_id"],
        party_id=row["party_id"],
        entry_date=date.fromisoformat(row["entry_date"]),
        entry_type=LedgerEntryType(row["entry_type"]),
        debit=row["debit"],
        credit=row["credit"],
        ref_type=LedgerRefType(row["ref_type"]) if row["ref_type"] else None,
        ref_id=row["ref_id"],
        ref_no=row["ref_no"],
        narration=row["narration"],
        payment_mode=row["payment_mode"],
        reversed_ref_id=row["reversed_ref_id"],
        is_reversal=bool(row["is_reversal"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class SQLiteLedgerStore(ILedgerStore):
    """SQLite implementation of the append-only ledger."""

    async def add_entries(self, entries: list[LedgerEntry]) -> list[LedgerEntry]:
        async with get_transaction() as conn:
            await insert_ledger_entries(conn, entries)
        logger.info("ledger_entries_added", count=len(entries))
        return entries

    async def list_entries(
        self,
        tenant_id: str,
        party_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> list[LedgerEntry]:
        query = "SELECT * FROM ledger_entries WHERE tenant_id = ? AND party_id = ?"
        params: list = [tenant_id, party_id]
        if start is not None:
            query += " AND entry_date >= ?"
            params.append(start.isoformat())
        if end is not None:
            query += " AND entry_date <= ?"
            params.append(end.isoformat())
        query += " ORDER BY entry_date, id"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            return [row_to_ledger_entry(row) for row in await cursor.fetchall()]

    async def sum_before(
        self, tenant_id: str, party_id: int, before: date
    ) -> LedgerTotals:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT COALESCE(SUM(debit), 0) AS debit, COALESCE(SUM(credit), 0) AS credit
                FROM ledger_entries
                WHERE tenant_id = ? AND party_id = ? AND entry_date < ?
                """,
                (tenant_id, party_id, before.isoformat()),
            )
            row = await cursor.fetchone()
            return LedgerTotals(debit=round_money(row["debit"]), credit=round_money(row["credit"]))

    async def list_for_reference(
        self, tenant_id: str, ref_type: LedgerRefType, ref_id: int
    ) -> list[LedgerEntry]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM ledger_entries
                WHERE tenant_id = ? AND ref_type = ? AND ref_id = ?
                ORDER BY id
                """,
                (tenant_id, ref_type.value, ref_id),
            )
            return [row_to_ledger_entry(row) for row in await cursor.fetchall()]
