"""SQLite implementation of adjustment storage."""

from datetime import date, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.adjustment import Adjustment, AdjustmentType
from src.core.entities.ledger import LedgerEntry
from src.core.exceptions import AdjustmentNotFoundError
from src.core.interfaces.adjustment_store import IAdjustmentStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from src.infrastructure.storage.sqlite.ledger_store import insert_ledger_entries

logger = get_logger(__name__)


class SQLiteAdjustmentStore(IAdjustmentStore):
    """SQLite implementation of adjustments.

    The adjustment row and its ledger rows are written in one transaction.
    """

    async def create_adjustment(
        self, adjustment: Adjustment, ledger_entries: list[LedgerEntry] | None = None
    ) -> Adjustment:
        adjustment.created_at = datetime.utcnow()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO adjustments (
                    tenant_id, txn_type, adjustment_date, amount,
                    from_party_id, to_party_id, reference, category, note, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    adjustment.tenant_id,
                    adjustment.txn_type.value,
                    adjustment.adjustment_date.isoformat(),
                    adjustment.amount,
                    adjustment.from_party_id,
                    adjustment.to_party_id,
                    adjustment.reference,
                    adjustment.category,
                    adjustment.note,
                    adjustment.created_at.isoformat(),
                ),
            )
            adjustment.id = cursor.lastrowid
            await insert_ledger_entries(conn, ledger_entries or [], ref_id=adjustment.id)

        logger.info(
            "adjustment_created",
            tenant_id=adjustment.tenant_id,
            adjustment_id=adjustment.id,
            txn_type=adjustment.txn_type.value,
            amount=adjustment.amount,
        )
        return adjustment

    async def delete_adjustment(
        self, adjustment: Adjustment, ledger_entries: list[LedgerEntry] | None = None
    ) -> None:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM adjustments WHERE id = ? AND tenant_id = ?",
                (adjustment.id, adjustment.tenant_id),
            )
            if cursor.rowcount == 0:
                raise AdjustmentNotFoundError(adjustment.id)
            await insert_ledger_entries(conn, ledger_entries or [], ref_id=adjustment.id)

        logger.info(
            "adjustment_deleted",
            tenant_id=adjustment.tenant_id,
            adjustment_id=adjustment.id,
        )

    async def get_adjustment(self, tenant_id: str, adjustment_id: int) -> Adjustment | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM adjustments WHERE id = ? AND tenant_id = ?",
                (adjustment_id, tenant_id),
            )
            row = await cursor.fetchone()
            return self._row_to_adjustment(row) if row else None

    async def list_adjustments(
        self,
        tenant_id: str,
        txn_type: AdjustmentType | None = None,
        start: date | None = None,
        end: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Adjustment]:
        query = "SELECT * FROM adjustments WHERE tenant_id = ?"
        params: list = [tenant_id]
        if txn_type is not None:
            query += " AND txn_type = ?"
            params.append(AdjustmentType(txn_type).value)
        if start is not None:
            query += " AND adjustment_date >= ?"
            params.append(start.isoformat())
        if end is not None:
            query += " AND adjustment_date <= ?"
            params.append(end.isoformat())
        query += " ORDER BY adjustment_date DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            return [self._row_to_adjustment(row) for row in await cursor.fetchall()]

    @staticmethod
    def _row_to_adjustment(row: aiosqlite.Row) -> Adjustment:
        return Adjustment(
            id=row["id"],
            tenant_id=row["tenant_id"],
            txn_type=AdjustmentType(row["txn_type"]),
            adjustment_date=date.fromisoformat(row["adjustment_date"]),
            amount=row["amount"],
            from_party_id=row["from_party_id"],
            to_party_id=row["to_party_id"],
            reference=row["reference"],
            category=row["category"],
            note=row["note"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
