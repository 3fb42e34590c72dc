"""SQLite implementation of payment storage."""

from datetime import date, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.amounts import MONEY_EPSILON
from src.core.entities.invoice import InvoiceDirection, PaymentMode
from src.core.entities.ledger import LedgerEntry
from src.core.entities.payment import Payment, PaymentAllocation, PaymentDirection
from src.core.exceptions import (
    AllocationExceedsDueError,
    AllocationInvoiceMismatchError,
    InvoiceNotFoundError,
    PaymentNotFoundError,
)
from src.core.interfaces.payment_store import IPaymentStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from src.infrastructure.storage.sqlite.ledger_store import insert_ledger_entries

logger = get_logger(__name__)


class SQLitePaymentStore(IPaymentStore):
    """SQLite implementation of payments and allocations.

    Each write method is one transaction covering the payment row, the
    allocated invoices' paid/due fields and the ledger rows.
    """

    async def create_payment_with_allocations(
        self, payment: Payment, ledger_entries: list[LedgerEntry] | None = None
    ) -> Payment:
        payment.created_at = datetime.utcnow()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO payments (
                    tenant_id, party_id, direction, amount, payment_date, mode,
                    voucher_number, sequence, series_code, period,
                    reference, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    payment.tenant_id,
                    payment.party_id,
                    payment.direction.value,
                    payment.amount,
                    payment.payment_date.isoformat(),
                    payment.mode.value,
                    payment.voucher_number,
                    payment.sequence,
                    payment.series_code,
                    payment.period,
                    payment.reference,
                    payment.notes,
                    payment.created_at.isoformat(),
                ),
            )
            payment.id = cursor.lastrowid

            for allocation in payment.allocations:
                await self._apply_allocation(conn, payment, allocation)

            await insert_ledger_entries(conn, ledger_entries or [], ref_id=payment.id)

        logger.info(
            "payment_created",
            tenant_id=payment.tenant_id,
            payment_id=payment.id,
            voucher_number=payment.voucher_number,
            allocations=len(payment.allocations),
        )
        return payment

    async def delete_payment_with_reversal(
        self, payment: Payment, ledger_entries: list[LedgerEntry] | None = None
    ) -> list[int]:
        now = datetime.utcnow().isoformat()
        missing: list[int] = []
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM payments WHERE id = ? AND tenant_id = ?",
                (payment.id, payment.tenant_id),
            )
            if cursor.rowcount == 0:
                raise PaymentNotFoundError(payment.id)

            for allocation in payment.allocations:
                cursor = await conn.execute(
                    """
                    UPDATE invoices SET
                        paid_amount = MAX(0, ROUND(paid_amount - ?, 2)),
                        due_amount = MAX(0, ROUND(grand_total - MAX(0, paid_amount - ?), 2)),
                        updated_at = ?,
                        version = version + 1
                    WHERE id = ? AND tenant_id = ?
                    """,
                    (allocation.amount, allocation.amount, now, allocation.invoice_id, payment.tenant_id),
                )
                if cursor.rowcount == 0:
                    missing.append(allocation.invoice_id)
                    logger.warning(
                        "payment_reversal_invoice_missing",
                        tenant_id=payment.tenant_id,
                        payment_id=payment.id,
                        invoice_id=allocation.invoice_id,
                    )

            await insert_ledger_entries(conn, ledger_entries or [], ref_id=payment.id)

        logger.info(
            "payment_deleted",
            tenant_id=payment.tenant_id,
            payment_id=payment.id,
            voucher_number=payment.voucher_number,
            missing_invoices=len(missing),
        )
        return missing

    async def get_payment(self, tenant_id: str, payment_id: int) -> Payment | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM payments WHERE id = ? AND tenant_id = ?",
                (payment_id, tenant_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return (await self._with_allocations(conn, [row]))[0]

    async def list_payments(
        self,
        tenant_id: str,
        party_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Payment]:
        query = "SELECT * FROM payments WHERE tenant_id = ?"
        params: list = [tenant_id]
        if party_id is not None:
            query += " AND party_id = ?"
            params.append(party_id)
        query += " ORDER BY payment_date DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            return await self._with_allocations(conn, await cursor.fetchall())

    @staticmethod
    async def _apply_allocation(
        conn: aiosqlite.Connection, payment: Payment, allocation: PaymentAllocation
    ) -> None:
        """Raise an invoice's paid amount, guarded by its party, direction and due amount."""
        settles = (
            InvoiceDirection.SALES
            if payment.direction == PaymentDirection.RECEIVE
            else InvoiceDirection.PURCHASE
        )
        cursor = await conn.execute(
            """
            UPDATE invoices SET
                paid_amount = ROUND(paid_amount + ?, 2),
                due_amount = MAX(0, ROUND(grand_total - paid_amount - ?, 2)),
                updated_at = ?,
                version = version + 1
            WHERE id = ? AND tenant_id = ? AND party_id = ? AND direction = ?
                AND due_amount + ? >= ?
            """,
            (
                allocation.amount,
                allocation.amount,
                datetime.utcnow().isoformat(),
                allocation.invoice_id,
                payment.tenant_id,
                payment.party_id,
                settles.value,
                MONEY_EPSILON,
                allocation.amount,
            ),
        )
        if cursor.rowcount == 0:
            cursor = await conn.execute(
                "SELECT party_id, direction, due_amount FROM invoices WHERE id = ? AND tenant_id = ?",
                (allocation.invoice_id, payment.tenant_id),
            )
            row = await cursor.fetchone()
            if row is None:
                raise InvoiceNotFoundError(allocation.invoice_id)
            if row["party_id"] != payment.party_id or row["direction"] != settles.value:
                raise AllocationInvoiceMismatchError(
                    allocation.invoice_id,
                    f"invoice is a {row['direction']} invoice of party {row['party_id']}",
                )
            raise AllocationExceedsDueError(allocation.invoice_id, allocation.amount, row["due_amount"])

        allocation.payment_id = payment.id
        cursor = await conn.execute(
            "INSERT INTO payment_allocations (payment_id, invoice_id, amount) VALUES (?, ?, ?)",
            (payment.id, allocation.invoice_id, allocation.amount),
        )
        allocation.id = cursor.lastrowid

    async def _with_allocations(
        self, conn: aiosqlite.Connection, rows: list[aiosqlite.Row]
    ) -> list[Payment]:
        if not rows:
            return []
        ids = [row["id"] for row in rows]
        placeholders = ", ".join("?" for _ in ids)
        cursor = await conn.execute(
            f"SELECT * FROM payment_allocations WHERE payment_id IN ({placeholders}) ORDER BY id",
            ids,
        )
        allocations: dict[int, list[PaymentAllocation]] = {}
        for alloc_row in await cursor.fetchall():
            allocations.setdefault(alloc_row["payment_id"], []).append(
                PaymentAllocation(
                    id=alloc_row["id"],
                    payment_id=alloc_row["payment_id"],
                    invoice_id=alloc_row["invoice_id"],
                    amount=alloc_row["amount"],
                )
            )
        return [self._row_to_payment(row, allocations.get(row["id"], [])) for row in rows]

    @staticmethod
    def _row_to_payment(row: aiosqlite.Row, allocations: list[PaymentAllocation]) -> Payment:
        return Payment(
            id=row["id"],
            tenant_id=row["tenant_id"],
            party_id=row["party_id"],
            direction=PaymentDirection(row["direction"]),
            amount=row["amount"],
            payment_date=date.fromisoformat(row["payment_date"]),
            mode=PaymentMode(row["mode"]),
            allocations=allocations,
            voucher_number=row["voucher_number"],
            sequence=row["sequence"],
            series_code=row["series_code"],
            period=row["period"],
            reference=row["reference"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
