"""SQLite implementation of invoice storage."""

from datetime import date, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.amounts import MONEY_EPSILON
from src.core.entities.invoice import Invoice, InvoiceDirection, InvoiceLine, PaymentMode
from src.core.entities.ledger import LedgerEntry
from src.core.exceptions import InvoiceConflictError, InvoiceNotFoundError
from src.core.interfaces.invoice_store import IInvoiceStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from src.infrastructure.storage.sqlite.ledger_store import insert_ledger_entries

logger = get_logger(__name__)


class SQLiteInvoiceStore(IInvoiceStore):
    """SQLite implementation of invoices and their lines."""

    async def create_invoice(
        self, invoice: Invoice, ledger_entries: list[LedgerEntry] | None = None
    ) -> Invoice:
        now = datetime.utcnow()
        invoice.created_at = now
        invoice.updated_at = now
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO invoices (
                    tenant_id, party_id, direction, invoice_date, payment_mode,
                    subtotal, tax_amount, grand_total, paid_amount, due_amount,
                    number, sequence, series_code, period, notes,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    invoice.tenant_id,
                    invoice.party_id,
                    invoice.direction.value,
                    invoice.invoice_date.isoformat(),
                    invoice.payment_mode.value,
                    invoice.subtotal,
                    invoice.tax_amount,
                    invoice.grand_total,
                    invoice.paid_amount,
                    invoice.due_amount,
                    invoice.number,
                    invoice.sequence,
                    invoice.series_code,
                    invoice.period,
                    invoice.notes,
                    invoice.created_at.isoformat(),
                    invoice.updated_at.isoformat(),
                ),
            )
            invoice.id = cursor.lastrowid
            await self._insert_lines(conn, invoice)
            await insert_ledger_entries(conn, ledger_entries or [], ref_id=invoice.id)

        logger.info(
            "invoice_created",
            tenant_id=invoice.tenant_id,
            invoice_id=invoice.id,
            number=invoice.number,
            lines=len(invoice.lines),
            grand_total=invoice.grand_total,
        )
        return invoice

    async def get_invoice(self, tenant_id: str, invoice_id: int) -> Invoice | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM invoices WHERE id = ? AND tenant_id = ?",
                (invoice_id, tenant_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return (await self._with_lines(conn, [row]))[0]

    async def list_invoices(
        self,
        tenant_id: str,
        party_id: int | None = None,
        direction: InvoiceDirection | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Invoice]:
        query = "SELECT * FROM invoices WHERE tenant_id = ?"
        params: list = [tenant_id]
        if party_id is not None:
            query += " AND party_id = ?"
            params.append(party_id)
        if direction is not None:
            query += " AND direction = ?"
            params.append(direction.value)
        query += " ORDER BY invoice_date DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            return await self._with_lines(conn, await cursor.fetchall())

    async def list_outstanding(self, tenant_id: str, party_id: int) -> list[Invoice]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM invoices
                WHERE tenant_id = ? AND party_id = ? AND due_amount >= ?
                ORDER BY invoice_date, id
                """,
                (tenant_id, party_id, MONEY_EPSILON),
            )
            return await self._with_lines(conn, await cursor.fetchall())

    async def update_invoice(
        self, invoice: Invoice, ledger_entries: list[LedgerEntry] | None = None
    ) -> Invoice:
        invoice.updated_at = datetime.utcnow()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE invoices SET
                    party_id = ?, direction = ?, invoice_date = ?, payment_mode = ?,
                    subtotal = ?, tax_amount = ?, grand_total = ?,
                    paid_amount = ?, due_amount = ?,
                    number = ?, sequence = ?, series_code = ?, period = ?,
                    notes = ?, updated_at = ?, version = version + 1
                WHERE id = ? AND tenant_id = ? AND version = ?
                """,
                (
                    invoice.party_id,
                    invoice.direction.value,
                    invoice.invoice_date.isoformat(),
                    invoice.payment_mode.value,
                    invoice.subtotal,
                    invoice.tax_amount,
                    invoice.grand_total,
                    invoice.paid_amount,
                    invoice.due_amount,
                    invoice.number,
                    invoice.sequence,
                    invoice.series_code,
                    invoice.period,
                    invoice.notes,
                    invoice.updated_at.isoformat(),
                    invoice.id,
                    invoice.tenant_id,
                    invoice.version,
                ),
            )
            if cursor.rowcount == 0:
                await self._raise_stale(conn, invoice)
            invoice.version += 1

            await conn.execute("DELETE FROM invoice_lines WHERE invoice_id = ?", (invoice.id,))
            await self._insert_lines(conn, invoice)
            await insert_ledger_entries(conn, ledger_entries or [], ref_id=invoice.id)

        logger.info(
            "invoice_updated",
            tenant_id=invoice.tenant_id,
            invoice_id=invoice.id,
            number=invoice.number,
            version=invoice.version,
            ledger_entries=len(ledger_entries or []),
        )
        return invoice

    async def delete_invoice(
        self, invoice: Invoice, ledger_entries: list[LedgerEntry] | None = None
    ) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM invoices WHERE id = ? AND tenant_id = ? AND version = ?",
                (invoice.id, invoice.tenant_id, invoice.version),
            )
            if cursor.rowcount == 0:
                await self._raise_stale(conn, invoice)
            await insert_ledger_entries(conn, ledger_entries or [], ref_id=invoice.id)

        logger.info(
            "invoice_deleted",
            tenant_id=invoice.tenant_id,
            invoice_id=invoice.id,
            number=invoice.number,
        )
        return True

    @staticmethod
    async def _raise_stale(conn: aiosqlite.Connection, invoice: Invoice) -> None:
        """Explain why a version-guarded write matched no row."""
        cursor = await conn.execute(
            "SELECT version FROM invoices WHERE id = ? AND tenant_id = ?",
            (invoice.id, invoice.tenant_id),
        )
        row = await cursor.fetchone()
        if row is None:
            raise InvoiceNotFoundError(invoice.id)  # type: ignore[arg-type]
        logger.warning(
            "invoice_write_conflict",
            tenant_id=invoice.tenant_id,
            invoice_id=invoice.id,
            expected_version=invoice.version,
            stored_version=row["version"],
        )
        raise InvoiceConflictError(invoice.id, invoice.version)

    @staticmethod
    async def _insert_lines(conn: aiosqlite.Connection, invoice: Invoice) -> None:
        for line_no, line in enumerate(invoice.lines, start=1):
            line.invoice_id = invoice.id
            cursor = await conn.execute(
                """
                INSERT INTO invoice_lines (
                    invoice_id, line_no, item_id, description, quantity,
                    rate, tax_percent, amount, tax_amount
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    invoice.id,
                    line_no,
                    line.item_id,
                    line.description,
                    line.quantity,
                    line.rate,
                    line.tax_percent,
                    line.amount,
                    line.tax_amount,
                ),
            )
            line.id = cursor.lastrowid

    async def _with_lines(
        self, conn: aiosqlite.Connection, rows: list[aiosqlite.Row]
    ) -> list[Invoice]:
        """Build invoices from rows, loading all their lines in one query."""
        if not rows:
            return []
        ids = [row["id"] for row in rows]
        placeholders = ", ".join("?" for _ in ids)
        cursor = await conn.execute(
            f"SELECT * FROM invoice_lines WHERE invoice_id IN ({placeholders}) "
            "ORDER BY invoice_id, line_no",
            ids,
        )
        lines: dict[int, list[InvoiceLine]] = {}
        for line_row in await cursor.fetchall():
            lines.setdefault(line_row["invoice_id"], []).append(self._row_to_line(line_row))
        return [self._row_to_invoice(row, lines.get(row["id"], [])) for row in rows]

    @staticmethod
    def _row_to_line(row: aiosqlite.Row) -> InvoiceLine:
        return InvoiceLine(
            id=row["id"],
            invoice_id=row["invoice_id"],
            item_id=row["item_id"],
            description=row["description"],
            quantity=row["quantity"],
            rate=row["rate"],
            tax_percent=row["tax_percent"],
        )

    @staticmethod
    def _row_to_invoice(row: aiosqlite.Row, lines: list[InvoiceLine]) -> Invoice:
        return Invoice(
            id=row["id"],
            tenant_id=row["tenant_id"],
            party_id=row["party_id"],
            direction=InvoiceDirection(row["direction"]),
            invoice_date=date.fromisoformat(row["invoice_date"]),
            payment_mode=PaymentMode(row["payment_mode"]),
            lines=lines,
            subtotal=row["subtotal"],
            tax_amount=row["tax_amount"],
            grand_total=row["grand_total"],
            paid_amount=row["paid_amount"],
            due_amount=row["due_amount"],
            number=row["number"],
            sequence=row["sequence"],
            series_code=row["series_code"],
            period=row["period"],
            notes=row["notes"],
            version=row["version"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
