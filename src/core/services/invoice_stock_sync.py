"""
Invoice-stock synchronizer.

Translates invoice line items into stock ledger calls when an invoice is
created, updated or deleted.

Two execution policies are supported:

- atomic (default): all lines of one apply/revert are written in a single
  store transaction, so a failing line leaves no trace.
- sequential: lines are applied one at a time; if a line fails, the lines
  already applied are undone in reverse order with ADJUSTMENT movements
  noted ``rollback`` and the original error is re-raised.
"""

from src.config import get_logger
from src.core.entities.invoice import Invoice, InvoiceDirection, PartialRevertWarning
from src.core.entities.inventory import MovementKind, StockDelta
from src.core.entities.ledger import LedgerEntry
from src.core.exceptions import (
    InvoiceTypeInvalidError,
    ItemNotFoundError,
    LedgerlineError,
    StockRestoreFailedError,
)
from src.core.interfaces.invoice_store import IInvoiceStore
from src.core.services.posting import compensating_entries
from src.core.services.stock_ledger import StockLedger

logger = get_logger(__name__)

ROLLBACK_NOTE = "rollback"


class InvoiceStockSynchronizer:
    """Keeps item quantities in step with the invoices that move them."""

    def __init__(
        self,
        stock_ledger: StockLedger,
        invoice_store: IInvoiceStore,
        *,
        atomic_batches: bool = True,
    ):
        self._stock_ledger = stock_ledger
        self._invoice_store = invoice_store
        self._atomic_batches = atomic_batches

    async def apply(self, invoice: Invoice) -> None:
        """Decrease stock per line for SALES, increase it for PURCHASE."""
        await self._run(invoice, self._apply_deltas(invoice))

    async def revert(self, invoice: Invoice) -> None:
        """Undo :meth:`apply`. Any failing line aborts the whole revert."""
        await self._run(invoice, self._revert_deltas(invoice))

    async def revert_for_deletion(self, invoice: Invoice) -> list[PartialRevertWarning]:
        """
        Undo :meth:`apply` line by line without failing.

        A line whose item was removed from the item master gets a
        compensating movement with empty snapshots. Lines that cannot be
        reverted are reported as warnings rather than raised.
        """
        warnings: list[PartialRevertWarning] = []
        for delta in self._revert_deltas(invoice):
            try:
                await self._move(invoice.tenant_id, delta)
            except ItemNotFoundError as e:
                recorded = await self._record_missing_item(invoice, delta)
                warnings.append(self._warning(invoice, delta, e.code, recorded))
            except LedgerlineError as e:
                logger.warning(
                    "stock_revert_line_failed",
                    tenant_id=invoice.tenant_id,
                    invoice_id=invoice.id,
                    item_id=delta.item_id,
                    error=e.code,
                )
                warnings.append(self._warning(invoice, delta, e.code, False))
        return warnings

    async def update(
        self,
        stored: Invoice,
        updated: Invoice,
        ledger_entries: list[LedgerEntry] | None = None,
    ) -> Invoice:
        """
        Replace an invoice and move its stock effect to the new lines.

        Reverts the stored effect, persists ``updated`` together with
        ``ledger_entries``, then applies the new effect. The write is
        guarded by ``stored.version``: a payment or another update that
        committed in between makes it fail with ``InvoiceConflictError``.
        If the write or the final apply fails, the stored document and its
        stock effect are restored and the original error is re-raised.

        Raises:
            StockRestoreFailedError: If restoring the previous state failed.
        """
        self._direction(stored)
        self._direction(updated)

        await self.revert(stored)

        try:
            saved = await self._invoice_store.update_invoice(updated, ledger_entries)
        except Exception as exc:
            logger.error(
                "invoice_update_write_failed",
                tenant_id=stored.tenant_id,
                invoice_id=stored.id,
                error=str(exc),
            )
            await self._restore(stored, exc, restore_document=False, ledger_entries=None)
            raise

        try:
            await self.apply(saved)
        except Exception as exc:
            logger.warning(
                "invoice_update_apply_failed",
                tenant_id=stored.tenant_id,
                invoice_id=stored.id,
                error=str(exc),
            )
            await self._restore(
                stored.model_copy(update={"version": saved.version}),
                exc,
                restore_document=True,
                ledger_entries=ledger_entries,
            )
            raise

        return saved

    async def delete(
        self, invoice: Invoice, ledger_entries: list[LedgerEntry] | None = None
    ) -> list[PartialRevertWarning]:
        """
        Remove the document, then revert its stock leniently.

        The version-guarded delete claims the invoice first, so of two
        concurrent deletes only the one that removed the row reverts stock.

        Raises:
            InvoiceNotFoundError: If the invoice is already gone.
            InvoiceConflictError: If the invoice changed since it was read.
        """
        await self._invoice_store.delete_invoice(invoice, ledger_entries)
        warnings = await self.revert_for_deletion(invoice)
        if warnings:
            logger.warning(
                "invoice_deleted_with_warnings",
                tenant_id=invoice.tenant_id,
                invoice_id=invoice.id,
                warnings=len(warnings),
            )
        return warnings

    async def _restore(
        self,
        stored: Invoice,
        original: Exception,
        *,
        restore_document: bool,
        ledger_entries: list[LedgerEntry] | None,
    ) -> None:
        try:
            if restore_document:
                await self._invoice_store.update_invoice(
                    stored,
                    compensating_entries(
                        ledger_entries or [],
                        f"Update rolled back: {stored.number or stored.id}",
                    ),
                )
            await self.apply(stored)
        except Exception as restore_exc:
            logger.error(
                "invoice_restore_failed",
                tenant_id=stored.tenant_id,
                invoice_id=stored.id,
                original_error=str(original),
                restore_error=str(restore_exc),
            )
            raise StockRestoreFailedError(stored.id, str(original), str(restore_exc)) from restore_exc
        logger.info("invoice_restored", tenant_id=stored.tenant_id, invoice_id=stored.id)

    async def _run(self, invoice: Invoice, deltas: list[StockDelta]) -> None:
        if not deltas:
            return
        if self._atomic_batches:
            await self._stock_ledger.apply_batch(invoice.tenant_id, deltas)
            return

        applied: list[StockDelta] = []
        try:
            for delta in deltas:
                await self._move(invoice.tenant_id, delta)
                applied.append(delta)
        except Exception as exc:
            failed = await self._compensate(invoice, applied)
            if failed and isinstance(exc, LedgerlineError):
                exc.details["rollback_failed_items"] = failed
            raise

    async def _compensate(self, invoice: Invoice, applied: list[StockDelta]) -> list[int]:
        """Undo applied lines newest first. Returns items that could not be undone."""
        failed: list[int] = []
        for delta in reversed(applied):
            undo = StockDelta(
                item_id=delta.item_id,
                delta=-delta.delta,
                kind=MovementKind.ADJUSTMENT,
                ref_id=invoice.id,
                note=ROLLBACK_NOTE,
            )
            try:
                await self._move(invoice.tenant_id, undo)
            except Exception as e:
                logger.error(
                    "stock_rollback_failed",
                    tenant_id=invoice.tenant_id,
                    invoice_id=invoice.id,
                    item_id=delta.item_id,
                    delta=undo.delta,
                    error=str(e),
                )
                failed.append(delta.item_id)
            else:
                logger.info(
                    "stock_rollback_applied",
                    tenant_id=invoice.tenant_id,
                    invoice_id=invoice.id,
                    item_id=delta.item_id,
                    delta=undo.delta,
                )
        return failed

    async def _move(self, tenant_id: str, delta: StockDelta) -> float:
        if delta.delta < 0:
            return await self._stock_ledger.decrease(
                tenant_id, delta.item_id, -delta.delta, delta.kind, delta.ref_id, delta.note
            )
        return await self._stock_ledger.increase(
            tenant_id, delta.item_id, delta.delta, delta.kind, delta.ref_id, delta.note
        )

    async def _record_missing_item(self, invoice: Invoice, delta: StockDelta) -> bool:
        try:
            await self._stock_ledger.record_missing_item_movement(
                invoice.tenant_id,
                delta.item_id,
                delta.delta,
                ref_id=invoice.id,
                note=f"item missing - {delta.note}",
            )
        except Exception as e:
            logger.error(
                "stock_missing_item_record_failed",
                tenant_id=invoice.tenant_id,
                invoice_id=invoice.id,
                item_id=delta.item_id,
                error=str(e),
            )
            return False
        return True

    @staticmethod
    def _warning(
        invoice: Invoice, delta: StockDelta, reason: str, recorded: bool
    ) -> PartialRevertWarning:
        return PartialRevertWarning(
            invoice_id=invoice.id,
            item_id=delta.item_id,
            quantity=abs(delta.delta),
            reason=reason,
            movement_recorded=recorded,
        )

    @staticmethod
    def _direction(invoice: Invoice) -> InvoiceDirection:
        try:
            return InvoiceDirection(invoice.direction)
        except ValueError:
            raise InvoiceTypeInvalidError(invoice.id, invoice.direction) from None

    def _apply_deltas(self, invoice: Invoice) -> list[StockDelta]:
        if self._direction(invoice) == InvoiceDirection.SALES:
            sign, kind = -1, MovementKind.SALE
        else:
            sign, kind = 1, MovementKind.PURCHASE
        return [
            StockDelta(item_id=line.item_id, delta=sign * line.quantity, kind=kind, ref_id=invoice.id)
            for line in invoice.lines
        ]

    def _revert_deltas(self, invoice: Invoice) -> list[StockDelta]:
        if self._direction(invoice) == InvoiceDirection.SALES:
            sign, note = 1, "revert invoice (sale)"
        else:
            sign, note = -1, "revert invoice (purchase)"
        return [
            StockDelta(
                item_id=line.item_id,
                delta=sign * line.quantity,
                kind=MovementKind.ADJUSTMENT,
                ref_id=invoice.id,
                note=note,
            )
            for line in invoice.lines
        ]
