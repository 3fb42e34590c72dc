"""
Accounting core facade.

The operations adapters call to keep invoices, stock, payments and the
ledger consistent. Each method delegates to one core service; the facade
only fixes the calling surface.
"""

from datetime import date

from src.core.entities.invoice import Invoice, PartialRevertWarning
from src.core.entities.ledger import LedgerEntry, LedgerStatement
from src.core.entities.numbering import DocumentNumber, SeriesCode, SeriesSelector
from src.core.entities.payment import Payment, PaymentAllocation
from src.core.services import (
    InvoiceStockSynchronizer,
    LedgerAggregator,
    PaymentAllocationEngine,
    SequenceAllocator,
)


class AccountingCore:
    """Single entry point for the consistency-critical operations."""

    def __init__(
        self,
        sequence_allocator: SequenceAllocator,
        synchronizer: InvoiceStockSynchronizer,
        payment_engine: PaymentAllocationEngine,
        ledger_aggregator: LedgerAggregator,
    ):
        self.sequence_allocator = sequence_allocator
        self.synchronizer = synchronizer
        self.payment_engine = payment_engine
        self.ledger_aggregator = ledger_aggregator

    async def allocate_document_number(
        self,
        tenant_id: str,
        selector: SeriesSelector | SeriesCode,
        effective_date: date,
    ) -> DocumentNumber:
        return await self.sequence_allocator.allocate_document_number(
            tenant_id, selector, effective_date
        )

    async def apply_invoice_stock_effect(self, invoice: Invoice) -> None:
        await self.synchronizer.apply(invoice)

    async def revert_invoice_stock_effect(self, invoice: Invoice) -> list[str]:
        """Revert leniently; lines that could not be reverted come back as messages."""
        warnings = await self.synchronizer.revert_for_deletion(invoice)
        return [warning.message for warning in warnings]

    async def update_invoice_with_stock(
        self,
        stored: Invoice,
        updated: Invoice,
        ledger_entries: list[LedgerEntry] | None = None,
    ) -> Invoice:
        return await self.synchronizer.update(stored, updated, ledger_entries)

    async def delete_invoice_with_stock(
        self, invoice: Invoice, ledger_entries: list[LedgerEntry] | None = None
    ) -> list[PartialRevertWarning]:
        return await self.synchronizer.delete(invoice, ledger_entries)

    async def create_payment_with_allocations(
        self,
        payment: Payment,
        allocations: list[PaymentAllocation] | None = None,
        candidates: list[Invoice] | None = None,
        auto_allocate: bool = True,
    ) -> Payment:
        return await self.payment_engine.apply(
            payment, allocations, candidates=candidates, auto_allocate=auto_allocate
        )

    async def delete_payment(self, tenant_id: str, payment_id: int) -> list[int]:
        """
        Returns ids of allocated invoices that no longer exist. Raises
        PaymentNotFoundError when the payment does not exist.
        """
        return await self.payment_engine.remove(tenant_id, payment_id)

    async def compute_party_ledger(
        self,
        tenant_id: str,
        party_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> LedgerStatement:
        return await self.ledger_aggregator.running_balance(tenant_id, party_id, start, end)
