"""Tests for SQLite invoice, payment and ledger stores."""

from datetime import date

import pytest

from src.core.entities import (
    Invoice,
    InvoiceDirection,
    InvoiceLine,
    LedgerRefType,
    Payment,
    PaymentAllocation,
    PaymentDirection,
)
from src.core.exceptions import (
    AllocationExceedsDueError,
    AllocationInvoiceMismatchError,
    InvoiceConflictError,
    InvoiceNotFoundError,
)
from src.core.services import posting
from src.infrastructure.storage.sqlite import (
    SQLiteInvoiceStore,
    SQLiteLedgerStore,
    SQLitePaymentStore,
)


@pytest.fixture
def invoice_store() -> SQLiteInvoiceStore:
    return SQLiteInvoiceStore()


@pytest.fixture
def payment_store() -> SQLitePaymentStore:
    return SQLitePaymentStore()


@pytest.fixture
def ledger_store() -> SQLiteLedgerStore:
    return SQLiteLedgerStore()


@pytest.fixture
async def invoice(invoice_store, customer, item) -> Invoice:
    draft = Invoice(
        tenant_id=customer.tenant_id,
        party_id=customer.id,
        direction=InvoiceDirection.SALES,
        invoice_date=date(2025, 6, 1),
        number="GK-CR-0001-25-26",
        series_code="CR",
        lines=[InvoiceLine(item_id=item.id, quantity=10, rate=100)],
    )
    return await invoice_store.create_invoice(draft, posting.invoice_entries(draft))


def _receipt(invoice: Invoice, amount: float, allocations: list[PaymentAllocation]) -> Payment:
    return Payment(
        tenant_id=invoice.tenant_id,
        party_id=invoice.party_id,
        direction=PaymentDirection.RECEIVE,
        amount=amount,
        payment_date=date(2025, 6, 5),
        voucher_number="GK-RCV-0001-25-26",
        allocations=allocations,
    )


class TestInvoiceStore:
    async def test_round_trip_with_lines(self, invoice_store, invoice):
        loaded = await invoice_store.get_invoice(invoice.tenant_id, invoice.id)

        assert loaded.number == "GK-CR-0001-25-26"
        assert loaded.grand_total == 1000.0
        assert loaded.due_amount == 1000.0
        assert [line.quantity for line in loaded.lines] == [10.0]

    async def test_ledger_row_linked_to_invoice(self, ledger_store, invoice):
        rows = await ledger_store.list_for_reference(invoice.tenant_id, LedgerRefType.INVOICE, invoice.id)
        assert len(rows) == 1
        assert rows[0].debit == 1000.0

    async def test_delete_missing_invoice(self, invoice_store, invoice):
        await invoice_store.delete_invoice(invoice)
        with pytest.raises(InvoiceNotFoundError):
            await invoice_store.delete_invoice(invoice)

    async def test_list_outstanding(self, invoice_store, invoice):
        outstanding = await invoice_store.list_outstanding(invoice.tenant_id, invoice.party_id)
        assert [i.id for i in outstanding] == [invoice.id]


class TestPaymentStore:
    async def test_allocation_updates_invoice(self, payment_store, invoice_store, invoice):
        payment = _receipt(invoice, 600, [PaymentAllocation(invoice_id=invoice.id, amount=600)])

        saved = await payment_store.create_payment_with_allocations(payment, [posting.payment_entry(payment)])

        loaded = await invoice_store.get_invoice(invoice.tenant_id, invoice.id)
        assert (loaded.paid_amount, loaded.due_amount) == (600.0, 400.0)
        fetched = await payment_store.get_payment(invoice.tenant_id, saved.id)
        assert [(a.invoice_id, a.amount) for a in fetched.allocations] == [(invoice.id, 600.0)]

    async def test_over_due_allocation_writes_nothing(self, payment_store, invoice_store, invoice):
        payment = _receipt(invoice, 1500, [PaymentAllocation(invoice_id=invoice.id, amount=1200)])

        with pytest.raises(AllocationExceedsDueError):
            await payment_store.create_payment_with_allocations(payment)

        assert await payment_store.list_payments(invoice.tenant_id) == []
        loaded = await invoice_store.get_invoice(invoice.tenant_id, invoice.id)
        assert loaded.due_amount == 1000.0

    async def test_delete_restores_due(self, payment_store, invoice_store, ledger_store, invoice):
        payment = _receipt(invoice, 600, [PaymentAllocation(invoice_id=invoice.id, amount=600)])
        saved = await payment_store.create_payment_with_allocations(payment, [posting.payment_entry(payment)])

        await payment_store.delete_payment_with_reversal(saved, [posting.payment_reversal_entry(saved)])

        loaded = await invoice_store.get_invoice(invoice.tenant_id, invoice.id)
        assert (loaded.paid_amount, loaded.due_amount) == (0.0, 1000.0)
        assert await payment_store.get_payment(invoice.tenant_id, saved.id) is None

        rows = await ledger_store.list_for_reference(invoice.tenant_id, LedgerRefType.PAYMENT, saved.id)
        assert [(r.debit, r.credit, r.is_reversal) for r in rows] == [
            (0.0, 600.0, False),
            (600.0, 0.0, True),
        ]
        assert rows[1].reversed_ref_id == saved.id


class TestInvoiceVersions:
    async def test_update_bumps_version(self, invoice_store, invoice):
        invoice.notes = "deliver by Friday"

        saved = await invoice_store.update_invoice(invoice)

        assert saved.version == 1
        assert (await invoice_store.get_invoice(invoice.tenant_id, invoice.id)).version == 1

    async def test_stale_update_refused(self, invoice_store, invoice):
        stale = invoice.model_copy(deep=True)
        invoice.notes = "first"
        await invoice_store.update_invoice(invoice)

        stale.notes = "second"
        with pytest.raises(InvoiceConflictError):
            await invoice_store.update_invoice(stale)

        assert (await invoice_store.get_invoice(invoice.tenant_id, invoice.id)).notes == "first"

    async def test_allocation_bumps_version(self, payment_store, invoice_store, invoice):
        payment = _receipt(invoice, 250, [PaymentAllocation(invoice_id=invoice.id, amount=250)])
        await payment_store.create_payment_with_allocations(payment)

        loaded = await invoice_store.get_invoice(invoice.tenant_id, invoice.id)
        assert loaded.version == 1

        with pytest.raises(InvoiceConflictError):
            await invoice_store.update_invoice(invoice)
        with pytest.raises(InvoiceConflictError):
            await invoice_store.delete_invoice(invoice)

        await invoice_store.delete_invoice(loaded)
        assert await invoice_store.get_invoice(invoice.tenant_id, invoice.id) is None


class TestAllocationCounterpart:
    async def test_other_party_invoice_refused_at_write(self, payment_store, invoice_store, invoice, supplier):
        payment = _receipt(invoice, 100, [PaymentAllocation(invoice_id=invoice.id, amount=100)])
        payment.party_id = supplier.id

        with pytest.raises(AllocationInvoiceMismatchError):
            await payment_store.create_payment_with_allocations(payment)

        assert await payment_store.list_payments(invoice.tenant_id) == []
        assert (await invoice_store.get_invoice(invoice.tenant_id, invoice.id)).due_amount == 1000.0

    async def test_payout_refused_against_sales_invoice(self, payment_store, invoice_store, invoice):
        payment = _receipt(invoice, 100, [PaymentAllocation(invoice_id=invoice.id, amount=100)])
        payment.direction = PaymentDirection.PAY

        with pytest.raises(AllocationInvoiceMismatchError):
            await payment_store.create_payment_with_allocations(payment)

        assert (await invoice_store.get_invoice(invoice.tenant_id, invoice.id)).version == 0


class TestDeletePaymentAfterInvoice:
    async def test_returns_deleted_invoice_ids(self, payment_store, invoice_store, ledger_store, invoice):
        payment = _receipt(invoice, 600, [PaymentAllocation(invoice_id=invoice.id, amount=600)])
        saved = await payment_store.create_payment_with_allocations(payment, [posting.payment_entry(payment)])
        await invoice_store.delete_invoice(await invoice_store.get_invoice(invoice.tenant_id, invoice.id))

        missing = await payment_store.delete_payment_with_reversal(
            saved, [posting.payment_reversal_entry(saved)]
        )

        assert missing == [invoice.id]
        assert await payment_store.get_payment(invoice.tenant_id, saved.id) is None
        rows = await ledger_store.list_for_reference(invoice.tenant_id, LedgerRefType.PAYMENT, saved.id)
        assert sum(r.debit - r.credit for r in rows) == 0.0

    async def test_nothing_missing_when_invoice_remains(self, payment_store, invoice):
        payment = _receipt(invoice, 100, [PaymentAllocation(invoice_id=invoice.id, amount=100)])
        saved = await payment_store.create_payment_with_allocations(payment)

        assert await payment_store.delete_payment_with_reversal(saved) == []
