"""Tests for PaymentAllocationEngine."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.core.entities import (
    DocumentNumber,
    Invoice,
    InvoiceDirection,
    InvoiceLine,
    LedgerEntryType,
    Payment,
    PaymentAllocation,
    PaymentDirection,
    SeriesCode,
)
from src.core.exceptions import (
    AllocationExceedsDueError,
    AllocationExceedsPaymentAmountError,
    AllocationInvoiceMismatchError,
    InvoiceNotFoundError,
    PaymentNotFoundError,
    ValidationError,
)
from src.core.services import PaymentAllocationEngine, allocate_fifo


def _invoice(
    invoice_id: int,
    total: float,
    paid: float = 0.0,
    direction=InvoiceDirection.SALES,
    party_id: int = 1,
) -> Invoice:
    return Invoice(
        id=invoice_id,
        tenant_id="gk",
        party_id=party_id,
        direction=direction,
        lines=[InvoiceLine(item_id=1, quantity=1, rate=total)],
        paid_amount=paid,
    )


def _payment(amount: float, direction=PaymentDirection.RECEIVE) -> Payment:
    return Payment(
        tenant_id="gk", party_id=1, direction=direction, amount=amount, payment_date=date(2025, 6, 1)
    )


@pytest.fixture
def invoices():
    return {1: _invoice(1, 500), 2: _invoice(2, 500), 3: _invoice(3, 300, paid=100)}


@pytest.fixture
def mock_invoice_store(invoices):
    store = AsyncMock()
    store.get_invoice.side_effect = lambda tenant_id, invoice_id: invoices.get(invoice_id)
    store.list_outstanding.return_value = list(invoices.values())
    return store


@pytest.fixture
def mock_payment_store():
    store = AsyncMock()
    store.create_payment_with_allocations.side_effect = lambda payment, entries: payment
    return store


@pytest.fixture
def mock_allocator():
    allocator = AsyncMock()
    allocator.allocate_document_number.return_value = DocumentNumber(
        number="GK-RCV-0001-25-26", sequence=1, series_code=SeriesCode.RECEIPT, period="25-26"
    )
    return allocator


@pytest.fixture
def engine(mock_payment_store, mock_invoice_store, mock_allocator):
    return PaymentAllocationEngine(mock_payment_store, mock_invoice_store, mock_allocator)


class TestAllocateFifo:
    def test_consumes_in_order(self, invoices):
        allocations = allocate_fifo(700, list(invoices.values()))
        assert [(a.invoice_id, a.amount) for a in allocations] == [(1, 500.0), (2, 200.0)]

    def test_leftover_stays_unallocated(self, invoices):
        allocations = allocate_fifo(2000, list(invoices.values()))
        assert sum(a.amount for a in allocations) == 1200.0

    def test_skips_settled_invoices(self):
        allocations = allocate_fifo(100, [_invoice(1, 50, paid=50), _invoice(2, 80)])
        assert [(a.invoice_id, a.amount) for a in allocations] == [(2, 80.0)]


class TestApply:
    async def test_over_allocation_rejected_before_any_write(
        self, engine, mock_payment_store, mock_invoice_store, mock_allocator
    ):
        allocations = [
            PaymentAllocation(invoice_id=1, amount=600),
            PaymentAllocation(invoice_id=2, amount=500),
        ]

        with pytest.raises(AllocationExceedsPaymentAmountError):
            await engine.apply(_payment(1000), allocations)

        mock_invoice_store.get_invoice.assert_not_called()
        mock_allocator.allocate_document_number.assert_not_called()
        mock_payment_store.create_payment_with_allocations.assert_not_called()

    async def test_allocation_above_due_rejected(self, engine, mock_payment_store):
        with pytest.raises(AllocationExceedsDueError) as exc_info:
            await engine.apply(_payment(1000), [PaymentAllocation(invoice_id=3, amount=250)])
        assert exc_info.value.details["due"] == 200.0
        mock_payment_store.create_payment_with_allocations.assert_not_called()

    async def test_other_party_invoice_rejected(
        self, engine, invoices, mock_payment_store, mock_allocator
    ):
        invoices[4] = _invoice(4, 300, party_id=2)

        with pytest.raises(AllocationInvoiceMismatchError) as exc_info:
            await engine.apply(_payment(300), [PaymentAllocation(invoice_id=4, amount=300)])

        assert exc_info.value.details["invoice_id"] == 4
        mock_allocator.allocate_document_number.assert_not_called()
        mock_payment_store.create_payment_with_allocations.assert_not_called()

    async def test_payout_cannot_settle_sales_invoice(self, engine, mock_payment_store):
        with pytest.raises(AllocationInvoiceMismatchError):
            await engine.apply(
                _payment(300, PaymentDirection.PAY), [PaymentAllocation(invoice_id=1, amount=300)]
            )
        mock_payment_store.create_payment_with_allocations.assert_not_called()

    async def test_receipt_cannot_settle_purchase_invoice(self, engine, invoices):
        invoices[5] = _invoice(5, 400, direction=InvoiceDirection.PURCHASE)
        with pytest.raises(AllocationInvoiceMismatchError):
            await engine.apply(_payment(400), [PaymentAllocation(invoice_id=5, amount=400)])

    async def test_unknown_invoice_rejected(self, engine):
        with pytest.raises(InvoiceNotFoundError):
            await engine.apply(_payment(100), [PaymentAllocation(invoice_id=99, amount=50)])

    @pytest.mark.parametrize("amount", [0, -10, float("nan")])
    async def test_invalid_payment_amount(self, engine, amount):
        with pytest.raises(ValidationError):
            await engine.apply(_payment(amount))

    async def test_explicit_allocations_merge_duplicates(self, engine):
        saved = await engine.apply(
            _payment(600),
            [
                PaymentAllocation(invoice_id=1, amount=200),
                PaymentAllocation(invoice_id=1, amount=100),
                PaymentAllocation(invoice_id=2, amount=300),
            ],
        )
        assert [(a.invoice_id, a.amount) for a in saved.allocations] == [(1, 300.0), (2, 300.0)]
        assert saved.unallocated == 0.0

    async def test_auto_allocates_fifo_and_numbers(self, engine, mock_payment_store):
        saved = await engine.apply(_payment(700))

        assert saved.voucher_number == "GK-RCV-0001-25-26"
        assert saved.series_code == "RCV"
        assert [(a.invoice_id, a.amount) for a in saved.allocations] == [(1, 500.0), (2, 200.0)]

        entries = mock_payment_store.create_payment_with_allocations.await_args.args[1]
        assert len(entries) == 1
        assert entries[0].entry_type == LedgerEntryType.PAYMENT
        assert entries[0].credit == 700.0

    async def test_auto_allocate_only_matching_direction(self, engine, mock_invoice_store):
        mock_invoice_store.list_outstanding.return_value = [
            _invoice(1, 500, direction=InvoiceDirection.PURCHASE),
            _invoice(2, 500),
        ]
        saved = await engine.apply(_payment(300))
        assert [a.invoice_id for a in saved.allocations] == [2]

    async def test_on_account_payment(self, engine, mock_invoice_store, mock_allocator):
        saved = await engine.apply(_payment(250, PaymentDirection.PAY), auto_allocate=False)

        assert saved.allocations == []
        assert saved.unallocated == 250.0
        mock_invoice_store.list_outstanding.assert_not_called()
        assert mock_allocator.allocate_document_number.await_args.args[1] == SeriesCode.PAYMENT


class TestRemove:
    async def test_remove_posts_reversal(self, engine, mock_payment_store):
        payment = _payment(400)
        payment.id = 5
        payment.voucher_number = "GK-RCV-0002-25-26"
        mock_payment_store.get_payment.return_value = payment

        mock_payment_store.delete_payment_with_reversal.return_value = []

        assert await engine.remove("gk", 5) == []

        stored, entries = mock_payment_store.delete_payment_with_reversal.await_args.args
        assert stored is payment
        assert entries[0].is_reversal
        assert entries[0].debit == 400.0

    async def test_remove_missing_payment(self, engine, mock_payment_store):
        mock_payment_store.get_payment.return_value = None
        with pytest.raises(PaymentNotFoundError):
            await engine.remove("gk", 5)
