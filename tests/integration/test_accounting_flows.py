"""
End-to-end flows through the use cases against a real SQLite database.

These wire the default services (no mocks), so they cover the store
transactions, the stock synchronizer and the ledger together.
"""

from datetime import date

import pytest

from src.application.dto.requests import (
    AllocateNumberRequest,
    CreateInvoiceRequest,
    CreatePaymentRequest,
    InvoiceLineRequest,
    UpdateInvoiceRequest,
)
from src.application.use_cases import (
    AllocateNumberUseCase,
    CreateInvoiceUseCase,
    DeleteInvoiceUseCase,
    DeletePaymentUseCase,
    PartyStatementUseCase,
    RecordPaymentUseCase,
    UpdateInvoiceUseCase,
)
from src.core.entities import (
    InvoiceDirection,
    LedgerRefType,
    MovementKind,
    PaymentDirection,
    PaymentMode,
    SeriesCode,
)
from src.core.exceptions import InsufficientStockError
from src.infrastructure.storage.sqlite import (
    get_invoice_store,
    get_ledger_store,
    get_stock_store,
)


def _invoice_request(party_id: int, item_id: int, quantity: float, **kwargs) -> CreateInvoiceRequest:
    data = {
        "party_id": party_id,
        "direction": InvoiceDirection.SALES,
        "invoice_date": date(2025, 6, 1),
        "lines": [InvoiceLineRequest(item_id=item_id, quantity=quantity, rate=100)],
    }
    data.update(kwargs)
    return CreateInvoiceRequest(**data)


async def _on_hand(tenant_id: str, item_id: int) -> float:
    store = await get_stock_store()
    return (await store.get_item(tenant_id, item_id)).quantity


class TestInvoiceStockFlow:
    async def test_sale_then_delete_restores_stock(self, customer, item):
        created = await CreateInvoiceUseCase().execute(
            customer.tenant_id, _invoice_request(customer.id, item.id, 10)
        )
        assert await _on_hand(customer.tenant_id, item.id) == 40.0

        result = await DeleteInvoiceUseCase().execute(customer.tenant_id, created.invoice.id)

        assert result.warnings == []
        assert await _on_hand(customer.tenant_id, item.id) == 50.0
        store = await get_stock_store()
        movements = await store.list_movements(customer.tenant_id, item_id=item.id)
        assert [(m.delta, m.kind) for m in movements] == [
            (50.0, MovementKind.ADJUSTMENT),
            (-10.0, MovementKind.SALE),
            (10.0, MovementKind.ADJUSTMENT),
        ]

    async def test_purchase_adds_stock(self, supplier, item):
        request = _invoice_request(supplier.id, item.id, 25, direction=InvoiceDirection.PURCHASE)

        result = await CreateInvoiceUseCase().execute(supplier.tenant_id, request)

        assert result.invoice.series_code == "PUR"
        assert await _on_hand(supplier.tenant_id, item.id) == 75.0

    async def test_failed_update_keeps_previous_state(self, customer, item):
        created = await CreateInvoiceUseCase().execute(
            customer.tenant_id, _invoice_request(customer.id, item.id, 10)
        )

        with pytest.raises(InsufficientStockError):
            await UpdateInvoiceUseCase().execute(
                customer.tenant_id,
                created.invoice.id,
                UpdateInvoiceRequest(lines=[InvoiceLineRequest(item_id=item.id, quantity=90, rate=100)]),
            )

        assert await _on_hand(customer.tenant_id, item.id) == 40.0
        invoices = await get_invoice_store()
        stored = await invoices.get_invoice(customer.tenant_id, created.invoice.id)
        assert [line.quantity for line in stored.lines] == [10.0]
        assert stored.grand_total == 1000.0

    async def test_oversell_leaves_no_invoice(self, customer, item):
        with pytest.raises(InsufficientStockError):
            await CreateInvoiceUseCase().execute(
                customer.tenant_id, _invoice_request(customer.id, item.id, 51)
            )

        invoices = await get_invoice_store()
        assert await invoices.list_invoices(customer.tenant_id) == []
        assert await _on_hand(customer.tenant_id, item.id) == 50.0


class TestPaymentFlow:
    async def test_delete_payment_restores_due_and_nets_ledger(self, customer, item):
        created = await CreateInvoiceUseCase().execute(
            customer.tenant_id, _invoice_request(customer.id, item.id, 10)
        )
        recorded = await RecordPaymentUseCase().execute(
            customer.tenant_id,
            CreatePaymentRequest(
                party_id=customer.id,
                direction=PaymentDirection.RECEIVE,
                amount=700,
                payment_date=date(2025, 6, 10),
            ),
        )
        invoices = await get_invoice_store()
        paid = await invoices.get_invoice(customer.tenant_id, created.invoice.id)
        assert (paid.paid_amount, paid.due_amount) == (700.0, 300.0)
        assert recorded.payment.voucher_number == "GK-RCV-0001-25-26"

        await DeletePaymentUseCase().execute(customer.tenant_id, recorded.payment.id)

        restored = await invoices.get_invoice(customer.tenant_id, created.invoice.id)
        assert (restored.paid_amount, restored.due_amount) == (0.0, 1000.0)
        ledger = await get_ledger_store()
        rows = await ledger.list_for_reference(
            customer.tenant_id, LedgerRefType.PAYMENT, recorded.payment.id
        )
        assert sum(r.debit - r.credit for r in rows) == 0.0

    async def test_cash_sale_statement_nets_to_zero(self, customer, item):
        await CreateInvoiceUseCase().execute(
            customer.tenant_id,
            _invoice_request(customer.id, item.id, 3, payment_mode=PaymentMode.CASH),
        )

        statement = await PartyStatementUseCase().execute(customer.tenant_id, customer.id)

        assert [line.balance_after for line in statement.lines] == [300.0, 0.0]
        assert statement.closing_balance == 0.0


class TestPartyStatementFlow:
    async def test_range_opening_includes_earlier_entries(self, customer, item):
        create = CreateInvoiceUseCase()
        await create.execute(
            customer.tenant_id, _invoice_request(customer.id, item.id, 2, invoice_date=date(2025, 5, 2))
        )
        await create.execute(
            customer.tenant_id, _invoice_request(customer.id, item.id, 4, invoice_date=date(2025, 6, 2))
        )
        await RecordPaymentUseCase().execute(
            customer.tenant_id,
            CreatePaymentRequest(
                party_id=customer.id,
                direction=PaymentDirection.RECEIVE,
                amount=150,
                payment_date=date(2025, 6, 3),
            ),
        )

        statement = await PartyStatementUseCase().execute(
            customer.tenant_id, customer.id, start=date(2025, 6, 1), end=date(2025, 6, 30)
        )

        assert statement.opening_balance == 200.0
        assert [line.balance_after for line in statement.lines] == [600.0, 450.0]
        assert (statement.total_debit, statement.total_credit) == (400.0, 150.0)
        assert statement.closing_balance == 450.0


class TestNumberingFlow:
    async def test_fiscal_year_boundary_restarts_sequence(self, tenant):
        use_case = AllocateNumberUseCase()

        march = await use_case.execute(
            tenant.id,
            AllocateNumberRequest(series_code=SeriesCode.CREDIT_SALE, effective_date=date(2025, 3, 31)),
        )
        april = await use_case.execute(
            tenant.id,
            AllocateNumberRequest(series_code=SeriesCode.CREDIT_SALE, effective_date=date(2025, 4, 1)),
        )

        assert (march.sequence, march.period, march.number) == (1, "24-25", "GK-CR-0001-24-25")
        assert (april.sequence, april.period, april.number) == (1, "25-26", "GK-CR-0001-25-26")
