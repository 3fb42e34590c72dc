"""Tests for InvoiceStockSynchronizer."""

from unittest.mock import AsyncMock

import pytest

from src.core.entities import (
    Invoice,
    InvoiceDirection,
    InvoiceLine,
    LedgerEntry,
    LedgerEntryType,
    MovementKind,
)
from src.core.exceptions import (
    InsufficientStockError,
    InvoiceConflictError,
    InvoiceNotFoundError,
    InvoiceTypeInvalidError,
    ItemNotFoundError,
    StockRestoreFailedError,
)
from src.core.services import InvoiceStockSynchronizer
from src.core.services.invoice_stock_sync import ROLLBACK_NOTE


def _invoice(direction=InvoiceDirection.SALES, lines=None) -> Invoice:
    return Invoice(
        id=11,
        tenant_id="gk",
        party_id=1,
        direction=direction,
        number="GK-CR-0001-25-26",
        series_code="CR",
        lines=lines
        or [
            InvoiceLine(item_id=1, quantity=2, rate=10),
            InvoiceLine(item_id=2, quantity=3, rate=10),
            InvoiceLine(item_id=3, quantity=4, rate=10),
        ],
    )


@pytest.fixture
def mock_stock_ledger():
    return AsyncMock()


@pytest.fixture
def mock_invoice_store():
    store = AsyncMock()
    store.update_invoice.side_effect = lambda invoice, entries=None: invoice
    return store


@pytest.fixture
def sequential(mock_stock_ledger, mock_invoice_store):
    return InvoiceStockSynchronizer(mock_stock_ledger, mock_invoice_store, atomic_batches=False)


@pytest.fixture
def atomic(mock_stock_ledger, mock_invoice_store):
    return InvoiceStockSynchronizer(mock_stock_ledger, mock_invoice_store)


class TestApply:
    async def test_sales_decreases_each_line(self, sequential, mock_stock_ledger):
        await sequential.apply(_invoice())

        calls = mock_stock_ledger.decrease.await_args_list
        assert [c.args[1] for c in calls] == [1, 2, 3]
        assert [c.args[2] for c in calls] == [2, 3, 4]
        assert all(c.args[3] == MovementKind.SALE for c in calls)
        mock_stock_ledger.increase.assert_not_called()

    async def test_purchase_increases_each_line(self, sequential, mock_stock_ledger):
        await sequential.apply(_invoice(InvoiceDirection.PURCHASE))

        assert mock_stock_ledger.increase.await_count == 3
        assert mock_stock_ledger.increase.await_args_list[0].args[3] == MovementKind.PURCHASE
        mock_stock_ledger.decrease.assert_not_called()

    async def test_atomic_policy_uses_one_batch(self, atomic, mock_stock_ledger):
        await atomic.apply(_invoice())

        mock_stock_ledger.apply_batch.assert_awaited_once()
        deltas = mock_stock_ledger.apply_batch.await_args.args[1]
        assert [d.delta for d in deltas] == [-2, -3, -4]
        assert all(d.ref_id == 11 for d in deltas)

    async def test_missing_direction_blocks_stock(self, sequential, mock_stock_ledger):
        with pytest.raises(InvoiceTypeInvalidError):
            await sequential.apply(_invoice(direction=None))
        mock_stock_ledger.decrease.assert_not_called()
        mock_stock_ledger.increase.assert_not_called()

    async def test_empty_invoice_is_noop(self, atomic, mock_stock_ledger):
        await atomic.apply(_invoice().model_copy(update={"lines": []}))
        mock_stock_ledger.apply_batch.assert_not_called()


class TestSequentialRollback:
    async def test_failed_line_rolls_back_applied_lines(self, sequential, mock_stock_ledger):
        mock_stock_ledger.decrease.side_effect = [8.0, 7.0, InsufficientStockError(3, 4, 1)]

        with pytest.raises(InsufficientStockError):
            await sequential.apply(_invoice())

        undo = mock_stock_ledger.increase.await_args_list
        # newest first
        assert [c.args[1] for c in undo] == [2, 1]
        assert [c.args[2] for c in undo] == [3, 2]
        assert all(c.args[3] == MovementKind.ADJUSTMENT for c in undo)
        assert all(c.args[5] == ROLLBACK_NOTE for c in undo)

    async def test_failed_rollback_reported_on_error(self, sequential, mock_stock_ledger):
        mock_stock_ledger.decrease.side_effect = [8.0, 7.0, InsufficientStockError(3, 4, 1)]
        mock_stock_ledger.increase.side_effect = [ItemNotFoundError(2), 10.0]

        with pytest.raises(InsufficientStockError) as exc_info:
            await sequential.apply(_invoice())

        assert exc_info.value.details["rollback_failed_items"] == [2]
        assert mock_stock_ledger.increase.await_count == 2


class TestRevertForDeletion:
    async def test_reverts_sales_lines(self, sequential, mock_stock_ledger):
        warnings = await sequential.revert_for_deletion(_invoice())

        assert warnings == []
        calls = mock_stock_ledger.increase.await_args_list
        assert [c.args[2] for c in calls] == [2, 3, 4]
        assert all(c.args[3] == MovementKind.ADJUSTMENT for c in calls)

    async def test_missing_item_records_compensation(self, sequential, mock_stock_ledger):
        mock_stock_ledger.increase.side_effect = [5.0, ItemNotFoundError(2), 6.0]

        warnings = await sequential.revert_for_deletion(_invoice())

        assert len(warnings) == 1
        assert warnings[0].item_id == 2
        assert warnings[0].reason == "ITEM_NOT_FOUND"
        assert warnings[0].movement_recorded is True
        mock_stock_ledger.record_missing_item_movement.assert_awaited_once()
        assert mock_stock_ledger.increase.await_count == 3

    async def test_purchase_revert_shortfall_is_warning(self, sequential, mock_stock_ledger):
        mock_stock_ledger.decrease.side_effect = [1.0, InsufficientStockError(2, 3, 0), 2.0]

        warnings = await sequential.revert_for_deletion(_invoice(InvoiceDirection.PURCHASE))

        assert [w.reason for w in warnings] == ["INSUFFICIENT_STOCK"]
        assert warnings[0].movement_recorded is False

    async def test_delete_claims_document_before_revert(
        self, sequential, mock_stock_ledger, mock_invoice_store
    ):
        order = []
        mock_invoice_store.delete_invoice.side_effect = lambda invoice, entries: order.append("delete")
        mock_stock_ledger.increase.side_effect = lambda *args: order.append("increase")
        invoice = _invoice()

        await sequential.delete(invoice, [])

        mock_invoice_store.delete_invoice.assert_awaited_once_with(invoice, [])
        assert order == ["delete", "increase", "increase", "increase"]

    async def test_lost_delete_leaves_stock_alone(
        self, sequential, mock_stock_ledger, mock_invoice_store
    ):
        mock_invoice_store.delete_invoice.side_effect = InvoiceNotFoundError(11)

        with pytest.raises(InvoiceNotFoundError):
            await sequential.delete(_invoice(), [])
        mock_stock_ledger.increase.assert_not_called()
        mock_stock_ledger.record_missing_item_movement.assert_not_called()


class TestUpdate:
    async def test_update_reverts_then_applies(self, sequential, mock_stock_ledger, mock_invoice_store):
        stored = _invoice(lines=[InvoiceLine(item_id=1, quantity=10, rate=10)])
        updated = _invoice(lines=[InvoiceLine(item_id=1, quantity=4, rate=10)])

        saved = await sequential.update(stored, updated, [])

        assert saved is updated
        mock_stock_ledger.increase.assert_awaited_once()
        assert mock_stock_ledger.increase.await_args.args[2] == 10
        mock_stock_ledger.decrease.assert_awaited_once()
        assert mock_stock_ledger.decrease.await_args.args[2] == 4
        mock_invoice_store.update_invoice.assert_awaited_once_with(updated, [])

    async def test_failed_apply_restores_previous_state(
        self, sequential, mock_stock_ledger, mock_invoice_store
    ):
        stored = _invoice(lines=[InvoiceLine(item_id=1, quantity=10, rate=10)])
        updated = _invoice(lines=[InvoiceLine(item_id=1, quantity=80, rate=10)])
        posted = [
            LedgerEntry(
                tenant_id="gk", party_id=1, entry_date=stored.invoice_date,
                entry_type=LedgerEntryType.INVOICE, debit=800, ref_id=11,
            )
        ]
        mock_stock_ledger.decrease.side_effect = [InsufficientStockError(1, 80, 50), 40.0]

        with pytest.raises(InsufficientStockError):
            await sequential.update(stored, updated, posted)

        # second write restores the stored document with a compensating row
        restore_call = mock_invoice_store.update_invoice.await_args_list[1]
        assert restore_call.args[0].id == stored.id
        assert restore_call.args[0].lines == stored.lines
        compensation = restore_call.args[1]
        assert len(compensation) == 1
        assert compensation[0].credit == 800
        assert compensation[0].is_reversal
        assert mock_stock_ledger.decrease.await_args_list[1].args[2] == 10

    async def test_restore_writes_against_bumped_version(
        self, sequential, mock_stock_ledger, mock_invoice_store
    ):
        seen = []

        def write(invoice, entries=None):
            seen.append(invoice.version)
            invoice.version += 1
            return invoice

        mock_invoice_store.update_invoice.side_effect = write
        stored = _invoice(lines=[InvoiceLine(item_id=1, quantity=10, rate=10)])
        updated = _invoice(lines=[InvoiceLine(item_id=1, quantity=80, rate=10)])
        mock_stock_ledger.decrease.side_effect = [InsufficientStockError(1, 80, 50), 40.0]

        with pytest.raises(InsufficientStockError):
            await sequential.update(stored, updated, [])

        assert seen == [0, 1]
        assert stored.version == 0

    async def test_write_conflict_restores_stored_effect(
        self, sequential, mock_stock_ledger, mock_invoice_store
    ):
        stored = _invoice(lines=[InvoiceLine(item_id=1, quantity=10, rate=10)])
        updated = _invoice(lines=[InvoiceLine(item_id=1, quantity=4, rate=10)])
        mock_invoice_store.update_invoice.side_effect = InvoiceConflictError(11, 0)

        with pytest.raises(InvoiceConflictError):
            await sequential.update(stored, updated, [])

        # the stored line is reverted and then applied again
        assert mock_stock_ledger.increase.await_args.args[2] == 10
        mock_stock_ledger.decrease.assert_awaited_once()
        assert mock_stock_ledger.decrease.await_args.args[2] == 10
        mock_invoice_store.update_invoice.assert_awaited_once()

    async def test_failed_restore_raises_restore_error(
        self, sequential, mock_stock_ledger, mock_invoice_store
    ):
        stored = _invoice(lines=[InvoiceLine(item_id=1, quantity=10, rate=10)])
        updated = _invoice(lines=[InvoiceLine(item_id=1, quantity=80, rate=10)])
        mock_stock_ledger.decrease.side_effect = [
            InsufficientStockError(1, 80, 50),
            ItemNotFoundError(1),
        ]

        with pytest.raises(StockRestoreFailedError) as exc_info:
            await sequential.update(stored, updated, [])
        assert exc_info.value.details["invoice_id"] == 11

    async def test_invalid_direction_rejected_before_any_write(
        self, sequential, mock_stock_ledger, mock_invoice_store
    ):
        with pytest.raises(InvoiceTypeInvalidError):
            await sequential.update(_invoice(), _invoice(direction=None), [])
        mock_invoice_store.update_invoice.assert_not_called()
        mock_stock_ledger.increase.assert_not_called()
