"""Tests for item, adjustment, numbering and directory use cases."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.application.accounting_core import AccountingCore
from src.application.dto.requests import (
    AdjustStockRequest,
    AllocateNumberRequest,
    CreateItemRequest,
    CreatePartyRequest,
)
from src.application.use_cases import (
    AdjustStockUseCase,
    AllocateNumberUseCase,
    CreateItemUseCase,
    CreatePartyUseCase,
)
from src.application.use_cases.manage_stock import OPENING_STOCK_NOTE
from src.core.entities import (
    DocumentKind,
    DocumentNumber,
    MovementKind,
    PartyRole,
    PaymentMode,
    SeriesCode,
    Tenant,
)
from src.core.exceptions import TenantNotFoundError, ValidationError


@pytest.fixture
def mock_directory():
    directory = AsyncMock()
    directory.get_tenant.return_value = Tenant(id="gk", name="Gayatri Kirana")
    directory.create_party.side_effect = lambda party: party
    return directory


class TestCreateItemUseCase:
    async def test_opening_quantity_goes_through_ledger(self, mock_directory):
        store = AsyncMock()

        def _create(item):
            item.id = 5
            return item

        store.create_item.side_effect = _create
        ledger = AsyncMock()
        ledger.increase.return_value = 12.0
        use_case = CreateItemUseCase(stock_store=store, stock_ledger=ledger, directory=mock_directory)

        item = await use_case.execute("gk", CreateItemRequest(name="Sugar 1kg", opening_quantity=12))

        assert item.quantity == 12.0
        created = store.create_item.await_args.args[0]
        assert created.quantity == 0.0
        ledger.increase.assert_awaited_once_with(
            "gk", 5, 12.0, MovementKind.ADJUSTMENT, note=OPENING_STOCK_NOTE
        )

    async def test_no_opening_quantity_no_movement(self, mock_directory):
        store = AsyncMock()
        store.create_item.side_effect = lambda item: item
        ledger = AsyncMock()
        use_case = CreateItemUseCase(stock_store=store, stock_ledger=ledger, directory=mock_directory)

        await use_case.execute("gk", CreateItemRequest(name="Salt"))
        ledger.increase.assert_not_called()

    async def test_unknown_tenant(self, mock_directory):
        mock_directory.get_tenant.return_value = None
        store = AsyncMock()
        use_case = CreateItemUseCase(stock_store=store, stock_ledger=AsyncMock(), directory=mock_directory)

        with pytest.raises(TenantNotFoundError):
            await use_case.execute("nope", CreateItemRequest(name="Salt"))
        store.create_item.assert_not_called()


class TestAdjustStockUseCase:
    async def test_decrease(self):
        ledger = AsyncMock()
        ledger.decrease.return_value = 45.0
        use_case = AdjustStockUseCase(stock_ledger=ledger)

        result = await use_case.execute(
            "gk", 5, AdjustStockRequest(direction="decrease", quantity=5, note="damaged")
        )

        assert use_case.to_response(result).new_quantity == 45.0
        ledger.decrease.assert_awaited_once_with(
            "gk", 5, 5, MovementKind.ADJUSTMENT, note="damaged"
        )
        ledger.increase.assert_not_called()


class TestAllocateNumberUseCase:
    async def test_document_kind_selector(self):
        core = AsyncMock(spec=AccountingCore)
        core.allocate_document_number.return_value = DocumentNumber(
            number="GK-C-0001-25-26", sequence=1, series_code=SeriesCode.CASH_SALE, period="25-26"
        )
        use_case = AllocateNumberUseCase(core=core)

        number = await use_case.execute(
            "gk",
            AllocateNumberRequest(
                document_kind=DocumentKind.SALES_INVOICE,
                payment_mode=PaymentMode.CASH,
                effective_date=date(2025, 4, 1),
            ),
        )

        tenant_id, selector, effective = core.allocate_document_number.await_args.args
        assert (tenant_id, effective) == ("gk", date(2025, 4, 1))
        assert selector.kind == DocumentKind.SALES_INVOICE
        assert use_case.to_response(number).series_code == "C"

    async def test_requires_series_or_kind(self):
        core = AsyncMock(spec=AccountingCore)
        with pytest.raises(ValidationError):
            await AllocateNumberUseCase(core=core).execute("gk", AllocateNumberRequest())
        core.allocate_document_number.assert_not_called()


class TestCreatePartyUseCase:
    async def test_creates_party_for_tenant(self, mock_directory):
        use_case = CreatePartyUseCase(directory=mock_directory)

        party = await use_case.execute(
            "gk", CreatePartyRequest(name="Sharma Wholesale", role=PartyRole.SUPPLIER, opening_balance=800)
        )

        assert party.tenant_id == "gk"
        assert party.signed_opening_balance == -800.0  # default DR side on a supplier

    async def test_unknown_tenant(self, mock_directory):
        mock_directory.get_tenant.return_value = None
        with pytest.raises(TenantNotFoundError):
            await CreatePartyUseCase(directory=mock_directory).execute(
                "nope", CreatePartyRequest(name="X", role=PartyRole.CUSTOMER)
            )
