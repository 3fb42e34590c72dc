"""Party statement and outstanding invoice reports."""

from datetime import date

from src.application.accounting_core import AccountingCore
from src.application.dto.presenters import invoice_response, statement_response
from src.application.dto.responses import OutstandingInvoicesResponse, PartyStatementResponse
from src.core.entities.amounts import round_money
from src.core.entities.invoice import Invoice
from src.core.entities.ledger import LedgerStatement
from src.core.exceptions import PartyNotFoundError
from src.core.interfaces.directory import IDirectory
from src.core.interfaces.invoice_store import IInvoiceStore


class PartyStatementUseCase:
    """Running-balance statement for one party over an optional date range."""

    def __init__(self, core: AccountingCore | None = None):
        self._core = core

    async def _get_core(self) -> AccountingCore:
        if self._core is None:
            from src.application.services import get_accounting_core

            self._core = await get_accounting_core()
        return self._core

    async def execute(
        self,
        tenant_id: str,
        party_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> LedgerStatement:
        core = await self._get_core()
        return await core.compute_party_ledger(tenant_id, party_id, start, end)

    def to_response(self, statement: LedgerStatement) -> PartyStatementResponse:
        return statement_response(statement)


class OutstandingInvoicesUseCase:
    """A party's unpaid invoices, oldest first."""

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        directory: IDirectory | None = None,
    ):
        self._invoice_store = invoice_store
        self._directory = directory

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from src.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def _get_directory(self) -> IDirectory:
        if self._directory is None:
            from src.infrastructure.storage.sqlite import get_directory

            self._directory = await get_directory()
        return self._directory

    async def execute(self, tenant_id: str, party_id: int) -> list[Invoice]:
        directory = await self._get_directory()
        if await directory.get_party(tenant_id, party_id) is None:
            raise PartyNotFoundError(party_id)
        store = await self._get_invoice_store()
        return await store.list_outstanding(tenant_id, party_id)

    def to_response(self, party_id: int, invoices: list[Invoice]) -> OutstandingInvoicesResponse:
        return OutstandingInvoicesResponse(
            party_id=party_id,
            invoices=[invoice_response(invoice) for invoice in invoices],
            total_due=round_money(sum(invoice.due_amount for invoice in invoices)),
        )
