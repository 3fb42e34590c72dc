"""Update Invoice Use Case: replaces an invoice and moves its stock effect."""

from dataclasses import dataclass

from src.application.accounting_core import AccountingCore
from src.application.dto.presenters import invoice_response
from src.application.dto.requests import UpdateInvoiceRequest
from src.application.dto.responses import InvoiceResponse
from src.application.use_cases.create_invoice import build_lines, series_selector
from src.config import get_logger
from src.core.entities.invoice import Invoice
from src.core.entities.ledger import LedgerEntry
from src.core.exceptions import InvoiceNotFoundError, PartyNotFoundError
from src.core.interfaces.directory import IDirectory
from src.core.interfaces.invoice_store import IInvoiceStore
from src.core.services import SequenceAllocator, posting

logger = get_logger(__name__)


@dataclass
class UpdateInvoiceResult:
    """Result of updating an invoice."""

    invoice: Invoice
    renumbered: bool
    reposted: bool


class UpdateInvoiceUseCase:
    """
    Update an invoice's party, date, payment mode, notes or lines.

    Paid amount rules:
    - a cash sale is always fully paid;
    - an explicit ``paid_amount`` wins otherwise;
    - a cash sale switched to another mode without a paid amount resets to 0;
    - anything else keeps the stored paid amount against the new total.

    A change of series (e.g. cash to credit) allocates a new number.
    """

    def __init__(
        self,
        core: AccountingCore | None = None,
        invoice_store: IInvoiceStore | None = None,
        directory: IDirectory | None = None,
    ):
        self._core = core
        self._invoice_store = invoice_store
        self._directory = directory

    async def _get_core(self) -> AccountingCore:
        if self._core is None:
            from src.application.services import get_accounting_core

            self._core = await get_accounting_core()
        return self._core

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

    async def execute(
        self, tenant_id: str, invoice_id: int, request: UpdateInvoiceRequest
    ) -> UpdateInvoiceResult:
        """Execute update invoice use case."""
        core = await self._get_core()
        store = await self._get_invoice_store()

        stored = await store.get_invoice(tenant_id, invoice_id)
        if stored is None:
            raise InvoiceNotFoundError(invoice_id)

        if request.party_id is not None and request.party_id != stored.party_id:
            directory = await self._get_directory()
            if await directory.get_party(tenant_id, request.party_id) is None:
                raise PartyNotFoundError(request.party_id)

        updated = self._merge(stored, request)

        renumbered = False
        series = SequenceAllocator.series_for(series_selector(updated))
        if series.value != stored.series_code:
            number = await core.allocate_document_number(
                tenant_id, series, updated.invoice_date
            )
            updated.number = number.number
            updated.sequence = number.sequence
            updated.series_code = number.series_code.value
            updated.period = number.period
            renumbered = True

        entries: list[LedgerEntry] = []
        if posting.invoice_needs_repost(stored, updated):
            entries = posting.invoice_reversal_entries(stored, "Invoice updated")
            entries += posting.invoice_entries(updated)

        saved = await core.update_invoice_with_stock(stored, updated, entries)

        logger.info(
            "update_invoice_complete",
            tenant_id=tenant_id,
            invoice_id=invoice_id,
            number=saved.number,
            renumbered=renumbered,
            reposted=bool(entries),
            grand_total=saved.grand_total,
        )
        return UpdateInvoiceResult(invoice=saved, renumbered=renumbered, reposted=bool(entries))

    @staticmethod
    def _merge(stored: Invoice, request: UpdateInvoiceRequest) -> Invoice:
        data = stored.model_dump()
        if request.party_id is not None:
            data["party_id"] = request.party_id
        if request.invoice_date is not None:
            data["invoice_date"] = request.invoice_date
        if request.payment_mode is not None:
            data["payment_mode"] = request.payment_mode
        if request.notes is not None:
            data["notes"] = request.notes
        if request.lines is not None:
            data["lines"] = [line.model_dump() for line in build_lines(request.lines)]

        # Validation recomputes totals from the lines
        updated = Invoice.model_validate(data)

        if updated.is_cash_sale:
            updated.set_paid(updated.grand_total)
        elif request.paid_amount is not None:
            updated.set_paid(request.paid_amount)
        elif stored.is_cash_sale:
            updated.set_paid(0.0)
        else:
            updated.set_paid(stored.paid_amount)
        return updated

    def to_response(self, result: UpdateInvoiceResult) -> InvoiceResponse:
        """Convert result to API response."""
        return invoice_response(result.invoice)
