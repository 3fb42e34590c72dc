"""Create Invoice Use Case: numbers, persists and posts an invoice, then moves stock."""

from dataclasses import dataclass
from datetime import date

from src.application.accounting_core import AccountingCore
from src.application.dto.presenters import invoice_response
from src.application.dto.requests import CreateInvoiceRequest, InvoiceLineRequest
from src.application.dto.responses import InvoiceResponse
from src.config import get_logger
from src.core.entities.invoice import Invoice, InvoiceDirection, InvoiceLine
from src.core.entities.numbering import DocumentKind, SeriesSelector
from src.core.exceptions import PartyNotFoundError
from src.core.interfaces.directory import IDirectory
from src.core.interfaces.invoice_store import IInvoiceStore
from src.core.services import posting

logger = get_logger(__name__)


def build_lines(requests: list[InvoiceLineRequest]) -> list[InvoiceLine]:
    return [
        InvoiceLine(
            item_id=line.item_id,
            description=line.description,
            quantity=line.quantity,
            rate=line.rate,
            tax_percent=line.tax_percent,
        )
        for line in requests
    ]


def series_selector(invoice: Invoice) -> SeriesSelector:
    kind = (
        DocumentKind.SALES_INVOICE
        if invoice.direction == InvoiceDirection.SALES
        else DocumentKind.PURCHASE_INVOICE
    )
    return SeriesSelector(kind=kind, payment_mode=invoice.payment_mode)


@dataclass
class CreateInvoiceResult:
    """Result of creating an invoice."""

    invoice: Invoice


class CreateInvoiceUseCase:
    """
    Create a sales or purchase invoice.

    Order of work: allocate a number, persist the document with its ledger
    rows, apply the stock effect. If the stock effect fails the document
    is removed again with reversal rows and the stock error is re-raised.
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

    async def execute(self, tenant_id: str, request: CreateInvoiceRequest) -> CreateInvoiceResult:
        """Execute create invoice use case."""
        logger.info(
            "create_invoice_started",
            tenant_id=tenant_id,
            party_id=request.party_id,
            direction=request.direction.value,
            lines=len(request.lines),
        )

        core = await self._get_core()
        store = await self._get_invoice_store()
        directory = await self._get_directory()

        party = await directory.get_party(tenant_id, request.party_id)
        if party is None:
            raise PartyNotFoundError(request.party_id)

        invoice = Invoice(
            tenant_id=tenant_id,
            party_id=party.id,  # type: ignore[arg-type]
            direction=request.direction,
            invoice_date=request.invoice_date or date.today(),
            payment_mode=request.payment_mode,
            lines=build_lines(request.lines),
            notes=request.notes,
        )
        # Cash sales are settled in full when issued
        if invoice.is_cash_sale:
            invoice.set_paid(invoice.grand_total)
        elif request.paid_amount is not None:
            invoice.set_paid(request.paid_amount)

        number = await core.allocate_document_number(
            tenant_id, series_selector(invoice), invoice.invoice_date
        )
        invoice.number = number.number
        invoice.sequence = number.sequence
        invoice.series_code = number.series_code.value
        invoice.period = number.period

        invoice = await store.create_invoice(invoice, posting.invoice_entries(invoice))

        try:
            await core.apply_invoice_stock_effect(invoice)
        except Exception as exc:
            logger.warning(
                "create_invoice_stock_failed",
                tenant_id=tenant_id,
                invoice_id=invoice.id,
                number=invoice.number,
                error=str(exc),
            )
            await self._discard(store, invoice)
            raise

        logger.info(
            "create_invoice_complete",
            tenant_id=tenant_id,
            invoice_id=invoice.id,
            number=invoice.number,
            grand_total=invoice.grand_total,
            due_amount=invoice.due_amount,
        )
        return CreateInvoiceResult(invoice=invoice)

    async def _discard(self, store: IInvoiceStore, invoice: Invoice) -> None:
        """Remove an invoice whose stock effect never landed."""
        try:
            await store.delete_invoice(
                invoice,
                posting.invoice_reversal_entries(
                    invoice, "Invoice creation failed", on=invoice.invoice_date
                ),
            )
        except Exception as e:
            logger.error(
                "create_invoice_discard_failed",
                tenant_id=invoice.tenant_id,
                invoice_id=invoice.id,
                error=str(e),
            )
            return
        logger.info(
            "create_invoice_discarded",
            tenant_id=invoice.tenant_id,
            invoice_id=invoice.id,
            number=invoice.number,
        )

    def to_response(self, result: CreateInvoiceResult) -> InvoiceResponse:
        """Convert result to API response."""
        return invoice_response(result.invoice)
