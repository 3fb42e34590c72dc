"""Delete Invoice Use Case: reverts stock leniently and removes the invoice."""

from dataclasses import dataclass, field

from src.application.accounting_core import AccountingCore
from src.application.dto.responses import DeleteInvoiceResponse, RevertWarningResponse
from src.config import get_logger
from src.core.entities.invoice import Invoice, PartialRevertWarning
from src.core.exceptions import InvoiceNotFoundError
from src.core.interfaces.invoice_store import IInvoiceStore
from src.core.services import posting

logger = get_logger(__name__)


@dataclass
class DeleteInvoiceResult:
    """Result of deleting an invoice."""

    invoice: Invoice
    warnings: list[PartialRevertWarning] = field(default_factory=list)


class DeleteInvoiceUseCase:
    """Delete an invoice, posting reversal rows and reporting unreverted lines."""

    def __init__(
        self,
        core: AccountingCore | None = None,
        invoice_store: IInvoiceStore | None = None,
    ):
        self._core = core
        self._invoice_store = invoice_store

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

    async def execute(self, tenant_id: str, invoice_id: int) -> DeleteInvoiceResult:
        """Execute delete invoice use case."""
        core = await self._get_core()
        store = await self._get_invoice_store()

        invoice = await store.get_invoice(tenant_id, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        warnings = await core.delete_invoice_with_stock(
            invoice, posting.invoice_reversal_entries(invoice, "Invoice deleted")
        )

        logger.info(
            "delete_invoice_complete",
            tenant_id=tenant_id,
            invoice_id=invoice_id,
            number=invoice.number,
            warnings=len(warnings),
        )
        return DeleteInvoiceResult(invoice=invoice, warnings=warnings)

    def to_response(self, result: DeleteInvoiceResult) -> DeleteInvoiceResponse:
        """Convert result to API response."""
        return DeleteInvoiceResponse(
            invoice_id=result.invoice.id,  # type: ignore[arg-type]
            number=result.invoice.number,
            warnings=[
                RevertWarningResponse(
                    item_id=w.item_id,
                    quantity=w.quantity,
                    reason=w.reason,
                    movement_recorded=w.movement_recorded,
                    message=w.message,
                )
                for w in result.warnings
            ],
        )
