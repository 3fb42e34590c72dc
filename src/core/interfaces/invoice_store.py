"""Abstract interface for invoice storage."""

from abc import ABC, abstractmethod

from src.core.entities.invoice import Invoice, InvoiceDirection
from src.core.entities.ledger import LedgerEntry


class IInvoiceStore(ABC):
    """Interface for invoice persistence.

    Ledger entries passed to the write methods are stored in the same
    transaction as the document change. Entries without a ``ref_id`` are
    linked to the invoice being written.
    """

    @abstractmethod
    async def create_invoice(
        self, invoice: Invoice, ledger_entries: list[LedgerEntry] | None = None
    ) -> Invoice:
        """Create an invoice with its lines."""
        pass

    @abstractmethod
    async def get_invoice(self, tenant_id: str, invoice_id: int) -> Invoice | None:
        """Get invoice by ID with lines."""
        pass

    @abstractmethod
    async def list_invoices(
        self,
        tenant_id: str,
        party_id: int | None = None,
        direction: InvoiceDirection | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Invoice]:
        """List invoices, newest first."""
        pass

    @abstractmethod
    async def list_outstanding(self, tenant_id: str, party_id: int) -> list[Invoice]:
        """List a party's invoices with a positive due amount, oldest first."""
        pass

    @abstractmethod
    async def update_invoice(
        self, invoice: Invoice, ledger_entries: list[LedgerEntry] | None = None
    ) -> Invoice:
        """Replace an invoice's fields and lines.

        The write only succeeds while the stored row still has
        ``invoice.version``; the version is then bumped.

        Raises:
            InvoiceNotFoundError: If the invoice no longer exists.
            InvoiceConflictError: If the stored row has another version.
        """
        pass

    @abstractmethod
    async def delete_invoice(
        self, invoice: Invoice, ledger_entries: list[LedgerEntry] | None = None
    ) -> bool:
        """Delete an invoice and its lines, guarded like :meth:`update_invoice`.

        Raises:
            InvoiceNotFoundError: If the invoice no longer exists.
            InvoiceConflictError: If the stored row has another version.
        """
        pass
