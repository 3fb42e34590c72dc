"""Abstract interface for payment storage."""

from abc import ABC, abstractmethod

from src.core.entities.ledger import LedgerEntry
from src.core.entities.payment import Payment


class IPaymentStore(ABC):
    """Interface for payments and their invoice allocations."""

    @abstractmethod
    async def create_payment_with_allocations(
        self, payment: Payment, ledger_entries: list[LedgerEntry] | None = None
    ) -> Payment:
        """Insert the payment, apply every allocation and post ledger rows.

        One transaction: either every invoice update and the payment are
        committed, or nothing is.

        Raises:
            InvoiceNotFoundError: If an allocated invoice does not exist.
            AllocationExceedsDueError: If an invoice's due amount is
                smaller than its allocation at write time.
        """
        pass

    @abstractmethod
    async def delete_payment_with_reversal(
        self, payment: Payment, ledger_entries: list[LedgerEntry] | None = None
    ) -> list[int]:
        """Undo every allocation, post ledger rows and delete the payment.

        One transaction. Paid amounts are floored at zero; invoices that
        no longer exist are skipped.

        Returns:
            Ids of allocated invoices that no longer exist.

        Raises:
            PaymentNotFoundError: If the payment was already deleted.
        """
        pass

    @abstractmethod
    async def get_payment(self, tenant_id: str, payment_id: int) -> Payment | None:
        """Get payment by ID with allocations."""
        pass

    @abstractmethod
    async def list_payments(
        self,
        tenant_id: str,
        party_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Payment]:
        """List payments, newest first."""
        pass
