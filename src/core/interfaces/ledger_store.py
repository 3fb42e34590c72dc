"""Abstract interface for ledger entry storage."""

from abc import ABC, abstractmethod
from datetime import date

from src.core.entities.ledger import LedgerEntry, LedgerRefType, LedgerTotals


class ILedgerStore(ABC):
    """Interface for the append-only ledger."""

    @abstractmethod
    async def add_entries(self, entries: list[LedgerEntry]) -> list[LedgerEntry]:
        """Append entries in one transaction."""
        pass

    @abstractmethod
    async def list_entries(
        self,
        tenant_id: str,
        party_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> list[LedgerEntry]:
        """List a party's entries ordered by (entry_date, id), bounds inclusive."""
        pass

    @abstractmethod
    async def sum_before(
        self, tenant_id: str, party_id: int, before: date
    ) -> LedgerTotals:
        """Debit and credit totals of a party's entries dated before ``before``."""
        pass

    @abstractmethod
    async def list_for_reference(
        self, tenant_id: str, ref_type: LedgerRefType, ref_id: int
    ) -> list[LedgerEntry]:
        """List every entry that points at one document."""
        pass
