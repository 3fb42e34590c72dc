"""Abstract interface for adjustment storage."""

from abc import ABC, abstractmethod
from datetime import date

from src.core.entities.adjustment import Adjustment, AdjustmentType
from src.core.entities.ledger import LedgerEntry


class IAdjustmentStore(ABC):
    """Interface for income, expense and contra adjustments."""

    @abstractmethod
    async def create_adjustment(
        self, adjustment: Adjustment, ledger_entries: list[LedgerEntry] | None = None
    ) -> Adjustment:
        """Insert the adjustment and its ledger rows in one transaction."""
        pass

    @abstractmethod
    async def delete_adjustment(
        self, adjustment: Adjustment, ledger_entries: list[LedgerEntry] | None = None
    ) -> None:
        """Delete the adjustment and post ledger rows in one transaction.

        Raises:
            AdjustmentNotFoundError: If the adjustment was already deleted.
        """
        pass

    @abstractmethod
    async def get_adjustment(self, tenant_id: str, adjustment_id: int) -> Adjustment | None:
        pass

    @abstractmethod
    async def list_adjustments(
        self,
        tenant_id: str,
        txn_type: AdjustmentType | None = None,
        start: date | None = None,
        end: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Adjustment]:
        """List adjustments, newest first, optionally within a date range."""
        pass
