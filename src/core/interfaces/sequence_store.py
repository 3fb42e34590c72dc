"""Abstract interface for numbering counters."""

from abc import ABC, abstractmethod

from src.core.entities.numbering import SequenceCounter


class ISequenceStore(ABC):
    """Interface for per-(tenant, series, period) counters."""

    @abstractmethod
    async def next_value(self, tenant_id: str, series_code: str, period: str) -> int:
        """Atomically increment the counter and return the new value.

        The first call for a key returns 1.
        """
        pass

    @abstractmethod
    async def current_value(self, tenant_id: str, series_code: str, period: str) -> int:
        """Last issued value for a key, or 0 if none was issued."""
        pass

    @abstractmethod
    async def list_counters(self, tenant_id: str | None = None) -> list[SequenceCounter]:
        """List counters, optionally for one tenant."""
        pass
