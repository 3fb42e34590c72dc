"""Abstract interface for the tenant and party directory."""

from abc import ABC, abstractmethod

from src.core.entities.directory import Party, PartyRole, Tenant


class IDirectory(ABC):
    """Interface for tenant and party lookup."""

    @abstractmethod
    async def get_tenant(self, tenant_id: str) -> Tenant | None:
        """Get tenant by ID."""
        pass

    @abstractmethod
    async def create_tenant(self, tenant: Tenant) -> Tenant:
        """Create a tenant."""
        pass

    @abstractmethod
    async def get_party(self, tenant_id: str, party_id: int) -> Party | None:
        """Get party by ID within a tenant."""
        pass

    @abstractmethod
    async def create_party(self, party: Party) -> Party:
        """Create a party."""
        pass

    @abstractmethod
    async def list_parties(
        self, tenant_id: str, role: PartyRole | None = None
    ) -> list[Party]:
        """List a tenant's parties, optionally by role."""
        pass
