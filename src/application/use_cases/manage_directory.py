"""Tenant and party registration use cases."""

from src.application.dto.presenters import party_response
from src.application.dto.requests import CreatePartyRequest, CreateTenantRequest
from src.application.dto.responses import PartyResponse, TenantResponse
from src.config import get_logger
from src.core.entities.directory import Party, Tenant
from src.core.exceptions import TenantNotFoundError
from src.core.interfaces.directory import IDirectory

logger = get_logger(__name__)


class CreateTenantUseCase:
    """Register a tenant."""

    def __init__(self, directory: IDirectory | None = None):
        self._directory = directory

    async def _get_directory(self) -> IDirectory:
        if self._directory is None:
            from src.infrastructure.storage.sqlite import get_directory

            self._directory = await get_directory()
        return self._directory

    async def execute(self, request: CreateTenantRequest) -> Tenant:
        directory = await self._get_directory()
        tenant = await directory.create_tenant(
            Tenant(
                id=request.id,
                name=request.name,
                numbering_prefix=request.numbering_prefix,
            )
        )
        logger.info("tenant_registered", tenant_id=tenant.id)
        return tenant

    def to_response(self, tenant: Tenant) -> TenantResponse:
        return TenantResponse(
            id=tenant.id,
            name=tenant.name,
            numbering_prefix=tenant.numbering_prefix,
            created_at=tenant.created_at,
        )


class CreatePartyUseCase:
    """Create a party under an existing tenant."""

    def __init__(self, directory: IDirectory | None = None):
        self._directory = directory

    async def _get_directory(self) -> IDirectory:
        if self._directory is None:
            from src.infrastructure.storage.sqlite import get_directory

            self._directory = await get_directory()
        return self._directory

    async def execute(self, tenant_id: str, request: CreatePartyRequest) -> Party:
        """
        Raises:
            TenantNotFoundError: If the tenant is not registered.
        """
        directory = await self._get_directory()
        if await directory.get_tenant(tenant_id) is None:
            raise TenantNotFoundError(tenant_id)

        party = await directory.create_party(
            Party(
                tenant_id=tenant_id,
                name=request.name,
                role=request.role,
                opening_balance=request.opening_balance,
                opening_balance_type=request.opening_balance_type,
                mobile=request.mobile,
                email=request.email,
                address=request.address,
            )
        )
        logger.info(
            "party_registered",
            tenant_id=tenant_id,
            party_id=party.id,
            role=party.role.value,
        )
        return party

    def to_response(self, party: Party) -> PartyResponse:
        return party_response(party)
