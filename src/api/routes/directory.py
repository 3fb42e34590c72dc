"""Tenant and party endpoints, including party statements."""

from datetime import date

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_create_party_use_case,
    get_create_tenant_use_case,
    get_dir,
    get_outstanding_invoices_use_case,
    get_party_statement_use_case,
    get_tenant_id,
)
from src.application.dto.presenters import party_response
from src.application.dto.requests import CreatePartyRequest, CreateTenantRequest
from src.application.dto.responses import (
    ErrorResponse,
    OutstandingInvoicesResponse,
    PartyResponse,
    PartyStatementResponse,
    TenantResponse,
)
from src.application.use_cases import (
    CreatePartyUseCase,
    CreateTenantUseCase,
    OutstandingInvoicesUseCase,
    PartyStatementUseCase,
)
from src.core.entities.directory import PartyRole
from src.core.exceptions import PartyNotFoundError
from src.core.interfaces import IDirectory

router = APIRouter(prefix="/api", tags=["directory"])


@router.post(
    "/tenants",
    response_model=TenantResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_tenant(
    request: CreateTenantRequest,
    use_case: CreateTenantUseCase = Depends(get_create_tenant_use_case),
) -> TenantResponse:
    """Register a tenant."""
    tenant = await use_case.execute(request)
    return use_case.to_response(tenant)


@router.post(
    "/parties",
    response_model=PartyResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_party(
    request: CreatePartyRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: CreatePartyUseCase = Depends(get_create_party_use_case),
) -> PartyResponse:
    """Create a customer, supplier or money account."""
    party = await use_case.execute(tenant_id, request)
    return use_case.to_response(party)


@router.get("/parties", response_model=list[PartyResponse])
async def list_parties(
    role: PartyRole | None = None,
    tenant_id: str = Depends(get_tenant_id),
    directory: IDirectory = Depends(get_dir),
) -> list[PartyResponse]:
    """List the tenant's parties, optionally filtered by role."""
    parties = await directory.list_parties(tenant_id, role=role)
    return [party_response(party) for party in parties]


@router.get(
    "/parties/{party_id}",
    response_model=PartyResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_party(
    party_id: int,
    tenant_id: str = Depends(get_tenant_id),
    directory: IDirectory = Depends(get_dir),
) -> PartyResponse:
    party = await directory.get_party(tenant_id, party_id)
    if party is None:
        raise PartyNotFoundError(party_id)
    return party_response(party)


@router.get(
    "/parties/{party_id}/ledger",
    response_model=PartyStatementResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def party_ledger(
    party_id: int,
    start: date | None = None,
    end: date | None = None,
    tenant_id: str = Depends(get_tenant_id),
    use_case: PartyStatementUseCase = Depends(get_party_statement_use_case),
) -> PartyStatementResponse:
    """Statement with brought-forward opening and running balance per entry."""
    statement = await use_case.execute(tenant_id, party_id, start, end)
    return use_case.to_response(statement)


@router.get(
    "/parties/{party_id}/outstanding",
    response_model=OutstandingInvoicesResponse,
    responses={404: {"model": ErrorResponse}},
)
async def party_outstanding(
    party_id: int,
    tenant_id: str = Depends(get_tenant_id),
    use_case: OutstandingInvoicesUseCase = Depends(get_outstanding_invoices_use_case),
) -> OutstandingInvoicesResponse:
    """Invoices with an amount still due, oldest first."""
    invoices = await use_case.execute(tenant_id, party_id)
    return use_case.to_response(party_id, invoices)
