"""Invoice endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_create_invoice_use_case,
    get_delete_invoice_use_case,
    get_inv_store,
    get_tenant_id,
    get_update_invoice_use_case,
)
from src.application.dto.presenters import invoice_response
from src.application.dto.requests import CreateInvoiceRequest, UpdateInvoiceRequest
from src.application.dto.responses import (
    DeleteInvoiceResponse,
    ErrorResponse,
    InvoiceListResponse,
    InvoiceResponse,
)
from src.application.use_cases import (
    CreateInvoiceUseCase,
    DeleteInvoiceUseCase,
    UpdateInvoiceUseCase,
)
from src.core.entities.invoice import InvoiceDirection
from src.core.exceptions import InvoiceNotFoundError
from src.core.interfaces import IInvoiceStore

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def create_invoice(
    request: CreateInvoiceRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: CreateInvoiceUseCase = Depends(get_create_invoice_use_case),
) -> InvoiceResponse:
    """Create an invoice: number it, post it and move its stock."""
    result = await use_case.execute(tenant_id, request)
    return use_case.to_response(result)


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    party_id: int | None = None,
    direction: InvoiceDirection | None = None,
    limit: int = 100,
    offset: int = 0,
    tenant_id: str = Depends(get_tenant_id),
    store: IInvoiceStore = Depends(get_inv_store),
) -> InvoiceListResponse:
    """List invoices, newest first."""
    invoices = await store.list_invoices(
        tenant_id, party_id=party_id, direction=direction, limit=limit, offset=offset
    )
    return InvoiceListResponse(
        invoices=[invoice_response(invoice) for invoice in invoices],
        total=len(invoices),
    )


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    invoice_id: int,
    tenant_id: str = Depends(get_tenant_id),
    store: IInvoiceStore = Depends(get_inv_store),
) -> InvoiceResponse:
    invoice = await store.get_invoice(tenant_id, invoice_id)
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id)
    return invoice_response(invoice)


@router.patch(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: UpdateInvoiceUseCase = Depends(get_update_invoice_use_case),
) -> InvoiceResponse:
    """Update an invoice; stock follows the new lines or the old state is restored."""
    result = await use_case.execute(tenant_id, invoice_id, request)
    return use_case.to_response(result)


@router.delete(
    "/{invoice_id}",
    response_model=DeleteInvoiceResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_invoice(
    invoice_id: int,
    tenant_id: str = Depends(get_tenant_id),
    use_case: DeleteInvoiceUseCase = Depends(get_delete_invoice_use_case),
) -> DeleteInvoiceResponse:
    """Delete an invoice. Lines that could not be reverted are returned as warnings."""
    result = await use_case.execute(tenant_id, invoice_id)
    return use_case.to_response(result)
