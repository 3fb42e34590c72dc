"""Payment endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_delete_payment_use_case,
    get_pay_store,
    get_record_payment_use_case,
    get_tenant_id,
)
from src.application.dto.presenters import payment_response
from src.application.dto.requests import CreatePaymentRequest
from src.application.dto.responses import (
    DeletePaymentResponse,
    ErrorResponse,
    PaymentListResponse,
    PaymentResponse,
)
from src.application.use_cases import DeletePaymentUseCase, RecordPaymentUseCase
from src.core.exceptions import PaymentNotFoundError
from src.core.interfaces import IPaymentStore

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post(
    "",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_payment(
    request: CreatePaymentRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: RecordPaymentUseCase = Depends(get_record_payment_use_case),
) -> PaymentResponse:
    """Record a payment and apply it to invoices, all or nothing."""
    result = await use_case.execute(tenant_id, request)
    return use_case.to_response(result)


@router.get("", response_model=PaymentListResponse)
async def list_payments(
    party_id: int | None = None,
    limit: int = 100,
    offset: int = 0,
    tenant_id: str = Depends(get_tenant_id),
    store: IPaymentStore = Depends(get_pay_store),
) -> PaymentListResponse:
    """List payments, newest first."""
    payments = await store.list_payments(tenant_id, party_id=party_id, limit=limit, offset=offset)
    return PaymentListResponse(
        payments=[payment_response(p) for p in payments],
        total=len(payments),
    )


@router.get(
    "/{payment_id}",
    response_model=PaymentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payment(
    payment_id: int,
    tenant_id: str = Depends(get_tenant_id),
    store: IPaymentStore = Depends(get_pay_store),
) -> PaymentResponse:
    payment = await store.get_payment(tenant_id, payment_id)
    if payment is None:
        raise PaymentNotFoundError(payment_id)
    return payment_response(payment)


@router.delete(
    "/{payment_id}",
    response_model=DeletePaymentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_payment(
    payment_id: int,
    tenant_id: str = Depends(get_tenant_id),
    use_case: DeletePaymentUseCase = Depends(get_delete_payment_use_case),
) -> DeletePaymentResponse:
    """Delete a payment and restore the due amounts it had reduced."""
    result = await use_case.execute(tenant_id, payment_id)
    return use_case.to_response(result)
