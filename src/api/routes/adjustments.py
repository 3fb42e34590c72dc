"""Adjustment endpoints: income, expense and contra transfers."""

from datetime import date

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_adj_store,
    get_delete_adjustment_use_case,
    get_record_adjustment_use_case,
    get_tenant_id,
)
from src.application.dto.presenters import adjustment_response
from src.application.dto.requests import CreateAdjustmentRequest
from src.application.dto.responses import (
    AdjustmentListResponse,
    AdjustmentResponse,
    DeleteAdjustmentResponse,
    ErrorResponse,
)
from src.application.use_cases import DeleteAdjustmentUseCase, RecordAdjustmentUseCase
from src.core.entities import AdjustmentType
from src.core.interfaces import IAdjustmentStore

router = APIRouter(prefix="/api/adjustments", tags=["adjustments"])


@router.post(
    "",
    response_model=AdjustmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_adjustment(
    request: CreateAdjustmentRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: RecordAdjustmentUseCase = Depends(get_record_adjustment_use_case),
) -> AdjustmentResponse:
    """Record an adjustment and post it to both parties' ledgers."""
    adjustment = await use_case.execute(tenant_id, request)
    return use_case.to_response(adjustment)


@router.get("", response_model=AdjustmentListResponse)
async def list_adjustments(
    txn_type: AdjustmentType | None = None,
    start: date | None = None,
    end: date | None = None,
    limit: int = 100,
    offset: int = 0,
    tenant_id: str = Depends(get_tenant_id),
    store: IAdjustmentStore = Depends(get_adj_store),
) -> AdjustmentListResponse:
    adjustments = await store.list_adjustments(
        tenant_id, txn_type=txn_type, start=start, end=end, limit=limit, offset=offset
    )
    return AdjustmentListResponse(
        adjustments=[adjustment_response(a) for a in adjustments],
        total=len(adjustments),
    )


@router.delete(
    "/{adjustment_id}",
    response_model=DeleteAdjustmentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_adjustment(
    adjustment_id: int,
    tenant_id: str = Depends(get_tenant_id),
    use_case: DeleteAdjustmentUseCase = Depends(get_delete_adjustment_use_case),
) -> DeleteAdjustmentResponse:
    """Delete an adjustment; its ledger rows are cancelled by reversal rows."""
    result = await use_case.execute(tenant_id, adjustment_id)
    return use_case.to_response(result)
