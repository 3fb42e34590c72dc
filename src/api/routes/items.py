"""Item master and stock endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_adjust_stock_use_case,
    get_create_item_use_case,
    get_item_store,
    get_tenant_id,
)
from src.application.dto.presenters import item_response, movement_response
from src.application.dto.requests import AdjustStockRequest, CreateItemRequest
from src.application.dto.responses import (
    AdjustStockResponse,
    ErrorResponse,
    ItemResponse,
    StockMovementResponse,
)
from src.application.use_cases import AdjustStockUseCase, CreateItemUseCase
from src.core.exceptions import ItemNotFoundError
from src.core.interfaces import IStockStore

router = APIRouter(prefix="/api/items", tags=["items"])


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateItemRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: CreateItemUseCase = Depends(get_create_item_use_case),
) -> ItemResponse:
    """Create an item; an opening quantity is recorded as an adjustment."""
    item = await use_case.execute(tenant_id, request)
    return use_case.to_response(item)


@router.get("", response_model=list[ItemResponse])
async def list_items(
    limit: int = 100,
    offset: int = 0,
    tenant_id: str = Depends(get_tenant_id),
    store: IStockStore = Depends(get_item_store),
) -> list[ItemResponse]:
    """List items with their on-hand quantity."""
    items = await store.list_items(tenant_id, limit=limit, offset=offset)
    return [item_response(item) for item in items]


@router.get(
    "/{item_id}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: int,
    tenant_id: str = Depends(get_tenant_id),
    store: IStockStore = Depends(get_item_store),
) -> ItemResponse:
    item = await store.get_item(tenant_id, item_id)
    if item is None:
        raise ItemNotFoundError(item_id)
    return item_response(item)


@router.get("/{item_id}/movements", response_model=list[StockMovementResponse])
async def get_movements(
    item_id: int,
    limit: int = 100,
    offset: int = 0,
    tenant_id: str = Depends(get_tenant_id),
    store: IStockStore = Depends(get_item_store),
) -> list[StockMovementResponse]:
    """Movement log of an item, oldest first."""
    movements = await store.list_movements(
        tenant_id, item_id=item_id, limit=limit, offset=offset
    )
    return [movement_response(m) for m in movements]


@router.post(
    "/{item_id}/adjust",
    response_model=AdjustStockResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def adjust_stock(
    item_id: int,
    request: AdjustStockRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> AdjustStockResponse:
    """Manually increase or decrease an item's quantity."""
    result = await use_case.execute(tenant_id, item_id, request)
    return use_case.to_response(result)
