"""Item master and manual stock adjustment use cases."""

from dataclasses import dataclass

from src.application.dto.presenters import item_response
from src.application.dto.requests import AdjustStockRequest, CreateItemRequest
from src.application.dto.responses import AdjustStockResponse, ItemResponse
from src.config import get_logger
from src.core.entities.inventory import Item, MovementKind
from src.core.exceptions import TenantNotFoundError
from src.core.interfaces.directory import IDirectory
from src.core.interfaces.stock_store import IStockStore
from src.core.services import StockLedger

logger = get_logger(__name__)

OPENING_STOCK_NOTE = "opening stock"


class CreateItemUseCase:
    """Create an item; any opening quantity goes through the stock ledger."""

    def __init__(
        self,
        stock_store: IStockStore | None = None,
        stock_ledger: StockLedger | None = None,
        directory: IDirectory | None = None,
    ):
        self._stock_store = stock_store
        self._stock_ledger = stock_ledger
        self._directory = directory

    async def _get_stock_store(self) -> IStockStore:
        if self._stock_store is None:
            from src.infrastructure.storage.sqlite import get_stock_store

            self._stock_store = await get_stock_store()
        return self._stock_store

    async def _get_stock_ledger(self) -> StockLedger:
        if self._stock_ledger is None:
            from src.application.services import get_stock_ledger

            self._stock_ledger = await get_stock_ledger()
        return self._stock_ledger

    async def _get_directory(self) -> IDirectory:
        if self._directory is None:
            from src.infrastructure.storage.sqlite import get_directory

            self._directory = await get_directory()
        return self._directory

    async def execute(self, tenant_id: str, request: CreateItemRequest) -> Item:
        directory = await self._get_directory()
        if await directory.get_tenant(tenant_id) is None:
            raise TenantNotFoundError(tenant_id)

        store = await self._get_stock_store()
        item = await store.create_item(
            Item(
                tenant_id=tenant_id,
                name=request.name,
                unit=request.unit,
                hsn=request.hsn,
                purchase_rate=request.purchase_rate,
                sale_rate=request.sale_rate,
                tax_percent=request.tax_percent,
            )
        )

        if request.opening_quantity > 0:
            ledger = await self._get_stock_ledger()
            item.quantity = await ledger.increase(
                tenant_id,
                item.id,  # type: ignore[arg-type]
                request.opening_quantity,
                MovementKind.ADJUSTMENT,
                note=OPENING_STOCK_NOTE,
            )
        return item

    def to_response(self, item: Item) -> ItemResponse:
        return item_response(item)


@dataclass
class AdjustStockResult:
    """Result of a manual adjustment."""

    item_id: int
    new_quantity: float


class AdjustStockUseCase:
    """Increase or decrease an item's quantity by hand."""

    def __init__(self, stock_ledger: StockLedger | None = None):
        self._stock_ledger = stock_ledger

    async def _get_stock_ledger(self) -> StockLedger:
        if self._stock_ledger is None:
            from src.application.services import get_stock_ledger

            self._stock_ledger = await get_stock_ledger()
        return self._stock_ledger

    async def execute(
        self, tenant_id: str, item_id: int, request: AdjustStockRequest
    ) -> AdjustStockResult:
        """
        Raises:
            InvalidQuantityError: If the quantity is not a finite number > 0.
            ItemNotFoundError: If the item does not exist.
            InsufficientStockError: If a decrease exceeds the quantity on hand.
        """
        ledger = await self._get_stock_ledger()
        if request.direction == "increase":
            new_quantity = await ledger.increase(
                tenant_id, item_id, request.quantity, request.kind, note=request.note
            )
        else:
            new_quantity = await ledger.decrease(
                tenant_id, item_id, request.quantity, request.kind, note=request.note
            )
        return AdjustStockResult(item_id=item_id, new_quantity=new_quantity)

    def to_response(self, result: AdjustStockResult) -> AdjustStockResponse:
        return AdjustStockResponse(item_id=result.item_id, new_quantity=result.new_quantity)
