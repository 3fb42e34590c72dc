"""
Stock ledger service.

The only path through which an item's on-hand quantity changes. Each
successful call produces exactly one movement row with the before and
after quantities.
"""

from src.config import get_logger
from src.core.entities.amounts import is_positive_finite, round_quantity
from src.core.entities.inventory import MovementKind, StockDelta, StockMovement
from src.core.exceptions import InvalidQuantityError
from src.core.interfaces.stock_store import IStockStore

logger = get_logger(__name__)


class StockLedger:
    """Validated increase/decrease operations over an IStockStore."""

    def __init__(self, stock_store: IStockStore):
        self._stock_store = stock_store

    async def increase(
        self,
        tenant_id: str,
        item_id: int,
        quantity: float,
        kind: MovementKind,
        ref_id: int | None = None,
        note: str | None = None,
    ) -> float:
        """Add ``quantity`` to an item. Returns the new on-hand quantity."""
        qty = self._validate(quantity)
        movement = await self._stock_store.increase_quantity(
            tenant_id, item_id, qty, MovementKind(kind), ref_id=ref_id, note=note
        )
        logger.info(
            "stock_increased",
            tenant_id=tenant_id,
            item_id=item_id,
            quantity=qty,
            kind=movement.kind.value,
            ref_id=ref_id,
            new_quantity=movement.new_quantity,
        )
        return movement.new_quantity

    async def decrease(
        self,
        tenant_id: str,
        item_id: int,
        quantity: float,
        kind: MovementKind,
        ref_id: int | None = None,
        note: str | None = None,
    ) -> float:
        """
        Remove ``quantity`` from an item. Returns the new on-hand quantity.

        Raises:
            InvalidQuantityError: If quantity is not a finite number > 0.
            ItemNotFoundError: If the item no longer exists.
            InsufficientStockError: If less than ``quantity`` is on hand.
        """
        qty = self._validate(quantity)
        movement = await self._stock_store.decrease_quantity(
            tenant_id, item_id, qty, MovementKind(kind), ref_id=ref_id, note=note
        )
        logger.info(
            "stock_decreased",
            tenant_id=tenant_id,
            item_id=item_id,
            quantity=qty,
            kind=movement.kind.value,
            ref_id=ref_id,
            new_quantity=movement.new_quantity,
        )
        return movement.new_quantity

    async def apply_batch(
        self, tenant_id: str, deltas: list[StockDelta]
    ) -> list[StockMovement]:
        """Apply signed changes in a single transaction, all or nothing."""
        for delta in deltas:
            self._validate(abs(delta.delta))
        movements = await self._stock_store.apply_batch(tenant_id, deltas)
        logger.info("stock_batch_applied", tenant_id=tenant_id, lines=len(movements))
        return movements

    async def record_missing_item_movement(
        self,
        tenant_id: str,
        item_id: int,
        delta: float,
        ref_id: int | None = None,
        note: str | None = None,
    ) -> StockMovement:
        """Record a compensating movement for an item that no longer exists.

        No quantity changes; before/after snapshots are left empty.
        """
        movement = await self._stock_store.record_movement(
            StockMovement(
                tenant_id=tenant_id,
                item_id=item_id,
                delta=round_quantity(delta),
                kind=MovementKind.ADJUSTMENT,
                ref_id=ref_id,
                note=note,
            )
        )
        logger.warning(
            "stock_missing_item_movement_recorded",
            tenant_id=tenant_id,
            item_id=item_id,
            delta=delta,
            ref_id=ref_id,
        )
        return movement

    async def list_movements(
        self,
        tenant_id: str,
        item_id: int | None = None,
        ref_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockMovement]:
        return await self._stock_store.list_movements(
            tenant_id, item_id=item_id, ref_id=ref_id, limit=limit, offset=offset
        )

    @staticmethod
    def _validate(quantity: float) -> float:
        if not is_positive_finite(quantity):
            raise InvalidQuantityError(quantity)
        qty = round_quantity(quantity)
        if qty <= 0:
            raise InvalidQuantityError(quantity)
        return qty
