"""Abstract interface for item and stock movement storage."""

from abc import ABC, abstractmethod

from src.core.entities.inventory import Item, MovementKind, StockDelta, StockMovement


class IStockStore(ABC):
    """Interface for items and their append-only movement log.

    Every quantity change goes through ``increase_quantity``,
    ``decrease_quantity`` or ``apply_batch``; each writes the item update
    and its movement row in one transaction.
    """

    @abstractmethod
    async def create_item(self, item: Item) -> Item:
        """Create a new item. It starts at zero whatever ``item.quantity`` says."""
        pass

    @abstractmethod
    async def get_item(self, tenant_id: str, item_id: int) -> Item | None:
        """Get item by ID within a tenant."""
        pass

    @abstractmethod
    async def list_items(
        self, tenant_id: str, limit: int = 100, offset: int = 0
    ) -> list[Item]:
        """List items with pagination."""
        pass

    @abstractmethod
    async def delete_item(self, tenant_id: str, item_id: int) -> bool:
        """Delete an item from the item master. Movements are kept."""
        pass

    @abstractmethod
    async def increase_quantity(
        self,
        tenant_id: str,
        item_id: int,
        quantity: float,
        kind: MovementKind,
        ref_id: int | None = None,
        note: str | None = None,
    ) -> StockMovement:
        """Atomically add to on-hand quantity and record the movement.

        Raises:
            ItemNotFoundError: If the item does not exist.
        """
        pass

    @abstractmethod
    async def decrease_quantity(
        self,
        tenant_id: str,
        item_id: int,
        quantity: float,
        kind: MovementKind,
        ref_id: int | None = None,
        note: str | None = None,
    ) -> StockMovement:
        """Conditionally subtract from on-hand quantity and record the movement.

        The availability check and the update are a single statement.

        Raises:
            ItemNotFoundError: If the item does not exist.
            InsufficientStockError: If on-hand quantity is below ``quantity``.
        """
        pass

    @abstractmethod
    async def apply_batch(
        self, tenant_id: str, deltas: list[StockDelta]
    ) -> list[StockMovement]:
        """Apply several signed changes in one transaction, all or nothing."""
        pass

    @abstractmethod
    async def record_movement(self, movement: StockMovement) -> StockMovement:
        """Append a movement row without touching any item quantity."""
        pass

    @abstractmethod
    async def list_movements(
        self,
        tenant_id: str,
        item_id: int | None = None,
        ref_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockMovement]:
        """List movements in insertion order."""
        pass
