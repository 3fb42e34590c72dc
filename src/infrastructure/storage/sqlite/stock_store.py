"""SQLite implementation of item and stock movement storage."""

from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.amounts import round_quantity
from src.core.entities.inventory import Item, MovementKind, StockDelta, StockMovement
from src.core.exceptions import InsufficientStockError, ItemNotFoundError
from src.core.interfaces.stock_store import IStockStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteStockStore(IStockStore):
    """SQLite implementation of items and their movement log.

    Quantity updates are single ``UPDATE`` statements; decreases carry a
    ``quantity >= ?`` guard and report failure through ``rowcount``.
    """

    async def create_item(self, item: Item) -> Item:
        """Create a new item with nothing on hand.

        Opening stock is booked afterwards through the stock ledger so that
        every unit on hand has a movement row.
        """
        now = datetime.utcnow()
        item.created_at = now
        item.updated_at = now
        item.quantity = 0.0
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO items (
                    tenant_id, name, unit, hsn, purchase_rate, sale_rate,
                    tax_percent, quantity, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.tenant_id,
                    item.name,
                    item.unit,
                    item.hsn,
                    item.purchase_rate,
                    item.sale_rate,
                    item.tax_percent,
                    item.quantity,
                    item.created_at.isoformat(),
                    item.updated_at.isoformat(),
                ),
            )
            item.id = cursor.lastrowid
        logger.info("item_created", tenant_id=item.tenant_id, item_id=item.id, name=item.name)
        return item

    async def get_item(self, tenant_id: str, item_id: int) -> Item | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM items WHERE id = ? AND tenant_id = ?",
                (item_id, tenant_id),
            )
            row = await cursor.fetchone()
            return self._row_to_item(row) if row else None

    async def list_items(
        self, tenant_id: str, limit: int = 100, offset: int = 0
    ) -> list[Item]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM items
                WHERE tenant_id = ?
                ORDER BY name, id
                LIMIT ? OFFSET ?
                """,
                (tenant_id, limit, offset),
            )
            return [self._row_to_item(row) for row in await cursor.fetchall()]

    async def delete_item(self, tenant_id: str, item_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM items WHERE id = ? AND tenant_id = ?",
                (item_id, tenant_id),
            )
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("item_deleted", tenant_id=tenant_id, item_id=item_id)
        return deleted

    async def increase_quantity(
        self,
        tenant_id: str,
        item_id: int,
        quantity: float,
        kind: MovementKind,
        ref_id: int | None = None,
        note: str | None = None,
    ) -> StockMovement:
        async with get_transaction() as conn:
            return await self._increase(conn, tenant_id, item_id, quantity, kind, ref_id, note)

    async def decrease_quantity(
        self,
        tenant_id: str,
        item_id: int,
        quantity: float,
        kind: MovementKind,
        ref_id: int | None = None,
        note: str | None = None,
    ) -> StockMovement:
        async with get_transaction() as conn:
            return await self._decrease(conn, tenant_id, item_id, quantity, kind, ref_id, note)

    async def apply_batch(
        self, tenant_id: str, deltas: list[StockDelta]
    ) -> list[StockMovement]:
        """Apply every delta in one transaction; the first failure rolls back all."""
        movements: list[StockMovement] = []
        async with get_transaction() as conn:
            for delta in deltas:
                if delta.delta < 0:
                    movement = await self._decrease(
                        conn, tenant_id, delta.item_id, -delta.delta,
                        delta.kind, delta.ref_id, delta.note,
                    )
                else:
                    movement = await self._increase(
                        conn, tenant_id, delta.item_id, delta.delta,
                        delta.kind, delta.ref_id, delta.note,
                    )
                movements.append(movement)
        return movements

    async def record_movement(self, movement: StockMovement) -> StockMovement:
        async with get_transaction() as conn:
            return await self._insert_movement(conn, movement)

    async def list_movements(
        self,
        tenant_id: str,
        item_id: int | None = None,
        ref_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockMovement]:
        query = "SELECT * FROM stock_movements WHERE tenant_id = ?"
        params: list = [tenant_id]
        if item_id is not None:
            query += " AND item_id = ?"
            params.append(item_id)
        if ref_id is not None:
            query += " AND ref_id = ?"
            params.append(ref_id)
        query += " ORDER BY id LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            return [self._row_to_movement(row) for row in await cursor.fetchall()]

    async def _increase(
        self,
        conn: aiosqlite.Connection,
        tenant_id: str,
        item_id: int,
        quantity: float,
        kind: MovementKind,
        ref_id: int | None,
        note: str | None,
    ) -> StockMovement:
        qty = round_quantity(quantity)
        cursor = await conn.execute(
            """
            UPDATE items SET quantity = ROUND(quantity + ?, 3), updated_at = ?
            WHERE id = ? AND tenant_id = ?
            """,
            (qty, datetime.utcnow().isoformat(), item_id, tenant_id),
        )
        if cursor.rowcount == 0:
            raise ItemNotFoundError(item_id)

        new_quantity = await self._current_quantity(conn, item_id)
        return await self._insert_movement(
            conn,
            StockMovement(
                tenant_id=tenant_id,
                item_id=item_id,
                delta=qty,
                kind=kind,
                ref_id=ref_id,
                note=note,
                previous_quantity=round_quantity(new_quantity - qty),
                new_quantity=new_quantity,
            ),
        )

    async def _decrease(
        self,
        conn: aiosqlite.Connection,
        tenant_id: str,
        item_id: int,
        quantity: float,
        kind: MovementKind,
        ref_id: int | None,
        note: str | None,
    ) -> StockMovement:
        qty = round_quantity(quantity)
        cursor = await conn.execute(
            """
            UPDATE items SET quantity = ROUND(quantity - ?, 3), updated_at = ?
            WHERE id = ? AND tenant_id = ? AND ROUND(quantity, 3) >= ?
            """,
            (qty, datetime.utcnow().isoformat(), item_id, tenant_id, qty),
        )
        if cursor.rowcount == 0:
            cursor = await conn.execute(
                "SELECT quantity FROM items WHERE id = ? AND tenant_id = ?",
                (item_id, tenant_id),
            )
            row = await cursor.fetchone()
            if row is None:
                raise ItemNotFoundError(item_id)
            raise InsufficientStockError(item_id, qty, row["quantity"])

        new_quantity = await self._current_quantity(conn, item_id)
        return await self._insert_movement(
            conn,
            StockMovement(
                tenant_id=tenant_id,
                item_id=item_id,
                delta=-qty,
                kind=kind,
                ref_id=ref_id,
                note=note,
                previous_quantity=round_quantity(new_quantity + qty),
                new_quantity=new_quantity,
            ),
        )

    @staticmethod
    async def _current_quantity(conn: aiosqlite.Connection, item_id: int) -> float:
        cursor = await conn.execute("SELECT quantity FROM items WHERE id = ?", (item_id,))
        row = await cursor.fetchone()
        return round_quantity(row["quantity"])

    @staticmethod
    async def _insert_movement(
        conn: aiosqlite.Connection, movement: StockMovement
    ) -> StockMovement:
        cursor = await conn.execute(
            """
            INSERT INTO stock_movements (
                tenant_id, item_id, delta, kind, ref_id, note,
                previous_quantity, new_quantity, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                movement.tenant_id,
                movement.item_id,
                movement.delta,
                movement.kind.value,
                movement.ref_id,
                movement.note,
                movement.previous_quantity,
                movement.new_quantity,
                movement.created_at.isoformat(),
            ),
        )
        movement.id = cursor.lastrowid
        logger.debug(
            "stock_movement_recorded",
            movement_id=movement.id,
            item_id=movement.item_id,
            kind=movement.kind.value,
            delta=movement.delta,
        )
        return movement

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> Item:
        return Item(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            unit=row["unit"],
            hsn=row["hsn"],
            purchase_rate=row["purchase_rate"],
            sale_rate=row["sale_rate"],
            tax_percent=row["tax_percent"],
            quantity=row["quantity"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        return StockMovement(
            id=row["id"],
            tenant_id=row["tenant_id"],
            item_id=row["item_id"],
            delta=row["delta"],
            kind=MovementKind(row["kind"]),
            ref_id=row["ref_id"],
            note=row["note"],
            previous_quantity=row["previous_quantity"],
            new_quantity=row["new_quantity"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
