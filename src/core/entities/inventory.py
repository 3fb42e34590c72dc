"""Inventory domain entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class MovementKind(str, Enum):
    """Cause of a stock movement."""

    PURCHASE = "PURCHASE"
    SALE = "SALE"
    ADJUSTMENT = "ADJUSTMENT"


class Item(BaseModel):
    """Item master record; ``quantity`` is only changed by the stock ledger."""

    id: int | None = None
    tenant_id: str
    name: str
    unit: str | None = None
    hsn: str | None = None
    purchase_rate: float = 0.0
    sale_rate: float = 0.0
    tax_percent: float = 0.0
    quantity: float = 0.0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class StockMovement(BaseModel):
    """Append-only audit row for one change of an item's quantity.

    ``previous_quantity`` and ``new_quantity`` are ``None`` only for
    compensations recorded against an item that no longer exists.
    """

    id: int | None = None
    tenant_id: str
    item_id: int
    delta: float  # signed: negative for decreases
    kind: MovementKind
    ref_id: int | None = None  # causing document, e.g. invoice id
    note: str | None = None
    previous_quantity: float | None = None
    new_quantity: float | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class StockDelta(BaseModel):
    """One requested quantity change inside a batch."""

    item_id: int
    delta: float  # signed, never zero
    kind: MovementKind
    ref_id: int | None = None
    note: str | None = None
