"""Party adjustment entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class AdjustmentType(str, Enum):
    """Kinds of money movement that are not invoices or payments."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    CONTRA = "CONTRA"


class Adjustment(BaseModel):
    """Transfer of ``amount`` from one party to another.

    Either side may be left empty for income arriving from, or expense
    going to, outside the books. The source is credited, the destination
    debited.
    """

    id: int | None = None
    tenant_id: str
    txn_type: AdjustmentType = AdjustmentType.INCOME
    adjustment_date: date = Field(default_factory=date.today)
    amount: float
    from_party_id: int | None = None
    to_party_id: int | None = None
    reference: str | None = None
    category: str | None = None
    note: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def party_ids(self) -> list[int]:
        return [p for p in (self.from_party_id, self.to_party_id) if p is not None]
