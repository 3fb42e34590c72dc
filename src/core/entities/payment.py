"""Payment domain entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from src.core.entities.amounts import round_money
from src.core.entities.invoice import PaymentMode


class PaymentDirection(str, Enum):
    """Money received from a party or paid out to one."""

    RECEIVE = "receive"
    PAY = "pay"


class PaymentAllocation(BaseModel):
    """Portion of a payment applied to one invoice."""

    id: int | None = None
    payment_id: int | None = None
    invoice_id: int
    amount: float


class Payment(BaseModel):
    """A payment voucher with its invoice allocations."""

    id: int | None = None
    tenant_id: str
    party_id: int
    direction: PaymentDirection
    amount: float
    payment_date: date = Field(default_factory=date.today)
    mode: PaymentMode = PaymentMode.CASH
    allocations: list[PaymentAllocation] = Field(default_factory=list)

    # Numbering
    voucher_number: str | None = None
    sequence: int | None = None
    series_code: str | None = None
    period: str | None = None

    reference: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def allocated_total(self) -> float:
        return round_money(sum(a.amount for a in self.allocations))

    @property
    def unallocated(self) -> float:
        return round_money(self.amount - self.allocated_total)
