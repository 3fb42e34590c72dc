"""Invoice domain entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from src.core.entities.amounts import outstanding, round_money, round_quantity


class InvoiceDirection(str, Enum):
    """Whether an invoice sells stock out or buys stock in."""

    SALES = "SALES"
    PURCHASE = "PURCHASE"


class PaymentMode(str, Enum):
    """How a document is settled."""

    CASH = "cash"
    CREDIT = "credit"
    BANK = "bank"
    UPI = "upi"
    CHEQUE = "cheque"
    ONLINE = "online"


class InvoiceLine(BaseModel):
    """A single line item on an invoice."""

    id: int | None = None
    invoice_id: int | None = None
    item_id: int
    description: str | None = None
    quantity: float
    rate: float = 0.0
    tax_percent: float = 0.0
    amount: float = 0.0  # quantity * rate
    tax_amount: float = 0.0

    @model_validator(mode="after")
    def compute_line(self) -> "InvoiceLine":
        """Compute amount and tax_amount from quantity, rate, tax_percent."""
        self.quantity = round_quantity(self.quantity)
        self.amount = round_money(self.quantity * self.rate)
        self.tax_amount = round_money(self.amount * self.tax_percent / 100)
        return self


class Invoice(BaseModel):
    """A sales or purchase invoice.

    ``due_amount`` always equals ``max(0, grand_total - paid_amount)``; it is
    recomputed whenever the model is validated and by :meth:`set_paid`.
    """

    id: int | None = None
    tenant_id: str
    party_id: int
    # None or an unknown tag blocks every stock effect
    direction: InvoiceDirection | None = None
    invoice_date: date = Field(default_factory=date.today)
    payment_mode: PaymentMode = PaymentMode.CREDIT
    lines: list[InvoiceLine] = Field(default_factory=list)

    subtotal: float = 0.0
    tax_amount: float = 0.0
    grand_total: float = 0.0
    paid_amount: float = 0.0
    due_amount: float = 0.0

    # Numbering
    number: str | None = None
    sequence: int | None = None
    series_code: str | None = None
    period: str | None = None

    notes: str | None = None
    # Bumped by every write to the stored row
    version: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def compute_totals(self) -> "Invoice":
        """Compute subtotal, tax and grand total from lines, then due from paid."""
        if self.lines:
            self.subtotal = round_money(sum(line.amount for line in self.lines))
            self.tax_amount = round_money(sum(line.tax_amount for line in self.lines))
            self.grand_total = round_money(self.subtotal + self.tax_amount)
        self.paid_amount = round_money(max(0.0, self.paid_amount))
        self.due_amount = outstanding(self.grand_total, self.paid_amount)
        return self

    @property
    def is_cash_sale(self) -> bool:
        return self.direction == InvoiceDirection.SALES and self.payment_mode == PaymentMode.CASH

    def set_paid(self, paid_amount: float) -> None:
        self.paid_amount = round_money(max(0.0, paid_amount))
        self.due_amount = outstanding(self.grand_total, self.paid_amount)


class PartialRevertWarning(BaseModel):
    """A line whose stock effect could not be reverted during deletion.

    Returned to the caller, never raised.
    """

    invoice_id: int | None = None
    item_id: int
    quantity: float
    reason: str  # error code of the underlying failure
    movement_recorded: bool = False

    @property
    def message(self) -> str:
        text = (
            f"Line for item {self.item_id} (qty {self.quantity}) on invoice "
            f"{self.invoice_id} was not reverted: {self.reason}"
        )
        if self.movement_recorded:
            text += "; a compensating movement was recorded"
        return text
