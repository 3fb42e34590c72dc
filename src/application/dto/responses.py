"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

# --- Common ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str
    schema_version: int | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: Any = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


# --- Directory ---


class TenantResponse(BaseModel):
    """Tenant in response."""

    id: str
    name: str
    numbering_prefix: str | None = None
    created_at: datetime


class PartyResponse(BaseModel):
    """Party in response."""

    id: int
    name: str
    role: str
    opening_balance: float
    opening_balance_type: str
    mobile: str | None = None
    email: str | None = None
    address: str | None = None
    created_at: datetime


# --- Numbering ---


class DocumentNumberResponse(BaseModel):
    """An allocated document number and its parts."""

    number: str = Field(..., examples=["GK-CR-0001-25-26"])
    sequence: int
    series_code: str
    period: str


# --- Items / Stock ---


class ItemResponse(BaseModel):
    """Item in response."""

    id: int
    name: str
    unit: str | None = None
    hsn: str | None = None
    purchase_rate: float
    sale_rate: float
    tax_percent: float
    quantity: float
    created_at: datetime
    updated_at: datetime


class StockMovementResponse(BaseModel):
    """Stock movement in response.

    ``previous_quantity``/``new_quantity`` are null for movements recorded
    against items that no longer exist.
    """

    id: int
    item_id: int
    delta: float
    kind: str
    ref_id: int | None = None
    note: str | None = None
    previous_quantity: float | None = None
    new_quantity: float | None = None
    created_at: datetime


class AdjustStockResponse(BaseModel):
    """Result of a manual stock adjustment."""

    item_id: int
    new_quantity: float


# --- Invoices ---


class InvoiceLineResponse(BaseModel):
    """Invoice line in response."""

    id: int | None = None
    item_id: int
    description: str | None = None
    quantity: float
    rate: float
    tax_percent: float
    amount: float
    tax_amount: float


class InvoiceResponse(BaseModel):
    """Invoice in response."""

    id: int
    party_id: int
    direction: str
    invoice_date: date
    payment_mode: str
    number: str | None = None
    sequence: int | None = None
    series_code: str | None = None
    period: str | None = None
    subtotal: float
    tax_amount: float
    grand_total: float
    paid_amount: float
    due_amount: float
    notes: str | None = None
    lines: list[InvoiceLineResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class InvoiceListResponse(BaseModel):
    """List of invoices."""

    invoices: list[InvoiceResponse]
    total: int


class RevertWarningResponse(BaseModel):
    """A line whose stock could not be reverted."""

    item_id: int
    quantity: float
    reason: str
    movement_recorded: bool
    message: str


class DeleteInvoiceResponse(BaseModel):
    """Result of deleting an invoice.

    The deletion succeeded; ``warnings`` lists lines for an operator to review.
    """

    invoice_id: int
    number: str | None = None
    deleted: bool = True
    warnings: list[RevertWarningResponse] = Field(default_factory=list)


# --- Payments ---


class PaymentAllocationResponse(BaseModel):
    """Payment allocation in response."""

    invoice_id: int
    amount: float


class PaymentResponse(BaseModel):
    """Payment in response."""

    id: int
    party_id: int
    direction: str
    amount: float
    payment_date: date
    mode: str
    voucher_number: str | None = None
    allocations: list[PaymentAllocationResponse] = Field(default_factory=list)
    allocated_total: float
    unallocated: float
    reference: str | None = None
    notes: str | None = None
    created_at: datetime


class PaymentListResponse(BaseModel):
    """List of payments."""

    payments: list[PaymentResponse]
    total: int


class DeletePaymentResponse(BaseModel):
    """Result of deleting a payment."""

    payment_id: int
    voucher_number: str | None = None
    deleted: bool = True
    restored_invoices: list[int] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


# --- Adjustments ---


class AdjustmentResponse(BaseModel):
    """Adjustment in response."""

    id: int
    txn_type: str
    adjustment_date: date
    amount: float
    from_party_id: int | None = None
    to_party_id: int | None = None
    reference: str | None = None
    category: str | None = None
    note: str | None = None
    created_at: datetime


class AdjustmentListResponse(BaseModel):
    """List of adjustments."""

    adjustments: list[AdjustmentResponse]
    total: int


class DeleteAdjustmentResponse(BaseModel):
    adjustment_id: int
    deleted: bool = True


# --- Ledger ---


class LedgerLineResponse(BaseModel):
    """One statement line with the balance after it."""

    id: int | None = None
    entry_date: date
    entry_type: str
    debit: float
    credit: float
    ref_type: str | None = None
    ref_id: int | None = None
    ref_no: str | None = None
    narration: str | None = None
    is_reversal: bool = False
    balance_after: float


class PartyStatementResponse(BaseModel):
    """Party ledger statement."""

    party_id: int
    party_name: str
    role: str
    start: date | None = None
    end: date | None = None
    opening_balance: float
    total_debit: float
    total_credit: float
    closing_balance: float
    lines: list[LedgerLineResponse] = Field(default_factory=list)


class OutstandingInvoicesResponse(BaseModel):
    """A party's invoices with an amount still due, oldest first."""

    party_id: int
    invoices: list[InvoiceResponse]
    total_due: float
