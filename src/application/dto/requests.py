"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

The tenant never appears in a request body; it comes from the tenant
header and is passed to use cases separately.
"""

from datetime import date

from pydantic import BaseModel, Field

from src.core.entities.adjustment import AdjustmentType
from src.core.entities.directory import BalanceType, PartyRole
from src.core.entities.inventory import MovementKind
from src.core.entities.invoice import InvoiceDirection, PaymentMode
from src.core.entities.numbering import DocumentKind, SeriesCode
from src.core.entities.payment import PaymentDirection

# --- Directory ---


class CreateTenantRequest(BaseModel):
    """Request to register a tenant (company)."""

    id: str = Field(..., min_length=1, max_length=64, description="Tenant identifier")
    name: str = Field(..., min_length=1, description="Display name")
    numbering_prefix: str | None = Field(
        default=None,
        max_length=8,
        description="Prefix for document numbers (defaults to the first two letters of the name)",
        examples=["GK", "ACME"],
    )


class CreatePartyRequest(BaseModel):
    """Request to create a party within the current tenant."""

    name: str = Field(..., min_length=1, description="Party name")
    role: PartyRole = Field(..., description="Party role", examples=["customer", "supplier"])
    opening_balance: float = Field(default=0.0, ge=0, description="Opening balance amount")
    opening_balance_type: BalanceType = Field(
        default=BalanceType.DR,
        description="DR for a receivable opening, CR for a payable one",
    )
    mobile: str | None = None
    email: str | None = None
    address: str | None = None


# --- Numbering ---


class AllocateNumberRequest(BaseModel):
    """Request a document number.

    Either ``series_code`` or ``document_kind`` must be given; the latter
    picks the series from the kind and payment mode.
    """

    series_code: SeriesCode | None = Field(default=None, description="Explicit series code")
    document_kind: DocumentKind | None = Field(default=None, description="Document kind")
    payment_mode: PaymentMode | None = Field(
        default=None, description="Payment mode, used to split sales series"
    )
    effective_date: date | None = Field(
        default=None, description="Document date (defaults to today)"
    )


# --- Items / Stock ---


class CreateItemRequest(BaseModel):
    """Request to create an item in the item master."""

    name: str = Field(..., min_length=1, description="Item name")
    unit: str = Field(default="pcs", description="Unit of measure")
    hsn: str | None = Field(default=None, description="HSN/SAC code")
    purchase_rate: float = Field(default=0.0, ge=0)
    sale_rate: float = Field(default=0.0, ge=0)
    tax_percent: float = Field(default=0.0, ge=0, le=100)
    opening_quantity: float = Field(default=0.0, ge=0, description="Quantity on hand at creation")


class AdjustStockRequest(BaseModel):
    """Manual stock adjustment (ADJUSTMENT movement)."""

    direction: str = Field(
        ...,
        pattern="^(increase|decrease)$",
        description="Whether to add or remove stock",
    )
    quantity: float = Field(..., description="Quantity to move, must be > 0")
    kind: MovementKind = Field(default=MovementKind.ADJUSTMENT)
    note: str | None = Field(default=None, description="Reason for the adjustment")


# --- Invoices ---


class InvoiceLineRequest(BaseModel):
    """A single invoice line."""

    item_id: int = Field(..., description="Item ID")
    quantity: float = Field(..., gt=0, description="Quantity")
    rate: float = Field(default=0.0, ge=0, description="Rate per unit")
    tax_percent: float = Field(default=0.0, ge=0, le=100, description="Tax percentage")
    description: str | None = None


class CreateInvoiceRequest(BaseModel):
    """Request to create a sales or purchase invoice."""

    party_id: int = Field(..., description="Party ID")
    direction: InvoiceDirection = Field(..., description="SALES or PURCHASE")
    invoice_date: date | None = Field(
        default=None, description="Invoice date (defaults to today)"
    )
    payment_mode: PaymentMode = Field(default=PaymentMode.CREDIT)
    paid_amount: float | None = Field(
        default=None,
        ge=0,
        description="Amount settled at creation (cash sales are always fully settled)",
    )
    notes: str | None = None
    lines: list[InvoiceLineRequest] = Field(..., min_length=1, description="Line items")


class UpdateInvoiceRequest(BaseModel):
    """Partial update of an invoice. Omitted fields keep their stored value."""

    party_id: int | None = None
    invoice_date: date | None = None
    payment_mode: PaymentMode | None = None
    paid_amount: float | None = Field(default=None, ge=0)
    notes: str | None = None
    lines: list[InvoiceLineRequest] | None = Field(default=None, min_length=1)


# --- Payments ---


class AllocationRequest(BaseModel):
    """Portion of a payment to apply to one invoice."""

    invoice_id: int = Field(..., description="Invoice ID")
    amount: float = Field(..., description="Amount to apply, must be > 0")


class CreatePaymentRequest(BaseModel):
    """Request to record a payment.

    Without ``allocations`` the amount is spread over the party's oldest
    outstanding invoices first, unless ``auto_allocate`` is false.
    """

    party_id: int = Field(..., description="Party ID")
    direction: PaymentDirection = Field(..., description="receive or pay")
    amount: float = Field(..., description="Payment amount, must be > 0")
    payment_date: date | None = Field(default=None, description="Payment date (defaults to today)")
    mode: PaymentMode = Field(default=PaymentMode.CASH)
    allocations: list[AllocationRequest] | None = None
    auto_allocate: bool = Field(default=True)
    reference: str | None = Field(default=None, description="Cheque / transaction reference")
    notes: str | None = None


# --- Adjustments ---


class CreateAdjustmentRequest(BaseModel):
    """Request to record an income, expense or contra adjustment.

    At least one of ``from_party_id`` and ``to_party_id`` is required.
    """

    txn_type: AdjustmentType = Field(default=AdjustmentType.INCOME)
    amount: float = Field(..., description="Amount moved, must be > 0")
    adjustment_date: date | None = Field(default=None, description="Defaults to today")
    from_party_id: int | None = Field(default=None, description="Party credited (source)")
    to_party_id: int | None = Field(default=None, description="Party debited (destination)")
    reference: str | None = None
    category: str | None = None
    note: str | None = None
