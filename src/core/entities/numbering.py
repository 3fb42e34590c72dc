"""Document numbering entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from src.core.entities.invoice import PaymentMode


class SeriesCode(str, Enum):
    """Numbering series; each has an independent counter per period."""

    CASH_SALE = "C"
    CREDIT_SALE = "CR"
    PURCHASE = "PUR"
    RECEIPT = "RCV"
    PAYMENT = "PAY"


class DocumentKind(str, Enum):
    """Document families that draw numbers."""

    SALES_INVOICE = "sales_invoice"
    PURCHASE_INVOICE = "purchase_invoice"
    RECEIPT_VOUCHER = "receipt_voucher"
    PAYMENT_VOUCHER = "payment_voucher"


class SeriesSelector(BaseModel):
    """What the caller knows about a document before it has a series."""

    kind: DocumentKind
    payment_mode: PaymentMode | None = None


class DocumentNumber(BaseModel):
    """A freshly allocated document number and its parts."""

    number: str
    sequence: int
    series_code: SeriesCode
    period: str


class SequenceCounter(BaseModel):
    """Last issued value for one (tenant, series, period) key."""

    tenant_id: str
    series_code: str
    period: str
    last_value: int = 0
    updated_at: datetime = Field(default_factory=datetime.utcnow)
