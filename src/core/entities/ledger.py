"""Ledger domain entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from src.core.entities.directory import PartyRole


class LedgerEntryType(str, Enum):
    """Kinds of ledger rows."""

    OPENING_BALANCE = "OPENING_BALANCE"
    INVOICE = "INVOICE"
    PAYMENT = "PAYMENT"
    ADJUSTMENT = "ADJUSTMENT"
    REVERSAL = "REVERSAL"


class LedgerRefType(str, Enum):
    """Kind of document a ledger row points back to."""

    INVOICE = "INVOICE"
    PAYMENT = "PAYMENT"
    PARTY = "PARTY"
    ADJUSTMENT = "ADJUSTMENT"


class LedgerEntry(BaseModel):
    """Immutable debit/credit row for a party.

    Corrections are new REVERSAL rows, never edits.
    """

    id: int | None = None
    tenant_id: str
    party_id: int
    entry_date: date
    entry_type: LedgerEntryType
    debit: float = 0.0
    credit: float = 0.0
    ref_type: LedgerRefType | None = None
    ref_id: int | None = None
    ref_no: str | None = None  # invoice or voucher number
    narration: str | None = None
    payment_mode: str | None = None
    reversed_ref_id: int | None = None  # document whose posting this row reverses
    is_reversal: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)


class LedgerTotals(BaseModel):
    """Debit and credit sums over a set of entries."""

    debit: float = 0.0
    credit: float = 0.0


class StatementLine(BaseModel):
    """A ledger entry with the party balance after it is applied."""

    entry: LedgerEntry
    balance_after: float


class LedgerStatement(BaseModel):
    """Running-balance statement for one party over a date range."""

    tenant_id: str
    party_id: int
    party_name: str
    role: PartyRole
    start: date | None = None
    end: date | None = None
    opening_balance: float
    lines: list[StatementLine] = Field(default_factory=list)
    closing_balance: float
    total_debit: float = 0.0
    total_credit: float = 0.0
