"""Core domain entities."""

from src.core.entities.adjustment import Adjustment, AdjustmentType
from src.core.entities.amounts import (
    MONEY_EPSILON,
    is_positive_finite,
    outstanding,
    round_money,
    round_quantity,
)
from src.core.entities.directory import (
    ASSET_LIKE_ROLES,
    BalanceType,
    Party,
    PartyRole,
    Tenant,
)
from src.core.entities.inventory import (
    Item,
    MovementKind,
    StockDelta,
    StockMovement,
)
from src.core.entities.invoice import (
    Invoice,
    InvoiceDirection,
    InvoiceLine,
    PartialRevertWarning,
    PaymentMode,
)
from src.core.entities.ledger import (
    LedgerEntry,
    LedgerEntryType,
    LedgerRefType,
    LedgerStatement,
    LedgerTotals,
    StatementLine,
)
from src.core.entities.numbering import (
    DocumentKind,
    DocumentNumber,
    SequenceCounter,
    SeriesCode,
    SeriesSelector,
)
from src.core.entities.payment import (
    Payment,
    PaymentAllocation,
    PaymentDirection,
)

__all__ = [
    # Adjustment
    "Adjustment",
    "AdjustmentType",
    # Amounts
    "MONEY_EPSILON",
    "is_positive_finite",
    "outstanding",
    "round_money",
    "round_quantity",
    # Directory
    "ASSET_LIKE_ROLES",
    "BalanceType",
    "Party",
    "PartyRole",
    "Tenant",
    # Inventory
    "Item",
    "MovementKind",
    "StockDelta",
    "StockMovement",
    # Invoice
    "Invoice",
    "InvoiceDirection",
    "InvoiceLine",
    "PartialRevertWarning",
    "PaymentMode",
    # Ledger
    "LedgerEntry",
    "LedgerEntryType",
    "LedgerRefType",
    "LedgerStatement",
    "LedgerTotals",
    "StatementLine",
    # Numbering
    "DocumentKind",
    "DocumentNumber",
    "SequenceCounter",
    "SeriesCode",
    "SeriesSelector",
    # Payment
    "Payment",
    "PaymentAllocation",
    "PaymentDirection",
]
