"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.adjustment_store import IAdjustmentStore
from src.core.interfaces.directory import IDirectory
from src.core.interfaces.invoice_store import IInvoiceStore
from src.core.interfaces.ledger_store import ILedgerStore
from src.core.interfaces.payment_store import IPaymentStore
from src.core.interfaces.sequence_store import ISequenceStore
from src.core.interfaces.stock_store import IStockStore

__all__ = [
    "IAdjustmentStore",
    "IDirectory",
    "IInvoiceStore",
    "ILedgerStore",
    "IPaymentStore",
    "ISequenceStore",
    "IStockStore",
]
