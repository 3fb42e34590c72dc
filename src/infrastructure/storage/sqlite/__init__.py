"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.adjustment_store import SQLiteAdjustmentStore
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    open_pool,
)
from src.infrastructure.storage.sqlite.directory_store import SQLiteDirectory
from src.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore
from src.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from src.infrastructure.storage.sqlite.payment_store import SQLitePaymentStore
from src.infrastructure.storage.sqlite.sequence_store import SQLiteSequenceStore
from src.infrastructure.storage.sqlite.stock_store import SQLiteStockStore

# Singleton instances
_adjustment_store: SQLiteAdjustmentStore | None = None
_directory: SQLiteDirectory | None = None
_invoice_store: SQLiteInvoiceStore | None = None
_ledger_store: SQLiteLedgerStore | None = None
_payment_store: SQLitePaymentStore | None = None
_sequence_store: SQLiteSequenceStore | None = None
_stock_store: SQLiteStockStore | None = None


async def get_adjustment_store() -> SQLiteAdjustmentStore:
    """Get singleton adjustment store instance."""
    global _adjustment_store
    if _adjustment_store is None:
        _adjustment_store = SQLiteAdjustmentStore()
    return _adjustment_store


async def get_directory() -> SQLiteDirectory:
    """Get singleton tenant/party directory instance."""
    global _directory
    if _directory is None:
        _directory = SQLiteDirectory()
    return _directory


async def get_invoice_store() -> SQLiteInvoiceStore:
    """Get singleton invoice store instance."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = SQLiteInvoiceStore()
    return _invoice_store


async def get_ledger_store() -> SQLiteLedgerStore:
    """Get singleton ledger store instance."""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = SQLiteLedgerStore()
    return _ledger_store


async def get_payment_store() -> SQLitePaymentStore:
    """Get singleton payment store instance."""
    global _payment_store
    if _payment_store is None:
        _payment_store = SQLitePaymentStore()
    return _payment_store


async def get_sequence_store() -> SQLiteSequenceStore:
    """Get singleton sequence store instance."""
    global _sequence_store
    if _sequence_store is None:
        _sequence_store = SQLiteSequenceStore()
    return _sequence_store


async def get_stock_store() -> SQLiteStockStore:
    """Get singleton stock store instance."""
    global _stock_store
    if _stock_store is None:
        _stock_store = SQLiteStockStore()
    return _stock_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "open_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteAdjustmentStore",
    "SQLiteDirectory",
    "SQLiteInvoiceStore",
    "SQLiteLedgerStore",
    "SQLitePaymentStore",
    "SQLiteSequenceStore",
    "SQLiteStockStore",
    # Factory functions
    "get_adjustment_store",
    "get_directory",
    "get_invoice_store",
    "get_ledger_store",
    "get_payment_store",
    "get_sequence_store",
    "get_stock_store",
]
