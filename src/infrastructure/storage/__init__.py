"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteDirectory,
    SQLiteInvoiceStore,
    SQLiteLedgerStore,
    SQLitePaymentStore,
    SQLiteSequenceStore,
    SQLiteStockStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteDirectory",
    "SQLiteInvoiceStore",
    "SQLiteLedgerStore",
    "SQLitePaymentStore",
    "SQLiteSequenceStore",
    "SQLiteStockStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
