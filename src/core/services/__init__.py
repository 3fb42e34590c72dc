"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from src.core.services import posting
from src.core.services.invoice_stock_sync import InvoiceStockSynchronizer
from src.core.services.ledger_aggregator import LedgerAggregator, fold_entries
from src.core.services.payment_allocation import PaymentAllocationEngine, allocate_fifo
from src.core.services.sequence_allocator import SequenceAllocator
from src.core.services.stock_ledger import StockLedger

__all__ = [
    # Numbering
    "SequenceAllocator",
    # Stock
    "StockLedger",
    "InvoiceStockSynchronizer",
    # Payments
    "PaymentAllocationEngine",
    "allocate_fifo",
    # Ledger
    "LedgerAggregator",
    "fold_entries",
    "posting",
]
