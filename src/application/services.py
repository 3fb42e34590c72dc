"""
Service factory functions for dependency injection.

This module wires the SQLite store implementations to the core services.
Use cases and adapters import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from src.application.accounting_core import AccountingCore
from src.config import get_settings
from src.core.services import (
    InvoiceStockSynchronizer,
    LedgerAggregator,
    PaymentAllocationEngine,
    SequenceAllocator,
    StockLedger,
)

if TYPE_CHECKING:
    from src.core.interfaces import (
        IDirectory,
        IInvoiceStore,
        ILedgerStore,
        IPaymentStore,
        ISequenceStore,
        IStockStore,
    )


# Singleton service instances
_sequence_allocator: SequenceAllocator | None = None
_stock_ledger: StockLedger | None = None
_invoice_stock_synchronizer: InvoiceStockSynchronizer | None = None
_payment_allocation_engine: PaymentAllocationEngine | None = None
_ledger_aggregator: LedgerAggregator | None = None
_accounting_core: AccountingCore | None = None


async def get_sequence_allocator(
    sequence_store: "ISequenceStore | None" = None,
    directory: "IDirectory | None" = None,
) -> SequenceAllocator:
    """
    Get or create SequenceAllocator instance.

    Numbering policy comes from ``NUMBERING_*`` settings. Overrides bypass
    the singleton.

    Args:
        sequence_store: Optional counter store override
        directory: Optional tenant directory override

    Returns:
        Configured SequenceAllocator
    """
    global _sequence_allocator

    overridden = sequence_store is not None or directory is not None
    if _sequence_allocator is not None and not overridden:
        return _sequence_allocator

    # Lazy import infrastructure to avoid circular imports
    from src.infrastructure.storage.sqlite import get_directory, get_sequence_store

    numbering = get_settings().numbering
    allocator = SequenceAllocator(
        sequence_store or await get_sequence_store(),
        directory or await get_directory(),
        period_policy=numbering.period_policy,
        fiscal_year_start_month=numbering.fiscal_year_start_month,
        sequence_width=numbering.sequence_width,
        default_prefix=numbering.default_prefix,
    )

    if not overridden:
        _sequence_allocator = allocator

    return allocator


async def get_stock_ledger(stock_store: "IStockStore | None" = None) -> StockLedger:
    """Get or create StockLedger instance."""
    global _stock_ledger

    if _stock_ledger is not None and stock_store is None:
        return _stock_ledger

    from src.infrastructure.storage.sqlite import get_stock_store

    ledger = StockLedger(stock_store or await get_stock_store())

    if stock_store is None:
        _stock_ledger = ledger

    return ledger


async def get_invoice_stock_synchronizer(
    stock_ledger: StockLedger | None = None,
    invoice_store: "IInvoiceStore | None" = None,
) -> InvoiceStockSynchronizer:
    """
    Get or create InvoiceStockSynchronizer instance.

    ``STOCK_ATOMIC_BATCHES`` selects between single-transaction batches and
    sequential application with compensating rollback.
    """
    global _invoice_stock_synchronizer

    overridden = stock_ledger is not None or invoice_store is not None
    if _invoice_stock_synchronizer is not None and not overridden:
        return _invoice_stock_synchronizer

    from src.infrastructure.storage.sqlite import get_invoice_store

    synchronizer = InvoiceStockSynchronizer(
        stock_ledger or await get_stock_ledger(),
        invoice_store or await get_invoice_store(),
        atomic_batches=get_settings().stock.atomic_batches,
    )

    if not overridden:
        _invoice_stock_synchronizer = synchronizer

    return synchronizer


async def get_payment_allocation_engine(
    payment_store: "IPaymentStore | None" = None,
    invoice_store: "IInvoiceStore | None" = None,
    sequence_allocator: SequenceAllocator | None = None,
) -> PaymentAllocationEngine:
    """Get or create PaymentAllocationEngine instance."""
    global _payment_allocation_engine

    overridden = any(
        dep is not None for dep in (payment_store, invoice_store, sequence_allocator)
    )
    if _payment_allocation_engine is not None and not overridden:
        return _payment_allocation_engine

    from src.infrastructure.storage.sqlite import get_invoice_store, get_payment_store

    engine = PaymentAllocationEngine(
        payment_store or await get_payment_store(),
        invoice_store or await get_invoice_store(),
        sequence_allocator or await get_sequence_allocator(),
    )

    if not overridden:
        _payment_allocation_engine = engine

    return engine


async def get_ledger_aggregator(
    ledger_store: "ILedgerStore | None" = None,
    directory: "IDirectory | None" = None,
) -> LedgerAggregator:
    """Get or create LedgerAggregator instance."""
    global _ledger_aggregator

    overridden = ledger_store is not None or directory is not None
    if _ledger_aggregator is not None and not overridden:
        return _ledger_aggregator

    from src.infrastructure.storage.sqlite import get_directory, get_ledger_store

    aggregator = LedgerAggregator(
        ledger_store or await get_ledger_store(),
        directory or await get_directory(),
    )

    if not overridden:
        _ledger_aggregator = aggregator

    return aggregator


async def get_accounting_core() -> AccountingCore:
    """Get the facade over all five core services."""
    global _accounting_core

    if _accounting_core is None:
        _accounting_core = AccountingCore(
            sequence_allocator=await get_sequence_allocator(),
            synchronizer=await get_invoice_stock_synchronizer(),
            payment_engine=await get_payment_allocation_engine(),
            ledger_aggregator=await get_ledger_aggregator(),
        )
    return _accounting_core


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _sequence_allocator
    global _stock_ledger
    global _invoice_stock_synchronizer
    global _payment_allocation_engine
    global _ledger_aggregator
    global _accounting_core

    _sequence_allocator = None
    _stock_ledger = None
    _invoice_stock_synchronizer = None
    _payment_allocation_engine = None
    _ledger_aggregator = None
    _accounting_core = None


__all__ = [
    # Factory functions
    "get_sequence_allocator",
    "get_stock_ledger",
    "get_invoice_stock_synchronizer",
    "get_payment_allocation_engine",
    "get_ledger_aggregator",
    "get_accounting_core",
    "reset_services",
]
