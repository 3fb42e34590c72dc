"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from src.application.accounting_core import AccountingCore
from src.application.services import (
    get_accounting_core,
    get_invoice_stock_synchronizer,
    get_ledger_aggregator,
    get_payment_allocation_engine,
    get_sequence_allocator,
    get_stock_ledger,
    reset_services,
)

__all__ = [
    "AccountingCore",
    "get_accounting_core",
    "get_invoice_stock_synchronizer",
    "get_ledger_aggregator",
    "get_payment_allocation_engine",
    "get_sequence_allocator",
    "get_stock_ledger",
    "reset_services",
]
