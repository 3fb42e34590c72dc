"""
Domain exceptions for the Ledgerline accounting core.

Provides specific exception types for different error scenarios. Every
exception carries a machine-readable ``code`` so adapters can report the
failure kind without parsing messages.
"""

from typing import Any


class LedgerlineError(Exception):
    """Base exception for all Ledgerline errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Lookup Exceptions
class NotFoundError(LedgerlineError):
    """Base exception for missing records."""

    pass


class TenantNotFoundError(NotFoundError):
    """Tenant could not be resolved."""

    def __init__(self, tenant_id: str):
        super().__init__(
            f"Tenant not found: {tenant_id}",
            code="TENANT_NOT_FOUND",
            details={"tenant_id": tenant_id},
        )


class PartyNotFoundError(NotFoundError):
    """Party not found for the tenant."""

    def __init__(self, party_id: int):
        super().__init__(
            f"Party not found: {party_id}",
            code="PARTY_NOT_FOUND",
            details={"party_id": party_id},
        )


class ItemNotFoundError(NotFoundError):
    """Item no longer exists in the item master."""

    def __init__(self, item_id: int):
        super().__init__(
            f"Item not found: {item_id}",
            code="ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class InvoiceNotFoundError(NotFoundError):
    """Invoice not found in storage."""

    def __init__(self, invoice_id: int):
        super().__init__(
            f"Invoice not found: {invoice_id}",
            code="INVOICE_NOT_FOUND",
            details={"invoice_id": invoice_id},
        )


class PaymentNotFoundError(NotFoundError):
    """Payment not found in storage."""

    def __init__(self, payment_id: int):
        super().__init__(
            f"Payment not found: {payment_id}",
            code="PAYMENT_NOT_FOUND",
            details={"payment_id": payment_id},
        )


class AdjustmentNotFoundError(NotFoundError):
    """Adjustment not found in storage."""

    def __init__(self, adjustment_id: int):
        super().__init__(
            f"Adjustment not found: {adjustment_id}",
            code="ADJUSTMENT_NOT_FOUND",
            details={"adjustment_id": adjustment_id},
        )


# Concurrency Exceptions
class ConflictError(LedgerlineError):
    """A document changed between being read and being written."""

    pass


class InvoiceConflictError(ConflictError):
    """Invoice row no longer has the version the writer started from."""

    def __init__(self, invoice_id: int | None, expected_version: int):
        super().__init__(
            f"Invoice {invoice_id} was changed by another request; reload it and retry",
            code="INVOICE_CONFLICT",
            details={"invoice_id": invoice_id, "expected_version": expected_version},
        )


# Stock Exceptions
class StockError(LedgerlineError):
    """Base exception for stock ledger operations."""

    pass


class InsufficientStockError(StockError):
    """Conditional decrease refused because on-hand quantity is too low."""

    def __init__(self, item_id: int, requested: float, available: float):
        super().__init__(
            f"Insufficient stock for item {item_id}: requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "item_id": item_id,
                "requested": requested,
                "available": available,
            },
        )


class InvalidQuantityError(StockError):
    """Quantity is zero, negative, or not a finite number."""

    def __init__(self, quantity: Any, field: str = "quantity"):
        super().__init__(
            f"Invalid {field}: {quantity!r} (must be a finite number > 0)",
            code="INVALID_QUANTITY",
            details={"field": field, "value": str(quantity)},
        )


class InvoiceTypeInvalidError(StockError):
    """Invoice direction tag is missing or unrecognized."""

    def __init__(self, invoice_id: int | None, direction: Any):
        super().__init__(
            f"Invoice {invoice_id} has invalid direction {direction!r}; expected SALES or PURCHASE",
            code="INVOICE_TYPE_INVALID",
            details={"invoice_id": invoice_id, "direction": str(direction)},
        )


class StockRestoreFailedError(StockError):
    """An update failed and the prior invoice state could not be restored."""

    def __init__(self, invoice_id: int | None, original_error: str, restore_error: str):
        super().__init__(
            f"Invoice {invoice_id} update failed ({original_error}) and restoring "
            f"the previous state also failed: {restore_error}",
            code="STOCK_RESTORE_FAILED",
            details={
                "invoice_id": invoice_id,
                "original_error": original_error,
                "restore_error": restore_error,
            },
        )


# Payment Exceptions
class AllocationError(LedgerlineError):
    """Base exception for payment allocation failures."""

    pass


class AllocationExceedsDueError(AllocationError):
    """Allocation is larger than the invoice's outstanding due amount."""

    def __init__(self, invoice_id: int, amount: float, due: float):
        super().__init__(
            f"Allocation of {amount} exceeds due amount {due} on invoice {invoice_id}",
            code="ALLOCATION_EXCEEDS_DUE",
            details={"invoice_id": invoice_id, "amount": amount, "due": due},
        )


class AllocationExceedsPaymentAmountError(AllocationError):
    """Allocations add up to more than the payment amount."""

    def __init__(self, allocated: float, payment_amount: float):
        super().__init__(
            f"Allocations total {allocated} exceeds payment amount {payment_amount}",
            code="ALLOCATION_EXCEEDS_PAYMENT_AMOUNT",
            details={"allocated": allocated, "payment_amount": payment_amount},
        )


class AllocationInvoiceMismatchError(AllocationError):
    """Allocated invoice belongs to another party or runs the other way."""

    def __init__(self, invoice_id: int, reason: str):
        super().__init__(
            f"Invoice {invoice_id} cannot take this payment: {reason}",
            code="ALLOCATION_INVOICE_MISMATCH",
            details={"invoice_id": invoice_id, "reason": reason},
        )


# Numbering Exceptions
class SequenceAllocationFailedError(LedgerlineError):
    """A document number could not be allocated."""

    def __init__(self, tenant_id: str, series_code: str, reason: str):
        super().__init__(
            f"Sequence allocation failed for tenant {tenant_id} series {series_code}: {reason}",
            code="SEQUENCE_ALLOCATION_FAILED",
            details={"tenant_id": tenant_id, "series_code": series_code, "reason": reason},
        )


# Storage Exceptions
class StorageError(LedgerlineError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Validation Exceptions
class ValidationError(LedgerlineError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class TenantRequiredError(ValidationError):
    """Request arrived without a tenant identifier."""

    def __init__(self, header: str):
        LedgerlineError.__init__(
            self,
            f"Missing {header} tenant header",
            code="TENANT_REQUIRED",
            details={"header": header},
        )


class ConfigurationError(LedgerlineError):
    """Configuration error."""

    pass
