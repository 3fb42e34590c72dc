"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.requests import (
    CreateAdjustmentRequest,
    AdjustStockRequest,
    AllocateNumberRequest,
    AllocationRequest,
    CreateInvoiceRequest,
    CreateItemRequest,
    CreatePartyRequest,
    CreatePaymentRequest,
    CreateTenantRequest,
    InvoiceLineRequest,
    UpdateInvoiceRequest,
)
from src.application.dto.responses import (
    AdjustmentListResponse,
    AdjustmentResponse,
    AdjustStockResponse,
    DeleteInvoiceResponse,
    DeleteAdjustmentResponse,
    DeletePaymentResponse,
    DocumentNumberResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceLineResponse,
    InvoiceListResponse,
    InvoiceResponse,
    ItemResponse,
    LedgerLineResponse,
    OutstandingInvoicesResponse,
    PartyResponse,
    PartyStatementResponse,
    PaymentAllocationResponse,
    PaymentListResponse,
    PaymentResponse,
    RevertWarningResponse,
    StockMovementResponse,
    TenantResponse,
)

__all__ = [
    # Requests
    "CreateAdjustmentRequest",
    "AdjustStockRequest",
    "AllocateNumberRequest",
    "AllocationRequest",
    "CreateInvoiceRequest",
    "CreateItemRequest",
    "CreatePartyRequest",
    "CreatePaymentRequest",
    "CreateTenantRequest",
    "InvoiceLineRequest",
    "UpdateInvoiceRequest",
    # Responses
    "AdjustmentListResponse",
    "AdjustmentResponse",
    "DeleteAdjustmentResponse",
    "AdjustStockResponse",
    "DeleteInvoiceResponse",
    "DeletePaymentResponse",
    "DocumentNumberResponse",
    "ErrorResponse",
    "HealthResponse",
    "InvoiceLineResponse",
    "InvoiceListResponse",
    "InvoiceResponse",
    "ItemResponse",
    "LedgerLineResponse",
    "OutstandingInvoicesResponse",
    "PartyResponse",
    "PartyStatementResponse",
    "PaymentAllocationResponse",
    "PaymentListResponse",
    "PaymentResponse",
    "RevertWarningResponse",
    "StockMovementResponse",
    "TenantResponse",
]
