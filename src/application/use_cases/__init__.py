"""Application use cases."""

from src.application.use_cases.allocate_number import AllocateNumberUseCase
from src.application.use_cases.create_invoice import CreateInvoiceResult, CreateInvoiceUseCase
from src.application.use_cases.delete_invoice import DeleteInvoiceResult, DeleteInvoiceUseCase
from src.application.use_cases.manage_directory import CreatePartyUseCase, CreateTenantUseCase
from src.application.use_cases.manage_stock import (
    AdjustStockResult,
    AdjustStockUseCase,
    CreateItemUseCase,
)
from src.application.use_cases.party_reports import (
    OutstandingInvoicesUseCase,
    PartyStatementUseCase,
)
from src.application.use_cases.record_adjustment import (
    DeleteAdjustmentResult,
    DeleteAdjustmentUseCase,
    RecordAdjustmentUseCase,
)
from src.application.use_cases.record_payment import (
    DeletePaymentResult,
    DeletePaymentUseCase,
    RecordPaymentResult,
    RecordPaymentUseCase,
)
from src.application.use_cases.update_invoice import UpdateInvoiceResult, UpdateInvoiceUseCase

__all__ = [
    "AllocateNumberUseCase",
    "CreateTenantUseCase",
    "CreatePartyUseCase",
    "CreateItemUseCase",
    "AdjustStockUseCase",
    "AdjustStockResult",
    "CreateInvoiceUseCase",
    "CreateInvoiceResult",
    "UpdateInvoiceUseCase",
    "UpdateInvoiceResult",
    "DeleteInvoiceUseCase",
    "DeleteInvoiceResult",
    "RecordPaymentUseCase",
    "RecordPaymentResult",
    "DeletePaymentUseCase",
    "DeletePaymentResult",
    "RecordAdjustmentUseCase",
    "DeleteAdjustmentUseCase",
    "DeleteAdjustmentResult",
    "PartyStatementUseCase",
    "OutstandingInvoicesUseCase",
]
