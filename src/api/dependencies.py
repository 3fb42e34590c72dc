"""
Dependency injection container for FastAPI.

Provides service instances and the request tenant to route handlers.
"""

from functools import lru_cache

from fastapi import Request

from src.application.use_cases import (
    AdjustStockUseCase,
    AllocateNumberUseCase,
    CreateInvoiceUseCase,
    CreateItemUseCase,
    CreatePartyUseCase,
    CreateTenantUseCase,
    DeleteAdjustmentUseCase,
    DeleteInvoiceUseCase,
    DeletePaymentUseCase,
    OutstandingInvoicesUseCase,
    PartyStatementUseCase,
    RecordAdjustmentUseCase,
    RecordPaymentUseCase,
    UpdateInvoiceUseCase,
)
from src.config import Settings, get_settings
from src.core.exceptions import TenantRequiredError
from src.core.interfaces import (
    IAdjustmentStore,
    IDirectory,
    IInvoiceStore,
    IPaymentStore,
    IStockStore,
)
from src.infrastructure.storage.sqlite import (
    get_adjustment_store,
    get_directory,
    get_invoice_store,
    get_payment_store,
    get_stock_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Tenant dependency
async def get_tenant_id(request: Request) -> str:
    """
    Tenant for the request, read from the configured tenant header.

    Raises:
        TenantRequiredError: If the header is missing or blank.
    """
    header = get_app_settings().api.tenant_header
    tenant_id = request.headers.get(header, "").strip()
    if not tenant_id:
        raise TenantRequiredError(header)
    return tenant_id


# Store dependencies
async def get_dir() -> IDirectory:
    """Get tenant/party directory."""
    return await get_directory()


async def get_inv_store() -> IInvoiceStore:
    """Get invoice store."""
    return await get_invoice_store()


async def get_pay_store() -> IPaymentStore:
    """Get payment store."""
    return await get_payment_store()


async def get_item_store() -> IStockStore:
    """Get item/stock store."""
    return await get_stock_store()


async def get_adj_store() -> IAdjustmentStore:
    """Get adjustment store."""
    return await get_adjustment_store()


# Use case dependencies
def get_allocate_number_use_case() -> AllocateNumberUseCase:
    """Get allocate number use case."""
    return AllocateNumberUseCase()


def get_create_tenant_use_case() -> CreateTenantUseCase:
    """Get create tenant use case."""
    return CreateTenantUseCase()


def get_create_party_use_case() -> CreatePartyUseCase:
    """Get create party use case."""
    return CreatePartyUseCase()


def get_create_item_use_case() -> CreateItemUseCase:
    """Get create item use case."""
    return CreateItemUseCase()


def get_adjust_stock_use_case() -> AdjustStockUseCase:
    """Get adjust stock use case."""
    return AdjustStockUseCase()


def get_create_invoice_use_case() -> CreateInvoiceUseCase:
    """Get create invoice use case."""
    return CreateInvoiceUseCase()


def get_update_invoice_use_case() -> UpdateInvoiceUseCase:
    """Get update invoice use case."""
    return UpdateInvoiceUseCase()


def get_delete_invoice_use_case() -> DeleteInvoiceUseCase:
    """Get delete invoice use case."""
    return DeleteInvoiceUseCase()


def get_record_payment_use_case() -> RecordPaymentUseCase:
    """Get record payment use case."""
    return RecordPaymentUseCase()


def get_delete_payment_use_case() -> DeletePaymentUseCase:
    """Get delete payment use case."""
    return DeletePaymentUseCase()


def get_party_statement_use_case() -> PartyStatementUseCase:
    """Get party statement use case."""
    return PartyStatementUseCase()


def get_outstanding_invoices_use_case() -> OutstandingInvoicesUseCase:
    """Get outstanding invoices use case."""
    return OutstandingInvoicesUseCase()


def get_record_adjustment_use_case() -> RecordAdjustmentUseCase:
    """Get record adjustment use case."""
    return RecordAdjustmentUseCase()


def get_delete_adjustment_use_case() -> DeleteAdjustmentUseCase:
    """Get delete adjustment use case."""
    return DeleteAdjustmentUseCase()
