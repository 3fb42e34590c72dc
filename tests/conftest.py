"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import AsyncGenerator
from pathlib import Path

# Keep the default data directory out of the working tree
os.environ.setdefault("STORAGE_DATA_DIR", tempfile.mkdtemp(prefix="ledgerline-tests-"))

import pytest
from httpx import ASGITransport, AsyncClient

from src.application.services import get_stock_ledger, reset_services
from src.config import reset_settings
from src.core.entities import Item, MovementKind, Party, PartyRole, Tenant
from src.infrastructure.storage.sqlite import (
    close_pool,
    get_directory,
    get_stock_store,
    open_pool,
)
from src.infrastructure.storage.sqlite.migrations import initialize_database

TENANT_ID = "gk"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Temporary database path."""
    return tmp_path / "ledgerline-test.db"


@pytest.fixture
async def database(db_path: Path) -> AsyncGenerator[Path, None]:
    """Migrated database with the global pool bound to it."""
    results = await initialize_database(db_path, create_backup_before=False)
    assert all(r.success for r in results)

    reset_services()
    await open_pool(db_path, pool_size=2)
    yield db_path
    await close_pool()
    reset_services()
    reset_settings()


@pytest.fixture
async def tenant(database: Path) -> Tenant:
    directory = await get_directory()
    return await directory.create_tenant(
        Tenant(id=TENANT_ID, name="Gayatri Kirana", numbering_prefix="GK")
    )


@pytest.fixture
async def customer(tenant: Tenant) -> Party:
    directory = await get_directory()
    return await directory.create_party(
        Party(tenant_id=tenant.id, name="Ramesh Traders", role=PartyRole.CUSTOMER)
    )


@pytest.fixture
async def supplier(tenant: Tenant) -> Party:
    directory = await get_directory()
    return await directory.create_party(
        Party(tenant_id=tenant.id, name="Sharma Wholesale", role=PartyRole.SUPPLIER)
    )


@pytest.fixture
async def item(tenant: Tenant) -> Item:
    """Item with 50 on hand, booked as a single opening-stock movement."""
    store = await get_stock_store()
    created = await store.create_item(
        Item(tenant_id=tenant.id, name="Basmati Rice 5kg", unit="bag", sale_rate=100.0)
    )
    ledger = await get_stock_ledger()
    created.quantity = await ledger.increase(
        tenant.id, created.id, 50, MovementKind.ADJUSTMENT, note="opening stock"
    )
    return created


@pytest.fixture
async def client(tenant: Tenant) -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app, sending the test tenant header."""
    from src.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-Tenant-ID": tenant.id},
    ) as ac:
        yield ac
