"""
FastAPI application for the ledger service.

Startup migrates the database and opens the connection pool; shutdown
closes the pool. Every route except health and tenant registration reads
the tenant from the ``X-Tenant-ID`` header.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from src.api.middleware.error_handler import setup_exception_handlers
from src.api.routes import (
    adjustments_router,
    directory_router,
    health_router,
    invoices_router,
    items_router,
    numbering_router,
    payments_router,
)
from src.config import configure_logging, get_logger, get_settings
from src.core.exceptions import StorageError

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    numbering_router,
    directory_router,
    items_router,
    invoices_router,
    payments_router,
    adjustments_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    from src.infrastructure.storage.sqlite import close_pool, get_pool
    from src.infrastructure.storage.sqlite.migrations import run_migrations

    settings = get_settings()
    db_path = settings.storage.db_path
    logger.info("application_starting", db_path=str(db_path), environment=settings.environment)

    results = await run_migrations(db_path)
    failed = [r.version for r in results if not r.success]
    if failed:
        logger.error("startup_migrations_failed", versions=failed)
        raise StorageError(f"Migrations failed: {', '.join(failed)}", code="DATABASE_ERROR")

    pool = await get_pool()
    logger.info(
        "application_started",
        migrations_applied=len(results),
        pool_size=pool.pool_size,
    )
    try:
        yield
    finally:
        await close_pool()
        logger.info("application_stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Invoices, stock, payments and party ledgers for many tenants",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Starlette runs the last-added middleware first: errors wrap logging.
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Response-Time"],
        )

    setup_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("src.api.main:app", host=settings.api.host, port=settings.api.port, reload=settings.api.debug)
