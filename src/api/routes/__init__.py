"""API route modules."""

from src.api.routes.adjustments import router as adjustments_router
from src.api.routes.directory import router as directory_router
from src.api.routes.health import router as health_router
from src.api.routes.invoices import router as invoices_router
from src.api.routes.items import router as items_router
from src.api.routes.numbering import router as numbering_router
from src.api.routes.payments import router as payments_router

__all__ = [
    "health_router",
    "numbering_router",
    "directory_router",
    "items_router",
    "invoices_router",
    "payments_router",
    "adjustments_router",
]
