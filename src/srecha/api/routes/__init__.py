"""API route modules."""

from srecha.api.routes.auth import router as auth_router
from srecha.api.routes.catalog import router as catalog_router
from srecha.api.routes.deliveries import router as deliveries_router
from srecha.api.routes.documents import router as documents_router
from srecha.api.routes.health import router as health_router
from srecha.api.routes.invoices import router as invoices_router
from srecha.api.routes.warehouse import router as warehouse_router

__all__ = [
    "health_router",
    "auth_router",
    "invoices_router",
    "documents_router",
    "catalog_router",
    "warehouse_router",
    "deliveries_router",
]
