"""
Dependency providers for FastAPI.

Every provider reads from the ServiceContainer attached to the running
application, so tests can swap any of them with ``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from srecha.application.container import ServiceContainer
from srecha.core.exceptions import ConfigurationError
from srecha.core.services import AuthService, DeliveryService, InvoiceLifecycleService
from srecha.infrastructure.storage.sqlite import SQLiteWarehouseStore


def get_container(request: Request) -> ServiceContainer:
    """Get the container built at application startup."""
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise ConfigurationError("Service container is not initialized")
    return container


def get_invoice_service(
    container: ServiceContainer = Depends(get_container),
) -> InvoiceLifecycleService:
    return container.invoice_service


def get_auth_service(container: ServiceContainer = Depends(get_container)) -> AuthService:
    return container.auth_service


def get_delivery_service(
    container: ServiceContainer = Depends(get_container),
) -> DeliveryService:
    return container.delivery_service


def get_warehouse_store(
    container: ServiceContainer = Depends(get_container),
) -> SQLiteWarehouseStore:
    return container.warehouse
