"""Core interfaces (ports) for dependency injection."""

from srecha.core.interfaces.delivery_store import IDeliveryStore
from srecha.core.interfaces.document_store import IDocumentStore
from srecha.core.interfaces.entity_store import IEntityStore, IProductStore
from srecha.core.interfaces.invoice_store import IInvoiceStore
from srecha.core.interfaces.user_store import IUserStore
from srecha.core.interfaces.warehouse_store import IWarehouseStore

__all__ = [
    "IEntityStore",
    "IProductStore",
    "IInvoiceStore",
    "IDocumentStore",
    "IWarehouseStore",
    "IDeliveryStore",
    "IUserStore",
]
