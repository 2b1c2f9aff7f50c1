"""SQLite storage implementations."""

from srecha.infrastructure.storage.sqlite.connection import ConnectionPool
from srecha.infrastructure.storage.sqlite.delivery_store import SQLiteDeliveryStore
from srecha.infrastructure.storage.sqlite.entity_store import (
    SQLiteCategoryStore,
    SQLiteClientStore,
    SQLiteCountryStore,
    SQLiteEntityStore,
    SQLiteProductStore,
    SQLiteSubcategoryStore,
    SQLiteSupplierProductStore,
    SQLiteSupplierSectorStore,
    SQLiteSupplierStore,
)
from srecha.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore
from srecha.infrastructure.storage.sqlite.user_store import SQLiteUserStore
from srecha.infrastructure.storage.sqlite.warehouse_store import SQLiteWarehouseStore

__all__ = [
    "ConnectionPool",
    "SQLiteEntityStore",
    "SQLiteClientStore",
    "SQLiteProductStore",
    "SQLiteCategoryStore",
    "SQLiteSubcategoryStore",
    "SQLiteCountryStore",
    "SQLiteSupplierSectorStore",
    "SQLiteSupplierProductStore",
    "SQLiteSupplierStore",
    "SQLiteInvoiceStore",
    "SQLiteWarehouseStore",
    "SQLiteDeliveryStore",
    "SQLiteUserStore",
]
