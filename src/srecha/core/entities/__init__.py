"""Core domain entities."""

from srecha.core.entities.delivery import Delivery, DeliveryItem
from srecha.core.entities.document import (
    DocumentArtifact,
    DocumentConsistencyReport,
    DocumentKey,
    safe_invoice_filename,
)
from srecha.core.entities.invoice import (
    Invoice,
    InvoiceHeaderUpdate,
    InvoiceItem,
    InvoiceStatus,
)
from srecha.core.entities.reference import (
    Category,
    Client,
    Country,
    Product,
    Subcategory,
    Supplier,
    SupplierProduct,
    SupplierSector,
)
from srecha.core.entities.user import Principal, User
from srecha.core.entities.warehouse import WarehouseGroup, WarehouseGroupItem

__all__ = [
    # Invoices
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "InvoiceHeaderUpdate",
    # Documents
    "DocumentKey",
    "DocumentArtifact",
    "DocumentConsistencyReport",
    "safe_invoice_filename",
    # Reference data
    "Client",
    "Product",
    "Category",
    "Subcategory",
    "Country",
    "SupplierSector",
    "SupplierProduct",
    "Supplier",
    # Warehouse
    "WarehouseGroup",
    "WarehouseGroupItem",
    # Deliveries
    "Delivery",
    "DeliveryItem",
    # Users
    "User",
    "Principal",
]
