"""
Service container.

Builds the connection pool, every store and every service once, from one
Settings object, and hands them out explicitly. Nothing here is global: the
API keeps its container on ``app.state`` and tests build their own.
"""

from dataclasses import dataclass

from srecha.config import Settings, get_logger
from srecha.core.exceptions import StorageUnavailableError
from srecha.core.services import AuthService, DeliveryService, InvoiceLifecycleService
from srecha.infrastructure.storage.files import FileSystemDocumentStore
from srecha.infrastructure.storage.retry import StorageRetry
from srecha.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteCategoryStore,
    SQLiteClientStore,
    SQLiteCountryStore,
    SQLiteDeliveryStore,
    SQLiteEntityStore,
    SQLiteInvoiceStore,
    SQLiteProductStore,
    SQLiteSubcategoryStore,
    SQLiteSupplierProductStore,
    SQLiteSupplierSectorStore,
    SQLiteSupplierStore,
    SQLiteUserStore,
    SQLiteWarehouseStore,
)
from srecha.infrastructure.storage.sqlite.migrations import initialize_database

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    """Everything a request handler may need."""

    settings: Settings
    pool: ConnectionPool

    clients: SQLiteClientStore
    products: SQLiteProductStore
    categories: SQLiteCategoryStore
    subcategories: SQLiteSubcategoryStore
    countries: SQLiteCountryStore
    supplier_sectors: SQLiteSupplierSectorStore
    supplier_products: SQLiteSupplierProductStore
    suppliers: SQLiteSupplierStore
    invoices: SQLiteInvoiceStore
    warehouse: SQLiteWarehouseStore
    deliveries: SQLiteDeliveryStore
    users: SQLiteUserStore
    documents: FileSystemDocumentStore

    invoice_service: InvoiceLifecycleService
    delivery_service: DeliveryService
    auth_service: AuthService

    def registry(self) -> dict[str, SQLiteEntityStore]:
        """Flat reference stores by URL segment."""
        return {
            "clients": self.clients,
            "products": self.products,
            "categories": self.categories,
            "subcategories": self.subcategories,
            "countries": self.countries,
            "supplier-sectors": self.supplier_sectors,
            "supplier-products": self.supplier_products,
            "suppliers": self.suppliers,
        }

    async def startup(self) -> None:
        """Migrate the schema, open the pool and create the bootstrap admin."""
        results = await initialize_database(self.settings.storage.db_path)
        failed = next((r for r in results if not r.success), None)
        if failed is not None:
            raise StorageUnavailableError(
                "migrate", f"v{failed.version} {failed.name}: {failed.error}"
            )
        await self.pool.initialize()
        await self.auth_service.ensure_bootstrap_admin(
            self.settings.auth.admin_username,
            self.settings.auth.admin_password,
        )
        logger.info("container_started", db_path=str(self.settings.storage.db_path))

    async def shutdown(self) -> None:
        await self.pool.close()
        logger.info("container_stopped")


def build_container(settings: Settings) -> ServiceContainer:
    """Wire stores and services for one data directory."""
    storage = settings.storage
    pool = ConnectionPool.from_settings(storage)
    retry = StorageRetry(max_attempts=storage.max_retries, delay=storage.retry_delay)

    clients = SQLiteClientStore(pool, retry)
    products = SQLiteProductStore(pool, retry)
    invoices = SQLiteInvoiceStore(pool, retry)
    deliveries = SQLiteDeliveryStore(pool, retry)
    users = SQLiteUserStore(pool, retry)
    documents = FileSystemDocumentStore(
        storage.documents_dir,
        file_extension=settings.documents.file_extension,
        retry=retry,
    )

    return ServiceContainer(
        settings=settings,
        pool=pool,
        clients=clients,
        products=products,
        categories=SQLiteCategoryStore(pool, retry),
        subcategories=SQLiteSubcategoryStore(pool, retry),
        countries=SQLiteCountryStore(pool, retry),
        supplier_sectors=SQLiteSupplierSectorStore(pool, retry),
        supplier_products=SQLiteSupplierProductStore(pool, retry),
        suppliers=SQLiteSupplierStore(pool, retry),
        invoices=invoices,
        warehouse=SQLiteWarehouseStore(pool, retry),
        deliveries=deliveries,
        users=users,
        documents=documents,
        invoice_service=InvoiceLifecycleService(
            invoice_store=invoices,
            client_store=clients,
            product_store=products,
            document_store=documents,
            require_invoice_for_documents=settings.documents.require_invoice,
        ),
        delivery_service=DeliveryService(deliveries, clients, products),
        auth_service=AuthService(users, bcrypt_rounds=settings.auth.bcrypt_rounds),
    )
