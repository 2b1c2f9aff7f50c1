"""Pytest configuration and fixtures."""

import shutil
from collections.abc import AsyncGenerator
from datetime import date
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from srecha.api.main import create_app
from srecha.application.container import ServiceContainer, build_container
from srecha.config.settings import AuthSettings, Settings, StorageSettings
from srecha.core.entities import Client, Invoice, InvoiceItem, Product
from srecha.infrastructure.storage.sqlite.migrations import migrator


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway data directory."""
    return Settings(
        storage=StorageSettings(
            data_dir=tmp_path / "data",
            pool_size=2,
            max_retries=2,
            retry_delay=0,
        ),
        auth=AuthSettings(bcrypt_rounds=4),
    )


@pytest_asyncio.fixture
async def container(settings: Settings) -> AsyncGenerator[ServiceContainer, None]:
    """Migrated database, open pool, every store and service."""
    container = build_container(settings)
    await container.startup()
    yield container
    await container.shutdown()


@pytest_asyncio.fixture
async def async_client(container: ServiceContainer) -> AsyncGenerator[AsyncClient, None]:
    """Async client bound to an app using the test container."""
    app = create_app(container=container)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def client_record(container: ServiceContainer) -> Client:
    return await container.clients.create(Client(name="C1", city="Beograd"))


@pytest_asyncio.fixture
async def product_record(container: ServiceContainer) -> Product:
    return await container.products.create(Product(code="SKU-1", name="Green tea", price=10.0))


@pytest.fixture
def sample_invoice(client_record: Client) -> Invoice:
    """Draft header for the stored client; items are passed separately."""
    return Invoice(
        invoice_number="12/2024",
        client_id=client_record.id,
        issue_date=date(2024, 3, 15),
    )


@pytest.fixture
def sample_items(product_record: Product) -> list[InvoiceItem]:
    return [InvoiceItem(product_id=product_record.id, quantity=3, unit_price=10.0)]


@pytest.fixture
def broken_migrations_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Real migration scripts plus a v999 script that cannot run."""
    directory = tmp_path / "migrations"
    directory.mkdir()
    for script in migrator.MIGRATIONS_DIR.glob("v*.sql"):
        shutil.copy(script, directory / script.name)
    (directory / "v999_broken.sql").write_text("CREATE TABLE broken (;\n", encoding="utf-8")
    monkeypatch.setattr(migrator, "MIGRATIONS_DIR", directory)
    return directory
