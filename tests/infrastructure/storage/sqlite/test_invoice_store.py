"""Tests for SQLite invoice store."""

from datetime import date

import pytest
import pytest_asyncio

from srecha.core.entities import Client, Invoice, InvoiceItem, InvoiceStatus, Product
from srecha.core.exceptions import DuplicateKeyError, InvoiceNotFoundError, ValidationError
from srecha.infrastructure.storage.sqlite import (
    SQLiteClientStore,
    SQLiteInvoiceStore,
    SQLiteProductStore,
)


@pytest.fixture
def store(pool, retry) -> SQLiteInvoiceStore:
    return SQLiteInvoiceStore(pool, retry)


@pytest_asyncio.fixture
async def refs(pool, retry) -> tuple[Client, Product, Product]:
    client = await SQLiteClientStore(pool, retry).create(Client(name="C1"))
    products = SQLiteProductStore(pool, retry)
    tea = await products.create(Product(code="SKU-1", name="Tea"))
    cup = await products.create(Product(code="SKU-2", name="Cup"))
    return client, tea, cup


def _invoice(number: str, client_id: int, product_ids: list[int], **kwargs) -> Invoice:
    return Invoice(
        invoice_number=number,
        client_id=client_id,
        items=[
            InvoiceItem(product_id=pid, product_name=f"p{pid}", quantity=i + 1, unit_price=10.0)
            for i, pid in enumerate(product_ids)
        ],
        **kwargs,
    )


class TestCreateAndGet:
    async def test_round_trip(self, store, refs):
        client, tea, cup = refs
        created = await store.create_invoice(
            _invoice("12/2024", client.id, [cup.id, tea.id], issue_date=date(2024, 3, 1))
        )

        assert created.id is not None
        fetched = await store.get_invoice(created.id)
        assert fetched.invoice_number == "12/2024"
        assert fetched.issue_date == date(2024, 3, 1)
        assert fetched.status == InvoiceStatus.DRAFT
        assert fetched.total == 30.0
        # Stored order, not product order
        assert [i.product_id for i in fetched.items] == [cup.id, tea.id]
        assert [i.position for i in fetched.items] == [0, 1]
        assert fetched.items[1].line_total == 20.0

    async def test_get_missing(self, store):
        with pytest.raises(InvoiceNotFoundError):
            await store.get_invoice(404)

    async def test_duplicate_number(self, store, refs):
        client, tea, _ = refs
        await store.create_invoice(_invoice("7", client.id, [tea.id]))

        with pytest.raises(DuplicateKeyError):
            await store.create_invoice(_invoice("7", client.id, [tea.id]))
        assert await store.count_invoices() == 1

    async def test_unknown_product_leaves_nothing_behind(self, store, refs):
        client, tea, _ = refs
        with pytest.raises(ValidationError):
            await store.create_invoice(_invoice("8", client.id, [tea.id, 9999]))

        assert await store.count_invoices() == 0
        assert await store.get_by_number("8") is None

    async def test_get_by_number(self, store, refs):
        client, tea, _ = refs
        created = await store.create_invoice(_invoice("INV-1", client.id, [tea.id]))

        found = await store.get_by_number("INV-1")
        assert found.id == created.id
        assert found.total == 10.0

    async def test_list_by_filename_stem(self, store, refs):
        client, tea, _ = refs
        slash = await store.create_invoice(_invoice("12/2024", client.id, [tea.id]))
        backslash = await store.create_invoice(_invoice("12\\2024 ", client.id, [tea.id]))
        await store.create_invoice(_invoice("12-2025", client.id, [tea.id]))

        found = await store.list_by_filename_stem("12-2024")

        assert sorted(i.id for i in found) == sorted([slash.id, backslash.id])
        assert await store.list_by_filename_stem("99-1") == []


class TestUpdates:
    async def test_update_header(self, store, refs):
        client, tea, _ = refs
        created = await store.create_invoice(_invoice("1", client.id, [tea.id]))

        updated = await store.update_header(
            created.model_copy(update={"notes": "deliver Monday", "invoice_number": "1A"})
        )

        assert updated.notes == "deliver Monday"
        assert updated.invoice_number == "1A"
        assert len(updated.items) == 1

    async def test_update_header_missing(self, store, refs):
        client, _, _ = refs
        with pytest.raises(InvoiceNotFoundError):
            await store.update_header(Invoice(id=77, invoice_number="x", client_id=client.id))

    async def test_replace_items(self, store, refs):
        client, tea, cup = refs
        created = await store.create_invoice(_invoice("1", client.id, [tea.id]))

        new_items = [InvoiceItem(product_id=cup.id, quantity=4, unit_price=2.5)]
        updated = await store.replace_items(created.id, new_items, total=10.0)

        assert [i.product_id for i in updated.items] == [cup.id]
        assert updated.total == 10.0
        assert (await store.get_invoice(created.id)).total == 10.0

    async def test_replace_items_failure_keeps_old_items(self, store, refs):
        client, tea, _ = refs
        created = await store.create_invoice(_invoice("1", client.id, [tea.id]))

        with pytest.raises(ValidationError):
            await store.replace_items(
                created.id,
                [InvoiceItem(product_id=9999, quantity=1, unit_price=1)],
                total=1.0,
            )

        fetched = await store.get_invoice(created.id)
        assert [i.product_id for i in fetched.items] == [tea.id]
        assert fetched.total == 10.0

    async def test_set_status_compare_and_set(self, store, refs):
        client, tea, _ = refs
        created = await store.create_invoice(_invoice("1", client.id, [tea.id]))

        assert await store.set_status(created.id, InvoiceStatus.ISSUED, InvoiceStatus.DRAFT)
        # Stale expectation loses
        assert not await store.set_status(
            created.id, InvoiceStatus.CANCELLED, InvoiceStatus.DRAFT
        )
        assert (await store.get_invoice(created.id)).status == InvoiceStatus.ISSUED


class TestDeleteAndList:
    async def test_delete_removes_items(self, pool, store, refs):
        client, tea, _ = refs
        created = await store.create_invoice(_invoice("1", client.id, [tea.id]))

        await store.delete_invoice(created.id)

        with pytest.raises(InvoiceNotFoundError):
            await store.get_invoice(created.id)
        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM invoice_items")
            assert (await cursor.fetchone())[0] == 0

    async def test_delete_missing(self, store):
        with pytest.raises(InvoiceNotFoundError):
            await store.delete_invoice(5)

    async def test_list_newest_issue_date_first(self, store, refs):
        client, tea, _ = refs
        await store.create_invoice(_invoice("old", client.id, [tea.id], issue_date=date(2024, 1, 5)))
        await store.create_invoice(_invoice("new", client.id, [tea.id], issue_date=date(2024, 6, 1)))
        await store.create_invoice(_invoice("mid", client.id, [tea.id], issue_date=date(2024, 3, 9)))

        listed = await store.list_invoices()
        assert [i.invoice_number for i in listed] == ["new", "mid", "old"]
        # Headers only
        assert all(i.items == [] for i in listed)
        assert listed[0].total == 10.0

    async def test_list_by_client(self, pool, retry, store, refs):
        client, tea, _ = refs
        other = await SQLiteClientStore(pool, retry).create(Client(name="C2"))
        await store.create_invoice(_invoice("a", client.id, [tea.id]))
        await store.create_invoice(_invoice("b", other.id, [tea.id]))

        history = await store.list_by_client(other.id)
        assert [i.invoice_number for i in history] == ["b"]
        assert await store.list_by_client(12345) == []
