"""SQLite implementation of invoice storage."""

import sqlite3
from datetime import date, datetime

import aiosqlite

from srecha.config import get_logger
from srecha.core.clock import utc_now
from srecha.core.entities.invoice import Invoice, InvoiceItem, InvoiceStatus
from srecha.core.exceptions import InvoiceNotFoundError
from srecha.core.interfaces.invoice_store import IInvoiceStore
from srecha.infrastructure.storage.sqlite.base import SQLiteStore, translate_integrity_error

logger = get_logger(__name__)

_HEADER_ORDER = "ORDER BY issue_date DESC, id DESC"

# SQL twin of safe_invoice_filename
_FILENAME_STEM = (
    "replace(replace(trim(invoice_number, ' ' || char(9, 10, 11, 12, 13)), '/', '-'), '\\', '-')"
)


class SQLiteInvoiceStore(SQLiteStore, IInvoiceStore):
    """SQLite implementation of invoice storage."""

    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """Create an invoice with all its items."""
        return await self.retry.run("create_invoice", self._create_invoice, invoice)

    async def _create_invoice(self, invoice: Invoice) -> Invoice:
        now = utc_now()
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO invoices (
                        invoice_number, document_type, client_id, client_name,
                        issue_date, due_date, status, total, notes,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        invoice.invoice_number,
                        invoice.document_type,
                        invoice.client_id,
                        invoice.client_name,
                        invoice.issue_date.isoformat(),
                        invoice.due_date.isoformat() if invoice.due_date else None,
                        invoice.status.value,
                        invoice.total,
                        invoice.notes,
                        now.isoformat(),
                        now.isoformat(),
                    ),
                )
                invoice_id = cursor.lastrowid
                items = await self._insert_items(conn, invoice_id, invoice.items)
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error(
                e, "invoice", {"invoice_number": invoice.invoice_number}
            ) from e

        created = invoice.model_copy(
            update={"id": invoice_id, "items": items, "created_at": now, "updated_at": now}
        )
        logger.info(
            "invoice_stored",
            invoice_id=created.id,
            invoice_number=created.invoice_number,
            items=len(items),
            total=created.total,
        )
        return created

    async def get_invoice(self, invoice_id: int) -> Invoice:
        """Get invoice by ID with items in stored order."""
        return await self.retry.run("get_invoice", self._get_invoice, invoice_id)

    async def _get_invoice(self, invoice_id: int) -> Invoice:
        async with self.pool.snapshot() as conn:
            return await self._load(conn, invoice_id)

    async def get_by_number(self, invoice_number: str) -> Invoice | None:
        """Get invoice header by number."""
        return await self.retry.run("get_invoice_by_number", self._get_by_number, invoice_number)

    async def _get_by_number(self, invoice_number: str) -> Invoice | None:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM invoices WHERE invoice_number = ?",
                (invoice_number,),
            )
            row = await cursor.fetchone()
        return self._row_to_invoice(row, []) if row else None

    async def list_by_filename_stem(self, stem: str) -> list[Invoice]:
        """Invoice headers whose sanitized number equals ``stem``."""
        return await self.retry.run("list_invoices_by_stem", self._list_by_filename_stem, stem)

    async def _list_by_filename_stem(self, stem: str) -> list[Invoice]:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM invoices WHERE {_FILENAME_STEM} = ?",
                (stem,),
            )
            rows = await cursor.fetchall()
        return [self._row_to_invoice(row, []) for row in rows]

    async def update_header(self, invoice: Invoice) -> Invoice:
        """Update header fields of an existing invoice."""
        return await self.retry.run("update_invoice", self._update_header, invoice)

    async def _update_header(self, invoice: Invoice) -> Invoice:
        now = utc_now()
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE invoices SET
                        invoice_number = ?, document_type = ?, client_id = ?,
                        client_name = ?, issue_date = ?, due_date = ?, notes = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        invoice.invoice_number,
                        invoice.document_type,
                        invoice.client_id,
                        invoice.client_name,
                        invoice.issue_date.isoformat(),
                        invoice.due_date.isoformat() if invoice.due_date else None,
                        invoice.notes,
                        now.isoformat(),
                        invoice.id,
                    ),
                )
                if cursor.rowcount == 0:
                    raise InvoiceNotFoundError(invoice.id)
                updated = await self._load(conn, invoice.id)
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error(
                e, "invoice", {"invoice_number": invoice.invoice_number}
            ) from e

        logger.info("invoice_header_updated", invoice_id=invoice.id)
        return updated

    async def replace_items(
        self, invoice_id: int, items: list[InvoiceItem], total: float
    ) -> Invoice:
        """Replace all items and the stored total atomically."""
        return await self.retry.run(
            "replace_invoice_items", self._replace_items, invoice_id, items, total
        )

    async def _replace_items(
        self, invoice_id: int, items: list[InvoiceItem], total: float
    ) -> Invoice:
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    "UPDATE invoices SET total = ?, updated_at = ? WHERE id = ?",
                    (total, utc_now().isoformat(), invoice_id),
                )
                if cursor.rowcount == 0:
                    raise InvoiceNotFoundError(invoice_id)
                await conn.execute(
                    "DELETE FROM invoice_items WHERE invoice_id = ?", (invoice_id,)
                )
                await self._insert_items(conn, invoice_id, items)
                updated = await self._load(conn, invoice_id)
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error(e, "invoice_item", {}) from e

        logger.info("invoice_items_replaced", invoice_id=invoice_id, items=len(items), total=total)
        return updated

    async def set_status(
        self, invoice_id: int, status: InvoiceStatus, expected: InvoiceStatus
    ) -> bool:
        """Compare-and-set the status. False if it changed underneath."""
        return await self.retry.run(
            "set_invoice_status", self._set_status, invoice_id, status, expected
        )

    async def _set_status(
        self, invoice_id: int, status: InvoiceStatus, expected: InvoiceStatus
    ) -> bool:
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                "UPDATE invoices SET status = ?, updated_at = ? WHERE id = ? AND status = ?",
                (status.value, utc_now().isoformat(), invoice_id, expected.value),
            )
            return cursor.rowcount == 1

    async def delete_invoice(self, invoice_id: int) -> None:
        """Delete invoice and its items."""
        await self.retry.run("delete_invoice", self._delete_invoice, invoice_id)

    async def _delete_invoice(self, invoice_id: int) -> None:
        async with self.pool.transaction() as conn:
            await conn.execute("DELETE FROM invoice_items WHERE invoice_id = ?", (invoice_id,))
            cursor = await conn.execute("DELETE FROM invoices WHERE id = ?", (invoice_id,))
            if cursor.rowcount == 0:
                raise InvoiceNotFoundError(invoice_id)
        logger.info("invoice_row_deleted", invoice_id=invoice_id)

    async def list_invoices(self) -> list[Invoice]:
        """List all invoice headers, newest issue date first."""
        return await self.retry.run("list_invoices", self._list_headers, None)

    async def list_by_client(self, client_id: int) -> list[Invoice]:
        """List invoice headers of one client, newest issue date first."""
        return await self.retry.run("list_client_invoices", self._list_headers, client_id)

    async def _list_headers(self, client_id: int | None) -> list[Invoice]:
        if client_id is None:
            sql, params = f"SELECT * FROM invoices {_HEADER_ORDER}", ()
        else:
            sql = f"SELECT * FROM invoices WHERE client_id = ? {_HEADER_ORDER}"
            params = (client_id,)
        async with self.pool.snapshot() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
        return [self._row_to_invoice(r, []) for r in rows]

    async def count_invoices(self) -> int:
        return await self.retry.run("count_invoices", self._count)

    async def _count(self) -> int:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM invoices")
            row = await cursor.fetchone()
        return row[0]

    # ------------------------------------------------------------------ helpers

    async def _insert_items(
        self,
        conn: aiosqlite.Connection,
        invoice_id: int,
        items: list[InvoiceItem],
    ) -> list[InvoiceItem]:
        stored = []
        for position, item in enumerate(items):
            cursor = await conn.execute(
                """
                INSERT INTO invoice_items (
                    invoice_id, position, product_id, product_name,
                    quantity, unit_price, line_total
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    invoice_id,
                    position,
                    item.product_id,
                    item.product_name,
                    item.quantity,
                    item.unit_price,
                    item.line_total,
                ),
            )
            stored.append(
                item.model_copy(
                    update={"id": cursor.lastrowid, "invoice_id": invoice_id, "position": position}
                )
            )
        return stored

    async def _load(self, conn: aiosqlite.Connection, invoice_id: int) -> Invoice:
        cursor = await conn.execute("SELECT * FROM invoices WHERE id = ?", (invoice_id,))
        row = await cursor.fetchone()
        if row is None:
            raise InvoiceNotFoundError(invoice_id)

        items_cursor = await conn.execute(
            "SELECT * FROM invoice_items WHERE invoice_id = ? ORDER BY position, id",
            (invoice_id,),
        )
        items = [self._row_to_item(r) for r in await items_cursor.fetchall()]
        return self._row_to_invoice(row, items)

    @staticmethod
    def _row_to_invoice(row: aiosqlite.Row, items: list[InvoiceItem]) -> Invoice:
        """Convert database row to Invoice."""
        return Invoice(
            id=row["id"],
            invoice_number=row["invoice_number"],
            document_type=row["document_type"],
            client_id=row["client_id"],
            client_name=row["client_name"],
            issue_date=date.fromisoformat(row["issue_date"]),
            due_date=date.fromisoformat(row["due_date"]) if row["due_date"] else None,
            status=InvoiceStatus(row["status"]),
            total=row["total"],
            notes=row["notes"],
            items=items,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> InvoiceItem:
        """Convert database row to InvoiceItem."""
        return InvoiceItem(
            id=row["id"],
            invoice_id=row["invoice_id"],
            position=row["position"],
            product_id=row["product_id"],
            product_name=row["product_name"],
            quantity=row["quantity"],
            unit_price=row["unit_price"],
            line_total=row["line_total"],
        )
