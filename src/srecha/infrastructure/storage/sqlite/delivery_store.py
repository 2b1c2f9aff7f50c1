"""SQLite implementation of delivery note storage."""

import sqlite3
from datetime import date, datetime

import aiosqlite

from srecha.config import get_logger
from srecha.core.entities.delivery import Delivery, DeliveryItem
from srecha.core.exceptions import EntityNotFoundError
from srecha.core.interfaces.delivery_store import IDeliveryStore
from srecha.infrastructure.storage.sqlite.base import SQLiteStore, translate_integrity_error

logger = get_logger(__name__)


class SQLiteDeliveryStore(SQLiteStore, IDeliveryStore):
    """SQLite implementation of delivery storage."""

    async def create_delivery(self, delivery: Delivery) -> Delivery:
        return await self.retry.run("create_delivery", self._create_delivery, delivery)

    async def _create_delivery(self, delivery: Delivery) -> Delivery:
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO deliveries (
                        delivery_number, client_id, client_name, delivery_date,
                        status, notes, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        delivery.delivery_number,
                        delivery.client_id,
                        delivery.client_name,
                        delivery.delivery_date.isoformat(),
                        delivery.status,
                        delivery.notes,
                        delivery.created_at.isoformat(),
                    ),
                )
                delivery_id = cursor.lastrowid

                items = []
                for position, item in enumerate(delivery.items):
                    item_cursor = await conn.execute(
                        """
                        INSERT INTO delivery_items (
                            delivery_id, position, product_id, product_name, quantity
                        ) VALUES (?, ?, ?, ?, ?)
                        """,
                        (delivery_id, position, item.product_id, item.product_name, item.quantity),
                    )
                    items.append(
                        item.model_copy(
                            update={
                                "id": item_cursor.lastrowid,
                                "delivery_id": delivery_id,
                                "position": position,
                            }
                        )
                    )
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error(
                e, "delivery", {"delivery_number": delivery.delivery_number}
            ) from e

        logger.info("delivery_created", delivery_id=delivery_id, items=len(items))
        return delivery.model_copy(update={"id": delivery_id, "items": items})

    async def get_delivery(self, delivery_id: int) -> Delivery:
        return await self.retry.run("get_delivery", self._get_delivery, delivery_id)

    async def _get_delivery(self, delivery_id: int) -> Delivery:
        async with self.pool.snapshot() as conn:
            cursor = await conn.execute("SELECT * FROM deliveries WHERE id = ?", (delivery_id,))
            row = await cursor.fetchone()
            if row is None:
                raise EntityNotFoundError("delivery", delivery_id)

            items_cursor = await conn.execute(
                "SELECT * FROM delivery_items WHERE delivery_id = ? ORDER BY position, id",
                (delivery_id,),
            )
            items = [self._row_to_item(r) for r in await items_cursor.fetchall()]
        return self._row_to_delivery(row, items)

    async def list_deliveries(self) -> list[Delivery]:
        return await self.retry.run("list_deliveries", self._list_deliveries)

    async def _list_deliveries(self) -> list[Delivery]:
        async with self.pool.snapshot() as conn:
            cursor = await conn.execute(
                "SELECT * FROM deliveries ORDER BY delivery_date DESC, id DESC"
            )
            rows = await cursor.fetchall()
        return [self._row_to_delivery(r, []) for r in rows]

    @staticmethod
    def _row_to_delivery(row: aiosqlite.Row, items: list[DeliveryItem]) -> Delivery:
        return Delivery(
            id=row["id"],
            delivery_number=row["delivery_number"],
            client_id=row["client_id"],
            client_name=row["client_name"],
            delivery_date=date.fromisoformat(row["delivery_date"]),
            status=row["status"],
            notes=row["notes"],
            items=items,
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> DeliveryItem:
        return DeliveryItem(
            id=row["id"],
            delivery_id=row["delivery_id"],
            position=row["position"],
            product_id=row["product_id"],
            product_name=row["product_name"],
            quantity=row["quantity"],
        )
