"""SQLite implementation of warehouse group storage."""

import sqlite3
from datetime import datetime
from typing import Any

import aiosqlite
from pydantic import ValidationError as PydanticValidationError

from srecha.config import get_logger
from srecha.core.entities.warehouse import WarehouseGroup, WarehouseGroupItem
from srecha.core.exceptions import EntityNotFoundError, ValidationError
from srecha.core.interfaces.warehouse_store import IWarehouseStore
from srecha.infrastructure.storage.sqlite.base import SQLiteStore, translate_integrity_error

logger = get_logger(__name__)

_GROUP_FIELDS = ("name", "description")


class SQLiteWarehouseStore(SQLiteStore, IWarehouseStore):
    """Warehouse groups and the products shelved in them."""

    async def create_group(self, group: WarehouseGroup) -> WarehouseGroup:
        return await self.retry.run("create_warehouse_group", self._create_group, group)

    async def _create_group(self, group: WarehouseGroup) -> WarehouseGroup:
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                "INSERT INTO warehouse_groups (name, description, created_at) VALUES (?, ?, ?)",
                (group.name, group.description, group.created_at.isoformat()),
            )
            created = group.model_copy(update={"id": cursor.lastrowid})
        logger.info("warehouse_group_created", group_id=created.id)
        return created

    async def get_group(self, group_id: int) -> WarehouseGroup:
        return await self.retry.run("get_warehouse_group", self._get_group, group_id)

    async def _get_group(self, group_id: int) -> WarehouseGroup:
        async with self.pool.acquire() as conn:
            return await self._fetch_group(conn, group_id)

    async def list_groups(self) -> list[WarehouseGroup]:
        return await self.retry.run("list_warehouse_groups", self._list_groups)

    async def _list_groups(self) -> list[WarehouseGroup]:
        async with self.pool.snapshot() as conn:
            cursor = await conn.execute("SELECT * FROM warehouse_groups ORDER BY id")
            rows = await cursor.fetchall()
        return [self._row_to_group(r) for r in rows]

    async def update_group(self, group_id: int, patch: dict[str, Any]) -> WarehouseGroup:
        unknown = set(patch) - set(_GROUP_FIELDS)
        if unknown:
            raise ValidationError(sorted(unknown)[0], "unknown warehouse group field")
        return await self.retry.run("update_warehouse_group", self._update_group, group_id, patch)

    async def _update_group(self, group_id: int, patch: dict[str, Any]) -> WarehouseGroup:
        async with self.pool.transaction() as conn:
            current = await self._fetch_group(conn, group_id)
            try:
                updated = WarehouseGroup.model_validate(current.model_dump() | patch)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e) from e
            await conn.execute(
                "UPDATE warehouse_groups SET name = ?, description = ? WHERE id = ?",
                (updated.name, updated.description, group_id),
            )
        logger.info("warehouse_group_updated", group_id=group_id)
        return updated

    async def delete_group(self, group_id: int) -> None:
        await self.retry.run("delete_warehouse_group", self._delete_group, group_id)

    async def _delete_group(self, group_id: int) -> None:
        async with self.pool.transaction() as conn:
            await conn.execute("DELETE FROM warehouse_items WHERE group_id = ?", (group_id,))
            cursor = await conn.execute("DELETE FROM warehouse_groups WHERE id = ?", (group_id,))
            if cursor.rowcount == 0:
                raise EntityNotFoundError("warehouse_group", group_id)
        logger.info("warehouse_group_deleted", group_id=group_id)

    async def add_item(self, item: WarehouseGroupItem) -> WarehouseGroupItem:
        return await self.retry.run("add_warehouse_item", self._add_item, item)

    async def _add_item(self, item: WarehouseGroupItem) -> WarehouseGroupItem:
        try:
            async with self.pool.transaction() as conn:
                await self._fetch_group(conn, item.group_id)

                cursor = await conn.execute(
                    "SELECT code, name FROM products WHERE id = ?", (item.product_id,)
                )
                product = await cursor.fetchone()
                if product is None:
                    raise ValidationError("product_id", "product does not exist", item.product_id)

                snapshot = item.model_copy(
                    update={
                        "product_code": item.product_code or product["code"],
                        "product_name": item.product_name or product["name"],
                    }
                )
                cursor = await conn.execute(
                    """
                    INSERT INTO warehouse_items (
                        group_id, product_id, product_code, product_name,
                        quantity, notes, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        snapshot.group_id,
                        snapshot.product_id,
                        snapshot.product_code,
                        snapshot.product_name,
                        snapshot.quantity,
                        snapshot.notes,
                        snapshot.created_at.isoformat(),
                    ),
                )
                created = snapshot.model_copy(update={"id": cursor.lastrowid})
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error(
                e,
                "warehouse_item",
                {"group_id": item.group_id, "product_id": item.product_id},
            ) from e

        logger.info(
            "warehouse_item_added",
            group_id=created.group_id,
            product_id=created.product_id,
        )
        return created

    async def list_items(self, group_id: int) -> list[WarehouseGroupItem]:
        return await self.retry.run("list_warehouse_items", self._list_items, group_id)

    async def _list_items(self, group_id: int) -> list[WarehouseGroupItem]:
        async with self.pool.snapshot() as conn:
            await self._fetch_group(conn, group_id)
            cursor = await conn.execute(
                "SELECT * FROM warehouse_items WHERE group_id = ? ORDER BY id",
                (group_id,),
            )
            rows = await cursor.fetchall()
        return [self._row_to_item(r) for r in rows]

    async def remove_item(self, group_id: int, product_id: int) -> None:
        await self.retry.run("remove_warehouse_item", self._remove_item, group_id, product_id)

    async def _remove_item(self, group_id: int, product_id: int) -> None:
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM warehouse_items WHERE group_id = ? AND product_id = ?",
                (group_id, product_id),
            )
            if cursor.rowcount == 0:
                raise EntityNotFoundError("warehouse_item", f"{group_id}/{product_id}")
        logger.info("warehouse_item_removed", group_id=group_id, product_id=product_id)

    # ------------------------------------------------------------------ helpers

    async def _fetch_group(self, conn: aiosqlite.Connection, group_id: int) -> WarehouseGroup:
        cursor = await conn.execute("SELECT * FROM warehouse_groups WHERE id = ?", (group_id,))
        row = await cursor.fetchone()
        if row is None:
            raise EntityNotFoundError("warehouse_group", group_id)
        return self._row_to_group(row)

    @staticmethod
    def _row_to_group(row: aiosqlite.Row) -> WarehouseGroup:
        return WarehouseGroup(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> WarehouseGroupItem:
        return WarehouseGroupItem(
            id=row["id"],
            group_id=row["group_id"],
            product_id=row["product_id"],
            product_code=row["product_code"],
            product_name=row["product_name"],
            quantity=row["quantity"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
