"""
Generic SQLite store for flat reference entities.

Each subclass names its table, model and the rows that may still point at
one of its records. Deleting a referenced record is refused instead of being
left to the foreign key to fail.
"""

import sqlite3
from typing import Any, ClassVar

import aiosqlite
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from srecha.config import get_logger
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
from srecha.core.exceptions import (
    EntityNotFoundError,
    ReferentialConflictError,
    ValidationError,
)
from srecha.core.interfaces.entity_store import EntityT, IEntityStore, IProductStore
from srecha.infrastructure.storage.sqlite.base import (
    SQLiteStore,
    to_db,
    translate_integrity_error,
)

logger = get_logger(__name__)


class SQLiteEntityStore(SQLiteStore, IEntityStore[EntityT]):
    """CRUD over one table whose columns mirror the model fields."""

    table: ClassVar[str]
    model: ClassVar[type[BaseModel]]
    entity_name: ClassVar[str]
    # (table, column) pairs that reference this table's id
    dependents: ClassVar[tuple[tuple[str, str], ...]] = ()

    @property
    def columns(self) -> list[str]:
        return [name for name in self.model.model_fields if name != "id"]

    # ------------------------------------------------------------------ create

    async def create(self, entity: EntityT) -> EntityT:
        return await self.retry.run(f"create_{self.table}", self._create, entity)

    async def _create(self, entity: EntityT) -> EntityT:
        values = {c: getattr(entity, c) for c in self.columns}
        placeholders = ", ".join("?" for _ in values)
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    f"INSERT INTO {self.table} ({', '.join(values)}) VALUES ({placeholders})",
                    [to_db(v) for v in values.values()],
                )
                created = entity.model_copy(update={"id": cursor.lastrowid})
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error(e, self.entity_name, values) from e

        logger.info("entity_created", entity=self.entity_name, id=created.id)
        return created

    # ------------------------------------------------------------------ read

    async def get(self, entity_id: int) -> EntityT:
        return await self.retry.run(f"get_{self.table}", self._get, entity_id)

    async def _get(self, entity_id: int) -> EntityT:
        async with self.pool.acquire() as conn:
            row = await self._fetch(conn, entity_id)
        if row is None:
            raise EntityNotFoundError(self.entity_name, entity_id)
        return self._row_to_entity(row)

    async def exists(self, entity_id: int) -> bool:
        return await self.retry.run(f"exists_{self.table}", self._exists, entity_id)

    async def _exists(self, entity_id: int) -> bool:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                f"SELECT 1 FROM {self.table} WHERE id = ?", (entity_id,)
            )
            return await cursor.fetchone() is not None

    async def list_all(self) -> list[EntityT]:
        return await self.retry.run(f"list_{self.table}", self._list, None, None)

    async def list_by(self, field: str, value: Any) -> list[EntityT]:
        if field not in self.columns:
            raise ValidationError(field, f"unknown {self.entity_name} field")
        return await self.retry.run(f"list_{self.table}", self._list, field, value)

    async def _list(self, field: str | None, value: Any) -> list[EntityT]:
        sql = f"SELECT * FROM {self.table}"
        params: tuple = ()
        if field is not None:
            sql += f" WHERE {field} = ?"
            params = (to_db(value),)
        sql += " ORDER BY id"

        async with self.pool.snapshot() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
        return [self._row_to_entity(r) for r in rows]

    # ------------------------------------------------------------------ update

    async def update(self, entity_id: int, patch: dict[str, Any]) -> EntityT:
        unknown = set(patch) - set(self.columns)
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationError(field, f"unknown {self.entity_name} field")
        return await self.retry.run(f"update_{self.table}", self._update, entity_id, patch)

    async def _update(self, entity_id: int, patch: dict[str, Any]) -> EntityT:
        try:
            async with self.pool.transaction() as conn:
                row = await self._fetch(conn, entity_id)
                if row is None:
                    raise EntityNotFoundError(self.entity_name, entity_id)

                current = self._row_to_entity(row)
                merged = current.model_dump() | patch
                if "updated_at" in self.model.model_fields and "updated_at" not in patch:
                    merged.pop("updated_at")
                try:
                    updated = self.model.model_validate(merged)
                except PydanticValidationError as e:
                    raise ValidationError.from_pydantic(e) from e

                values = {c: getattr(updated, c) for c in self.columns}
                assignments = ", ".join(f"{c} = ?" for c in values)
                await conn.execute(
                    f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                    [*(to_db(v) for v in values.values()), entity_id],
                )
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error(e, self.entity_name, patch) from e

        logger.info("entity_updated", entity=self.entity_name, id=entity_id, fields=sorted(patch))
        return updated

    # ------------------------------------------------------------------ delete

    async def delete(self, entity_id: int) -> None:
        await self.retry.run(f"delete_{self.table}", self._delete, entity_id)

    async def _delete(self, entity_id: int) -> None:
        async with self.pool.transaction() as conn:
            if await self._fetch(conn, entity_id) is None:
                raise EntityNotFoundError(self.entity_name, entity_id)

            for dep_table, dep_column in self.dependents:
                cursor = await conn.execute(
                    f"SELECT COUNT(*) FROM {dep_table} WHERE {dep_column} = ?",
                    (entity_id,),
                )
                count = (await cursor.fetchone())[0]
                if count:
                    raise ReferentialConflictError(
                        self.entity_name, entity_id, dep_table, count
                    )

            await conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (entity_id,))

        logger.info("entity_deleted", entity=self.entity_name, id=entity_id)

    # ------------------------------------------------------------------ helpers

    async def _fetch(self, conn: aiosqlite.Connection, entity_id: int) -> aiosqlite.Row | None:
        cursor = await conn.execute(f"SELECT * FROM {self.table} WHERE id = ?", (entity_id,))
        return await cursor.fetchone()

    def _row_to_entity(self, row: aiosqlite.Row) -> EntityT:
        return self.model.model_validate(dict(row))


class SQLiteClientStore(SQLiteEntityStore[Client]):
    table = "clients"
    model = Client
    entity_name = "client"
    dependents = (("invoices", "client_id"), ("deliveries", "client_id"))


class SQLiteProductStore(SQLiteEntityStore[Product], IProductStore):
    table = "products"
    model = Product
    entity_name = "product"
    dependents = (
        ("invoice_items", "product_id"),
        ("warehouse_items", "product_id"),
        ("delivery_items", "product_id"),
    )

    async def get_by_code(self, code: str) -> Product | None:
        matches = await self.list_by("code", code)
        return matches[0] if matches else None


class SQLiteCategoryStore(SQLiteEntityStore[Category]):
    table = "categories"
    model = Category
    entity_name = "category"
    dependents = (("subcategories", "category_id"),)


class SQLiteSubcategoryStore(SQLiteEntityStore[Subcategory]):
    table = "subcategories"
    model = Subcategory
    entity_name = "subcategory"


class SQLiteCountryStore(SQLiteEntityStore[Country]):
    table = "countries"
    model = Country
    entity_name = "country"


class SQLiteSupplierSectorStore(SQLiteEntityStore[SupplierSector]):
    table = "supplier_sectors"
    model = SupplierSector
    entity_name = "supplier_sector"
    dependents = (("supplier_products", "sector_id"), ("suppliers", "sector_id"))


class SQLiteSupplierProductStore(SQLiteEntityStore[SupplierProduct]):
    table = "supplier_products"
    model = SupplierProduct
    entity_name = "supplier_product"
    dependents = (("suppliers", "product_id"),)


class SQLiteSupplierStore(SQLiteEntityStore[Supplier]):
    table = "suppliers"
    model = Supplier
    entity_name = "supplier"
