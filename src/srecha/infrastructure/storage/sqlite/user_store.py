"""SQLite implementation of user storage."""

import sqlite3
from datetime import datetime

import aiosqlite

from srecha.config import get_logger
from srecha.core.entities.user import User
from srecha.core.interfaces.user_store import IUserStore
from srecha.infrastructure.storage.sqlite.base import SQLiteStore, translate_integrity_error

logger = get_logger(__name__)


class SQLiteUserStore(SQLiteStore, IUserStore):
    """SQLite implementation of user storage."""

    async def get_by_username(self, username: str) -> User | None:
        return await self.retry.run("get_user", self._get_by_username, username)

    async def _get_by_username(self, username: str) -> User | None:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM users WHERE username = ?", (username,))
            row = await cursor.fetchone()
        return self._row_to_user(row) if row else None

    async def create_user(self, user: User) -> User:
        return await self.retry.run("create_user", self._create_user, user)

    async def _create_user(self, user: User) -> User:
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    "INSERT INTO users (username, password_hash, role, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (user.username, user.password_hash, user.role, user.created_at.isoformat()),
                )
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error(e, "user", {"username": user.username}) from e

        logger.info("user_created", user_id=cursor.lastrowid, username=user.username)
        return user.model_copy(update={"id": cursor.lastrowid})

    async def count_users(self) -> int:
        return await self.retry.run("count_users", self._count_users)

    async def _count_users(self) -> int:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM users")
            row = await cursor.fetchone()
        return row[0]

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        return User(
            id=row["id"],
            username=row["username"],
            password_hash=row["password_hash"],
            role=row["role"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
