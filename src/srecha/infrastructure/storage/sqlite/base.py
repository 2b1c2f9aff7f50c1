"""Shared plumbing for SQLite stores: pool/retry wiring and error translation."""

import sqlite3
from datetime import date, datetime
from enum import Enum
from typing import Any

from srecha.core.exceptions import DuplicateKeyError, SrechaError, ValidationError
from srecha.infrastructure.storage.retry import StorageRetry
from srecha.infrastructure.storage.sqlite.connection import ConnectionPool


def to_db(value: Any) -> Any:
    """Convert a model value to its SQLite column representation."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def translate_integrity_error(
    error: sqlite3.IntegrityError,
    entity: str,
    values: dict[str, Any],
) -> SrechaError:
    """Map a constraint violation onto the domain error it stands for."""
    message = str(error)

    if message.startswith("UNIQUE constraint failed"):
        # "UNIQUE constraint failed: products.code[, table.col]"
        columns = [c.strip().split(".")[-1] for c in message.split(":", 1)[-1].split(",")]
        key = ",".join(columns)
        value = ",".join(str(values.get(c)) for c in columns)
        return DuplicateKeyError(entity, key, value)

    if message.startswith("FOREIGN KEY constraint failed"):
        return ValidationError(entity, "references a record that does not exist")

    # NOT NULL / CHECK
    return ValidationError(entity, message)


class SQLiteStore:
    """Base class for stores backed by the connection pool."""

    def __init__(self, pool: ConnectionPool, retry: StorageRetry | None = None):
        self.pool = pool
        self.retry = retry or StorageRetry()
