"""Storage adapters: SQLite for records, filesystem for rendered documents."""

from srecha.infrastructure.storage.retry import StorageRetry, is_transient

__all__ = ["StorageRetry", "is_transient"]
