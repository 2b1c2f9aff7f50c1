"""Abstract interface for rendered document storage."""

from abc import ABC, abstractmethod
from pathlib import Path

from srecha.core.entities.document import DocumentKey


class IDocumentStore(ABC):
    """Interface for content storage keyed by DocumentKey."""

    @abstractmethod
    async def save(self, key: DocumentKey, content: str) -> Path:
        """Write content, replacing any previous artifact. Returns storage path."""
        pass

    @abstractmethod
    async def load(self, key: DocumentKey) -> str:
        """Read content. Raises DocumentNotFoundError."""
        pass

    @abstractmethod
    async def delete(self, key: DocumentKey) -> None:
        """Delete artifact. Raises DocumentNotFoundError."""
        pass

    @abstractmethod
    async def exists(self, key: DocumentKey) -> bool:
        """Check whether an artifact is stored under key."""
        pass

    @abstractmethod
    async def delete_for_invoice(
        self, invoice_number: str, year: int, month: int
    ) -> list[DocumentKey]:
        """Delete artifacts of every document type for one invoice and period."""
        pass

    @abstractmethod
    async def move(self, source: DocumentKey, target: DocumentKey) -> Path:
        """Move an artifact to a new key."""
        pass

    @abstractmethod
    async def list_keys(self) -> list[DocumentKey]:
        """List keys of all stored artifacts."""
        pass
