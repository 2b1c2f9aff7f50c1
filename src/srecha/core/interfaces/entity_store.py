"""Abstract interfaces for reference data storage."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from srecha.core.entities.reference import Product

EntityT = TypeVar("EntityT", bound=BaseModel)


class IEntityStore(ABC, Generic[EntityT]):
    """Keyed storage for one flat reference entity type."""

    @abstractmethod
    async def create(self, entity: EntityT) -> EntityT:
        """Insert entity and return it with its assigned id.

        Raises DuplicateKeyError when a natural key collides.
        """
        pass

    @abstractmethod
    async def get(self, entity_id: int) -> EntityT:
        """Get entity by id. Raises EntityNotFoundError."""
        pass

    @abstractmethod
    async def exists(self, entity_id: int) -> bool:
        """Check whether an entity with this id exists."""
        pass

    @abstractmethod
    async def list_all(self) -> list[EntityT]:
        """List entities in creation order."""
        pass

    @abstractmethod
    async def list_by(self, field: str, value: Any) -> list[EntityT]:
        """List entities whose ``field`` equals ``value``, in creation order."""
        pass

    @abstractmethod
    async def update(self, entity_id: int, patch: dict[str, Any]) -> EntityT:
        """Apply a partial update and return the stored entity."""
        pass

    @abstractmethod
    async def delete(self, entity_id: int) -> None:
        """Delete entity. Raises ReferentialConflictError when still referenced."""
        pass


class IProductStore(IEntityStore[Product]):
    """Product storage with lookup by natural code."""

    @abstractmethod
    async def get_by_code(self, code: str) -> Product | None:
        """Get product by its unique code."""
        pass
