"""Abstract interface for warehouse group storage."""

from abc import ABC, abstractmethod
from typing import Any

from srecha.core.entities.warehouse import WarehouseGroup, WarehouseGroupItem


class IWarehouseStore(ABC):
    """Interface for warehouse groups and their product memberships."""

    @abstractmethod
    async def create_group(self, group: WarehouseGroup) -> WarehouseGroup:
        pass

    @abstractmethod
    async def get_group(self, group_id: int) -> WarehouseGroup:
        pass

    @abstractmethod
    async def list_groups(self) -> list[WarehouseGroup]:
        pass

    @abstractmethod
    async def update_group(self, group_id: int, patch: dict[str, Any]) -> WarehouseGroup:
        pass

    @abstractmethod
    async def delete_group(self, group_id: int) -> None:
        """Delete group together with its memberships."""
        pass

    @abstractmethod
    async def add_item(self, item: WarehouseGroupItem) -> WarehouseGroupItem:
        """Add a product to a group. Raises DuplicateKeyError if already a member."""
        pass

    @abstractmethod
    async def list_items(self, group_id: int) -> list[WarehouseGroupItem]:
        pass

    @abstractmethod
    async def remove_item(self, group_id: int, product_id: int) -> None:
        """Remove one membership. Raises EntityNotFoundError if absent."""
        pass
