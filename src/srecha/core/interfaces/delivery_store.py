"""Abstract interface for delivery note storage."""

from abc import ABC, abstractmethod

from srecha.core.entities.delivery import Delivery


class IDeliveryStore(ABC):
    """Interface for delivery note persistence."""

    @abstractmethod
    async def create_delivery(self, delivery: Delivery) -> Delivery:
        """Persist header and items atomically."""
        pass

    @abstractmethod
    async def get_delivery(self, delivery_id: int) -> Delivery:
        pass

    @abstractmethod
    async def list_deliveries(self) -> list[Delivery]:
        """List delivery headers, newest first."""
        pass
