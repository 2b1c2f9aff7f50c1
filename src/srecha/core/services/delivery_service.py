"""Delivery note service: validates references and snapshots names."""

from srecha.config import get_logger
from srecha.core.entities.delivery import Delivery
from srecha.core.entities.reference import Client
from srecha.core.exceptions import EntityNotFoundError, ValidationError
from srecha.core.interfaces import IDeliveryStore, IEntityStore, IProductStore

logger = get_logger(__name__)


class DeliveryService:
    """Create and read delivery notes."""

    def __init__(
        self,
        delivery_store: IDeliveryStore,
        client_store: IEntityStore[Client],
        product_store: IProductStore,
    ):
        self._deliveries = delivery_store
        self._clients = client_store
        self._products = product_store

    async def create_delivery(self, delivery: Delivery) -> Delivery:
        """
        Store a delivery note.

        Raises:
            ValidationError: No items, unknown client or unknown product
            DuplicateKeyError: Delivery number already used
        """
        if not delivery.items:
            raise ValidationError("items", "delivery must have at least one item")

        update: dict = {}
        if delivery.client_id is not None:
            try:
                client = await self._clients.get(delivery.client_id)
            except EntityNotFoundError:
                raise ValidationError(
                    "client_id", "client does not exist", delivery.client_id
                ) from None
            update["client_name"] = delivery.client_name or client.name

        items = []
        for position, item in enumerate(delivery.items):
            try:
                product = await self._products.get(item.product_id)
            except EntityNotFoundError:
                raise ValidationError(
                    f"items[{position}].product_id", "product does not exist", item.product_id
                ) from None
            items.append(
                item.model_copy(
                    update={"position": position, "product_name": item.product_name or product.name}
                )
            )
        update["items"] = items

        created = await self._deliveries.create_delivery(delivery.model_copy(update=update))
        logger.info(
            "delivery_recorded",
            delivery_id=created.id,
            delivery_number=created.delivery_number,
        )
        return created

    async def get_delivery(self, delivery_id: int) -> Delivery:
        return await self._deliveries.get_delivery(delivery_id)

    async def list_deliveries(self) -> list[Delivery]:
        return await self._deliveries.list_deliveries()
