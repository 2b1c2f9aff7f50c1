"""Delivery note endpoints."""

from fastapi import APIRouter, Depends, status

from srecha.api.dependencies import get_delivery_service
from srecha.application.dto.requests import CreateDeliveryRequest
from srecha.application.dto.responses import ErrorResponse
from srecha.core.entities.delivery import Delivery, DeliveryItem
from srecha.core.services import DeliveryService

router = APIRouter(prefix="/api/deliveries", tags=["deliveries"])


@router.post(
    "",
    response_model=Delivery,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_delivery(
    request: CreateDeliveryRequest,
    service: DeliveryService = Depends(get_delivery_service),
) -> Delivery:
    fields = request.model_dump(exclude={"items"}, exclude_none=True)
    delivery = Delivery(
        **fields,
        items=[DeliveryItem(**item.model_dump()) for item in request.items],
    )
    return await service.create_delivery(delivery)


@router.get("", response_model=list[Delivery])
async def list_deliveries(
    service: DeliveryService = Depends(get_delivery_service),
) -> list[Delivery]:
    """Delivery headers, newest first."""
    return await service.list_deliveries()


@router.get(
    "/{delivery_id}",
    response_model=Delivery,
    responses={404: {"model": ErrorResponse}},
)
async def get_delivery(
    delivery_id: int,
    service: DeliveryService = Depends(get_delivery_service),
) -> Delivery:
    return await service.get_delivery(delivery_id)
