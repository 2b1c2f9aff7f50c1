"""Warehouse group endpoints."""

from fastapi import APIRouter, Depends, Response, status

from srecha.api.dependencies import get_warehouse_store
from srecha.application.dto.requests import (
    AddWarehouseItemRequest,
    CreateWarehouseGroupRequest,
    UpdateWarehouseGroupRequest,
)
from srecha.application.dto.responses import ErrorResponse
from srecha.core.entities.warehouse import WarehouseGroup, WarehouseGroupItem
from srecha.infrastructure.storage.sqlite import SQLiteWarehouseStore

router = APIRouter(prefix="/api/warehouse", tags=["warehouse"])


@router.post("/groups", response_model=WarehouseGroup, status_code=status.HTTP_201_CREATED)
async def create_group(
    request: CreateWarehouseGroupRequest,
    store: SQLiteWarehouseStore = Depends(get_warehouse_store),
) -> WarehouseGroup:
    return await store.create_group(WarehouseGroup(**request.model_dump()))


@router.get("/groups", response_model=list[WarehouseGroup])
async def list_groups(
    store: SQLiteWarehouseStore = Depends(get_warehouse_store),
) -> list[WarehouseGroup]:
    return await store.list_groups()


@router.get(
    "/groups/{group_id}",
    response_model=WarehouseGroup,
    responses={404: {"model": ErrorResponse}},
)
async def get_group(
    group_id: int,
    store: SQLiteWarehouseStore = Depends(get_warehouse_store),
) -> WarehouseGroup:
    return await store.get_group(group_id)


@router.patch(
    "/groups/{group_id}",
    response_model=WarehouseGroup,
    responses={404: {"model": ErrorResponse}},
)
async def update_group(
    group_id: int,
    request: UpdateWarehouseGroupRequest,
    store: SQLiteWarehouseStore = Depends(get_warehouse_store),
) -> WarehouseGroup:
    return await store.update_group(group_id, request.model_dump(exclude_unset=True))


@router.delete(
    "/groups/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_group(
    group_id: int,
    store: SQLiteWarehouseStore = Depends(get_warehouse_store),
) -> Response:
    """Delete a group and its memberships. Products are kept."""
    await store.delete_group(group_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/groups/{group_id}/items",
    response_model=list[WarehouseGroupItem],
    responses={404: {"model": ErrorResponse}},
)
async def list_group_items(
    group_id: int,
    store: SQLiteWarehouseStore = Depends(get_warehouse_store),
) -> list[WarehouseGroupItem]:
    return await store.list_items(group_id)


@router.post(
    "/groups/{group_id}/items",
    response_model=WarehouseGroupItem,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Product already in group"},
    },
)
async def add_group_item(
    group_id: int,
    request: AddWarehouseItemRequest,
    store: SQLiteWarehouseStore = Depends(get_warehouse_store),
) -> WarehouseGroupItem:
    item = WarehouseGroupItem(group_id=group_id, **request.model_dump())
    return await store.add_item(item)


@router.delete(
    "/groups/{group_id}/items/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def remove_group_item(
    group_id: int,
    product_id: int,
    store: SQLiteWarehouseStore = Depends(get_warehouse_store),
) -> Response:
    await store.remove_item(group_id, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
