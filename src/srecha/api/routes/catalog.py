"""
Reference data endpoints.

One set of CRUD routes serves every flat registry (clients, products,
categories, ...); the registry is picked by the first path segment.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status
from pydantic import ValidationError as PydanticValidationError

from srecha.api.dependencies import get_container
from srecha.application.container import ServiceContainer
from srecha.application.dto.responses import ErrorResponse
from srecha.core.entities.reference import Product, Subcategory, SupplierProduct
from srecha.core.exceptions import EntityNotFoundError, ValidationError
from srecha.infrastructure.storage.sqlite import SQLiteEntityStore

router = APIRouter(prefix="/api/catalog", tags=["catalog"])

_ERRORS: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def _store(entity: str, container: ServiceContainer) -> SQLiteEntityStore:
    store = container.registry().get(entity)
    if store is None:
        raise EntityNotFoundError("registry", entity)
    return store


@router.get("/products/by-code/{code}", response_model=Product, responses=_ERRORS)
async def get_product_by_code(
    code: str,
    container: ServiceContainer = Depends(get_container),
) -> Product:
    product = await container.products.get_by_code(code)
    if product is None:
        raise EntityNotFoundError("product", code)
    return product


@router.get("/categories/{category_id}/subcategories", response_model=list[Subcategory])
async def list_subcategories(
    category_id: int,
    container: ServiceContainer = Depends(get_container),
) -> list[Subcategory]:
    return await container.subcategories.list_by("category_id", category_id)


@router.get(
    "/supplier-sectors/{sector_id}/products", response_model=list[SupplierProduct]
)
async def list_supplier_products(
    sector_id: int,
    container: ServiceContainer = Depends(get_container),
) -> list[SupplierProduct]:
    return await container.supplier_products.list_by("sector_id", sector_id)


@router.get("/{entity}", responses=_ERRORS)
async def list_entities(
    entity: str,
    container: ServiceContainer = Depends(get_container),
) -> list[dict[str, Any]]:
    """List a registry in creation order."""
    records = await _store(entity, container).list_all()
    return [r.model_dump(mode="json") for r in records]


@router.post("/{entity}", status_code=status.HTTP_201_CREATED, responses=_ERRORS)
async def create_entity(
    entity: str,
    payload: dict[str, Any] = Body(...),
    container: ServiceContainer = Depends(get_container),
) -> dict[str, Any]:
    store = _store(entity, container)
    payload.pop("id", None)
    try:
        record = store.model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e
    created = await store.create(record)
    return created.model_dump(mode="json")


@router.get("/{entity}/{entity_id}", responses=_ERRORS)
async def get_entity(
    entity: str,
    entity_id: int,
    container: ServiceContainer = Depends(get_container),
) -> dict[str, Any]:
    record = await _store(entity, container).get(entity_id)
    return record.model_dump(mode="json")


@router.patch("/{entity}/{entity_id}", responses=_ERRORS)
async def update_entity(
    entity: str,
    entity_id: int,
    patch: dict[str, Any] = Body(...),
    container: ServiceContainer = Depends(get_container),
) -> dict[str, Any]:
    if "id" in patch:
        raise ValidationError("id", "id cannot be changed")
    updated = await _store(entity, container).update(entity_id, patch)
    return updated.model_dump(mode="json")


@router.delete(
    "/{entity}/{entity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_ERRORS,
)
async def delete_entity(
    entity: str,
    entity_id: int,
    container: ServiceContainer = Depends(get_container),
) -> Response:
    """Delete a record. Refused while invoices or other records still reference it."""
    await _store(entity, container).delete(entity_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
