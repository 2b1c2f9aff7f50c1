"""Warehouse grouping entities."""

from datetime import datetime

from pydantic import BaseModel, Field

from srecha.core.clock import utc_now


class WarehouseGroup(BaseModel):
    """A named shelf/grouping of products."""

    id: int | None = None
    name: str = Field(min_length=1)
    description: str | None = None
    created_at: datetime = Field(default_factory=utc_now)


class WarehouseGroupItem(BaseModel):
    """Membership of a product in a warehouse group."""

    id: int | None = None
    group_id: int  # FK → warehouse_groups.id
    product_id: int  # FK → products.id
    product_code: str | None = None  # snapshot
    product_name: str | None = None  # snapshot
    quantity: float = Field(default=0.0, ge=0)
    notes: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
