"""Delivery note entities."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from srecha.core.clock import utc_now


class DeliveryItem(BaseModel):
    id: int | None = None
    delivery_id: int | None = None
    position: int = 0
    product_id: int  # FK → products.id
    product_name: str | None = None  # snapshot
    quantity: float = Field(gt=0)


class Delivery(BaseModel):
    """Goods handed to a client, without prices."""

    id: int | None = None
    delivery_number: str = Field(min_length=1)
    client_id: int | None = None  # FK → clients.id
    client_name: str | None = None
    delivery_date: date = Field(default_factory=date.today)
    status: str = "pending"
    notes: str | None = None
    items: list[DeliveryItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
