"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and services.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class InvoiceItemRequest(BaseModel):
    """One invoice line. Line totals are always computed server-side."""

    product_id: int = Field(..., description="Product ID", examples=[1])
    product_name: str | None = Field(
        default=None,
        description="Name to print; defaults to the product's current name",
    )
    quantity: float = Field(..., gt=0, examples=[3])
    unit_price: float = Field(..., ge=0, examples=[10.0])


class CreateInvoiceRequest(BaseModel):
    """Request to create a draft invoice."""

    invoice_number: str = Field(..., min_length=1, examples=["12/2024", "INV-0001"])
    document_type: str = Field(default="invoice", examples=["invoice", "proforma"])
    client_id: int = Field(..., description="Client ID")
    client_name: str | None = Field(
        default=None,
        description="Name to print; defaults to the client's current name",
    )
    issue_date: date | None = Field(default=None, description="Defaults to today")
    due_date: date | None = None
    notes: str | None = None
    items: list[InvoiceItemRequest] = Field(default_factory=list)


class UpdateInvoiceRequest(BaseModel):
    """Header fields to change. Status is changed through its own endpoint."""

    model_config = ConfigDict(extra="forbid")

    invoice_number: str | None = Field(default=None, min_length=1)
    document_type: str | None = None
    client_id: int | None = None
    client_name: str | None = None
    issue_date: date | None = None
    due_date: date | None = None
    notes: str | None = None


class ReplaceItemsRequest(BaseModel):
    """Full replacement of an invoice's lines."""

    items: list[InvoiceItemRequest] = Field(default_factory=list)


class UpdateStatusRequest(BaseModel):
    """Requested invoice status."""

    status: str = Field(..., examples=["issued", "paid", "cancelled"])


class SaveDocumentRequest(BaseModel):
    """Rendered document payload, stored as-is."""

    content: str = Field(..., description="Opaque text, typically HTML")


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: SecretStr


class CreateWarehouseGroupRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None


class UpdateWarehouseGroupRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None


class AddWarehouseItemRequest(BaseModel):
    product_id: int
    quantity: float = Field(default=0.0, ge=0)
    notes: str | None = None


class DeliveryItemRequest(BaseModel):
    product_id: int
    product_name: str | None = None
    quantity: float = Field(..., gt=0)


class CreateDeliveryRequest(BaseModel):
    delivery_number: str = Field(..., min_length=1)
    client_id: int | None = None
    client_name: str | None = None
    delivery_date: date | None = Field(default=None, description="Defaults to today")
    status: str = "pending"
    notes: str | None = None
    items: list[DeliveryItemRequest] = Field(default_factory=list)
