"""Data transfer objects between the API and the services."""

from srecha.application.dto.requests import (
    AddWarehouseItemRequest,
    CreateDeliveryRequest,
    CreateInvoiceRequest,
    CreateWarehouseGroupRequest,
    DeliveryItemRequest,
    InvoiceItemRequest,
    LoginRequest,
    ReplaceItemsRequest,
    SaveDocumentRequest,
    UpdateInvoiceRequest,
    UpdateStatusRequest,
    UpdateWarehouseGroupRequest,
)
from srecha.application.dto.responses import (
    DocumentConsistencyResponse,
    DocumentContentResponse,
    DocumentKeyResponse,
    DocumentSavedResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceItemResponse,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceSummaryResponse,
    LoginResponse,
    PurgeDocumentsResponse,
)

__all__ = [
    "AddWarehouseItemRequest",
    "CreateDeliveryRequest",
    "CreateInvoiceRequest",
    "CreateWarehouseGroupRequest",
    "DeliveryItemRequest",
    "InvoiceItemRequest",
    "LoginRequest",
    "ReplaceItemsRequest",
    "SaveDocumentRequest",
    "UpdateInvoiceRequest",
    "UpdateStatusRequest",
    "UpdateWarehouseGroupRequest",
    "DocumentConsistencyResponse",
    "DocumentContentResponse",
    "DocumentKeyResponse",
    "DocumentSavedResponse",
    "ErrorResponse",
    "HealthResponse",
    "InvoiceItemResponse",
    "InvoiceListResponse",
    "InvoiceResponse",
    "InvoiceSummaryResponse",
    "LoginResponse",
    "PurgeDocumentsResponse",
]
