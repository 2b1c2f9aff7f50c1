"""Invoice endpoints."""

from fastapi import APIRouter, Depends, Response, status

from srecha.api.dependencies import get_invoice_service
from srecha.application.dto.requests import (
    CreateInvoiceRequest,
    InvoiceItemRequest,
    ReplaceItemsRequest,
    UpdateInvoiceRequest,
    UpdateStatusRequest,
)
from srecha.application.dto.responses import (
    ErrorResponse,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceSummaryResponse,
)
from srecha.core.entities.invoice import Invoice, InvoiceHeaderUpdate, InvoiceItem
from srecha.core.services import InvoiceLifecycleService

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def _to_items(items: list[InvoiceItemRequest]) -> list[InvoiceItem]:
    return [
        InvoiceItem(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
        )
        for item in items
    ]


def _to_list(invoices: list[Invoice]) -> InvoiceListResponse:
    return InvoiceListResponse(
        invoices=[InvoiceSummaryResponse.model_validate(inv) for inv in invoices],
        total=len(invoices),
    )


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_invoice(
    request: CreateInvoiceRequest,
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> InvoiceResponse:
    """Create a draft invoice. Totals are computed from the items."""
    header_fields = request.model_dump(exclude={"items"}, exclude_none=True)
    header = Invoice(**header_fields)
    invoice = await service.create_invoice(header, _to_items(request.items))
    return InvoiceResponse.model_validate(invoice)


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> InvoiceListResponse:
    """List all invoices, newest issue date first."""
    return _to_list(await service.list_invoices())


@router.get("/clients/{client_id}/history", response_model=InvoiceListResponse)
async def get_client_history(
    client_id: int,
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> InvoiceListResponse:
    """All invoices of one client, newest issue date first."""
    return _to_list(await service.get_client_history(client_id))


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    invoice_id: int,
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> InvoiceResponse:
    """Get an invoice with its items."""
    return InvoiceResponse.model_validate(await service.get_invoice(invoice_id))


@router.post(
    "/{invoice_id}/status",
    response_model=InvoiceResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Transition not allowed"},
    },
)
async def update_invoice_status(
    invoice_id: int,
    request: UpdateStatusRequest,
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> InvoiceResponse:
    """Move an invoice through draft -> issued -> paid, or cancel it."""
    invoice = await service.update_status(invoice_id, request.status)
    return InvoiceResponse.model_validate(invoice)


@router.patch(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Invoice is paid or cancelled"},
    },
)
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequest,
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> InvoiceResponse:
    """Edit header fields of a draft or issued invoice."""
    changes = InvoiceHeaderUpdate(**request.model_dump(exclude_unset=True))
    invoice = await service.update_invoice(invoice_id, changes)
    return InvoiceResponse.model_validate(invoice)


@router.put(
    "/{invoice_id}/items",
    response_model=InvoiceResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Invoice is paid or cancelled"},
    },
)
async def replace_invoice_items(
    invoice_id: int,
    request: ReplaceItemsRequest,
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> InvoiceResponse:
    """Replace all items of a draft or issued invoice."""
    invoice = await service.replace_items(invoice_id, _to_items(request.items))
    return InvoiceResponse.model_validate(invoice)


@router.delete(
    "/{invoice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_invoice(
    invoice_id: int,
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> Response:
    """Delete an invoice, its items and its stored documents."""
    await service.delete_invoice(invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
