"""Rendered document endpoints.

Documents are addressed by ``/{document_type}/{year}/{month}/{invoice_number}``;
the invoice number is the last segment and may itself contain ``/``.
"""

from fastapi import APIRouter, Depends, Response, status

from srecha.api.dependencies import get_invoice_service
from srecha.application.dto.requests import SaveDocumentRequest
from srecha.application.dto.responses import (
    DocumentConsistencyResponse,
    DocumentContentResponse,
    DocumentKeyResponse,
    DocumentSavedResponse,
    ErrorResponse,
    PurgeDocumentsResponse,
)
from srecha.core.services import InvoiceLifecycleService

router = APIRouter(prefix="/api/documents", tags=["documents"])

_KEY_PATH = "/{document_type}/{year}/{month}/{invoice_number:path}"


@router.get("/consistency", response_model=DocumentConsistencyResponse)
async def check_consistency(
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> DocumentConsistencyResponse:
    """Report documents without an invoice and invoices without their document."""
    report = await service.check_document_consistency()
    return DocumentConsistencyResponse(
        orphaned=[DocumentKeyResponse.model_validate(k) for k in report.orphaned],
        missing=[DocumentKeyResponse.model_validate(k) for k in report.missing],
        is_consistent=report.is_consistent,
    )


@router.post("/purge-orphans", response_model=PurgeDocumentsResponse)
async def purge_orphans(
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> PurgeDocumentsResponse:
    """Delete documents that no invoice files."""
    purged = await service.purge_orphaned_documents()
    return PurgeDocumentsResponse(
        purged=[DocumentKeyResponse.model_validate(k) for k in purged],
        count=len(purged),
    )


@router.put(
    _KEY_PATH,
    response_model=DocumentSavedResponse,
    responses={
        400: {"model": ErrorResponse},
        503: {"model": ErrorResponse, "description": "Storage unavailable"},
    },
)
async def save_document(
    document_type: str,
    year: int,
    month: int,
    invoice_number: str,
    request: SaveDocumentRequest,
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> DocumentSavedResponse:
    """Store a rendered document, replacing any previous version."""
    artifact = await service.save_document(
        invoice_number, document_type, year, month, request.content
    )
    return DocumentSavedResponse(
        invoice_number=artifact.key.invoice_number,
        document_type=artifact.key.document_type,
        year=artifact.key.year,
        month=artifact.key.month,
        path=artifact.path,
        size=len(artifact.content),
    )


@router.get(
    _KEY_PATH,
    response_model=DocumentContentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def load_document(
    document_type: str,
    year: int,
    month: int,
    invoice_number: str,
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> DocumentContentResponse:
    """Get a stored document's content exactly as saved."""
    content = await service.load_document(invoice_number, document_type, year, month)
    return DocumentContentResponse(
        invoice_number=invoice_number,
        document_type=document_type,
        year=year,
        month=month,
        content=content,
    )


@router.delete(_KEY_PATH, status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_type: str,
    year: int,
    month: int,
    invoice_number: str,
    service: InvoiceLifecycleService = Depends(get_invoice_service),
) -> Response:
    """Delete a stored document. Deleting a missing document succeeds."""
    await service.delete_document(invoice_number, document_type, year, month)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
