"""Abstract interface for invoice storage."""

from abc import ABC, abstractmethod

from srecha.core.entities.invoice import Invoice, InvoiceItem, InvoiceStatus


class IInvoiceStore(ABC):
    """Interface for invoice header and line item persistence."""

    @abstractmethod
    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """Persist header and all items atomically."""
        pass

    @abstractmethod
    async def get_invoice(self, invoice_id: int) -> Invoice:
        """Get invoice with items in stored order. Raises InvoiceNotFoundError."""
        pass

    @abstractmethod
    async def get_by_number(self, invoice_number: str) -> Invoice | None:
        """Get invoice header by its unique number."""
        pass

    @abstractmethod
    async def list_by_filename_stem(self, stem: str) -> list[Invoice]:
        """Invoice headers whose number files documents under ``stem``."""
        pass

    @abstractmethod
    async def update_header(self, invoice: Invoice) -> Invoice:
        """Update header fields (not status, not items)."""
        pass

    @abstractmethod
    async def replace_items(
        self, invoice_id: int, items: list[InvoiceItem], total: float
    ) -> Invoice:
        """Replace all items and the stored total in one transaction."""
        pass

    @abstractmethod
    async def set_status(
        self, invoice_id: int, status: InvoiceStatus, expected: InvoiceStatus
    ) -> bool:
        """Set status only if the stored status still equals ``expected``."""
        pass

    @abstractmethod
    async def delete_invoice(self, invoice_id: int) -> None:
        """Delete invoice and its items."""
        pass

    @abstractmethod
    async def list_invoices(self) -> list[Invoice]:
        """List invoice headers, newest issue date first."""
        pass

    @abstractmethod
    async def list_by_client(self, client_id: int) -> list[Invoice]:
        """List invoice headers of one client, newest issue date first."""
        pass

    @abstractmethod
    async def count_invoices(self) -> int:
        """Count stored invoices."""
        pass
