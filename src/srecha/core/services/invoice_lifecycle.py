"""
Invoice lifecycle service.

Owns every rule about invoices that the stores do not: referential checks
against clients and products, total computation, the status state machine,
the edit window, and the convention that rendered documents are filed under
the invoice number and its issue period.

Layer-pure: depends only on core entities, interfaces and exceptions.
"""

from pydantic import ValidationError as PydanticValidationError

from srecha.config import get_logger
from srecha.core.entities.document import (
    DocumentArtifact,
    DocumentConsistencyReport,
    DocumentKey,
    safe_invoice_filename,
)
from srecha.core.entities.invoice import (
    Invoice,
    InvoiceHeaderUpdate,
    InvoiceItem,
    InvoiceStatus,
)
from srecha.core.entities.reference import Client
from srecha.core.exceptions import (
    DocumentNotFoundError,
    DuplicateKeyError,
    EntityNotFoundError,
    ImmutableStateError,
    InvalidTransitionError,
    InvoiceNotFoundError,
    SrechaError,
    ValidationError,
)
from srecha.core.interfaces import (
    IDocumentStore,
    IEntityStore,
    IInvoiceStore,
    IProductStore,
)

logger = get_logger(__name__)


class InvoiceLifecycleService:
    """
    Invoice creation, editing, status transitions and document filing.

    Required interfaces for DI:
    - IInvoiceStore: invoice persistence
    - IEntityStore[Client]: client existence and name snapshots
    - IProductStore: product existence and name snapshots
    - IDocumentStore: rendered document artifacts
    """

    def __init__(
        self,
        invoice_store: IInvoiceStore,
        client_store: IEntityStore[Client],
        product_store: IProductStore,
        document_store: IDocumentStore,
        require_invoice_for_documents: bool = False,
    ):
        self._invoices = invoice_store
        self._clients = client_store
        self._products = product_store
        self._documents = document_store
        self._require_invoice = require_invoice_for_documents

    # ------------------------------------------------------------------ queries

    async def get_invoice(self, invoice_id: int) -> Invoice:
        return await self._invoices.get_invoice(invoice_id)

    async def list_invoices(self) -> list[Invoice]:
        """All invoice headers, newest issue date first."""
        return await self._invoices.list_invoices()

    async def get_client_history(self, client_id: int) -> list[Invoice]:
        """Every invoice of one client, newest issue date first.

        Unknown clients simply have no history.
        """
        return await self._invoices.list_by_client(client_id)

    # ------------------------------------------------------------------ commands

    async def create_invoice(self, header: Invoice, items: list[InvoiceItem]) -> Invoice:
        """
        Create a draft invoice with its line items.

        Args:
            header: Invoice header; status, total and any items on it are ignored
            items: Ordered line items, at least one

        Returns:
            Stored invoice with ids, line totals and total

        Raises:
            ValidationError: No items, unknown client or unknown product
            DuplicateKeyError: Invoice number already used, or another invoice
                number files its documents under the same name
        """
        logger.info(
            "create_invoice_started",
            invoice_number=header.invoice_number,
            client_id=header.client_id,
            items=len(items),
        )

        client = await self._require_client(header.client_id)
        await self._ensure_filename_free(header.invoice_number)
        lines = await self._build_items(items)

        invoice = self._validated(
            header.model_dump(exclude={"id", "items", "total", "status"})
            | {
                "client_name": header.client_name or client.name,
                "status": InvoiceStatus.DRAFT,
                "items": lines,
            }
        )
        invoice = await self._invoices.create_invoice(invoice)

        logger.info(
            "invoice_created",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            total=invoice.total,
        )
        return invoice

    async def update_status(
        self, invoice_id: int, new_status: InvoiceStatus | str
    ) -> Invoice:
        """
        Move an invoice to another status.

        Requesting the current status is a no-op. Only status and
        ``updated_at`` change; items and total are untouched.

        Raises:
            ValidationError: Unknown status value
            InvoiceNotFoundError: No such invoice
            InvalidTransitionError: Target not reachable from the current status
        """
        target = self._parse_status(new_status)

        # Compare-and-set: a second pass sees a status changed by a racing writer
        for _ in range(2):
            invoice = await self._invoices.get_invoice(invoice_id)
            current = invoice.status

            if target == current:
                return invoice
            if not current.can_transition_to(target):
                raise InvalidTransitionError(invoice_id, current.value, target.value)

            if await self._invoices.set_status(invoice_id, target, expected=current):
                logger.info(
                    "invoice_status_changed",
                    invoice_id=invoice_id,
                    from_status=current.value,
                    to_status=target.value,
                )
                return await self._invoices.get_invoice(invoice_id)

        invoice = await self._invoices.get_invoice(invoice_id)
        if invoice.status == target:
            return invoice
        raise InvalidTransitionError(invoice_id, invoice.status.value, target.value)

    async def update_invoice(self, invoice_id: int, changes: InvoiceHeaderUpdate) -> Invoice:
        """
        Edit header fields of a draft or issued invoice.

        Stored documents follow the invoice when its number or issue
        period changes; a failed move is logged, not raised.

        Raises:
            InvoiceNotFoundError: No such invoice
            ImmutableStateError: Invoice is paid or cancelled
            ValidationError: Unknown client or invalid field value
            DuplicateKeyError: New invoice number already used, or its
                document filename belongs to another invoice
        """
        invoice = await self._invoices.get_invoice(invoice_id)
        self._ensure_editable(invoice, "update")

        patch = changes.changes()
        if not patch:
            return invoice

        if "client_id" in patch and patch["client_id"] != invoice.client_id:
            client = await self._require_client(patch["client_id"])
            patch.setdefault("client_name", client.name)

        if patch.get("invoice_number", invoice.invoice_number) != invoice.invoice_number:
            await self._ensure_filename_free(patch["invoice_number"], invoice_id)

        updated = self._validated(invoice.model_dump() | patch)
        stored = await self._invoices.update_header(updated)

        logger.info("invoice_updated", invoice_id=invoice_id, fields=sorted(patch))

        if (stored.invoice_number, stored.period) != (invoice.invoice_number, invoice.period):
            await self._relocate_documents(invoice, stored)

        return stored

    async def replace_items(self, invoice_id: int, items: list[InvoiceItem]) -> Invoice:
        """
        Replace all line items of a draft or issued invoice and recompute the total.

        Raises:
            InvoiceNotFoundError: No such invoice
            ImmutableStateError: Invoice is paid or cancelled
            ValidationError: No items or unknown product
        """
        invoice = await self._invoices.get_invoice(invoice_id)
        self._ensure_editable(invoice, "replace_items")

        lines = await self._build_items(items)
        total = sum(line.line_total for line in lines)
        stored = await self._invoices.replace_items(invoice_id, lines, total)

        logger.info(
            "invoice_items_replaced",
            invoice_id=invoice_id,
            items=len(lines),
            total=stored.total,
        )
        return stored

    async def delete_invoice(self, invoice_id: int) -> None:
        """
        Delete an invoice, its items, and its stored documents.

        Document cleanup is best-effort: the invoice is gone even if a
        file could not be removed.

        Raises:
            InvoiceNotFoundError: No such invoice
        """
        invoice = await self._invoices.get_invoice(invoice_id)
        await self._invoices.delete_invoice(invoice_id)
        logger.info(
            "invoice_deleted",
            invoice_id=invoice_id,
            invoice_number=invoice.invoice_number,
        )

        year, month = invoice.period
        try:
            await self._documents.delete_for_invoice(invoice.invoice_number, year, month)
        except SrechaError as e:
            logger.warning(
                "invoice_documents_cleanup_failed",
                invoice_id=invoice_id,
                invoice_number=invoice.invoice_number,
                error=str(e),
            )

    # ------------------------------------------------------------------ documents

    async def save_document(
        self,
        invoice_number: str,
        document_type: str,
        year: int,
        month: int,
        content: str,
    ) -> DocumentArtifact:
        """Store rendered content, replacing any previous version. Status-independent."""
        key = self.document_key(invoice_number, document_type, year, month)
        if self._require_invoice and await self._invoices.get_by_number(invoice_number) is None:
            raise InvoiceNotFoundError(invoice_number)

        path = await self._documents.save(key, content)
        return DocumentArtifact(key=key, content=content, path=path)

    async def load_document(
        self, invoice_number: str, document_type: str, year: int, month: int
    ) -> str:
        """Raises DocumentNotFoundError if nothing is stored under the key."""
        key = self.document_key(invoice_number, document_type, year, month)
        return await self._documents.load(key)

    async def delete_document(
        self, invoice_number: str, document_type: str, year: int, month: int
    ) -> bool:
        """Delete a stored document. Returns False if there was none."""
        key = self.document_key(invoice_number, document_type, year, month)
        try:
            await self._documents.delete(key)
        except DocumentNotFoundError:
            logger.info(
                "document_delete_skipped",
                invoice_number=invoice_number,
                document_type=document_type,
            )
            return False
        return True

    async def check_document_consistency(self) -> DocumentConsistencyReport:
        """Find documents without an invoice and invoices without their document."""
        keys = await self._documents.list_keys()
        invoices = await self._invoices.list_invoices()

        # Documents are filed by sanitized number, so compare on that form
        filed = {(k.document_type, k.filename_stem, k.year, k.month) for k in keys}
        expected: list[DocumentKey] = []
        for invoice in invoices:
            try:
                expected.append(self._key_for(invoice))
            except ValidationError:
                logger.warning("invoice_number_not_fileable", invoice_id=invoice.id)

        invoice_slots = {(k.filename_stem, k.year, k.month) for k in expected}
        report = DocumentConsistencyReport(
            orphaned=[k for k in keys if (k.filename_stem, k.year, k.month) not in invoice_slots],
            missing=[
                k for k in expected
                if (k.document_type, k.filename_stem, k.year, k.month) not in filed
            ],
        )
        logger.info(
            "document_consistency_checked",
            documents=len(keys),
            orphaned=len(report.orphaned),
            missing=len(report.missing),
        )
        return report

    async def purge_orphaned_documents(self) -> list[DocumentKey]:
        """Delete every document that no invoice files. Returns the deleted keys."""
        report = await self.check_document_consistency()
        purged = []
        for key in report.orphaned:
            try:
                await self._documents.delete(key)
            except DocumentNotFoundError:
                continue
            purged.append(key)

        logger.info("orphaned_documents_purged", count=len(purged))
        return purged

    @staticmethod
    def document_key(
        invoice_number: str, document_type: str, year: int, month: int
    ) -> DocumentKey:
        try:
            return DocumentKey(
                invoice_number=invoice_number,
                document_type=document_type,
                year=year,
                month=month,
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

    # ------------------------------------------------------------------ helpers

    def _key_for(self, invoice: Invoice, document_type: str | None = None) -> DocumentKey:
        year, month = invoice.period
        return self.document_key(
            invoice.invoice_number, document_type or invoice.document_type, year, month
        )

    async def _relocate_documents(self, old: Invoice, new: Invoice) -> None:
        try:
            keys = await self._documents.list_keys()
            source = self._key_for(old)
            for key in keys:
                if (key.filename_stem, key.year, key.month) != (
                    source.filename_stem,
                    source.year,
                    source.month,
                ):
                    continue
                target = self._key_for(new, key.document_type)
                if target.location == key.location:
                    continue
                if await self._documents.exists(target):
                    logger.warning(
                        "invoice_document_relocation_skipped",
                        invoice_id=new.id,
                        document_type=key.document_type,
                        reason="target_exists",
                    )
                    continue
                await self._documents.move(key, target)
                logger.info(
                    "invoice_document_relocated",
                    invoice_id=new.id,
                    document_type=key.document_type,
                    invoice_number=new.invoice_number,
                )
        except SrechaError as e:
            logger.warning(
                "invoice_document_relocation_failed",
                invoice_id=new.id,
                error=str(e),
            )

    async def _ensure_filename_free(
        self, invoice_number: str, invoice_id: int | None = None
    ) -> None:
        """Reject a number whose document filename another invoice already uses."""
        stem = safe_invoice_filename(invoice_number)
        for other in await self._invoices.list_by_filename_stem(stem):
            # Exact duplicates are left to the store's unique constraint
            if other.id != invoice_id and other.invoice_number != invoice_number:
                raise DuplicateKeyError("invoice", "document_filename", stem)

    async def _require_client(self, client_id: int) -> Client:
        try:
            return await self._clients.get(client_id)
        except EntityNotFoundError:
            raise ValidationError("client_id", "client does not exist", client_id) from None

    async def _build_items(self, items: list[InvoiceItem]) -> list[InvoiceItem]:
        """Check products exist, snapshot names, and recompute line totals."""
        if not items:
            raise ValidationError("items", "invoice must have at least one item")

        lines = []
        for position, item in enumerate(items):
            try:
                product = await self._products.get(item.product_id)
            except EntityNotFoundError:
                raise ValidationError(
                    f"items[{position}].product_id", "product does not exist", item.product_id
                ) from None

            lines.append(
                InvoiceItem(
                    position=position,
                    product_id=item.product_id,
                    product_name=item.product_name or product.name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
            )
        return lines

    @staticmethod
    def _ensure_editable(invoice: Invoice, operation: str) -> None:
        if not invoice.status.is_editable:
            raise ImmutableStateError(invoice.id, invoice.status.value, operation)

    @staticmethod
    def _parse_status(value: InvoiceStatus | str) -> InvoiceStatus:
        try:
            return InvoiceStatus(value)
        except ValueError:
            raise ValidationError("status", "unknown invoice status", value) from None

    @staticmethod
    def _validated(data: dict) -> Invoice:
        try:
            return Invoice.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e
