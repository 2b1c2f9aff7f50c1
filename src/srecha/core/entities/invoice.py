"""Invoice domain entities and the invoice status state machine."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from srecha.core.clock import utc_now


class InvoiceStatus(str, Enum):
    """Invoice lifecycle states."""

    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"
    CANCELLED = "cancelled"

    @classmethod
    def _missing_(cls, value: object) -> "InvoiceStatus | None":
        # Accept "Issued", " PAID " etc.
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]

    @property
    def is_editable(self) -> bool:
        """Header and items may only change before payment or cancellation."""
        return self in (InvoiceStatus.DRAFT, InvoiceStatus.ISSUED)

    def can_transition_to(self, target: "InvoiceStatus") -> bool:
        """Staying in the same state is always allowed."""
        return target == self or target in _TRANSITIONS[self]

    def next_states(self) -> frozenset["InvoiceStatus"]:
        return _TRANSITIONS[self]


_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.ISSUED, InvoiceStatus.CANCELLED}),
    InvoiceStatus.ISSUED: frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELLED}),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
}


class InvoiceItem(BaseModel):
    """A single line on an invoice.

    ``unit_price`` and ``product_name`` are snapshots taken when the line is
    written; later product edits do not change them.
    """

    id: int | None = None
    invoice_id: int | None = None
    position: int = 0  # presentation order, 0-based
    product_id: int  # FK → products.id
    product_name: str | None = None
    quantity: float = Field(gt=0)
    unit_price: float = Field(ge=0)
    line_total: float = 0.0  # quantity * unit_price

    @model_validator(mode="after")
    def compute_line(self) -> "InvoiceItem":
        """Compute line_total from quantity and unit_price."""
        self.line_total = self.quantity * self.unit_price
        return self


class Invoice(BaseModel):
    """Invoice header with its ordered line items."""

    id: int | None = None
    invoice_number: str = Field(min_length=1)
    document_type: str = "invoice"
    client_id: int  # FK → clients.id
    client_name: str | None = None  # snapshot
    issue_date: date = Field(default_factory=date.today)
    due_date: date | None = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    total: float = 0.0  # sum of item line totals
    notes: str | None = None
    items: list[InvoiceItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def compute_total(self) -> "Invoice":
        """Recompute total from items; header-only loads keep the stored total."""
        if self.items:
            self.total = sum(i.line_total for i in self.items)
        return self

    @property
    def period(self) -> tuple[int, int]:
        """(year, month) the invoice's documents are filed under."""
        return self.issue_date.year, self.issue_date.month

    def header(self) -> "Invoice":
        """Copy without items."""
        return self.model_copy(update={"items": []})


class InvoiceHeaderUpdate(BaseModel):
    """Editable header fields. Status changes go through the transition API."""

    model_config = ConfigDict(extra="forbid")

    invoice_number: str | None = Field(default=None, min_length=1)
    document_type: str | None = None
    client_id: int | None = None
    client_name: str | None = None
    issue_date: date | None = None
    due_date: date | None = None
    notes: str | None = None

    def changes(self) -> dict:
        """Only the fields the caller actually set."""
        return self.model_dump(exclude_unset=True)
