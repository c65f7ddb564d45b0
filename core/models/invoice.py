"""
Invoice domain models.

Amounts are Decimal in the currency's major unit (euros), matching the
numeric columns they are loaded from.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import AwareDatetime, BaseModel

from core.models.credit_note import CreditNote
from core.models.discount import Discount
from core.models.line_item import LineItem
from core.models.payment import Payment
from core.models.timeline import TimelineDocument


class DocumentStatus(str, Enum):
    """Stored document state."""

    DRAFT = "draft"
    ISSUED = "issued"
    VOID = "void"


class PaymentStatus(str, Enum):
    """Computed from the settled amount."""

    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class DueStatus(str, Enum):
    """Computed from the due date."""

    NOT_DUE = "not_due"
    DUE = "due"
    OVERDUE = "overdue"


class InvoiceStatusInfo(BaseModel):
    """Stored and computed statuses plus the one to display."""

    document: DocumentStatus
    payment: PaymentStatus
    due: DueStatus
    display_status: str

    model_config = {"frozen": True}


class Invoice(BaseModel):
    """Invoice header as stored."""

    id: UUID
    user_id: UUID | None = None
    customer_id: UUID | None = None
    invoice_number: str | None = None
    invoice_date: date | None = None
    due_date: date | None = None
    status: str | None = None
    is_issued: bool = False
    issued_at: AwareDatetime | None = None
    discount_type: str | None = None
    discount_value: Decimal | None = None
    discount_reason: str | None = None
    created_at: AwareDatetime | None = None

    model_config = {"from_attributes": True}

    @property
    def discount(self) -> Discount | None:
        """Discount built from the stored columns, if any."""
        return Discount.from_record(self.discount_type, self.discount_value)

    @property
    def document_status(self) -> DocumentStatus:
        """Stored state: void wins, then the issued flag."""
        if self.status == DocumentStatus.VOID.value:
            return DocumentStatus.VOID
        if self.is_issued:
            return DocumentStatus.ISSUED
        return DocumentStatus.DRAFT

    def to_timeline_document(self) -> TimelineDocument:
        return TimelineDocument(
            id=self.id,
            created_at=self.created_at,
            is_issued=self.is_issued,
            issued_at=self.issued_at,
            invoice_date=self.invoice_date,
        )


class InvoiceSnapshot(BaseModel):
    """
    Everything the engine needs for one invoice, loaded in one go.

    The engine only ever sees a complete snapshot, never a partially
    loaded one.
    """

    invoice: Invoice
    items: tuple[LineItem, ...] = ()
    credit_notes: tuple[CreditNote, ...] = ()
    payments: tuple[Payment, ...] = ()

    model_config = {"frozen": True}
