"""Core domain models."""

from core.models.line_item import LineItem
from core.models.discount import Discount, DiscountKind
from core.models.credit_note import CreditNote, CreditNoteAmount, NetPlusVatAmount, GrossAmount
from core.models.payment import Payment
from core.models.totals import DocumentTotals, VatBucket
from core.models.timeline import TimelineDocument, TimelineEvent, TimelineEventType
from core.models.settlement import SettlementSummary, SettlementResult
from core.models.invoice import (
    Invoice, InvoiceSnapshot, InvoiceStatusInfo,
    DocumentStatus, PaymentStatus, DueStatus,
)
from core.models.aging import AgingBucket, AgingReport, OverdueInvoice

__all__ = [
    # Inputs
    "LineItem", "Discount", "DiscountKind",
    "CreditNote", "CreditNoteAmount", "NetPlusVatAmount", "GrossAmount",
    "Payment",
    # Results
    "DocumentTotals", "VatBucket",
    "SettlementSummary", "SettlementResult",
    "TimelineDocument", "TimelineEvent", "TimelineEventType",
    # Invoice
    "Invoice", "InvoiceSnapshot", "InvoiceStatusInfo",
    "DocumentStatus", "PaymentStatus", "DueStatus",
    # Aging
    "AgingBucket", "AgingReport", "OverdueInvoice",
]
