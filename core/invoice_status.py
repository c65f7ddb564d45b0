"""
Invoice status model.

Only the document state (draft / issued / void) is stored. Payment status
and due status are computed from the settlement and the due date, and one
of them is picked for display.
"""

from datetime import date
from decimal import Decimal

from core.models import (
    DocumentStatus,
    DueStatus,
    Invoice,
    InvoiceStatusInfo,
    PaymentStatus,
    SettlementSummary,
)


def compute_payment_status(total: Decimal, settled: Decimal) -> PaymentStatus:
    """Unpaid until something is settled, paid once settled covers the total."""
    if settled <= 0:
        return PaymentStatus.UNPAID
    if settled >= total:
        return PaymentStatus.PAID
    return PaymentStatus.PARTIAL


def compute_due_status(
    due_date: date | None,
    payment_status: PaymentStatus,
    today: date,
) -> DueStatus:
    """Paid invoices and invoices without a due date are never due."""
    if payment_status == PaymentStatus.PAID or due_date is None:
        return DueStatus.NOT_DUE
    if due_date < today:
        return DueStatus.OVERDUE
    if due_date == today:
        return DueStatus.DUE
    return DueStatus.NOT_DUE


def get_invoice_status(
    document_status: DocumentStatus,
    total: Decimal,
    settled: Decimal,
    due_date: date | None,
    today: date,
) -> InvoiceStatusInfo:
    """
    Combine stored and computed statuses.

    Display priority: draft, void, paid, overdue, partial, then issued.
    """
    payment = compute_payment_status(total, settled)
    due = compute_due_status(due_date, payment, today)

    if document_status == DocumentStatus.DRAFT:
        display_status = "draft"
    elif document_status == DocumentStatus.VOID:
        display_status = "void"
    elif payment == PaymentStatus.PAID:
        display_status = "paid"
    elif due == DueStatus.OVERDUE:
        display_status = "overdue"
    elif payment == PaymentStatus.PARTIAL:
        display_status = "partial"
    else:
        display_status = "issued"

    return InvoiceStatusInfo(
        document=document_status,
        payment=payment,
        due=due,
        display_status=display_status,
    )


def status_for(invoice: Invoice, total: Decimal, settlement: SettlementSummary, today: date) -> InvoiceStatusInfo:
    """Status of a stored invoice given its computed grand total and settlement."""
    return get_invoice_status(
        invoice.document_status,
        total,
        settlement.total_settled,
        invoice.due_date,
        today,
    )
