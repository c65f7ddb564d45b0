"""
Activity timeline for a document.

The timeline is rebuilt from scratch on every refresh, so it must come out
the same for the same inputs: events are ordered by timestamp and ties are
broken by a fixed type precedence.
"""

from datetime import datetime
from typing import Iterable

from core.formatting import humanize_method
from core.models import (
    CreditNote,
    Payment,
    SettlementSummary,
    TimelineDocument,
    TimelineEvent,
    TimelineEventType,
)
from core.settlement import credit_note_gross
from utils.timezone import as_utc_datetime

# Tie-break order for events sharing a timestamp
EVENT_PRIORITY = {
    TimelineEventType.CREATED: 0,
    TimelineEventType.ISSUED: 1,
    TimelineEventType.CREDIT_NOTE: 2,
    TimelineEventType.PAYMENT: 2,
    TimelineEventType.PAID: 3,
}


def build_timeline(
    doc: TimelineDocument,
    credit_notes: Iterable[CreditNote],
    payments: Iterable[Payment],
    settlement: SettlementSummary,
) -> list[TimelineEvent]:
    """
    Build the ordered event list for a document.

    Args:
        doc: Document identity, creation and issue fields
        credit_notes: Credit notes applied to the document
        payments: Payments received for the document
        settlement: Settlement summary for the same inputs

    Returns:
        Events sorted ascending by timestamp, then by type precedence
    """
    credit_notes = list(credit_notes)
    payments = list(payments)
    events: list[TimelineEvent] = []

    if doc.created_at is not None:
        events.append(TimelineEvent(
            id=f"created-{doc.id}",
            type=TimelineEventType.CREATED,
            timestamp=as_utc_datetime(doc.created_at),
            title="Invoice created",
        ))

    issued_at = _issue_timestamp(doc)
    if issued_at is not None:
        events.append(TimelineEvent(
            id=f"issued-{doc.id}",
            type=TimelineEventType.ISSUED,
            timestamp=issued_at,
            title="Invoice issued",
        ))

    for credit_note in credit_notes:
        title = f"Credit Note {credit_note.number}" if credit_note.number else "Credit Note"
        events.append(TimelineEvent(
            id=f"cn-{credit_note.id}",
            type=TimelineEventType.CREDIT_NOTE,
            timestamp=as_utc_datetime(credit_note.date),
            title=title,
            amount=credit_note_gross(credit_note),
        ))

    for payment in payments:
        method = humanize_method(payment.method)
        title = f"Payment ({method})" if method else "Payment"
        events.append(TimelineEvent(
            id=f"payment-{payment.id}",
            type=TimelineEventType.PAYMENT,
            timestamp=as_utc_datetime(payment.date),
            title=title,
            amount=payment.amount,
        ))

    if settlement.is_fully_paid and payments:
        latest = max(as_utc_datetime(payment.date) for payment in payments)
        events.append(TimelineEvent(
            id=f"paid-{doc.id}",
            type=TimelineEventType.PAID,
            timestamp=latest,
            title="Marked as paid",
        ))

    # sorted() is stable, so equal keys keep insertion order
    return sorted(events, key=lambda event: (event.timestamp, EVENT_PRIORITY[event.type]))


def _issue_timestamp(doc: TimelineDocument) -> datetime | None:
    """Explicit issue timestamp, falling back to the invoice date."""
    if not doc.is_issued:
        return None
    if doc.issued_at is not None:
        return as_utc_datetime(doc.issued_at)
    if doc.invoice_date is not None:
        return as_utc_datetime(doc.invoice_date)
    return None
