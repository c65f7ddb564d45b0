"""
Receivables aging.

Groups issued, still-outstanding invoices past their due date into
day-range buckets (1-30, 31-60, 61-90, 90+ by default).
"""

from datetime import date
from typing import Iterable

from core.config import InvoicingConfig
from core.models import (
    AgingBucket,
    AgingReport,
    DocumentStatus,
    Invoice,
    OverdueInvoice,
    SettlementSummary,
)
from core.money import ZERO, round2


def days_overdue(due_date: date, today: date) -> int:
    """Whole days past the due date, 0 if not yet past."""
    return max((today - due_date).days, 0)


def make_buckets(bounds: tuple[int, ...]) -> list[AgingBucket]:
    """Empty buckets for the given upper bounds plus one open-ended bucket."""
    buckets = []
    lower = 1
    for upper in bounds:
        buckets.append(AgingBucket(
            label=f"{lower}-{upper} days",
            range=f"{lower}-{upper}",
            min_days=lower,
            max_days=upper,
        ))
        lower = upper + 1

    buckets.append(AgingBucket(
        label=f"{bounds[-1]}+ days",
        range=f"{bounds[-1]}+",
        min_days=lower,
        max_days=None,
    ))
    return buckets


def build_aging_report(
    entries: Iterable[tuple[Invoice, SettlementSummary]],
    today: date,
    config: InvoicingConfig | None = None,
) -> AgingReport:
    """
    Bucket overdue receivables by how long they are past due.

    Only issued (not draft, not void) invoices with a due date and a
    positive remaining balance count. Bucket amounts are remaining balances.

    Args:
        entries: (invoice, settlement) pairs
        today: Reference date
        config: Bucket bounds; defaults to InvoicingConfig()

    Returns:
        AgingReport with every bucket, empty ones included
    """
    config = config or InvoicingConfig()
    buckets = make_buckets(config.aging_bucket_bounds)
    overdue: list[OverdueInvoice] = []

    for invoice, settlement in entries:
        if invoice.document_status != DocumentStatus.ISSUED or invoice.due_date is None:
            continue
        if settlement.remaining_balance <= 0:
            continue

        days = days_overdue(invoice.due_date, today)
        if days < 1:
            continue

        for bucket in buckets:
            if days >= bucket.min_days and (bucket.max_days is None or days <= bucket.max_days):
                bucket.count += 1
                bucket.amount = round2(bucket.amount + settlement.remaining_balance)
                break

        overdue.append(OverdueInvoice(
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            due_date=invoice.due_date,
            days_overdue=days,
            remaining_balance=settlement.remaining_balance,
        ))

    overdue.sort(key=lambda item: item.days_overdue, reverse=True)

    return AgingReport(
        as_of=today,
        buckets=buckets,
        total_overdue=round2(sum((b.amount for b in buckets), ZERO)),
        invoices=overdue,
    )
