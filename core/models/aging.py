"""Receivables aging models."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class OverdueInvoice(BaseModel):
    """An issued invoice past its due date with money still outstanding."""

    invoice_id: UUID
    invoice_number: str | None
    due_date: date
    days_overdue: int
    remaining_balance: Decimal


class AgingBucket(BaseModel):
    """Overdue invoices whose days overdue fall within [min_days, max_days]."""

    label: str
    range: str
    min_days: int
    max_days: int | None  # None = open ended
    count: int = 0
    amount: Decimal = Decimal("0.00")


class AgingReport(BaseModel):
    """Overdue receivables grouped into aging buckets."""

    as_of: date
    buckets: list[AgingBucket]
    total_overdue: Decimal
    invoices: list[OverdueInvoice] = Field(default_factory=list)

    def active_buckets(self) -> list[AgingBucket]:
        """Buckets that hold at least one invoice."""
        return [b for b in self.buckets if b.count > 0]
