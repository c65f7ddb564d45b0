"""Settlement summary and the combined engine result."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from core.models.timeline import TimelineEvent
from core.models.totals import DocumentTotals


class SettlementSummary(BaseModel):
    """
    How far credit notes and payments have settled a document.

    remaining_balance may be negative: the customer has paid or been
    credited more than the grand total.
    """

    total_credits_gross: Decimal
    total_payments_gross: Decimal
    remaining_balance: Decimal
    is_fully_paid: bool
    is_overpaid: bool

    model_config = {"frozen": True}

    @property
    def total_settled(self) -> Decimal:
        """Credits plus payments."""
        return self.total_credits_gross + self.total_payments_gross


class SettlementResult(BaseModel):
    """Totals, settlement and timeline for one document snapshot."""

    document_id: UUID | str
    totals: DocumentTotals
    settlement: SettlementSummary
    timeline: tuple[TimelineEvent, ...]

    model_config = {"frozen": True}
