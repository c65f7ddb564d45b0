"""
Settlement engine: the one place invoice arithmetic happens.

Interactive views and the document export path both go through this class,
so they always agree to the cent. It holds no state; one instance can be
shared across threads and requests.
"""

from decimal import Decimal
from typing import Iterable

from core.models import (
    CreditNote,
    Discount,
    DocumentTotals,
    InvoiceSnapshot,
    LineItem,
    Payment,
    SettlementResult,
    SettlementSummary,
    TimelineDocument,
    TimelineEvent,
)
from core.settlement import compute_settlement
from core.timeline import build_timeline
from core.totals import compute_totals


class SettlementEngine:
    """Totals, settlement and timeline for document snapshots."""

    def compute_totals(
        self,
        items: Iterable[LineItem],
        discount: Discount | None = None,
    ) -> DocumentTotals:
        return compute_totals(items, discount)

    def compute_settlement(
        self,
        grand_total: Decimal,
        credit_notes: Iterable[CreditNote],
        payments: Iterable[Payment],
    ) -> SettlementSummary:
        return compute_settlement(grand_total, credit_notes, payments)

    def build_timeline(
        self,
        doc: TimelineDocument,
        credit_notes: Iterable[CreditNote],
        payments: Iterable[Payment],
        settlement: SettlementSummary,
    ) -> list[TimelineEvent]:
        return build_timeline(doc, credit_notes, payments, settlement)

    def evaluate(self, snapshot: InvoiceSnapshot) -> SettlementResult:
        """
        Run all three steps for one invoice snapshot.

        Raises:
            SettlementError: Any invalid input; no partial result is returned
        """
        invoice = snapshot.invoice

        totals = self.compute_totals(snapshot.items, invoice.discount)
        settlement = self.compute_settlement(
            totals.grand_total, snapshot.credit_notes, snapshot.payments
        )
        timeline = self.build_timeline(
            invoice.to_timeline_document(),
            snapshot.credit_notes,
            snapshot.payments,
            settlement,
        )

        return SettlementResult(
            document_id=invoice.id,
            totals=totals,
            settlement=settlement,
            timeline=tuple(timeline),
        )
