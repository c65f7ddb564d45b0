"""
Invoice service: loads invoice snapshots and runs them through the engine.

Every read path (drawer view, list, aging, PDF export) goes through
summarize() or summarize_many(), so all of them show the same numbers.
Rows are user-scoped by RLS; the user comes from the request's user context.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable
from uuid import UUID

from clients.postgres_client import PostgresClient
from core.aging import build_aging_report
from core.config import InvoicingConfig
from core.engine import SettlementEngine
from core.exceptions import SettlementError
from core.invoice_status import status_for
from core.models import (
    AgingReport,
    CreditNote,
    Discount,
    DocumentTotals,
    Invoice,
    InvoiceSnapshot,
    InvoiceStatusInfo,
    LineItem,
    Payment,
    SettlementResult,
    SettlementSummary,
)
from core.rendering import build_document_payload
from utils.timezone import today_utc

logger = logging.getLogger(__name__)


class InvoiceService:
    """Service for invoice totals, settlement and status."""

    def __init__(
        self,
        postgres: PostgresClient,
        engine: SettlementEngine | None = None,
        config: InvoicingConfig | None = None,
    ):
        self.postgres = postgres
        self.engine = engine or SettlementEngine()
        self.config = config or InvoicingConfig()

    def load_snapshot(self, invoice_id: UUID) -> InvoiceSnapshot | None:
        """
        Load an invoice with its items, credit notes and payments.

        All four reads run in one transaction, so the snapshot is
        internally consistent.

        Args:
            invoice_id: Invoice UUID

        Returns:
            InvoiceSnapshot, or None if the invoice does not exist

        Raises:
            AmbiguousCreditNoteRepresentation: A credit note row lacks a VAT rate
        """
        invoice_rows, item_rows, credit_note_rows, payment_rows = self.postgres.execute_snapshot([
            ("SELECT * FROM invoices WHERE id = %s", (invoice_id,)),
            (
                """
                SELECT id, description, quantity, unit_price, vat_rate, unit
                FROM invoice_items
                WHERE invoice_id = %s
                ORDER BY created_at ASC, id ASC
                """,
                (invoice_id,),
            ),
            (
                """
                SELECT id, credit_note_number, credit_note_date, created_at,
                       amount, vat_rate, amount_kind, reason
                FROM credit_notes
                WHERE invoice_id = %s
                ORDER BY credit_note_date ASC, id ASC
                """,
                (invoice_id,),
            ),
            (
                """
                SELECT id, payment_date, created_at, amount, method
                FROM payments
                WHERE invoice_id = %s
                ORDER BY payment_date ASC, id ASC
                """,
                (invoice_id,),
            ),
        ])

        if not invoice_rows:
            return None

        snapshot = InvoiceSnapshot(
            invoice=Invoice.model_validate(invoice_rows[0]),
            items=tuple(LineItem.from_record(row) for row in item_rows),
            credit_notes=tuple(CreditNote.from_record(row) for row in credit_note_rows),
            payments=tuple(Payment.from_record(row) for row in payment_rows),
        )

        logger.debug(
            "Loaded invoice %s: %d items, %d credit notes, %d payments",
            invoice_id, len(item_rows), len(credit_note_rows), len(payment_rows),
        )
        return snapshot

    def summarize(self, invoice_id: UUID) -> SettlementResult:
        """
        Totals, settlement and timeline for one invoice.

        Raises:
            ValueError: If the invoice is not found
            SettlementError: If totals cannot be computed from the stored data
        """
        return self.evaluate(self._require_snapshot(invoice_id))

    def summarize_many(self, invoice_ids: Iterable[UUID]) -> dict[UUID, SettlementResult]:
        """
        Summaries for several invoices, for batch export.

        Each invoice is loaded as its own snapshot. Stops at the first
        invoice that is missing or cannot be computed.
        """
        return {invoice_id: self.summarize(invoice_id) for invoice_id in invoice_ids}

    def evaluate(self, snapshot: InvoiceSnapshot) -> SettlementResult:
        """Run a loaded snapshot through the engine, logging failures."""
        try:
            return self.engine.evaluate(snapshot)
        except SettlementError as e:
            logger.warning("Cannot compute totals for invoice %s: %s", snapshot.invoice.id, e)
            raise

    def status(
        self,
        snapshot: InvoiceSnapshot,
        result: SettlementResult,
        today: date | None = None,
    ) -> InvoiceStatusInfo:
        """Stored plus computed status for an evaluated snapshot."""
        return status_for(
            snapshot.invoice,
            result.totals.grand_total,
            result.settlement,
            today or today_utc(),
        )

    def document_payload(self, invoice_id: UUID) -> dict[str, Any]:
        """Render/export payload for one invoice."""
        snapshot = self._require_snapshot(invoice_id)
        return build_document_payload(snapshot, self.evaluate(snapshot), self.config)

    def list_unpaid(self, limit: int | None = None) -> list[tuple[Invoice, SettlementResult]]:
        """
        Issued invoices with money still outstanding.

        Args:
            limit: Maximum candidate invoices to consider

        Returns:
            (invoice, result) pairs ordered by due date, oldest first
        """
        limit = min(limit or self.config.default_list_limit, self.config.max_list_limit)
        rows = self.postgres.execute(
            """
            SELECT id FROM invoices
            WHERE is_issued = true
              AND COALESCE(status, '') NOT IN ('void', 'paid')
            ORDER BY COALESCE(due_date, invoice_date) ASC, id ASC
            LIMIT %s
            """,
            (limit,)
        )

        unpaid = []
        for row in rows:
            snapshot = self._require_snapshot(row["id"])
            result = self.evaluate(snapshot)
            if result.settlement.remaining_balance > 0:
                unpaid.append((snapshot.invoice, result))
        return unpaid

    def aging_report(self, today: date | None = None) -> AgingReport:
        """Overdue receivables bucketed by days past due."""
        today = today or today_utc()
        rows = self.postgres.execute(
            """
            SELECT id FROM invoices
            WHERE is_issued = true
              AND COALESCE(status, '') <> 'void'
              AND due_date < %s
            ORDER BY due_date ASC, id ASC
            """,
            (today,)
        )

        entries = []
        for row in rows:
            snapshot = self._require_snapshot(row["id"])
            entries.append((snapshot.invoice, self.evaluate(snapshot).settlement))

        return build_aging_report(entries, today, self.config)

    def preview_totals(
        self,
        items: Iterable[LineItem],
        discount: Discount | None = None,
    ) -> DocumentTotals:
        """Totals for unsaved form data (new invoice, quotation or credit note)."""
        return self.engine.compute_totals(items, discount)

    def preview_settlement(
        self,
        grand_total: Decimal,
        credit_notes: Iterable[CreditNote],
        payments: Iterable[Payment],
    ) -> SettlementSummary:
        """Settlement for unsaved credit notes or payments."""
        return self.engine.compute_settlement(grand_total, credit_notes, payments)

    def _require_snapshot(self, invoice_id: UUID) -> InvoiceSnapshot:
        snapshot = self.load_snapshot(invoice_id)
        if snapshot is None:
            raise ValueError(f"Invoice {invoice_id} not found")
        return snapshot
