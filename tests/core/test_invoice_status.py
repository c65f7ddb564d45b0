"""Tests for stored plus computed invoice status."""

from datetime import date
from decimal import Decimal

from core.invoice_status import (
    compute_due_status,
    compute_payment_status,
    get_invoice_status,
    status_for,
)
from core.models import DocumentStatus, DueStatus, Invoice, PaymentStatus
from core.settlement import compute_settlement
from factories import gross_credit_note, invoice_row, payment

TODAY = date(2024, 4, 15)


class TestPaymentStatus:

    def test_nothing_settled_is_unpaid(self):
        assert compute_payment_status(Decimal("100.00"), Decimal("0.00")) == PaymentStatus.UNPAID

    def test_some_settled_is_partial(self):
        assert compute_payment_status(Decimal("100.00"), Decimal("40.00")) == PaymentStatus.PARTIAL

    def test_settled_covers_total_is_paid(self):
        assert compute_payment_status(Decimal("100.00"), Decimal("100.00")) == PaymentStatus.PAID

    def test_overpaid_is_paid(self):
        assert compute_payment_status(Decimal("100.00"), Decimal("120.00")) == PaymentStatus.PAID


class TestDueStatus:

    def test_past_due_date_is_overdue(self):
        assert compute_due_status(date(2024, 4, 1), PaymentStatus.UNPAID, TODAY) == DueStatus.OVERDUE

    def test_due_today(self):
        assert compute_due_status(TODAY, PaymentStatus.PARTIAL, TODAY) == DueStatus.DUE

    def test_future_due_date_not_due(self):
        assert compute_due_status(date(2024, 5, 1), PaymentStatus.UNPAID, TODAY) == DueStatus.NOT_DUE

    def test_paid_never_due(self):
        assert compute_due_status(date(2024, 4, 1), PaymentStatus.PAID, TODAY) == DueStatus.NOT_DUE

    def test_no_due_date_never_due(self):
        assert compute_due_status(None, PaymentStatus.UNPAID, TODAY) == DueStatus.NOT_DUE


class TestDisplayStatus:

    def test_draft_wins(self):
        info = get_invoice_status(DocumentStatus.DRAFT, Decimal("100"), Decimal("100"), date(2024, 1, 1), TODAY)

        assert info.display_status == "draft"

    def test_void_wins_over_payment(self):
        info = get_invoice_status(DocumentStatus.VOID, Decimal("100"), Decimal("100"), None, TODAY)

        assert info.display_status == "void"

    def test_paid_wins_over_overdue(self):
        info = get_invoice_status(DocumentStatus.ISSUED, Decimal("100"), Decimal("100"), date(2024, 1, 1), TODAY)

        assert info.display_status == "paid"
        assert info.due == DueStatus.NOT_DUE

    def test_overdue_wins_over_partial(self):
        info = get_invoice_status(DocumentStatus.ISSUED, Decimal("100"), Decimal("50"), date(2024, 1, 1), TODAY)

        assert info.display_status == "overdue"
        assert info.payment == PaymentStatus.PARTIAL

    def test_partial(self):
        info = get_invoice_status(DocumentStatus.ISSUED, Decimal("100"), Decimal("50"), date(2024, 5, 1), TODAY)

        assert info.display_status == "partial"

    def test_issued_unpaid_not_due(self):
        info = get_invoice_status(DocumentStatus.ISSUED, Decimal("100"), Decimal("0"), date(2024, 5, 1), TODAY)

        assert info.display_status == "issued"


class TestStatusFor:

    def test_credit_notes_count_towards_settled(self):
        invoice = Invoice.model_validate(invoice_row(due_date=date(2024, 4, 1)))
        settlement = compute_settlement(
            Decimal("100.00"), [gross_credit_note("60.00")], [payment("40.00")]
        )

        info = status_for(invoice, Decimal("100.00"), settlement, TODAY)

        assert info.payment == PaymentStatus.PAID
        assert info.display_status == "paid"

    def test_unissued_invoice_is_draft(self):
        invoice = Invoice.model_validate(invoice_row(is_issued=False, status="draft"))
        settlement = compute_settlement(Decimal("100.00"), [], [])

        assert status_for(invoice, Decimal("100.00"), settlement, TODAY).document == DocumentStatus.DRAFT
