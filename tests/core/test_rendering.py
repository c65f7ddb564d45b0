"""Tests for the document render/export payload."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from core.config import InvoicingConfig
from core.engine import SettlementEngine
from core.rendering import build_document_payload
from factories import item, net_credit_note, payment, snapshot


@pytest.fixture
def snap():
    return snapshot(
        items=[
            item("10", "50", "0.18", description="Consulting"),
            item("1", "100", "0", description="Travel"),
        ],
        credit_notes=[net_credit_note("10", "0.18")],
        payments=[payment("100.00")],
        discount_type="percent",
        discount_value=Decimal("10"),
        discount_reason="Loyalty",
    )


@pytest.fixture
def engine():
    return SettlementEngine()


class TestBuildDocumentPayload:

    def test_totals_match_engine(self, snap, engine):
        result = engine.evaluate(snap)

        payload = build_document_payload(snap, result)

        assert payload["totals"]["grand_total"] == f"{result.totals.grand_total:.2f}"
        assert payload["totals"]["vat_total"] == f"{result.totals.vat_total:.2f}"
        assert payload["settlement"]["remaining_balance"] == f"{result.settlement.remaining_balance:.2f}"

    def test_amounts_and_display_strings(self, snap, engine):
        payload = build_document_payload(snap, engine.evaluate(snap))

        # 600 - 60 discount = 540 taxable; 450 x 0.18 = 81 VAT
        assert payload["totals"]["subtotal"] == "600.00"
        assert payload["totals"]["discount_amount"] == "60.00"
        assert payload["totals"]["grand_total"] == "621.00"
        assert payload["totals"]["display"]["grand_total"] == "€621.00"
        assert payload["totals"]["vat_label"] == "VAT"

    def test_items_and_breakdown(self, snap, engine):
        payload = build_document_payload(snap, engine.evaluate(snap))

        assert payload["items"][0]["line_total"] == "500.00"
        assert payload["items"][0]["vat_rate"] == "18%"
        assert [b["rate"] for b in payload["vat_breakdown"]] == ["18%", "0%"]

    def test_header_fields(self, snap, engine):
        payload = build_document_payload(snap, engine.evaluate(snap))

        assert payload["invoice_number"] == "INV-0001"
        assert payload["invoice_date"] == "01/03/2024"
        assert payload["discount"] == {"kind": "percent", "value": "10", "reason": "Loyalty"}

    def test_timeline_serialized(self, snap, engine):
        payload = build_document_payload(snap, engine.evaluate(snap))

        types = [event["type"] for event in payload["timeline"]]
        assert types == ["created", "issued", "credit_note", "payment"]
        assert payload["timeline"][2]["amount"] == "11.80"

    def test_currency_from_config(self, snap, engine):
        payload = build_document_payload(snap, engine.evaluate(snap), InvoicingConfig(currency="GBP"))

        assert payload["currency"] == "GBP"
        assert payload["totals"]["display"]["grand_total"] == "£621.00"

    def test_mismatched_result_raises(self, snap, engine):
        other = engine.evaluate(snapshot(items=[item("1", "1")], id=uuid4()))

        with pytest.raises(ValueError, match="does not match"):
            build_document_payload(snap, other)

    def test_no_discount(self, engine):
        snap = snapshot(items=[item("1", "10", "0.18")], due_date=date(2024, 4, 1))

        payload = build_document_payload(snap, engine.evaluate(snap))

        assert payload["discount"] is None
        assert payload["due_date"] == "01/04/2024"
        assert payload["totals"]["vat_label"] == "VAT (18%)"
