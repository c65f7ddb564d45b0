"""
Document payload for the PDF/HTML renderer and exports.

Turns a snapshot and its engine result into plain JSON-ready data. Numbers
are emitted as fixed two-decimal strings next to their formatted display
form; nothing here recomputes a total. Layout, colours and fonts belong to
the renderer, not to this payload.
"""

from decimal import Decimal
from typing import Any

from core.config import InvoicingConfig
from core.formatting import format_date, format_money, format_percent, vat_label
from core.models import InvoiceSnapshot, SettlementResult
from core.money import round2
from core.totals import line_net


def _amount(value: Decimal) -> str:
    return f"{round2(value):.2f}"


def build_document_payload(
    snapshot: InvoiceSnapshot,
    result: SettlementResult,
    config: InvoicingConfig | None = None,
) -> dict[str, Any]:
    """
    Build the render/export payload for one invoice.

    Args:
        snapshot: The snapshot the result was computed from
        result: SettlementEngine.evaluate(snapshot)
        config: Currency settings; defaults to InvoicingConfig()

    Raises:
        ValueError: If the result belongs to a different document
    """
    config = config or InvoicingConfig()
    invoice = snapshot.invoice

    if str(result.document_id) != str(invoice.id):
        raise ValueError(
            f"Result for document {result.document_id} does not match invoice {invoice.id}"
        )

    def money(value: Decimal) -> str:
        return format_money(value, config.currency)

    totals = result.totals
    settlement = result.settlement
    discount = invoice.discount

    return {
        "document_id": str(invoice.id),
        "invoice_number": invoice.invoice_number,
        "invoice_date": format_date(invoice.invoice_date) if invoice.invoice_date else None,
        "due_date": format_date(invoice.due_date) if invoice.due_date else None,
        "currency": config.currency,
        "items": [
            {
                "description": item.description,
                "quantity": str(item.quantity),
                "unit": item.unit,
                "unit_price": _amount(item.unit_price),
                "vat_rate": format_percent(item.vat_rate),
                "line_total": _amount(line_net(item)),
                "line_total_display": money(line_net(item)),
            }
            for item in snapshot.items
        ],
        "discount": {
            "kind": discount.kind.value,
            "value": str(discount.value),
            "reason": invoice.discount_reason,
        } if discount else None,
        "totals": {
            "subtotal": _amount(totals.subtotal),
            "discount_amount": _amount(totals.discount_amount),
            "taxable_amount": _amount(totals.taxable_amount),
            "vat_total": _amount(totals.vat_total),
            "grand_total": _amount(totals.grand_total),
            "vat_label": vat_label(snapshot.items),
            "display": {
                "subtotal": money(totals.subtotal),
                "discount_amount": money(totals.discount_amount),
                "taxable_amount": money(totals.taxable_amount),
                "vat_total": money(totals.vat_total),
                "grand_total": money(totals.grand_total),
            },
        },
        "vat_breakdown": [
            {
                "rate": format_percent(bucket.rate),
                "taxable": _amount(bucket.taxable),
                "vat": _amount(bucket.vat),
            }
            for bucket in totals.vat_breakdown
        ],
        "settlement": {
            "total_credits_gross": _amount(settlement.total_credits_gross),
            "total_payments_gross": _amount(settlement.total_payments_gross),
            "remaining_balance": _amount(settlement.remaining_balance),
            "remaining_balance_display": money(settlement.remaining_balance),
            "is_fully_paid": settlement.is_fully_paid,
            "is_overpaid": settlement.is_overpaid,
        },
        "timeline": [
            {
                "id": event.id,
                "type": event.type.value,
                "timestamp": event.timestamp.isoformat(),
                "title": event.title,
                "amount": _amount(event.amount) if event.amount is not None else None,
            }
            for event in result.timeline
        ],
    }
