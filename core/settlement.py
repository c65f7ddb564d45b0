"""
Settlement of a document by credit notes and payments.

Credit notes reduce what the customer owes at their gross amount, and so do
payments. The remaining balance is whatever is left of the grand total and
may go negative on overpayment.
"""

from decimal import Decimal
from typing import Iterable

from core.exceptions import AmbiguousCreditNoteRepresentation, InvalidSettlementInput
from core.models import CreditNote, GrossAmount, NetPlusVatAmount, Payment, SettlementSummary
from core.money import ZERO, round2


def credit_note_gross(credit_note: CreditNote) -> Decimal:
    """
    Gross amount of a credit note.

    Net amounts are grossed up at the note's own VAT rate; stored gross
    amounts are used as they are.

    Raises:
        InvalidSettlementInput: If the amount or VAT rate is negative
    """
    amount = credit_note.amount

    if isinstance(amount, NetPlusVatAmount):
        if amount.net < 0 or amount.vat_rate < 0:
            raise InvalidSettlementInput(
                f"Credit note {credit_note.id}: net amount and VAT rate cannot be negative"
            )
        return round2(amount.net * (1 + amount.vat_rate))

    if isinstance(amount, GrossAmount):
        if amount.gross < 0:
            raise InvalidSettlementInput(
                f"Credit note {credit_note.id}: gross amount cannot be negative"
            )
        return amount.gross

    raise AmbiguousCreditNoteRepresentation(credit_note.id)


def compute_settlement(
    grand_total: Decimal,
    credit_notes: Iterable[CreditNote],
    payments: Iterable[Payment],
) -> SettlementSummary:
    """
    Combine a document's grand total with its credit notes and payments.

    Args:
        grand_total: Document grand total (VAT included)
        credit_notes: Credit notes applied to the document
        payments: Payments received for the document

    Returns:
        SettlementSummary where remaining_balance = grand_total - credits - payments

    Raises:
        InvalidSettlementInput: Negative grand total, credit or payment amount
    """
    if grand_total < 0:
        raise InvalidSettlementInput(f"Grand total cannot be negative ({grand_total})")

    total_credits = round2(sum((credit_note_gross(cn) for cn in credit_notes), ZERO))

    total_payments = ZERO
    for payment in payments:
        if payment.amount < 0:
            raise InvalidSettlementInput(
                f"Payment {payment.id}: amount cannot be negative ({payment.amount})"
            )
        total_payments += payment.amount
    total_payments = round2(total_payments)

    remaining = round2(grand_total - total_credits - total_payments)

    return SettlementSummary(
        total_credits_gross=total_credits,
        total_payments_gross=total_payments,
        remaining_balance=remaining,
        is_fully_paid=remaining == 0,
        is_overpaid=remaining < 0,
    )
