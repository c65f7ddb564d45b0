"""Typed exceptions for settlement and totals calculation failures.

A calculation either completes or raises one of these at the offending
input. Nothing partial is ever returned.
"""


class SettlementError(Exception):
    """Base class for errors raised by the settlement engine."""


class InvalidLineItem(SettlementError):
    """Line item has a negative quantity, unit price or VAT rate."""


class InvalidDiscount(SettlementError):
    """Discount value is negative or of an unknown kind."""


class InvalidSettlementInput(SettlementError):
    """Negative grand total, credit note amount or payment amount."""


class AmbiguousCreditNoteRepresentation(SettlementError):
    """
    Credit note record does not say how its amount should be read.

    Raised instead of assuming a default VAT rate for records that carry
    neither an explicit gross amount nor a VAT rate.
    """

    def __init__(self, credit_note_id):
        self.credit_note_id = credit_note_id
        super().__init__(
            f"Credit note {credit_note_id} has no VAT rate and no gross amount marker; "
            "cannot determine its gross amount"
        )
