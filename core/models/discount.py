"""Document-level discount, applied before VAT."""

from enum import Enum

from pydantic import BaseModel

from core.exceptions import InvalidDiscount
from core.money import Money


class DiscountKind(str, Enum):
    """How a discount value is interpreted."""

    AMOUNT = "amount"
    PERCENT = "percent"


class Discount(BaseModel):
    """
    Discount on a document's net subtotal.

    Percent values are whole percentages (10 = 10%) and are capped at 100.
    Amount values are capped at the subtotal.
    """

    kind: DiscountKind
    value: Money

    model_config = {"frozen": True}

    @classmethod
    def from_record(cls, kind: str | None, value) -> "Discount | None":
        """
        Build from the stored discount_type / discount_value columns.

        Returns None when the document has no discount.

        Raises:
            InvalidDiscount: If discount_type is not a known kind
        """
        if kind in (None, "", "none") or value is None:
            return None

        try:
            discount_kind = DiscountKind(kind)
        except ValueError:
            raise InvalidDiscount(f"Unknown discount type '{kind}'")

        return cls(kind=discount_kind, value=value)
