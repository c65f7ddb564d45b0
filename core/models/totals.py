"""Document totals produced by the totals calculator. All amounts are rounded to cents."""

from decimal import Decimal

from pydantic import BaseModel


class VatBucket(BaseModel):
    """Net, discount share, taxable and VAT for one VAT rate."""

    rate: Decimal
    net: Decimal
    discount: Decimal
    taxable: Decimal
    vat: Decimal

    model_config = {"frozen": True}


class DocumentTotals(BaseModel):
    """Net subtotal, discount, taxable amount, VAT and grand total for one document."""

    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    vat_total: Decimal
    grand_total: Decimal
    vat_breakdown: tuple[VatBucket, ...] = ()

    model_config = {"frozen": True}

    @property
    def net_total(self) -> Decimal:
        """Alias for subtotal: sum of quantity x unit price before discount."""
        return self.subtotal
