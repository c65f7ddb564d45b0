"""
Line item value model.

Amounts are Decimal. vat_rate is a fraction (0.18 = 18%), never a
whole-number percentage. Stored or UI percentages are converted with
core.money.normalize_vat_rate before they reach the engine.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from core.money import Money, normalize_vat_rate


class LineItem(BaseModel):
    """A single billable line as it enters a totals calculation."""

    description: str = ""
    quantity: Money
    unit_price: Money
    vat_rate: Money = Decimal("0")
    unit: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> "LineItem":
        """Build from an invoice_items / quotation_items / credit_note_items row."""
        return cls(
            description=row.get("description") or "",
            quantity=row["quantity"],
            unit_price=row["unit_price"],
            vat_rate=normalize_vat_rate(row.get("vat_rate")),
            unit=row.get("unit"),
        )
