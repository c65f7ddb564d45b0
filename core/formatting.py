"""
Display formatting for amounts, rates and dates.

Deterministic on purpose: output does not depend on the server locale, so
the on-screen summary and the exported document show the same strings.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable

from core.models import LineItem
from core.money import HUNDRED, normalize_vat_rate, round2

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "GBP": "£",
    "USD": "$",
}


def format_money(amount: Decimal | int, currency: str = "EUR") -> str:
    """Format an amount with its currency symbol, e.g. €1,234.50 or -€10.00."""
    value = round2(amount)
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_percent(rate: Decimal | int | str) -> str:
    """Format a VAT rate as a percentage, e.g. 0.18 -> 18%, 0.055 -> 5.5%."""
    percent = (normalize_vat_rate(rate) * HUNDRED).normalize()
    return f"{percent:f}%"


def vat_label(items: Iterable[LineItem]) -> str:
    """'VAT (18%)' when every item shares one rate, plain 'VAT' otherwise."""
    rates = {normalize_vat_rate(item.vat_rate) for item in items}
    if len(rates) == 1:
        return f"VAT ({format_percent(rates.pop())})"
    return "VAT"


def format_date(value: date) -> str:
    """dd/mm/yyyy."""
    return value.strftime("%d/%m/%Y")


def humanize_method(method: str | None) -> str:
    """bank_transfer -> Bank Transfer. Empty string when no method is recorded."""
    if not method:
        return ""
    words = method.replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)
