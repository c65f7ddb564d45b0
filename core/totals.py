"""
Document totals: subtotal, discount, taxable amount, VAT and grand total.

Order of operations is Subtotal -> Discount -> Taxable -> VAT -> Total. The
discount is applied before VAT and is spread across VAT rate buckets in
proportion to each bucket's net, so mixed-rate documents are taxed on what
was actually charged at each rate.

Every monetary intermediate is rounded with round2(), so the same inputs
always produce the same cents no matter which call site asks.
"""

from decimal import Decimal
from typing import Iterable

from core.exceptions import InvalidDiscount, InvalidLineItem
from core.models import Discount, DiscountKind, DocumentTotals, LineItem, VatBucket
from core.money import HUNDRED, ZERO, round2


def line_net(item: LineItem) -> Decimal:
    """Quantity x unit price, rounded to cents."""
    return round2(item.quantity * item.unit_price)


def calculate_discount_amount(subtotal: Decimal, discount: Discount | None) -> Decimal:
    """
    Discount in money for a given subtotal.

    Percent discounts are capped at 100%, amount discounts at the subtotal,
    so the result never exceeds the subtotal.

    Raises:
        InvalidDiscount: If the discount value is negative
    """
    if discount is None:
        return ZERO

    _validate_discount(discount)

    if discount.kind == DiscountKind.PERCENT:
        percent = min(discount.value, HUNDRED)
        return round2(subtotal * percent / HUNDRED)

    return round2(min(discount.value, subtotal))


def compute_totals(items: Iterable[LineItem], discount: Discount | None = None) -> DocumentTotals:
    """
    Compute totals for a document's line items and optional discount.

    Args:
        items: Line items with fractional VAT rates
        discount: Optional document-level discount

    Returns:
        DocumentTotals with a per-rate VAT breakdown

    Raises:
        InvalidLineItem: Negative quantity, unit price or VAT rate, or a rate above 1
        InvalidDiscount: Negative discount value
    """
    items = list(items)
    for index, item in enumerate(items):
        _validate_item(index, item)

    # Net per VAT rate, in order of first appearance
    buckets: dict[Decimal, Decimal] = {}
    subtotal = ZERO
    for item in items:
        net = line_net(item)
        subtotal += net
        buckets[item.vat_rate] = buckets.get(item.vat_rate, ZERO) + net
    subtotal = round2(subtotal)

    discount_amount = calculate_discount_amount(subtotal, discount)
    shares = _allocate_discount(buckets, subtotal, discount_amount)

    breakdown = []
    taxable = ZERO
    vat_total = ZERO
    for rate, rate_net in buckets.items():
        rate_taxable = max(rate_net - shares[rate], ZERO)
        rate_vat = round2(rate_taxable * rate)
        breakdown.append(VatBucket(
            rate=rate,
            net=round2(rate_net),
            discount=shares[rate],
            taxable=round2(rate_taxable),
            vat=rate_vat,
        ))
        taxable += rate_taxable
        vat_total += rate_vat

    taxable = round2(taxable)
    vat_total = round2(vat_total)

    return DocumentTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        taxable_amount=taxable,
        vat_total=vat_total,
        grand_total=round2(taxable + vat_total),
        vat_breakdown=tuple(breakdown),
    )


def _allocate_discount(
    buckets: dict[Decimal, Decimal],
    subtotal: Decimal,
    discount_amount: Decimal,
) -> dict[Decimal, Decimal]:
    """
    Split the discount across VAT buckets in proportion to their net.

    Each share is rounded on its own and nothing is redistributed, so the
    shares can differ from discount_amount by a cent per bucket.
    """
    if subtotal == 0:
        return {rate: ZERO for rate in buckets}

    return {
        rate: round2(discount_amount * rate_net / subtotal)
        for rate, rate_net in buckets.items()
    }


def _validate_item(index: int, item: LineItem) -> None:
    label = item.description or f"#{index + 1}"
    if item.quantity < 0:
        raise InvalidLineItem(f"Line item {label}: quantity cannot be negative ({item.quantity})")
    if item.unit_price < 0:
        raise InvalidLineItem(f"Line item {label}: unit price cannot be negative ({item.unit_price})")
    if item.vat_rate < 0:
        raise InvalidLineItem(f"Line item {label}: VAT rate cannot be negative ({item.vat_rate})")
    if item.vat_rate > 1:
        raise InvalidLineItem(
            f"Line item {label}: VAT rate {item.vat_rate} is not a fraction; "
            "normalize percentages before calculating"
        )


def _validate_discount(discount: Discount) -> None:
    if discount.value < 0:
        raise InvalidDiscount(f"Discount value cannot be negative ({discount.value})")
