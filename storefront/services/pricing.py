# storefront/services/pricing.py
"""
Derived cart values.

Everything here is pure: the caller loads lines, tax rates and the coupon,
gets back a Totals and writes it in one go.
Order is fixed: subtotal -> tax -> discount -> total.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Tuple

from storefront.domain.enums import DiscountType, RecordStatus
from storefront.utils.money import Money, ZERO, D, round_money

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Totals:
    subtotal: Money
    tax: Money
    discount: Money
    total: Money


def line_total(unit_price, quantity: int) -> Money:
    return round_money(D(unit_price) * quantity)


def compute_subtotal(lines: Iterable[Tuple[Money, int]]) -> Money:
    return round_money(sum((D(price) * qty for price, qty in lines), ZERO))


def compute_tax(subtotal: Money, rates: Iterable[Money]) -> Money:
    total_rate = sum((D(r) for r in rates), ZERO)
    if total_rate == 0:
        return ZERO
    return round_money(subtotal * total_rate / HUNDRED)


def compute_discount(subtotal: Money, coupon) -> Money:
    if coupon is None:
        return ZERO

    if coupon.discount_type == DiscountType.PERCENTAGE.value:
        percent = min(D(coupon.discount), HUNDRED)
        discount = subtotal * percent / HUNDRED
    else:
        discount = D(coupon.discount)

    #never below zero, never more than what is being bought
    return round_money(max(ZERO, min(discount, subtotal)))


def is_redeemable(coupon, at: datetime | None = None) -> bool:
    if coupon is None or coupon.deleted_at is not None:
        return False
    if coupon.status != RecordStatus.ACTIVE.value:
        return False

    at = _aware(at or datetime.now(timezone.utc))
    if coupon.from_date and _aware(coupon.from_date) > at:
        return False
    if coupon.to_date and _aware(coupon.to_date) < at:
        return False
    return True


def compute_totals(lines, rates, coupon=None) -> Totals:
    lines = list(lines)
    subtotal = compute_subtotal(lines)
    tax = compute_tax(subtotal, rates)
    discount = compute_discount(subtotal, coupon)
    total = round_money(subtotal + tax - discount)
    return Totals(subtotal=subtotal, tax=tax, discount=discount, total=total)


def _aware(value: datetime) -> datetime:
    #sqlite hands back naive datetimes, everything stored is UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
