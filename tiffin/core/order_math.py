"""Shared helpers for order totals and quantities.

All functions are pure. ``rules`` defaults to the configured constants so call
sites never hardcode fee or discount numbers.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from tiffin.core.config import PricingConfig
from tiffin.domain.line_item import LineItem

DEFAULT_RULES = PricingConfig()


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    subtotal: float
    delivery_fee: float
    discount: float
    total: float


def calc_subtotal(lines: Iterable[LineItem]) -> float:
    return sum((line.unit_price * line.quantity for line in lines), 0.0)


def calc_quantity(lines: Iterable[LineItem]) -> int:
    return sum(line.quantity for line in lines)


def calc_delivery_fee(lines: Iterable[LineItem], rules: PricingConfig = DEFAULT_RULES) -> float:
    """Flat fee for any non-empty order, zero otherwise."""
    return rules.delivery_fee if any(True for _ in lines) else 0.0


def calc_discount(subtotal: float, rules: PricingConfig = DEFAULT_RULES) -> float:
    return rules.discount_amount if subtotal > rules.discount_threshold else 0.0


def calc_total(lines: Iterable[LineItem], rules: PricingConfig = DEFAULT_RULES) -> float:
    return price_breakdown(lines, rules).total


def price_breakdown(lines: Iterable[LineItem], rules: PricingConfig = DEFAULT_RULES) -> PriceBreakdown:
    lines = list(lines)
    subtotal = calc_subtotal(lines)
    delivery_fee = calc_delivery_fee(lines, rules)
    discount = calc_discount(subtotal, rules)
    return PriceBreakdown(
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        discount=discount,
        total=subtotal + delivery_fee - discount,
    )


def price_single(item: LineItem, quantity: int | None = None, rules: PricingConfig = DEFAULT_RULES) -> PriceBreakdown:
    """Breakdown for a one-item booking that bypasses the cart."""
    line = item if quantity is None else item.with_quantity(max(int(quantity), 1))
    return price_breakdown([line], rules)
