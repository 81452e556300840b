"""Use case: turn the cart or a single booking into a server-side order."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union

from tiffin.core.cart_storage import CartStore
from tiffin.core.config import PricingConfig
from tiffin.core.exceptions import (
    EmptyOrderException,
    MissingAddressException,
    UnauthenticatedException,
)
from tiffin.core.idempotency import new_idempotency_key, normalize_idempotency_key
from tiffin.core.logging_config import logger
from tiffin.core.order_math import PriceBreakdown, price_breakdown
from tiffin.core.schedule import resolve_delivery_info
from tiffin.domain.line_item import LineItem, coerce_quantity
from tiffin.domain.order import Customer, DeliveryInfo
from tiffin.integrations.orders_api import OrdersApi


@dataclass(frozen=True)
class CartCheckout:
    """Check out everything currently in the cart."""

    address: str | None = None
    day: str | None = None
    delivery: DeliveryInfo | None = None
    notes: str | None = None


@dataclass(frozen=True)
class SingleBooking:
    """Order one menu item directly, bypassing the cart."""

    item: LineItem
    address: str
    quantity: int = 1
    day: str | None = None
    delivery: DeliveryInfo | None = None
    instructions: str | None = None


OrderSource = Union[CartCheckout, SingleBooking]


@dataclass
class SubmitOrderResult:
    order_id: str
    idempotency_key: str
    breakdown: PriceBreakdown
    from_cart: bool


def resolve_lines(source: OrderSource, cart: CartStore) -> list[LineItem]:
    if isinstance(source, SingleBooking):
        return [source.item.with_quantity(coerce_quantity(source.quantity))]
    return list(cart.lines)


def build_order_payload(
    lines: list[LineItem],
    customer: Customer,
    payment_method_label: str,
    *,
    breakdown: PriceBreakdown,
    address: str | None,
    delivery: DeliveryInfo,
    notes: str | None,
) -> dict[str, Any]:
    """Wire body for ``POST /orders``. ``totalAmount`` always comes from ``breakdown``."""
    return {
        "items": [line.to_payload() for line in lines],
        "customer": customer.to_payload(address),
        "subtotal": breakdown.subtotal,
        "deliveryFee": breakdown.delivery_fee,
        "discount": breakdown.discount,
        "totalAmount": breakdown.total,
        "paymentMethod": payment_method_label,
        "notes": notes or "",
        "deliveryInfo": delivery.to_payload(),
    }


async def submit_order(
    source: OrderSource,
    customer: Customer | None,
    payment_method_label: str,
    *,
    orders_api: OrdersApi,
    cart: CartStore,
    pricing: PricingConfig | None = None,
    idempotency_key: str | None = None,
    now: datetime | None = None,
) -> SubmitOrderResult:
    """Validate, price, and submit an order.

    Validation failures raise before any network call. Transport and server
    errors propagate unchanged and leave the cart as it was, so the caller can
    retry. On success only the submitted quantities leave the cart; items
    added while the request was in flight stay. Callers that retry should
    create one key per checkout attempt with ``new_idempotency_key()`` and
    pass it on every try so the server can recognise the duplicate.
    """
    if customer is None or not customer.is_authenticated:
        raise UnauthenticatedException()

    lines = resolve_lines(source, cart)
    if not lines:
        raise EmptyOrderException()

    if isinstance(source, SingleBooking):
        if not (source.address or "").strip():
            raise MissingAddressException()
        day = source.day or source.item.meta.day
        notes = source.instructions
    else:
        day = source.day
        notes = source.notes

    delivery = source.delivery or resolve_delivery_info(day, now)
    breakdown = price_breakdown(lines, pricing or PricingConfig())
    payload = build_order_payload(
        lines,
        customer,
        payment_method_label,
        breakdown=breakdown,
        address=source.address,
        delivery=delivery,
        notes=notes,
    )

    key = normalize_idempotency_key(idempotency_key) or new_idempotency_key()
    logger.info(
        "Submitting order: %s line(s), total %s, key %s",
        len(lines),
        breakdown.total,
        key,
    )
    order_id = await orders_api.create(payload, idempotency_key=key)

    from_cart = isinstance(source, CartCheckout)
    if from_cart:
        cart.remove_lines(lines)
    logger.info("Order %s created", order_id)
    return SubmitOrderResult(
        order_id=order_id,
        idempotency_key=key,
        breakdown=breakdown,
        from_cart=from_cart,
    )
