"""Tests for the checkout use case."""
from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any

import pytest

from tiffin.application.orders.submit_order import (
    CartCheckout,
    SingleBooking,
    submit_order,
)
from tiffin.core.cart_storage import CartStore
from tiffin.core.constants import ADDRESS_PLACEHOLDER
from tiffin.core.exceptions import (
    ApiTimeoutException,
    EmptyOrderException,
    MissingAddressException,
    ServerRejectedException,
    UnauthenticatedException,
)
from tiffin.core.idempotency import IDEMPOTENCY_HEADER
from tiffin.domain.line_item import LineItem
from tiffin.domain.order import Customer, DeliveryInfo

MONDAY_NOON = datetime(2026, 10, 19, 12, 0)


class DummyOrdersApi:
    def __init__(self, order_id: str = "ord-1", error: Exception | None = None):
        self.order_id = order_id
        self.error = error
        self.calls: list[tuple[dict[str, Any], str | None]] = []

    async def create(self, payload: dict[str, Any], *, idempotency_key: str | None = None) -> str:
        self.calls.append((payload, idempotency_key))
        if self.error is not None:
            raise self.error
        return self.order_id


class SlowOrdersApi(DummyOrdersApi):
    """Holds every create call until ``release`` is set."""

    def __init__(self, order_id: str = "ord-1"):
        super().__init__(order_id)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def create(self, payload: dict[str, Any], *, idempotency_key: str | None = None) -> str:
        self.started.set()
        await self.release.wait()
        return await super().create(payload, idempotency_key=idempotency_key)


@pytest.mark.asyncio
async def test_empty_cart_fails_without_network_call(customer: Customer) -> None:
    api = DummyOrdersApi()
    with pytest.raises(EmptyOrderException) as exc_info:
        await submit_order(CartCheckout(), customer, "UPI", orders_api=api, cart=CartStore())
    assert exc_info.value.category == "domain_error"
    assert api.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("who", [None, Customer(name="Guest", phone="1")])
async def test_unauthenticated_fails_without_network_call(who, single_item: LineItem) -> None:
    api = DummyOrdersApi()
    cart = CartStore()
    cart.add_to_cart(single_item)
    with pytest.raises(UnauthenticatedException):
        await submit_order(CartCheckout(), who, "UPI", orders_api=api, cart=cart)
    assert api.calls == []
    assert cart.item_count() == 1


@pytest.mark.asyncio
async def test_booking_requires_address(customer: Customer, package_item: LineItem) -> None:
    api = DummyOrdersApi()
    with pytest.raises(MissingAddressException):
        await submit_order(
            SingleBooking(item=package_item, address="   "),
            customer,
            "Cash on Delivery",
            orders_api=api,
            cart=CartStore(),
        )
    assert api.calls == []


@pytest.mark.asyncio
async def test_cart_checkout_success_clears_cart(customer: Customer, package_item: LineItem) -> None:
    api = DummyOrdersApi(order_id="ord-77")
    cart = CartStore()
    cart.add_to_cart(package_item)
    cart.add_to_cart(package_item)

    result = await submit_order(
        CartCheckout(address="12 MG Road"), customer, "UPI", orders_api=api, cart=cart, now=MONDAY_NOON
    )

    assert result.order_id == "ord-77"
    assert result.from_cart
    assert cart.lines == ()
    payload, key = api.calls[0]
    assert key == result.idempotency_key
    assert payload["totalAmount"] == 290
    assert payload["customer"]["address"] == "12 MG Road"
    assert payload["paymentMethod"] == "UPI"
    assert payload["deliveryInfo"] == {"date": "Oct 19, 2026", "time": "ASAP", "isToday": True}
    assert payload["items"][0]["quantity"] == 2


@pytest.mark.asyncio
async def test_booking_success_leaves_cart_untouched(
    customer: Customer, package_item: LineItem, single_item: LineItem
) -> None:
    api = DummyOrdersApi()
    cart = CartStore()
    cart.add_to_cart(single_item, 3)

    result = await submit_order(
        SingleBooking(item=package_item, quantity=2, address="Flat 4B", instructions="Ring twice"),
        customer,
        "Card",
        orders_api=api,
        cart=cart,
        now=MONDAY_NOON,
    )

    assert not result.from_cart
    assert cart.item_count() == 3
    payload, _ = api.calls[0]
    assert [item["id"] for item in payload["items"]] == ["p1"]
    assert payload["items"][0]["items"] == [{"name": "Dal", "image": None}, {"name": "Rice", "image": None}]
    assert payload["notes"] == "Ring twice"
    # package is for Monday and "now" is Monday
    assert payload["deliveryInfo"]["isToday"] is True
    assert payload["deliveryInfo"]["time"] == "12:00 PM"


@pytest.mark.asyncio
async def test_total_is_recomputed_not_trusted(customer: Customer, single_item: LineItem) -> None:
    api = DummyOrdersApi()
    cart = CartStore()
    cart.add_to_cart(single_item, 2)

    result = await submit_order(CartCheckout(), customer, "UPI", orders_api=api, cart=cart)

    assert result.breakdown.total == 100
    assert api.calls[0][0]["totalAmount"] == 100


@pytest.mark.asyncio
async def test_missing_address_uses_profile_then_placeholder(customer: Customer, single_item: LineItem) -> None:
    api = DummyOrdersApi()
    cart = CartStore()
    cart.add_to_cart(single_item)
    await submit_order(CartCheckout(), customer, "UPI", orders_api=api, cart=cart)
    assert api.calls[0][0]["customer"]["address"] == ADDRESS_PLACEHOLDER

    cart.add_to_cart(single_item)
    with_profile = customer.model_copy(update={"address": "Home, Sector 5"})
    await submit_order(CartCheckout(), with_profile, "UPI", orders_api=api, cart=cart)
    assert api.calls[1][0]["customer"]["address"] == "Home, Sector 5"


@pytest.mark.asyncio
async def test_explicit_schedule_wins(customer: Customer, single_item: LineItem) -> None:
    api = DummyOrdersApi()
    cart = CartStore()
    cart.add_to_cart(single_item)
    scheduled = DeliveryInfo(date="Oct 24, 2026", time="Scheduled", is_today=False)

    await submit_order(CartCheckout(delivery=scheduled), customer, "UPI", orders_api=api, cart=cart)

    assert api.calls[0][0]["deliveryInfo"] == {"date": "Oct 24, 2026", "time": "Scheduled", "isToday": False}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [ApiTimeoutException(), ServerRejectedException("Out of stock")],
)
async def test_failure_keeps_cart_and_propagates(customer: Customer, single_item: LineItem, error) -> None:
    api = DummyOrdersApi(error=error)
    cart = CartStore()
    cart.add_to_cart(single_item, 2)

    with pytest.raises(type(error)) as exc_info:
        await submit_order(CartCheckout(), customer, "UPI", orders_api=api, cart=cart)

    assert exc_info.value is error
    assert cart.item_count() == 2


@pytest.mark.asyncio
async def test_retry_reuses_caller_key(customer: Customer, single_item: LineItem) -> None:
    api = DummyOrdersApi(error=ApiTimeoutException())
    cart = CartStore()
    cart.add_to_cart(single_item)

    with pytest.raises(ApiTimeoutException):
        await submit_order(CartCheckout(), customer, "UPI", orders_api=api, cart=cart, idempotency_key="attempt-1")
    api.error = None
    result = await submit_order(
        CartCheckout(), customer, "UPI", orders_api=api, cart=cart, idempotency_key="attempt-1"
    )

    assert [key for _, key in api.calls] == ["attempt-1", "attempt-1"]
    assert result.idempotency_key == "attempt-1"


@pytest.mark.asyncio
async def test_end_to_end_against_backend(orders_api, backend, customer: Customer, package_item: LineItem) -> None:
    cart = CartStore()
    cart.add_to_cart(package_item)

    result = await submit_order(
        CartCheckout(address="12 MG Road", notes="No onions"),
        customer,
        "UPI Payment",
        orders_api=orders_api,
        cart=cart,
    )

    assert result.order_id == "ord-1"
    assert cart.is_empty()
    request = backend.requests[-1]
    assert request["headers"][IDEMPOTENCY_HEADER] == result.idempotency_key
    assert request["body"]["totalAmount"] == 170
    assert backend.orders["ord-1"]["customer"]["phone"] == customer.phone


@pytest.mark.asyncio
async def test_server_rejection_over_http_keeps_cart(orders_api, backend, customer: Customer, single_item: LineItem) -> None:
    backend.create_envelope = {"success": False, "message": "Delivery not available in your area"}
    cart = CartStore()
    cart.add_to_cart(single_item)

    with pytest.raises(ServerRejectedException) as exc_info:
        await submit_order(CartCheckout(), customer, "UPI", orders_api=orders_api, cart=cart)

    assert exc_info.value.message == "Delivery not available in your area"
    assert cart.item_count() == 1


@pytest.mark.asyncio
async def test_items_added_during_submission_stay_in_cart(
    customer: Customer, single_item: LineItem, package_item: LineItem
) -> None:
    api = SlowOrdersApi()
    cart = CartStore()
    cart.add_to_cart(single_item)

    task = asyncio.create_task(submit_order(CartCheckout(), customer, "UPI", orders_api=api, cart=cart))
    await api.started.wait()
    cart.add_to_cart(package_item)
    cart.add_to_cart(single_item)
    api.release.set()
    await task

    assert [item["id"] for item in api.calls[0][0]["items"]] == ["s1"]
    assert [(line.id, line.quantity) for line in cart.lines] == [("s1", 1), ("p1", 1)]


@pytest.mark.asyncio
async def test_booking_with_unusable_quantity_orders_one(customer: Customer, package_item: LineItem) -> None:
    api = DummyOrdersApi()

    await submit_order(
        SingleBooking(item=package_item, address="Flat 4B", quantity=None),
        customer,
        "UPI",
        orders_api=api,
        cart=CartStore(),
    )

    assert api.calls[0][0]["items"][0]["quantity"] == 1
