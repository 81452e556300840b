"""Order endpoints."""
from __future__ import annotations

from typing import Any

from tiffin.core.exceptions import InvalidResponseException
from tiffin.core.idempotency import IDEMPOTENCY_HEADER, normalize_idempotency_key
from tiffin.domain.order import Order
from tiffin.integrations.api_client import ApiClient


def _extract_order_id(data: Any) -> str:
    if isinstance(data, dict):
        order_id = data.get("id") or data.get("_id") or data.get("orderId")
        if order_id:
            return str(order_id)
    raise InvalidResponseException("Order was created but no order id was returned")


def _order_records(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, list):
        return [row for row in data if isinstance(row, dict)]
    if isinstance(data, dict):
        return _order_records(data.get("orders") or [])
    return []


class OrdersApi:
    def __init__(self, client: ApiClient):
        self._client = client

    async def create(self, payload: dict[str, Any], *, idempotency_key: str | None = None) -> str:
        """``POST /orders``; returns the new order id."""
        headers = None
        key = normalize_idempotency_key(idempotency_key)
        if key:
            headers = {IDEMPOTENCY_HEADER: key}
        data = await self._client.post("/orders", payload, headers=headers)
        return _extract_order_id(data)

    async def get(self, order_id: str) -> Order:
        data = await self._client.get(f"/orders/{order_id}")
        if not isinstance(data, dict):
            raise InvalidResponseException(f"Order {order_id} not found in response")
        record = data.get("order") if isinstance(data.get("order"), dict) else data
        return Order.from_api(record)

    async def list_for_phone(self, phone: str) -> list[Order]:
        data = await self._client.get("/orders", params={"phone": phone})
        return [Order.from_api(row) for row in _order_records(data)]

    async def mark_delivered(self, order_id: str) -> None:
        await self._client.put(f"/orders/{order_id}/delivered")
