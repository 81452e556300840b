"""Rider-side delivery actions."""
from __future__ import annotations

from tiffin.core.exceptions import UnauthenticatedException
from tiffin.core.logging_config import logger
from tiffin.domain.order import Customer, Order
from tiffin.integrations.orders_api import OrdersApi


class RiderService:
    def __init__(self, orders_api: OrdersApi):
        self._orders_api = orders_api

    async def mark_delivered(self, order_id: str, rider: Customer | None) -> Order:
        """Ask the server to mark ``order_id`` delivered, then return its view.

        The returned status is whatever the server now reports.
        """
        if rider is None or not rider.is_authenticated:
            raise UnauthenticatedException("Please log in as a rider")
        await self._orders_api.mark_delivered(order_id)
        order = await self._orders_api.get(order_id)
        logger.info("Order %s marked delivered by rider %s; server status %s", order_id, rider.id, order.status)
        return order
