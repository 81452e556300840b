"""Pull-based order tracking.

Status is never advanced locally: each refresh re-reads the order from the
server and re-projects it. A push notification is only a hint to refresh.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator

from tiffin.core.logging_config import logger
from tiffin.domain.order import Order
from tiffin.domain.order_labels import status_label
from tiffin.domain.order_progress import ProgressProjection, is_terminal, project_progress, split_orders
from tiffin.integrations.orders_api import OrdersApi

DEFAULT_POLL_INTERVAL_SECONDS = 15.0


@dataclass(frozen=True)
class TrackedOrder:
    order: Order
    progress: ProgressProjection
    label: str

    @property
    def is_finished(self) -> bool:
        return is_terminal(self.order.status)


def track(order: Order) -> TrackedOrder:
    return TrackedOrder(
        order=order,
        progress=project_progress(order.status),
        label=status_label(order.status),
    )


class OrderTracker:
    def __init__(self, orders_api: OrdersApi):
        self._orders_api = orders_api

    async def refresh(self, order_id: str) -> TrackedOrder:
        order = await self._orders_api.get(order_id)
        return track(order)

    async def on_push(self, order_id: str) -> TrackedOrder:
        """Handle a push notification by pulling the current server state."""
        logger.debug("Push received for order %s, refreshing", order_id)
        return await self.refresh(order_id)

    async def watch(
        self,
        order_id: str,
        *,
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_polls: int | None = None,
    ) -> AsyncIterator[TrackedOrder]:
        """Yield fresh snapshots until the order reaches a terminal status."""
        polls = 0
        while True:
            tracked = await self.refresh(order_id)
            polls += 1
            yield tracked
            if tracked.is_finished or (max_polls is not None and polls >= max_polls):
                return
            await asyncio.sleep(interval)

    async def my_orders(self, phone: str) -> tuple[list[Order], list[Order]]:
        """Customer's orders split into (ongoing, past)."""
        return split_orders(await self._orders_api.list_for_phone(phone))
