"""In-memory cart storage for a single client session."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterable, Iterator

from tiffin.core.config import PricingConfig
from tiffin.core.constants import MIN_QUANTITY
from tiffin.core.logging_config import logger
from tiffin.core.order_math import (
    PriceBreakdown,
    calc_delivery_fee,
    calc_discount,
    calc_quantity,
    calc_subtotal,
    price_breakdown,
)
from tiffin.domain.line_item import ItemType, LineItem, coerce_quantity

CartKey = tuple[str, ItemType]


def _key(item_id: str, item_type: ItemType | str) -> CartKey | None:
    """Cart key, or None when ``item_type`` is not a known type."""
    try:
        return (str(item_id), ItemType(item_type))
    except ValueError:
        return None


class CartStore:
    """Insertion-ordered cart keyed by ``(item id, item type)``.

    Mutations never fail: bad quantities are clamped and unknown keys are
    no-ops. A quantity that would drop below 1 removes the line instead.
    """

    def __init__(self, pricing: PricingConfig | None = None):
        self._pricing = pricing or PricingConfig()
        self._items: dict[CartKey, LineItem] = {}
        self._lock = threading.RLock()

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        with self._lock:
            yield

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_to_cart(self, item: LineItem, quantity: int | None = None) -> LineItem:
        """Add ``item`` or merge into the existing line with the same key.

        Merging only increments quantity; the first-seen price and metadata
        are kept.
        """
        incoming = coerce_quantity(item.quantity if quantity is None else quantity)
        with self._mutation():
            existing = self._items.get(item.key)
            if existing is not None:
                merged = existing.with_quantity(existing.quantity + incoming)
                self._items[item.key] = merged
                logger.debug("Cart merge %s -> qty %s", item.key, merged.quantity)
                return merged

            line = item.with_quantity(incoming)
            self._items[item.key] = line
            logger.debug("Cart add %s qty %s", item.key, incoming)
            return line

    def remove_from_cart(self, item_id: str, item_type: ItemType | str) -> bool:
        key = _key(item_id, item_type)
        if key is None:
            return False
        with self._mutation():
            return self._items.pop(key, None) is not None

    def update_quantity(self, item_id: str, item_type: ItemType | str, quantity: int) -> bool:
        """Set quantity exactly; anything below 1 removes the line.

        A quantity that is not a number leaves the cart unchanged.
        """
        key = _key(item_id, item_type)
        if key is None:
            return False
        try:
            wanted = int(quantity)
        except (TypeError, ValueError, OverflowError):
            logger.debug("Ignoring non-numeric quantity %r for %s", quantity, key)
            return False
        with self._mutation():
            return self._set_quantity(key, wanted)

    def increment_quantity(self, item_id: str, item_type: ItemType | str) -> bool:
        return self._adjust(item_id, item_type, 1)

    def decrement_quantity(self, item_id: str, item_type: ItemType | str) -> bool:
        return self._adjust(item_id, item_type, -1)

    def remove_lines(self, lines: Iterable[LineItem]) -> None:
        """Subtract submitted ``lines`` from the cart.

        Only the given quantities are taken out; anything added or raised
        since the lines were read stays in the cart.
        """
        with self._mutation():
            for line in lines:
                existing = self._items.get(line.key)
                if existing is not None:
                    self._set_quantity(line.key, existing.quantity - line.quantity)

    def clear_cart(self) -> None:
        with self._mutation():
            self._items.clear()

    def _adjust(self, item_id: str, item_type: ItemType | str, delta: int) -> bool:
        key = _key(item_id, item_type)
        if key is None:
            return False
        with self._mutation():
            existing = self._items.get(key)
            if existing is None:
                return False
            return self._set_quantity(key, existing.quantity + delta)

    def _set_quantity(self, key: CartKey, quantity: int) -> bool:
        # caller holds the lock
        existing = self._items.get(key)
        if existing is None:
            return False
        if quantity < MIN_QUANTITY:
            del self._items[key]
        else:
            self._items[key] = existing.with_quantity(quantity)
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def lines(self) -> tuple[LineItem, ...]:
        with self._lock:
            return tuple(self._items.values())

    def get_item(self, item_id: str, item_type: ItemType | str) -> LineItem | None:
        key = _key(item_id, item_type)
        if key is None:
            return None
        with self._lock:
            return self._items.get(key)

    def is_empty(self) -> bool:
        with self._lock:
            return not self._items

    def item_count(self) -> int:
        """Total units across all lines (not the number of distinct lines)."""
        return calc_quantity(self.lines)

    def subtotal(self) -> float:
        return calc_subtotal(self.lines)

    def delivery_fee(self) -> float:
        return calc_delivery_fee(self.lines, self._pricing)

    def discount(self) -> float:
        return calc_discount(self.subtotal(), self._pricing)

    def total(self) -> float:
        return self.breakdown().total

    def breakdown(self) -> PriceBreakdown:
        return price_breakdown(self.lines, self._pricing)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
