"""Order progress projection (single source of truth for step rendering).

The client never advances an order itself. It re-reads the server status and
projects it onto the fixed step list below.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from tiffin.domain.order import ORDER_STEPS, TERMINAL_STATUSES, Order, OrderStatus


class StepState(str, Enum):
    COMPLETE = "complete"
    CURRENT = "current"
    PENDING = "pending"


@dataclass(frozen=True, slots=True)
class StepProjection:
    status: OrderStatus
    state: StepState

    @property
    def is_done(self) -> bool:
        """Complete or current; both render as a filled step."""
        return self.state in (StepState.COMPLETE, StepState.CURRENT)


@dataclass(frozen=True, slots=True)
class ProgressProjection:
    current_index: int
    steps: tuple[StepProjection, ...]
    cancelled: bool = False

    @property
    def completed_count(self) -> int:
        return sum(1 for step in self.steps if step.is_done)


def status_index(status: str | OrderStatus | None, steps: Sequence[OrderStatus] = ORDER_STEPS) -> int:
    """Position of ``status`` in ``steps``; -1 when absent or unrecognized."""
    parsed = status if isinstance(status, OrderStatus) else OrderStatus.parse(status)
    if parsed is None:
        return -1
    try:
        return list(steps).index(parsed)
    except ValueError:
        return -1


def project_progress(
    status: str | OrderStatus | None,
    steps: Sequence[OrderStatus] = ORDER_STEPS,
) -> ProgressProjection:
    """Project a raw server status onto ``steps``.

    Cancelled orders short-circuit: no per-step projection is produced and the
    caller shows a cancellation state instead.
    """
    parsed = status if isinstance(status, OrderStatus) else OrderStatus.parse(status)
    if parsed == OrderStatus.CANCELLED:
        return ProgressProjection(current_index=-1, steps=(), cancelled=True)

    current = status_index(parsed, steps)
    projected = []
    for index, step in enumerate(steps):
        if current < 0 or index > current:
            state = StepState.PENDING
        elif index == current:
            state = StepState.CURRENT
        else:
            state = StepState.COMPLETE
        projected.append(StepProjection(status=step, state=state))
    return ProgressProjection(current_index=current, steps=tuple(projected))


def is_terminal(status: str | None) -> bool:
    return OrderStatus.parse(status) in TERMINAL_STATUSES


def is_ongoing(status: str | None) -> bool:
    """Known, non-terminal status."""
    parsed = OrderStatus.parse(status)
    return parsed is not None and parsed not in TERMINAL_STATUSES


def is_past(status: str | None) -> bool:
    return is_terminal(status)


def split_orders(orders: Iterable[Order]) -> tuple[list[Order], list[Order]]:
    """Split orders into the "ongoing" and "past" tabs.

    Orders with unrecognized statuses appear in neither tab.
    """
    ongoing: list[Order] = []
    past: list[Order] = []
    for order in orders:
        if is_ongoing(order.status):
            ongoing.append(order)
        elif is_past(order.status):
            past.append(order)
    return ongoing, past
