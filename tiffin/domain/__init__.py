"""Domain package."""

from .line_item import ItemType, LineItem, LineItemMeta, MealType, normalize_line_item
from .order import (
    ORDER_STEPS,
    TERMINAL_STATUSES,
    Customer,
    DeliveryInfo,
    Order,
    OrderStatus,
    RiderInfo,
)
from .order_progress import ProgressProjection, StepProjection, StepState, project_progress

__all__ = [
    # Entities
    "LineItem",
    "LineItemMeta",
    "Customer",
    "DeliveryInfo",
    "Order",
    "RiderInfo",
    # Value Objects
    "ItemType",
    "MealType",
    "OrderStatus",
    "StepState",
    "ORDER_STEPS",
    "TERMINAL_STATUSES",
    # Projection
    "ProgressProjection",
    "StepProjection",
    "project_progress",
    "normalize_line_item",
]
