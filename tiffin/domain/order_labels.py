"""Shared status and meal-type label helpers for the UI."""
from __future__ import annotations

from tiffin.domain.line_item import MealType
from tiffin.domain.order import OrderStatus

_STATUS_LABELS = {
    OrderStatus.PLACED: "Order Placed",
    OrderStatus.CONFIRMED: "Confirmed",
    OrderStatus.PREPARING: "Preparing",
    OrderStatus.READY: "Ready for Pickup",
    OrderStatus.PICKED_UP: "Picked Up",
    OrderStatus.OUT_FOR_DELIVERY: "Out for Delivery",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}

_MEAL_TYPE_LABELS = {
    MealType.BREAKFAST: "Breakfast",
    MealType.LUNCH: "Lunch",
    MealType.DINNER: "Dinner",
}


def status_label(status: str | None) -> str:
    """Return display label for an order status; unknown values read as Pending."""
    parsed = OrderStatus.parse(status)
    if parsed is None:
        return "Pending"
    return _STATUS_LABELS[parsed]


def meal_type_label(meal_type: str | None) -> str:
    """Return display label for a meal type, falling back to Lunch."""
    try:
        return _MEAL_TYPE_LABELS[MealType(str(meal_type or "").strip().lower())]
    except ValueError:
        return _MEAL_TYPE_LABELS[MealType.LUNCH]
