"""Order domain types and status enums."""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from tiffin.core.constants import ADDRESS_PLACEHOLDER, ASAP_TIME_LABEL
from tiffin.domain.line_item import ItemType, LineItem, coerce_price, normalize_line_item


class OrderStatus(str, Enum):
    """Server-authoritative order lifecycle statuses."""

    PLACED = "placed"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    PICKED_UP = "picked_up"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, status: str | None) -> OrderStatus | None:
        """Map a raw status string to a member, or ``None`` if unrecognized."""
        if not status:
            return None
        try:
            return cls(str(status).strip().lower())
        except ValueError:
            return None


ORDER_STEPS: tuple[OrderStatus, ...] = (
    OrderStatus.PLACED,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.PICKED_UP,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


class Customer(BaseModel):
    """Identity of the person placing the order."""

    id: str | None = Field(None, description="Account ID; None means not logged in")
    name: str = Field(..., description="Customer name")
    phone: str = Field(..., description="Contact phone")
    email: str | None = Field(None, description="Contact email")
    address: str | None = Field(None, description="Saved delivery address")
    role: str = Field("customer", description="customer or rider")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.id)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Customer:
        user_id = data.get("id") or data.get("_id")
        return cls(
            id=str(user_id) if user_id else None,
            name=str(data.get("name") or ""),
            phone=str(data.get("phone") or ""),
            email=data.get("email"),
            address=data.get("address"),
            role=str(data.get("role") or "customer"),
        )

    def to_payload(self, address: str | None = None) -> dict[str, Any]:
        resolved = (address or self.address or "").strip() or ADDRESS_PLACEHOLDER
        return {
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "address": resolved,
        }


class DeliveryInfo(BaseModel):
    """When the order should arrive."""

    date: str = Field(..., description="Display date, e.g. 'Oct 19, 2026'")
    time: str = Field(ASAP_TIME_LABEL, description="Display time or 'Scheduled'")
    is_today: bool = Field(True, description="Delivery happens today")

    class Config:
        """Pydantic config."""

        frozen = True

    def to_payload(self) -> dict[str, Any]:
        return {"date": self.date, "time": self.time, "isToday": self.is_today}


class RiderInfo(BaseModel):
    name: str = ""
    phone: str | None = None
    vehicle: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> RiderInfo:
        phone = data.get("phone")
        return cls(
            name=str(data.get("name") or ""),
            phone=str(phone) if phone is not None else None,
            vehicle=data.get("vehicle"),
        )


class Order(BaseModel):
    """Order as last reported by the server.

    ``status`` is kept as the raw string the server sent; unknown values are
    preserved so the progress projection can treat them as "no steps done".
    """

    id: str
    items: list[LineItem] = Field(default_factory=list)
    customer: dict[str, Any] = Field(default_factory=dict)
    total_amount: float = 0
    payment_method: str | None = None
    notes: str | None = None
    delivery_info: dict[str, Any] = Field(default_factory=dict)
    status: str = OrderStatus.PLACED.value
    rider: RiderInfo | None = None

    @property
    def parsed_status(self) -> OrderStatus | None:
        return OrderStatus.parse(self.status)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Order:
        """Build an Order from a ``GET /orders/:id`` payload."""
        order_id = data.get("id") or data.get("_id") or data.get("orderId")
        items = []
        for raw in data.get("items") or []:
            raw_type = raw.get("type") if isinstance(raw, dict) else None
            item_type = ItemType.PACKAGE if raw_type == ItemType.PACKAGE.value else ItemType.SINGLE
            items.append(normalize_line_item(raw, item_type))
        rider = data.get("rider")
        return cls(
            id=str(order_id or ""),
            items=items,
            customer=data.get("customer") or {},
            total_amount=coerce_price(data.get("totalAmount")),
            payment_method=data.get("paymentMethod"),
            notes=data.get("notes"),
            delivery_info=data.get("deliveryInfo") or {},
            status=str(data.get("status") or ""),
            rider=RiderInfo.from_api(rider) if isinstance(rider, dict) else None,
        )
