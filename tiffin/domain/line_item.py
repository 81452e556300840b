"""Line item entity and the boundary adapter that produces it."""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from tiffin.core.constants import DEFAULT_ITEM_NAME, MIN_QUANTITY


class ItemType(str, Enum):
    """Kinds of sellable items."""

    PACKAGE = "package"
    SINGLE = "single"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class LineItemMeta(BaseModel):
    """Menu context carried along with a line item."""

    day: str | None = Field(None, description="Weekday the package is served")
    meal_type: str | None = Field(None, description="breakfast / lunch / dinner")
    category: str | None = Field(None, description="A-la-carte category")
    package_contents: list[LineItem] = Field(
        default_factory=list, description="Sub-items of a package meal"
    )

    class Config:
        """Pydantic config."""

        frozen = True


class LineItem(BaseModel):
    """One priced, quantified entry in a cart or order.

    Identity for merging is the ``(id, type)`` pair; see :attr:`key`.
    """

    id: str = Field(..., description="Menu item ID")
    type: ItemType = Field(ItemType.SINGLE, description="package or single")
    name: str = Field(DEFAULT_ITEM_NAME, description="Display name")
    unit_price: float = Field(0, ge=0, description="Price for one unit")
    quantity: int = Field(MIN_QUANTITY, ge=MIN_QUANTITY, description="Units ordered")
    image: str | None = Field(None, description="Image URL")
    meta: LineItemMeta = Field(default_factory=LineItemMeta)

    class Config:
        """Pydantic config."""

        frozen = True

    @property
    def key(self) -> tuple[str, ItemType]:
        return (self.id, self.type)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    @property
    def is_package(self) -> bool:
        return self.type == ItemType.PACKAGE

    def with_quantity(self, quantity: int) -> LineItem:
        """Copy of this line with ``quantity`` replaced."""
        return self.model_copy(update={"quantity": quantity})

    def to_payload(self) -> dict[str, Any]:
        """Wire shape used inside ``POST /orders`` bodies."""
        payload: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "quantity": self.quantity,
            "price": self.unit_price,
            "image": self.image,
            "day": self.meta.day,
            "mealType": self.meta.meal_type,
            "category": self.meta.category,
        }
        if self.is_package:
            payload["items"] = [
                {"name": sub.name, "image": sub.image} for sub in self.meta.package_contents
            ]
        return payload


LineItemMeta.model_rebuild()
LineItem.model_rebuild()


def coerce_price(value: Any) -> float:
    try:
        price = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    return max(price, 0.0)


def coerce_quantity(value: Any) -> int:
    try:
        quantity = int(value)
    except (TypeError, ValueError, OverflowError):
        return MIN_QUANTITY
    return max(quantity, MIN_QUANTITY)


def _blank_to_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_line_item(
    raw: Any,
    item_type: ItemType | str = ItemType.SINGLE,
    *,
    day: str | None = None,
    quantity: Any = None,
) -> LineItem:
    """Turn a menu record (dict, bare name string, or LineItem) into a LineItem.

    Menu payloads are loose: package contents arrive either as plain strings or
    as ``{"name", "image"}`` objects, IDs as ``id`` or ``_id``. Core code only
    ever sees the normalized shape.
    """
    item_type = ItemType(item_type)

    if isinstance(raw, LineItem):
        if quantity is None:
            return raw
        return raw.with_quantity(coerce_quantity(quantity))

    if isinstance(raw, str):
        name = raw.strip() or DEFAULT_ITEM_NAME
        return LineItem(
            id=name,
            type=item_type,
            name=name,
            quantity=coerce_quantity(quantity) if quantity is not None else MIN_QUANTITY,
            meta=LineItemMeta(day=day),
        )

    if not isinstance(raw, dict):
        raise TypeError(f"Cannot build a line item from {type(raw).__name__}")

    item_id = _blank_to_none(raw.get("id")) or _blank_to_none(raw.get("_id"))
    name = _blank_to_none(raw.get("name")) or DEFAULT_ITEM_NAME
    contents = [
        normalize_line_item(sub, ItemType.SINGLE) for sub in (raw.get("items") or [])
    ]
    if quantity is None:
        quantity = raw.get("quantity", MIN_QUANTITY)

    return LineItem(
        id=item_id or name,
        type=item_type,
        name=name,
        unit_price=coerce_price(raw.get("price")),
        quantity=coerce_quantity(quantity),
        image=_blank_to_none(raw.get("image")),
        meta=LineItemMeta(
            day=day or _blank_to_none(raw.get("day")),
            meal_type=_blank_to_none(raw.get("mealType")),
            category=_blank_to_none(raw.get("category")),
            package_contents=contents,
        ),
    )
