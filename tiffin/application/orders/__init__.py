"""Order use cases."""

from .submit_order import (
    CartCheckout,
    OrderSource,
    SingleBooking,
    SubmitOrderResult,
    build_order_payload,
    submit_order,
)

__all__ = [
    "CartCheckout",
    "OrderSource",
    "SingleBooking",
    "SubmitOrderResult",
    "build_order_payload",
    "submit_order",
]
