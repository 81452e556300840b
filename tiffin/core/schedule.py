"""Delivery date helpers for weekly menu bookings."""
from __future__ import annotations

from datetime import datetime, timedelta

from tiffin.core.constants import ASAP_TIME_LABEL, SCHEDULED_TIME_LABEL, WEEKDAYS
from tiffin.domain.order import DeliveryInfo


def format_display_date(value: datetime) -> str:
    """``Oct 19, 2026``"""
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def format_display_time(value: datetime) -> str:
    """``2:05 PM``"""
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {'AM' if value.hour < 12 else 'PM'}"


def days_until(day: str, now: datetime) -> int | None:
    """Days from ``now`` to the next ``day`` (0 for today, 1..6 otherwise)."""
    wanted = day.strip().capitalize()
    if wanted not in WEEKDAYS:
        return None
    return (WEEKDAYS.index(wanted) - now.weekday()) % 7


def resolve_delivery_info(day: str | None = None, now: datetime | None = None) -> DeliveryInfo:
    """Resolve when a booking for ``day`` will be delivered.

    No day (or an unrecognized one) means today, as soon as possible.
    """
    now = now or datetime.now()
    offset = days_until(day, now) if day else None

    if offset is None:
        return DeliveryInfo(date=format_display_date(now), time=ASAP_TIME_LABEL, is_today=True)
    if offset == 0:
        return DeliveryInfo(date=format_display_date(now), time=format_display_time(now), is_today=True)

    target = now + timedelta(days=offset)
    return DeliveryInfo(date=format_display_date(target), time=SCHEDULED_TIME_LABEL, is_today=False)
