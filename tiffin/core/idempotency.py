"""
Idempotency helpers for order creation.

A checkout attempt carries one client-generated key; retries of the same
attempt reuse it so the server can drop duplicates after a lost response.
"""
from __future__ import annotations

import uuid

IDEMPOTENCY_HEADER = "Idempotency-Key"


def new_idempotency_key() -> str:
    return uuid.uuid4().hex


def normalize_idempotency_key(value: str | None) -> str | None:
    if not value:
        return None
    cleaned = str(value).strip()
    return cleaned or None

