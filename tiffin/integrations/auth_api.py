"""Authentication endpoints."""
from __future__ import annotations

from typing import Any

from tiffin.integrations.api_client import ApiClient


class AuthApi:
    def __init__(self, client: ApiClient):
        self._client = client

    async def login(self, phone: str, password: str) -> dict[str, Any]:
        """Returns ``{"user": {...}, "token": "..."}``."""
        data = await self._client.post("/auth/login", {"phone": phone, "password": password})
        return data if isinstance(data, dict) else {}

    async def register(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        password: str,
        role: str = "customer",
    ) -> dict[str, Any]:
        data = await self._client.post(
            "/auth/register",
            {"name": name, "email": email, "phone": phone, "password": password, "role": role},
        )
        return data if isinstance(data, dict) else {}
