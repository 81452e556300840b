"""Login session holder.

Session persistence is delegated to an injected key-value store (the
platform's secure storage on device). Failing to read it back is not an
error: the user is simply treated as logged out.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Protocol

from tiffin.core.constants import SESSION_TOKEN_KEY, SESSION_USER_KEY
from tiffin.core.exceptions import ServerRejectedException, TiffinException
from tiffin.core.logging_config import logger
from tiffin.domain.order import Customer
from tiffin.integrations.auth_api import AuthApi


class SessionStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


@dataclass
class AuthResult:
    ok: bool
    message: str | None = None
    category: str | None = None


class AuthService:
    def __init__(self, auth_api: AuthApi, store: SessionStore):
        self._auth_api = auth_api
        self._store = store
        self._customer: Customer | None = None
        self._token: str | None = None

    @property
    def customer(self) -> Customer | None:
        return self._customer

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._customer is not None and self._customer.is_authenticated

    async def restore(self) -> Customer | None:
        """Reload a persisted session; any storage problem means logged out."""
        try:
            raw_user = await self._store.get(SESSION_USER_KEY)
            token = await self._store.get(SESSION_TOKEN_KEY)
            if not raw_user or not token:
                self._clear()
                return None
            self._customer = Customer.from_api(json.loads(raw_user))
            self._token = token
        except Exception as exc:
            logger.warning("Error checking login status: %s", exc)
            self._clear()
            return None
        return self._customer

    async def login(self, phone: str, password: str) -> AuthResult:
        try:
            data = await self._auth_api.login(phone, password)
        except TiffinException as exc:
            if not isinstance(exc, ServerRejectedException):
                logger.error("Login error: %s", exc.message)
            return AuthResult(False, exc.message, exc.category)

        user = data.get("user") or {}
        token = data.get("token")
        if not isinstance(user, dict) or not token:
            return AuthResult(False, "Unexpected response from server", "server_error")

        self._customer = Customer.from_api(user)
        self._token = str(token)
        await self._persist(user, self._token)
        return AuthResult(True)

    async def signup(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        password: str,
        role: str = "customer",
    ) -> AuthResult:
        try:
            await self._auth_api.register(
                name=name, email=email, phone=phone, password=password, role=role
            )
        except TiffinException as exc:
            if not isinstance(exc, ServerRejectedException):
                logger.error("Signup error: %s", exc.message)
            return AuthResult(False, exc.message, exc.category)
        return AuthResult(True)

    async def logout(self) -> None:
        self._clear()
        try:
            await self._store.remove(SESSION_USER_KEY)
            await self._store.remove(SESSION_TOKEN_KEY)
        except Exception as exc:
            logger.warning("Error logging out: %s", exc)

    async def _persist(self, user: dict, token: str) -> None:
        try:
            await self._store.set(SESSION_USER_KEY, json.dumps(user))
            await self._store.set(SESSION_TOKEN_KEY, token)
        except Exception as exc:
            logger.warning("Could not persist session; it will not survive restart: %s", exc)

    def _clear(self) -> None:
        self._customer = None
        self._token = None
