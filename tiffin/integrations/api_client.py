"""
JSON API client for the Tiffin backend.

Every endpoint answers with an envelope::

    {"success": true, "data": {...}}
    {"success": false, "message": "..."}

Failures are mapped onto the exception taxonomy so the UI can tell a timeout
from an unreachable server from a server-side rejection.
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

import aiohttp

from tiffin.core.config import ApiConfig
from tiffin.core.exceptions import (
    ApiTimeoutException,
    HttpStatusException,
    InvalidResponseException,
    NetworkUnreachableException,
    ServerRejectedException,
    TransportException,
)
from tiffin.core.logging_config import logger

TokenProvider = Callable[[], Optional[str]]


def unwrap_envelope(body: Any) -> Any:
    """Return ``data`` from a success envelope, raise on ``success: false``."""
    if not isinstance(body, dict):
        raise InvalidResponseException("Unexpected response from server")
    if body.get("success") is False:
        raise ServerRejectedException(str(body.get("message") or "Request failed"))
    return body.get("data")


class ApiClient:
    """Thin aiohttp wrapper with a bounded timeout per request."""

    def __init__(
        self,
        config: ApiConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self._config = config or ApiConfig()
        self._base_url = self._config.base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._token_provider = token_provider

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_token_provider(self, provider: TokenProvider | None) -> None:
        self._token_provider = provider

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=dict(self._config.headers))
            self._owns_session = True
        return self._session

    def _build_headers(self, extra: dict[str, str] | None) -> dict[str, str]:
        headers: dict[str, str] = {}
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Perform a request and return the envelope's ``data``."""
        url = f"{self._base_url}{endpoint}"
        client_timeout = aiohttp.ClientTimeout(total=timeout or self._config.timeout)
        logger.debug("%s: %s", method, url)

        try:
            async with self._get_session().request(
                method,
                url,
                json=json,
                params=params,
                headers=self._build_headers(headers),
                timeout=client_timeout,
            ) as resp:
                if not 200 <= resp.status < 300:
                    raise HttpStatusException(resp.status)
                try:
                    body = await resp.json(content_type=None)
                except ValueError as exc:
                    raise InvalidResponseException("Unexpected response from server") from exc
        except asyncio.TimeoutError as exc:
            logger.warning("%s %s timed out after %ss", method, url, client_timeout.total)
            raise ApiTimeoutException() from exc
        except aiohttp.ClientConnectionError as exc:
            logger.warning("%s %s connection failed: %s", method, url, exc)
            raise NetworkUnreachableException() from exc
        except aiohttp.ClientError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportException(str(exc) or "Network error. Please try again.") from exc

        if isinstance(body, dict):
            logger.debug("Response: %s", "Success" if body.get("success") else "Failed")
        return unwrap_envelope(body)

    async def get(self, endpoint: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        data: Any,
        *,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self.request("POST", endpoint, json=data, headers=headers)

    async def put(self, endpoint: str, data: Any = None) -> Any:
        return await self.request("PUT", endpoint, json=data)
