"""Read-only menu endpoints (weekly packages and a-la-carte singles)."""
from __future__ import annotations

from typing import Any
from urllib.parse import quote

from tiffin.domain.line_item import ItemType, LineItem, normalize_line_item
from tiffin.integrations.api_client import ApiClient


def _records(data: Any, key: str) -> list[dict[str, Any]]:
    if isinstance(data, dict):
        data = data.get(key) or []
    if not isinstance(data, list):
        return []
    return [row for row in data if isinstance(row, dict)]


def _record(data: Any, key: str) -> dict[str, Any] | None:
    if not isinstance(data, dict):
        return None
    nested = data.get(key)
    return nested if isinstance(nested, dict) else data


def package_to_line_item(record: dict[str, Any], quantity: int | None = None) -> LineItem:
    return normalize_line_item(record, ItemType.PACKAGE, quantity=quantity)


def single_to_line_item(record: dict[str, Any], quantity: int | None = None) -> LineItem:
    return normalize_line_item(record, ItemType.SINGLE, quantity=quantity)


def group_packages_by_day(packages: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Bucket packages under their ``day``; records without a day are dropped."""
    grouped: dict[str, list[dict[str, Any]]] = {}
    for pkg in packages:
        day = pkg.get("day")
        if day:
            grouped.setdefault(str(day), []).append(pkg)
    return grouped


class MenuApi:
    def __init__(self, client: ApiClient):
        self._client = client

    async def packages(self) -> list[dict[str, Any]]:
        return _records(await self._client.get("/packages"), "packages")

    async def packages_for_day(self, day: str, meal_type: str | None = None) -> list[dict[str, Any]]:
        params = {"mealType": meal_type} if meal_type else None
        data = await self._client.get(f"/packages/day/{quote(day)}", params=params)
        return _records(data, "packages")

    async def package(self, package_id: str) -> dict[str, Any] | None:
        return _record(await self._client.get(f"/packages/{package_id}"), "package")

    async def singles(self) -> list[dict[str, Any]]:
        return _records(await self._client.get("/singles"), "items")

    async def singles_by_category(self, category: str) -> list[dict[str, Any]]:
        data = await self._client.get(f"/singles/category/{quote(category, safe='')}")
        return _records(data, "items")

    async def categories(self) -> list[str]:
        data = await self._client.get("/singles/categories")
        if isinstance(data, dict):
            data = data.get("categories") or []
        return [str(name) for name in data] if isinstance(data, list) else []

    async def single(self, item_id: str) -> dict[str, Any] | None:
        return _record(await self._client.get(f"/singles/{item_id}"), "item")
