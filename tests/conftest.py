"""Shared pytest fixtures: an in-process fake backend and clients bound to it."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from tiffin.core.config import ApiConfig
from tiffin.domain.line_item import ItemType, LineItem, LineItemMeta
from tiffin.domain.order import Customer
from tiffin.integrations.api_client import ApiClient
from tiffin.integrations.orders_api import OrdersApi


@dataclass
class FakeBackend:
    """Mutable state behind the fake API; tests tweak it per case."""

    orders: dict[str, dict[str, Any]] = field(default_factory=dict)
    requests: list[dict[str, Any]] = field(default_factory=list)
    create_envelope: dict[str, Any] | None = None
    next_order_number: int = 1
    packages: list[dict[str, Any]] = field(default_factory=list)
    singles: list[dict[str, Any]] = field(default_factory=list)
    users: dict[str, dict[str, Any]] = field(default_factory=dict)

    def record(self, request: web.Request, body: Any = None) -> None:
        self.requests.append(
            {
                "method": request.method,
                "path": request.path,
                "query": dict(request.query),
                "headers": dict(request.headers),
                "body": body,
            }
        )

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/api/orders", self.create_order)
        app.router.add_get("/api/orders", self.list_orders)
        app.router.add_get("/api/orders/{order_id}", self.get_order)
        app.router.add_put("/api/orders/{order_id}/delivered", self.mark_delivered)
        app.router.add_get("/api/packages", self.list_packages)
        app.router.add_get("/api/packages/day/{day}", self.packages_for_day)
        app.router.add_get("/api/singles", self.list_singles)
        app.router.add_get("/api/singles/categories", self.categories)
        app.router.add_get("/api/singles/category/{category}", self.singles_by_category)
        app.router.add_post("/api/auth/login", self.login)
        app.router.add_post("/api/auth/register", self.register)
        app.router.add_get("/api/slow", self.slow)
        app.router.add_get("/api/boom", self.boom)
        app.router.add_get("/api/not-json", self.not_json)
        app.router.add_get("/api/echo-auth", self.echo_auth)
        return app

    async def create_order(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.record(request, body)
        if self.create_envelope is not None:
            return web.json_response(self.create_envelope)
        order_id = f"ord-{self.next_order_number}"
        self.next_order_number += 1
        self.orders[order_id] = {**body, "id": order_id, "status": "placed"}
        return web.json_response({"success": True, "data": {"id": order_id}})

    async def list_orders(self, request: web.Request) -> web.Response:
        self.record(request)
        phone = request.query.get("phone")
        rows = [o for o in self.orders.values() if o.get("customer", {}).get("phone") == phone]
        return web.json_response({"success": True, "data": {"orders": rows}})

    async def get_order(self, request: web.Request) -> web.Response:
        self.record(request)
        order = self.orders.get(request.match_info["order_id"])
        if order is None:
            return web.json_response({"success": False, "message": "Order not found"})
        return web.json_response({"success": True, "data": order})

    async def mark_delivered(self, request: web.Request) -> web.Response:
        self.record(request)
        order = self.orders.get(request.match_info["order_id"])
        if order is None:
            return web.json_response({"success": False, "message": "Order not found"}, status=404)
        order["status"] = "delivered"
        return web.json_response({"success": True, "data": {"id": order["id"]}})

    async def list_packages(self, request: web.Request) -> web.Response:
        self.record(request)
        return web.json_response({"success": True, "data": {"packages": self.packages}})

    async def packages_for_day(self, request: web.Request) -> web.Response:
        self.record(request)
        day = request.match_info["day"]
        meal_type = request.query.get("mealType")
        rows = [
            p
            for p in self.packages
            if p.get("day") == day and (meal_type is None or p.get("mealType") == meal_type)
        ]
        return web.json_response({"success": True, "data": {"packages": rows}})

    async def list_singles(self, request: web.Request) -> web.Response:
        self.record(request)
        return web.json_response({"success": True, "data": {"items": self.singles}})

    async def categories(self, request: web.Request) -> web.Response:
        self.record(request)
        names = sorted({s["category"] for s in self.singles if s.get("category")})
        return web.json_response({"success": True, "data": {"categories": names}})

    async def singles_by_category(self, request: web.Request) -> web.Response:
        self.record(request)
        category = request.match_info["category"]
        rows = [s for s in self.singles if s.get("category") == category]
        return web.json_response({"success": True, "data": {"items": rows}})

    async def login(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.record(request, body)
        user = self.users.get(body.get("phone"))
        if user is None or user["password"] != body.get("password"):
            return web.json_response({"success": False, "message": "Invalid credentials"})
        public = {k: v for k, v in user.items() if k != "password"}
        return web.json_response({"success": True, "data": {"user": public, "token": "tok-123"}})

    async def register(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.record(request, body)
        if body["phone"] in self.users:
            return web.json_response({"success": False, "message": "Phone already registered"})
        self.users[body["phone"]] = {**body, "id": f"user-{len(self.users) + 1}"}
        return web.json_response({"success": True, "data": {"id": self.users[body["phone"]]["id"]}})

    async def slow(self, request: web.Request) -> web.Response:
        await asyncio.sleep(1.0)
        return web.json_response({"success": True, "data": {}})

    async def boom(self, request: web.Request) -> web.Response:
        return web.json_response({"error": "kaboom"}, status=500)

    async def not_json(self, request: web.Request) -> web.Response:
        return web.Response(text="<html>maintenance</html>", content_type="text/html")

    async def echo_auth(self, request: web.Request) -> web.Response:
        return web.json_response(
            {"success": True, "data": {"authorization": request.headers.get("Authorization")}}
        )


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
async def api_client(backend: FakeBackend):
    """ApiClient bound to a running fake backend."""
    server = TestServer(backend.build_app())
    await server.start_server()
    client = ApiClient(ApiConfig(base_url=str(server.make_url("/api")), timeout=5))
    try:
        yield client
    finally:
        await client.close()
        await server.close()


@pytest.fixture()
def orders_api(api_client: ApiClient) -> OrdersApi:
    return OrdersApi(api_client)


@pytest.fixture()
def customer() -> Customer:
    return Customer(id="user-1", name="Asha", phone="9876543210", email="asha@example.com")


@pytest.fixture()
def package_item() -> LineItem:
    return LineItem(
        id="p1",
        type=ItemType.PACKAGE,
        name="Monday Lunch Thali",
        unit_price=150,
        meta=LineItemMeta(
            day="Monday",
            meal_type="lunch",
            package_contents=[
                LineItem(id="Dal", name="Dal"),
                LineItem(id="Rice", name="Rice"),
            ],
        ),
    )


@pytest.fixture()
def single_item() -> LineItem:
    return LineItem(
        id="s1",
        type=ItemType.SINGLE,
        name="Masala Chaas",
        unit_price=40,
        meta=LineItemMeta(category="Drinks"),
    )
