"""Wire the client core once at application start."""
from __future__ import annotations

from dataclasses import dataclass

from tiffin.application.orders.submit_order import OrderSource, SubmitOrderResult, submit_order
from tiffin.core.cart_storage import CartStore
from tiffin.core.config import Settings, load_settings
from tiffin.core.logging_config import setup_logging
from tiffin.integrations.api_client import ApiClient
from tiffin.integrations.auth_api import AuthApi
from tiffin.integrations.menu_api import MenuApi
from tiffin.integrations.orders_api import OrdersApi
from tiffin.services.auth_service import AuthService, SessionStore
from tiffin.services.order_tracker import OrderTracker
from tiffin.services.rider_service import RiderService


@dataclass
class AppContext:
    """Explicit store objects handed to the UI layer."""

    settings: Settings
    client: ApiClient
    cart: CartStore
    auth: AuthService
    menu: MenuApi
    orders: OrdersApi
    tracker: OrderTracker
    rider: RiderService

    async def checkout(
        self,
        source: OrderSource,
        payment_method_label: str,
        *,
        idempotency_key: str | None = None,
    ) -> SubmitOrderResult:
        return await submit_order(
            source,
            self.auth.customer,
            payment_method_label,
            orders_api=self.orders,
            cart=self.cart,
            pricing=self.settings.pricing,
            idempotency_key=idempotency_key,
        )

    async def close(self) -> None:
        await self.client.close()


def build_app_context(session_store: SessionStore, settings: Settings | None = None) -> AppContext:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    client = ApiClient(settings.api)
    orders = OrdersApi(client)
    auth = AuthService(AuthApi(client), session_store)
    client.set_token_provider(lambda: auth.token)

    return AppContext(
        settings=settings,
        client=client,
        cart=CartStore(settings.pricing),
        auth=auth,
        menu=MenuApi(client),
        orders=orders,
        tracker=OrderTracker(orders),
        rider=RiderService(orders),
    )
