"""End-to-end checkout: a persisted cart submitted over HTTP."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.routes import order_router
from ordering.cart.checkout import OrderSubmitter, place_order
from ordering.cart.storage import MemoryStorage
from ordering.cart.store import CartStore
from ordering.order.order import Order
from protean import current_domain
from shared.api import register_error_handlers
from shared.errors import InsufficientStock


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(order_router)
    return TestClient(app)


@pytest.fixture()
def store(products):
    cart = CartStore(storage=MemoryStorage())
    cart.add_item(products.get_product("prod-mouse"), qty=3)
    cart.set_shipping_address(
        {"address": "1 Main St", "city": "Springfield", "postal_code": "62701", "country": "US"}
    )
    cart.set_payment_method("Stripe")
    return cart


class TestCheckoutFlow:
    def test_cart_becomes_order_and_is_cleared(self, client, store):
        token = store.snapshot().checkout_token

        order_id = place_order(store, OrderSubmitter(client, user_id="user-001"))

        order = current_domain.repository_for(Order).get(order_id)
        assert order.checkout_token == token
        assert order.pricing.total_price == 9250
        assert store.items == ()
        assert store.snapshot().checkout_token != token

    def test_server_price_matches_cart_price(self, client, store):
        cart_total = store.pricing.grand_total_amount

        order_id = place_order(store, OrderSubmitter(client, user_id="user-001"))

        detail = client.get(f"/orders/{order_id}", headers={"X-User-Id": "user-001"}).json()
        assert detail["pricing"]["total_price"] == str(cart_total)

    def test_rejected_order_keeps_cart(self, client, store, products):
        from dataclasses import replace

        products.put(replace(products.get_product("prod-mouse"), count_in_stock=1))

        with pytest.raises(InsufficientStock):
            place_order(store, OrderSubmitter(client, user_id="user-001"))

        assert len(store.items) == 1
        assert current_domain.repository_for(Order)._dao.query.all().items == []
