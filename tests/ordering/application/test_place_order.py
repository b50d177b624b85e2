"""Application tests for order placement via domain.process()."""

import json

import pytest
from ordering.order.order import Order, OrderStatus
from ordering.order.placement import PlaceOrder
from protean import current_domain
from shared.errors import IncompleteCheckout, InsufficientStock, NotFound

ADDRESS = {"address": "1 Main St", "city": "Springfield", "postal_code": "62701", "country": "US"}
MOUSE_LINE = {
    "product_id": "prod-mouse",
    "name": "Logitech G-Series Gaming Mouse",
    "unit_price": "25.00",
    "quantity": 3,
    "image": "/images/mouse.jpg",
}


def _place_order(**overrides):
    defaults = {
        "user_id": "user-001",
        "items": json.dumps([MOUSE_LINE]),
        "shipping_address": json.dumps(ADDRESS),
        "payment_method": "Stripe",
        "checkout_token": "tok-001",
    }
    defaults.update(overrides)
    command = PlaceOrder(**defaults)
    return current_domain.process(command, asynchronous=False)


def _all_orders():
    return current_domain.repository_for(Order)._dao.query.all().items


@pytest.mark.usefixtures("products")
class TestPlaceOrderFlow:
    def test_returns_id_of_persisted_order(self):
        order_id = _place_order()

        order = current_domain.repository_for(Order).get(order_id)
        assert str(order.id) == order_id
        assert str(order.user_id) == "user-001"
        assert order.status == OrderStatus.PENDING.value
        assert order.is_paid is False

    def test_stores_computed_pricing(self):
        order_id = _place_order()

        order = current_domain.repository_for(Order).get(order_id)
        assert order.pricing.items_price == 7500
        assert order.pricing.shipping_price == 1000
        assert order.pricing.tax_price == 750
        assert order.pricing.total_price == 9250

    def test_copies_cart_items(self):
        order_id = _place_order()

        order = current_domain.repository_for(Order).get(order_id)
        (item,) = order.items
        assert item.name == "Logitech G-Series Gaming Mouse"
        assert item.unit_price_cents == 2500
        assert item.quantity == 3

    def test_cart_price_is_kept_even_if_catalogue_changed(self, products):
        from decimal import Decimal

        from ordering.catalogue.port import ProductSnapshot

        products.put(
            ProductSnapshot(product_id="prod-mouse", name="Mouse v2", price=Decimal("99.00"), count_in_stock=7)
        )

        order_id = _place_order()

        order = current_domain.repository_for(Order).get(order_id)
        assert order.items[0].unit_price_cents == 2500
        assert order.items[0].name == "Logitech G-Series Gaming Mouse"

    def test_stores_order_placed_event(self):
        _place_order()

        messages = current_domain.event_store.store.read("ordering::order")
        placed = [
            m
            for m in messages
            if m.metadata and m.metadata.headers and m.metadata.headers.type == "Ordering.OrderPlaced.v1"
        ]
        assert len(placed) == 1


@pytest.mark.usefixtures("products")
class TestIdempotentPlacement:
    def test_same_token_returns_same_order(self):
        first = _place_order()
        second = _place_order()

        assert first == second
        assert len(_all_orders()) == 1

    def test_different_tokens_create_different_orders(self):
        first = _place_order(checkout_token="tok-a")
        second = _place_order(checkout_token="tok-b")

        assert first != second
        assert len(_all_orders()) == 2

    def test_same_token_from_another_customer_places_their_own_order(self):
        first = _place_order()
        second = _place_order(user_id="user-002")

        assert first != second
        owners = {str(order.user_id) for order in _all_orders()}
        assert owners == {"user-001", "user-002"}

    def test_missing_token_still_places_order(self):
        order_id = _place_order(checkout_token=None)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.checkout_token


@pytest.mark.usefixtures("products")
class TestIncompleteCheckout:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"items": json.dumps([])},
            {"items": None},
            {"shipping_address": None},
            {"payment_method": None},
        ],
    )
    def test_nothing_is_persisted(self, overrides):
        with pytest.raises(IncompleteCheckout):
            _place_order(**overrides)

        assert _all_orders() == []

    def test_message_names_missing_parts(self):
        with pytest.raises(IncompleteCheckout) as exc_info:
            _place_order(items=json.dumps([]), payment_method=None)

        assert "items" in exc_info.value.message
        assert "payment_method" in exc_info.value.message


@pytest.mark.usefixtures("products")
class TestStockAtPlacement:
    def test_quantity_beyond_stock(self):
        with pytest.raises(InsufficientStock):
            _place_order(items=json.dumps([{**MOUSE_LINE, "quantity": 8}]))

        assert _all_orders() == []

    def test_sold_out_product(self):
        line = {"product_id": "prod-echo", "name": "Echo Dot", "unit_price": "29.99", "quantity": 1}
        with pytest.raises(InsufficientStock):
            _place_order(items=json.dumps([line]))

    def test_unknown_product(self):
        line = {"product_id": "prod-ghost", "name": "Ghost", "unit_price": "1.00", "quantity": 1}
        with pytest.raises(NotFound):
            _place_order(items=json.dumps([line]))

        assert _all_orders() == []
