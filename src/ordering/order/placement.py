"""Order placement — command and handler.

A submitted cart becomes exactly one Order. The checkout token makes the
submission idempotent: replaying the same token for the same user returns
the order created the first time.
"""

import json
from uuid import uuid4

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.catalogue import get_catalogue
from ordering.domain import ordering
from ordering.order.order import Order
from shared.errors import IncompleteCheckout, InsufficientStock, NotFound

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text()  # JSON: list of cart item dicts
    shipping_address = Text()  # JSON: address dict
    payment_method = String(max_length=50)
    checkout_token = String(max_length=64)


def _load(value):
    if value is None or value == "":
        return None
    return json.loads(value) if isinstance(value, str) else value


def _verify_stock(items_data):
    """Check every line against the catalogue as it is right now."""
    catalogue = get_catalogue()
    for item in items_data:
        product = catalogue.get_product(str(item["product_id"]))
        if product is None:
            raise NotFound(f"Product {item['product_id']} does not exist", field="product_id")
        if item["quantity"] > product.count_in_stock:
            raise InsufficientStock(
                f"Only {product.count_in_stock} of {product.name} in stock, {item['quantity']} requested"
            )


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = _load(command.items) or []
        shipping_address = _load(command.shipping_address)

        missing = [
            name
            for name, value in (
                ("items", items_data),
                ("shipping_address", shipping_address),
                ("payment_method", command.payment_method),
            )
            if not value
        ]
        if missing:
            raise IncompleteCheckout(f"Checkout is missing: {', '.join(missing)}")

        repo = current_domain.repository_for(Order)
        checkout_token = command.checkout_token or uuid4().hex

        existing = repo._dao.query.filter(submission_key=f"{command.user_id}:{checkout_token}").all().items
        if existing:
            logger.info(
                "order_already_placed",
                order_id=str(existing[0].id),
                checkout_token=checkout_token,
            )
            return str(existing[0].id)

        _verify_stock(items_data)

        order = Order.place(
            user_id=command.user_id,
            checkout_token=checkout_token,
            items_data=items_data,
            shipping_address=shipping_address,
            payment_method=command.payment_method,
        )
        repo.add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            user_id=str(command.user_id),
            total_price=order.pricing.total_price,
        )
        return str(order.id)
