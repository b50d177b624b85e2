"""Client-side checkout: submit the cart as an order, then clear it.

``place_order`` takes any ``submit`` callable so the cart never depends on
how the order reaches the server. ``OrderSubmitter`` is the HTTP variant,
posting to ``POST /orders`` through an httpx-compatible client.
"""

from collections.abc import Callable

import structlog

from ordering.cart.models import Cart
from ordering.cart.store import CartStore
from shared import errors
from shared.errors import CheckoutError, IncompleteCheckout

logger = structlog.get_logger(__name__)


def place_order(store: CartStore, submit: Callable[[Cart], str]) -> str:
    """Submit the current cart and clear it once the order exists.

    If ``submit`` raises, the cart is left untouched so the customer can
    retry; the checkout token is unchanged, so a retry after a lost response
    resolves to the same order.
    """
    cart = store.snapshot()
    if not cart.is_complete:
        raise IncompleteCheckout(f"Cart is missing: {', '.join(cart.missing)}")

    order_id = submit(cart)
    store.clear()

    logger.info("cart_checked_out", order_id=order_id, checkout_token=cart.checkout_token)
    return order_id


class OrderSubmitter:
    """Posts a cart to the orders endpoint on behalf of an authenticated user."""

    def __init__(self, client, user_id: str, role: str = "user", path: str = "/orders") -> None:
        self.client = client
        self.path = path
        self.headers = {"X-User-Id": user_id, "X-User-Role": role}

    def __call__(self, cart: Cart) -> str:
        response = self.client.post(self.path, json=cart.to_order_payload(), headers=self.headers)
        if response.status_code >= 400:
            raise self._error_from(response)
        return response.json()["order_id"]

    @staticmethod
    def _error_from(response) -> CheckoutError:
        body = response.json()
        error_class = getattr(errors, body.get("error", ""), None)
        if not (isinstance(error_class, type) and issubclass(error_class, CheckoutError)):
            error_class = CheckoutError

        messages = body.get("messages") or {}
        field, texts = next(iter(messages.items()), (None, [f"HTTP {response.status_code}"]))
        return error_class(texts[0] if texts else "", field=field)
