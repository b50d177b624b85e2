"""CartStore — the client-side shopping cart.

The store is an explicit object handed to whatever needs the cart. State is
private and changes only through the operations below. Every mutation
recomputes pricing and persists the full cart state in one step
(``_commit``); the two never happen apart.
"""

from uuid import uuid4

import structlog

from ordering.cart.models import Cart, CartItem, PaymentMethod, ShippingAddress
from ordering.cart.persistence import CartState, load_state, save_state
from ordering.cart.storage import KeyValueStorage, MemoryStorage
from ordering.catalogue.port import ProductSnapshot
from ordering.pricing import PriceBreakdown, PricingPolicy, derive, from_minor_units, to_minor_units
from shared.errors import InvalidQuantity, NotFound

logger = structlog.get_logger(__name__)


def _new_checkout_token() -> str:
    return uuid4().hex


def _assert_valid_quantity(qty) -> None:
    if isinstance(qty, bool) or not isinstance(qty, int):
        raise InvalidQuantity(f"Quantity must be a whole number, got {qty!r}")
    if qty < 1:
        raise InvalidQuantity("Quantity must be at least 1; remove the item instead")


class CartStore:
    def __init__(self, storage: KeyValueStorage | None = None, policy: PricingPolicy | None = None) -> None:
        self._storage = storage if storage is not None else MemoryStorage()
        self._policy = policy

        state = load_state(self._storage)
        self._items: list[CartItem] = state.items
        self._shipping_address: ShippingAddress | None = state.shipping_address
        self._payment_method: PaymentMethod | None = state.payment_method
        self._checkout_token: str | None = state.checkout_token
        self._pricing: PriceBreakdown = derive(self._items, self._shipping_address, self._policy)

        if self._checkout_token is None:
            self._checkout_token = _new_checkout_token()
            self._commit()

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def pricing(self) -> PriceBreakdown:
        return self._pricing

    @property
    def items(self) -> tuple[CartItem, ...]:
        return tuple(self._items)

    def snapshot(self) -> Cart:
        missing = []
        if not self._items:
            missing.append("items")
        if self._shipping_address is None:
            missing.append("shipping_address")
        if self._payment_method is None:
            missing.append("payment_method")

        return Cart(
            items=tuple(self._items),
            pricing=self._pricing,
            checkout_token=self._checkout_token,
            shipping_address=self._shipping_address,
            payment_method=self._payment_method,
            missing=tuple(missing),
        )

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product: ProductSnapshot, qty: int = 1) -> None:
        """Add ``qty`` of ``product``, or increase the quantity if already present."""
        _assert_valid_quantity(qty)

        index = self._index_of(product.product_id)
        if index is not None:
            existing = self._items[index]
            self._items[index] = existing.model_copy(update={"quantity": existing.quantity + qty})
        else:
            if qty > product.count_in_stock:
                raise InvalidQuantity(f"Only {product.count_in_stock} of {product.name} in stock")
            self._items.append(
                CartItem(
                    product_id=str(product.product_id),
                    name=product.name,
                    unit_price=from_minor_units(to_minor_units(product.price)),
                    quantity=qty,
                    image=product.image,
                )
            )

        self._commit()

    def set_quantity(self, item_id: str, qty: int) -> None:
        _assert_valid_quantity(qty)
        index = self._require_index(item_id)
        self._items[index] = self._items[index].model_copy(update={"quantity": qty})
        self._commit()

    def remove_item(self, item_id: str) -> None:
        index = self._require_index(item_id)
        del self._items[index]
        self._commit()

    # -------------------------------------------------------------------
    # Checkout details
    # -------------------------------------------------------------------
    def set_shipping_address(self, address: ShippingAddress | dict) -> None:
        if not isinstance(address, ShippingAddress):
            address = ShippingAddress.model_validate(address)
        self._shipping_address = address
        self._commit()

    def set_payment_method(self, method: PaymentMethod | str) -> None:
        self._payment_method = PaymentMethod(method)
        self._commit()

    def clear(self) -> None:
        """Empty the cart after a successful order.

        The shipping address and payment method are kept for the next
        checkout. A fresh checkout token marks the next submission as new.
        """
        self._items = []
        self._checkout_token = _new_checkout_token()
        self._commit()

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _index_of(self, item_id) -> int | None:
        return next(
            (index for index, item in enumerate(self._items) if item.product_id == str(item_id)),
            None,
        )

    def _require_index(self, item_id) -> int:
        index = self._index_of(item_id)
        if index is None:
            raise NotFound(f"Item {item_id} is not in the cart", field="item_id")
        return index

    def _commit(self) -> None:
        self._pricing = derive(self._items, self._shipping_address, self._policy)
        save_state(
            self._storage,
            CartState(
                items=self._items,
                shipping_address=self._shipping_address,
                payment_method=self._payment_method,
                checkout_token=self._checkout_token,
            ),
        )
        logger.debug(
            "cart_committed",
            item_count=len(self._items),
            grand_total=str(self._pricing.grand_total_amount),
        )
