"""Versioned serialize/deserialize boundary for persisted cart state.

Every stored value is wrapped as ``{"version": 1, "data": ...}``. Anything
that does not parse, carries another version, or fails schema validation is
treated as unset. Legacy or corrupt client state therefore degrades to an
empty cart instead of breaking the page.
"""

import json
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as SchemaError

from ordering.cart.models import CartItem, PaymentMethod, ShippingAddress
from ordering.cart.storage import KeyValueStorage

logger = structlog.get_logger(__name__)

SCHEMA_VERSION = 1

CART_ITEMS_KEY = "cartItems"
SHIPPING_ADDRESS_KEY = "shippingAddress"
PAYMENT_METHOD_KEY = "paymentMethod"
CHECKOUT_TOKEN_KEY = "checkoutToken"

_ADAPTERS: dict[str, TypeAdapter] = {
    CART_ITEMS_KEY: TypeAdapter(list[CartItem]),
    SHIPPING_ADDRESS_KEY: TypeAdapter(ShippingAddress),
    PAYMENT_METHOD_KEY: TypeAdapter(PaymentMethod),
    CHECKOUT_TOKEN_KEY: TypeAdapter(str),
}


class StoredValue(BaseModel):
    version: int
    data: Any


@dataclass
class CartState:
    items: list[CartItem] = field(default_factory=list)
    shipping_address: ShippingAddress | None = None
    payment_method: PaymentMethod | None = None
    checkout_token: str | None = None


def _read(storage: KeyValueStorage, key: str):
    try:
        raw = storage.get(key)
    except UnicodeDecodeError:
        logger.warning("cart_state_discarded", key=key, reason="malformed")
        return None

    if raw is None:
        return None

    try:
        stored = StoredValue.model_validate_json(raw)
    except SchemaError:
        logger.warning("cart_state_discarded", key=key, reason="malformed")
        return None

    if stored.version != SCHEMA_VERSION:
        logger.warning("cart_state_discarded", key=key, reason="version", version=stored.version)
        return None

    try:
        return _ADAPTERS[key].validate_python(stored.data)
    except SchemaError:
        logger.warning("cart_state_discarded", key=key, reason="schema")
        return None


def _write(storage: KeyValueStorage, key: str, value) -> None:
    if value is None:
        storage.remove(key)
        return
    data = _ADAPTERS[key].dump_python(value, mode="json")
    storage.set(key, json.dumps({"version": SCHEMA_VERSION, "data": data}))


def load_state(storage: KeyValueStorage) -> CartState:
    return CartState(
        items=_read(storage, CART_ITEMS_KEY) or [],
        shipping_address=_read(storage, SHIPPING_ADDRESS_KEY),
        payment_method=_read(storage, PAYMENT_METHOD_KEY),
        checkout_token=_read(storage, CHECKOUT_TOKEN_KEY) or None,
    )


def save_state(storage: KeyValueStorage, state: CartState) -> None:
    _write(storage, CART_ITEMS_KEY, list(state.items))
    _write(storage, SHIPPING_ADDRESS_KEY, state.shipping_address)
    _write(storage, PAYMENT_METHOD_KEY, state.payment_method)
    _write(storage, CHECKOUT_TOKEN_KEY, state.checkout_token)
