"""Client-side cart models.

These are the shapes persisted in client storage and submitted at checkout.
Prices are snapshots taken when the item was added; the cart never re-prices
itself from the catalogue.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from ordering.pricing import PriceBreakdown


class PaymentMethod(Enum):
    STRIPE = "Stripe"
    PAYPAL = "PayPal"


class ShippingAddress(BaseModel):
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    country: str = Field(min_length=1)

    model_config = {"frozen": True, "str_strip_whitespace": True}


class CartItem(BaseModel):
    product_id: str
    name: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    image: str = ""

    model_config = {"frozen": True}

    @property
    def item_id(self) -> str:
        return self.product_id


@dataclass(frozen=True)
class Cart:
    """Immutable snapshot of the cart, with pricing derived at snapshot time."""

    items: tuple[CartItem, ...]
    pricing: PriceBreakdown
    checkout_token: str
    shipping_address: ShippingAddress | None = None
    payment_method: PaymentMethod | None = None
    missing: tuple[str, ...] = field(default=())

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def is_complete(self) -> bool:
        return not self.missing

    def to_order_payload(self) -> dict:
        """Body of ``POST /orders``."""
        return {
            "items": [item.model_dump(mode="json") for item in self.items],
            "shipping_address": self.shipping_address.model_dump() if self.shipping_address else None,
            "payment_method": self.payment_method.value if self.payment_method else None,
            "checkout_token": self.checkout_token,
        }
