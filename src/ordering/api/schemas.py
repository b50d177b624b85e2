"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Money leaves the API as decimal strings with two
fraction digits.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from ordering.cart.models import PaymentMethod
from ordering.order.order import Order, OrderStatus
from ordering.pricing import from_minor_units


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    country: str = Field(min_length=1)


class OrderItemSchema(BaseModel):
    product_id: str
    name: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    image: str = ""


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    items: list[OrderItemSchema] = Field(default_factory=list)
    shipping_address: AddressSchema | None = None
    payment_method: PaymentMethod | None = None
    checkout_token: str | None = Field(default=None, max_length=64)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {
                            "product_id": "prod-001",
                            "name": "Airpods Wireless Bluetooth Headphones",
                            "unit_price": "89.99",
                            "quantity": 1,
                            "image": "/images/airpods.jpg",
                        }
                    ],
                    "shipping_address": {
                        "address": "123 Main St",
                        "city": "Springfield",
                        "postal_code": "62701",
                        "country": "US",
                    },
                    "payment_method": "Stripe",
                    "checkout_token": "5f0e7c1b9a6d4e3f8b2a1c0d9e8f7a6b",
                }
            ]
        }
    }


class ConfirmPaymentRequest(BaseModel):
    amount_paid: int = Field(description="Amount captured by the processor, in minor units")
    payment_reference: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus
    tracking_number: str | None = None
    expected_status: OrderStatus | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "shipped",
                    "tracking_number": "1Z999AA10123456784",
                    "expected_status": "processing",
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class PaymentConfirmationResponse(BaseModel):
    order_id: str
    is_paid: bool
    already_confirmed: bool


class StatusResponse(BaseModel):
    status: str = "ok"


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    unit_price: str
    quantity: int
    image: str | None = None


class PricingResponse(BaseModel):
    items_price: str
    shipping_price: str
    tax_price: str
    total_price: str
    currency: str


class OrderResponse(BaseModel):
    order_id: str
    user_id: str
    items: list[OrderItemResponse]
    shipping_address: AddressSchema
    payment_method: str
    pricing: PricingResponse
    status: str
    is_paid: bool
    paid_at: datetime | None = None
    is_delivered: bool
    delivered_at: datetime | None = None
    tracking_number: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        pricing = order.pricing
        return cls(
            order_id=str(order.id),
            user_id=str(order.user_id),
            items=[
                OrderItemResponse(
                    product_id=str(item.product_id),
                    name=item.name,
                    unit_price=str(from_minor_units(item.unit_price_cents)),
                    quantity=item.quantity,
                    image=item.image,
                )
                for item in order.items
            ],
            shipping_address=AddressSchema(
                address=order.shipping_address.address,
                city=order.shipping_address.city,
                postal_code=order.shipping_address.postal_code,
                country=order.shipping_address.country,
            ),
            payment_method=order.payment_method,
            pricing=PricingResponse(
                items_price=str(from_minor_units(pricing.items_price)),
                shipping_price=str(from_minor_units(pricing.shipping_price)),
                tax_price=str(from_minor_units(pricing.tax_price)),
                total_price=str(from_minor_units(pricing.total_price)),
                currency=pricing.currency,
            ),
            status=order.status,
            is_paid=bool(order.is_paid),
            paid_at=order.paid_at,
            is_delivered=bool(order.is_delivered),
            delivered_at=order.delivered_at,
            tracking_number=order.tracking_number,
            created_at=order.created_at,
        )
