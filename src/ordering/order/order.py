"""Order aggregate (CQRS) — a placed order and its lifecycle.

An Order is created once from a submitted cart. Line items, the shipping
address and the price breakdown are copies taken at placement and never
change afterwards, whatever happens to the catalogue. Orders are never
deleted.

All money is held in integer minor units (cents).

State Machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED
    CANCELLED (from PENDING, PROCESSING, SHIPPED)

Payment is tracked separately from status (``is_paid``/``paid_at``): a paid
order stays PENDING until an admin starts processing it.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.cart.models import PaymentMethod
from ordering.domain import ordering
from ordering.order.events import OrderPaid, OrderPlaced, OrderStatusChanged
from ordering.pricing import PricingPolicy, derive, from_minor_units, to_minor_units
from shared.errors import AmountMismatch, InvalidTransition


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_PRE_SHIPMENT_STATES = {OrderStatus.PENDING, OrderStatus.PROCESSING}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, as captured at checkout."""

    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@ordering.value_object(part_of="Order")
class OrderPricing:
    """Price breakdown locked at placement, in minor units."""

    items_price = Integer(required=True, min_value=0)
    shipping_price = Integer(required=True, min_value=0)
    tax_price = Integer(required=True, min_value=0)
    total_price = Integer(required=True, min_value=0)
    currency = String(max_length=3, default="USD")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A copied cart line: product name, image and unit price as they were at placement."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    unit_price_cents = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    image = String(max_length=500)

    @property
    def unit_price(self):
        return from_minor_units(self.unit_price_cents)

    @property
    def line_total(self) -> int:
        return self.unit_price_cents * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    checkout_token = String(required=True, max_length=64)
    # One order per customer and checkout token
    submission_key = String(required=True, max_length=300, unique=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(choices=PaymentMethod)
    pricing = ValueObject(OrderPricing)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    is_paid = Boolean(default=False)
    paid_at = DateTime()
    payment_reference = String(max_length=255)
    is_delivered = Boolean(default=False)
    delivered_at = DateTime()
    tracking_number = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def total_must_reconcile(self):
        if self.pricing is None:
            return
        expected = self.pricing.items_price + self.pricing.shipping_price + self.pricing.tax_price
        if self.pricing.total_price != expected:
            raise ValidationError({"pricing": ["Total price must equal items + shipping + tax"]})

    @invariant.post
    def items_price_must_match_items(self):
        if self.pricing is None:
            return
        if self.pricing.items_price != sum(item.line_total for item in self.items):
            raise ValidationError({"pricing": ["Items price must equal the sum of line totals"]})

    @invariant.post
    def delivered_flag_follows_status(self):
        if bool(self.is_delivered) != (self.status == OrderStatus.DELIVERED.value):
            raise ValidationError({"is_delivered": ["Only delivered orders are marked as delivered"]})

    @invariant.post
    def no_tracking_number_before_shipment(self):
        if self.tracking_number and OrderStatus(self.status) in _PRE_SHIPMENT_STATES:
            raise ValidationError({"tracking_number": ["Tracking number is only recorded once shipped"]})

    @invariant.post
    def paid_at_follows_is_paid(self):
        if bool(self.is_paid) != (self.paid_at is not None):
            raise ValidationError({"paid_at": ["Payment time is recorded exactly when the order is paid"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        checkout_token,
        items_data,
        shipping_address,
        payment_method,
        policy: PricingPolicy | None = None,
    ):
        """Create a pending, unpaid order from a submitted cart.

        Args:
            user_id: The customer placing the order.
            checkout_token: The cart submission id; one order per token.
            items_data: List of dicts with product_id, name, unit_price
                        (decimal amount), quantity and image.
            shipping_address: Dict with address, city, postal_code, country.
            payment_method: One of the PaymentMethod values.
            policy: Pricing policy; the environment default when omitted.
        """
        now = datetime.now(UTC)

        items = [
            OrderItem(
                product_id=str(item["product_id"]),
                name=item["name"],
                unit_price_cents=to_minor_units(item["unit_price"]),
                quantity=item["quantity"],
                image=item.get("image") or "",
            )
            for item in items_data
        ]
        breakdown = derive(items, shipping_address, policy)

        order = cls(
            user_id=user_id,
            checkout_token=checkout_token,
            submission_key=f"{user_id}:{checkout_token}",
            items=items,
            shipping_address=ShippingAddress(**shipping_address),
            payment_method=PaymentMethod(payment_method).value,
            pricing=OrderPricing(
                items_price=breakdown.items_total,
                shipping_price=breakdown.shipping_fee,
                tax_price=breakdown.tax,
                total_price=breakdown.grand_total,
                currency=breakdown.currency,
            ),
            status=OrderStatus.PENDING.value,
            is_paid=False,
            is_delivered=False,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                checkout_token=checkout_token,
                item_count=len(items),
                items_price=breakdown.items_total,
                shipping_price=breakdown.shipping_fee,
                tax_price=breakdown.tax,
                total_price=breakdown.grand_total,
                currency=breakdown.currency,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransition(f"Cannot transition from {current.value} to {target_status.value}")

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def confirm_payment(self, amount, payment_reference=None) -> bool:
        """Record a processor-confirmed payment of ``amount`` minor units.

        Returns False when the order was already paid for the same amount
        (a repeated confirmation); nothing changes in that case, even if the
        order has been cancelled since.
        """
        if amount != self.pricing.total_price:
            raise AmountMismatch(f"Amount paid {amount} does not match order total {self.pricing.total_price}")

        if self.is_paid:
            return False

        if OrderStatus(self.status) == OrderStatus.CANCELLED:
            raise InvalidTransition("Cannot record payment for a cancelled order")

        now = datetime.now(UTC)
        with atomic_change(self):
            self.is_paid = True
            self.paid_at = now
            self.payment_reference = payment_reference
            self.updated_at = now

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                amount=amount,
                currency=self.pricing.currency,
                payment_reference=payment_reference,
                paid_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Fulfillment status
    # -------------------------------------------------------------------
    def change_status(self, target_status, tracking_number=None, expected_status=None):
        """Move the order to ``target_status``.

        ``expected_status``, when given, must equal the current status; this
        lets a caller act only on the state it last observed.
        """
        target = OrderStatus(target_status)
        current = OrderStatus(self.status)

        if expected_status is not None and OrderStatus(expected_status) != current:
            raise InvalidTransition(f"Order is {current.value}, not {OrderStatus(expected_status).value}")

        self._assert_can_transition(target)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = target.value
            if target == OrderStatus.SHIPPED and tracking_number:
                self.tracking_number = tracking_number
            if target == OrderStatus.DELIVERED:
                self.is_delivered = True
                self.delivered_at = now
            self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                tracking_number=self.tracking_number,
                changed_at=now,
            )
        )
