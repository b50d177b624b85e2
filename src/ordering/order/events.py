"""Domain events for the Order aggregate.

Events are versioned, immutable facts. The Order is stored as current state
(CQRS); events are kept as the audit trail of what happened to it.
"""

from protean.fields import DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A submitted cart became an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    checkout_token = String(required=True)
    item_count = Integer(required=True)
    items_price = Integer(required=True)  # minor units
    shipping_price = Integer(required=True)
    tax_price = Integer(required=True)
    total_price = Integer(required=True)
    currency = String(default="USD")
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """The processor confirmed payment for the full order total."""

    __version__ = 1

    order_id = Identifier(required=True)
    amount = Integer(required=True)  # minor units
    currency = String(default="USD")
    payment_reference = String()
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()
    changed_at = DateTime(required=True)
