"""Payment intent origination.

The processor is told exactly what the order says it costs. Confirmation
happens between the client and the processor; nothing here polls for it.
"""

import structlog

from payments.gateway import get_gateway
from shared.errors import AmountInvalid, InvalidTransition

logger = structlog.get_logger(__name__)


def idempotency_key_for(order) -> str:
    return f"order-{order.id}"


def create_intent(order):
    """Create a payment intent for the full total of ``order``.

    Raises ``AmountInvalid`` for a non-positive total. Gateway timeouts
    surface as ``UpstreamTimeout`` and are left to the caller to retry.
    """
    total = order.pricing.total_price
    if total <= 0:
        raise AmountInvalid(f"Cannot collect a payment of {total}")
    if order.is_paid:
        raise InvalidTransition("Order is already paid")
    if order.status == "cancelled":
        raise InvalidTransition("Cannot collect payment for a cancelled order")

    intent = get_gateway().create_intent(
        amount=total,
        currency=order.pricing.currency.lower(),
        metadata={"user_id": str(order.user_id), "order_id": str(order.id)},
        idempotency_key=idempotency_key_for(order),
    )
    logger.info(
        "payment_intent_created",
        order_id=str(order.id),
        intent_id=intent.intent_id,
        amount=intent.amount,
    )
    return intent


def get_public_config() -> dict:
    return {"publishable_key": get_gateway().publishable_key}
