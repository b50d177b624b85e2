"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any domain or application code.

Amounts always cross this boundary in minor units (cents).
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass

SUCCEEDED_EVENT = "payment_intent.succeeded"


@dataclass(frozen=True)
class PaymentIntent:
    """A payment intent as created at the processor."""

    intent_id: str
    client_secret: str
    amount: int
    currency: str
    status: str


@dataclass(frozen=True)
class PaymentNotification:
    """A verified processor callback about one payment intent."""

    intent_id: str
    order_id: str | None
    amount_received: int
    succeeded: bool


def notification_from_event(event: dict) -> PaymentNotification:
    """Translate a Stripe-shaped webhook event into a PaymentNotification."""
    intent = event.get("data", {}).get("object", {})
    metadata = intent.get("metadata") or {}
    return PaymentNotification(
        intent_id=intent.get("id", ""),
        order_id=metadata.get("order_id"),
        amount_received=int(intent.get("amount_received") or 0),
        succeeded=event.get("type") == SUCCEEDED_EVENT,
    )


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @property
    @abstractmethod
    def publishable_key(self) -> str:
        """Key the browser uses to talk to the processor. Not secret."""
        ...

    @abstractmethod
    def create_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict,
        idempotency_key: str,
    ) -> PaymentIntent:
        """Create a payment intent for ``amount`` minor units."""
        ...

    @abstractmethod
    def verify_webhook_signature(self, payload: str, signature: str) -> bool:
        """Verify that a webhook payload is authentically from the gateway."""
        ...

    def parse_webhook(self, payload: str) -> PaymentNotification:
        """Decode an already-verified webhook payload."""
        return notification_from_event(json.loads(payload))
