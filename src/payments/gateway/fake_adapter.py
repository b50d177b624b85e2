"""Configurable fake payment gateway for development and testing.

This adapter simulates the processor without any external calls. It can be
configured at runtime to time out, and records every call it receives.
Like the real processor, a repeated idempotency key returns the intent
created the first time.
"""

from uuid import uuid4

from payments.gateway.port import PaymentGateway, PaymentIntent
from shared.errors import UpstreamTimeout


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, publishable_key: str = "pk_test_fake") -> None:
        self._publishable_key = publishable_key
        self.should_time_out: bool = False
        self.calls: list[dict] = []
        self._intents: dict[str, PaymentIntent] = {}

    def configure(self, should_time_out: bool = False) -> None:
        """Configure gateway behavior at runtime."""
        self.should_time_out = should_time_out

    @property
    def publishable_key(self) -> str:
        return self._publishable_key

    def create_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict,
        idempotency_key: str,
    ) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_intent",
                "amount": amount,
                "currency": currency,
                "metadata": dict(metadata),
                "idempotency_key": idempotency_key,
            }
        )

        if self.should_time_out:
            raise UpstreamTimeout("Payment processor did not respond in time")

        if idempotency_key not in self._intents:
            intent_id = f"pi_fake_{uuid4().hex[:16]}"
            self._intents[idempotency_key] = PaymentIntent(
                intent_id=intent_id,
                client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
                amount=amount,
                currency=currency,
                status="requires_payment_method",
            )
        return self._intents[idempotency_key]

    def verify_webhook_signature(self, payload: str, signature: str) -> bool:  # noqa: ARG002
        return signature == "test-signature"
