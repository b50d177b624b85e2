"""Stripe payment gateway adapter.

Uses the stripe-python SDK with a per-request timeout and no automatic
network retries: a timed-out intent creation surfaces to the caller as a
retryable ``UpstreamTimeout`` and the caller decides whether to try again.
Retries are safe because every intent is created with an idempotency key.
"""

import stripe
import structlog

from payments.gateway.port import PaymentGateway, PaymentIntent
from shared.errors import UpstreamTimeout

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(
        self,
        api_key: str,
        publishable_key: str,
        webhook_secret: str,
        timeout: float = 10.0,
    ) -> None:
        self._publishable_key = publishable_key
        self.webhook_secret = webhook_secret
        self.client = stripe.StripeClient(
            api_key,
            http_client=stripe.RequestsClient(timeout=timeout),
            max_network_retries=0,
        )

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
        try:
            intent = self.client.payment_intents.create(
                params={
                    "amount": amount,
                    "currency": currency.lower(),
                    "metadata": metadata,
                },
                options={"idempotency_key": idempotency_key},
            )
        except stripe.APIConnectionError as exc:
            logger.warning("stripe_unreachable", idempotency_key=idempotency_key, error=str(exc))
            raise UpstreamTimeout("Payment processor did not respond in time") from exc

        return PaymentIntent(
            intent_id=intent.id,
            client_secret=intent.client_secret,
            amount=intent.amount,
            currency=intent.currency,
            status=intent.status,
        )

    def verify_webhook_signature(self, payload: str, signature: str) -> bool:
        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError):
            return False
        return True
