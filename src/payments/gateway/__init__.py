"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- StripeGateway for production

Configure via the PAYMENT_GATEWAY environment variable.
"""

import os

from payments.gateway.port import PaymentGateway

DEFAULT_TIMEOUT_SECONDS = "10"

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the configured payment gateway (singleton). Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        adapter = os.environ.get("PAYMENT_GATEWAY", "fake")
        if adapter == "fake":
            from payments.gateway.fake_adapter import FakeGateway

            _current_gateway = FakeGateway()
        elif adapter == "stripe":
            from payments.gateway.stripe_adapter import StripeGateway

            _current_gateway = StripeGateway(
                api_key=os.environ["STRIPE_SECRET_KEY"],
                publishable_key=os.environ.get("STRIPE_PUBLISHABLE_KEY", ""),
                webhook_secret=os.environ.get("STRIPE_WEBHOOK_SECRET", ""),
                timeout=float(os.environ.get("PAYMENT_GATEWAY_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)),
            )
        else:
            raise ValueError(f"Unknown payment gateway: {adapter}")
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
