import pytest
from payments.gateway import set_gateway
from payments.gateway.fake_adapter import FakeGateway
from protean import current_domain


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    """Payments has no domain of its own; intents and webhooks act on orders."""
    with ordering_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def gateway():
    fake = FakeGateway(publishable_key="pk_test_storefront")
    set_gateway(fake)
    return fake


@pytest.fixture()
def order():
    """A persisted, unpaid order for user-001 totalling 92.50 USD."""
    from decimal import Decimal

    from ordering.order.order import Order
    from ordering.pricing import PricingPolicy

    placed = Order.place(
        user_id="user-001",
        checkout_token="tok-pay-001",
        items_data=[{"product_id": "prod-mouse", "name": "Mouse", "unit_price": Decimal("25.00"), "quantity": 3}],
        shipping_address={"address": "1 Main St", "city": "Springfield", "postal_code": "62701", "country": "US"},
        payment_method="Stripe",
        policy=PricingPolicy(),
    )
    current_domain.repository_for(Order).add(placed)
    return current_domain.repository_for(Order).get(placed.id)
