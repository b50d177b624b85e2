from decimal import Decimal

import pytest
from ordering.catalogue import set_catalogue
from ordering.catalogue.memory_adapter import InMemoryCatalogue
from ordering.catalogue.port import ProductSnapshot
from protean import current_domain


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def products():
    """A small in-memory catalogue installed as the active lookup."""
    catalogue = InMemoryCatalogue(
        [
            ProductSnapshot(
                product_id="prod-airpods",
                name="Airpods Wireless Bluetooth Headphones",
                price=Decimal("89.99"),
                image="/images/airpods.jpg",
                count_in_stock=10,
            ),
            ProductSnapshot(
                product_id="prod-mouse",
                name="Logitech G-Series Gaming Mouse",
                price=Decimal("25.00"),
                image="/images/mouse.jpg",
                count_in_stock=7,
            ),
            ProductSnapshot(
                product_id="prod-echo",
                name="Amazon Echo Dot 3rd Generation",
                price=Decimal("29.99"),
                image="/images/alexa.jpg",
                count_in_stock=0,
            ),
        ]
    )
    set_catalogue(catalogue)
    return catalogue
