"""Catalogue lookup port.

The Ordering context reads product snapshots at cart-add and order-placement
time only. It never re-reads the catalogue after an order exists.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ProductSnapshot:
    """Product data as seen by the catalogue at one instant."""

    product_id: str
    name: str
    price: Decimal
    image: str = ""
    count_in_stock: int = 0


class CatalogueLookup(ABC):
    """Abstract catalogue interface."""

    @abstractmethod
    def get_product(self, product_id: str) -> ProductSnapshot | None:
        """Return the current snapshot of ``product_id``, or None if unknown."""
        ...
