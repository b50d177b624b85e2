"""Price derivation for carts and orders.

All arithmetic happens in integer minor units (cents). Decimal amounts are
only produced at the display boundary. Tax is the single place where
rounding happens (half-up, to the minor unit).

Defaults: free shipping above 100.00, otherwise a 10.00 flat fee; 10% tax.
"""

import os
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")

DEFAULT_FREE_SHIPPING_THRESHOLD = "100.00"
DEFAULT_FLAT_SHIPPING_FEE = "10.00"
DEFAULT_TAX_RATE = "0.10"
DEFAULT_CURRENCY = "USD"


def to_minor_units(amount) -> int:
    """Convert a decimal amount (``Decimal``, ``str`` or ``int``) to integer cents."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value / CENT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(cents: int) -> Decimal:
    """Convert integer cents to a Decimal with exactly two fraction digits."""
    return (Decimal(cents) * CENT).quantize(CENT)


@dataclass(frozen=True)
class PricingPolicy:
    free_shipping_threshold: int = to_minor_units(DEFAULT_FREE_SHIPPING_THRESHOLD)
    flat_shipping_fee: int = to_minor_units(DEFAULT_FLAT_SHIPPING_FEE)
    tax_rate: Decimal = Decimal(DEFAULT_TAX_RATE)
    currency: str = DEFAULT_CURRENCY

    @classmethod
    def from_env(cls) -> "PricingPolicy":
        return cls(
            free_shipping_threshold=to_minor_units(
                os.environ.get("FREE_SHIPPING_THRESHOLD", DEFAULT_FREE_SHIPPING_THRESHOLD)
            ),
            flat_shipping_fee=to_minor_units(os.environ.get("FLAT_SHIPPING_FEE", DEFAULT_FLAT_SHIPPING_FEE)),
            tax_rate=Decimal(os.environ.get("TAX_RATE", DEFAULT_TAX_RATE)),
            currency=os.environ.get("STORE_CURRENCY", DEFAULT_CURRENCY).upper(),
        )

    def shipping_fee_for(self, items_total: int, shipping_address=None) -> int:  # noqa: ARG002
        """Flat fee for every destination, waived strictly above the threshold."""
        if items_total > self.free_shipping_threshold:
            return 0
        return self.flat_shipping_fee

    def tax_for(self, items_total: int) -> int:
        return int((Decimal(items_total) * self.tax_rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class PriceBreakdown:
    """Derived totals, in minor units."""

    items_total: int
    shipping_fee: int
    tax: int
    grand_total: int
    currency: str = DEFAULT_CURRENCY

    @property
    def items_total_amount(self) -> Decimal:
        return from_minor_units(self.items_total)

    @property
    def shipping_fee_amount(self) -> Decimal:
        return from_minor_units(self.shipping_fee)

    @property
    def tax_amount(self) -> Decimal:
        return from_minor_units(self.tax)

    @property
    def grand_total_amount(self) -> Decimal:
        return from_minor_units(self.grand_total)

    def as_display(self) -> dict[str, str]:
        return {
            "items_total": str(self.items_total_amount),
            "shipping_fee": str(self.shipping_fee_amount),
            "tax": str(self.tax_amount),
            "grand_total": str(self.grand_total_amount),
            "currency": self.currency,
        }


_default_policy: PricingPolicy | None = None


def default_policy() -> PricingPolicy:
    """Policy built from the environment on first use."""
    global _default_policy
    if _default_policy is None:
        _default_policy = PricingPolicy.from_env()
    return _default_policy


def reset_default_policy() -> None:
    global _default_policy
    _default_policy = None


def line_total(unit_price, quantity: int) -> int:
    return to_minor_units(unit_price) * quantity


def derive(items, shipping_address=None, policy: PricingPolicy | None = None) -> PriceBreakdown:
    """Derive items total, shipping fee, tax and grand total from ``items``.

    ``items`` is any iterable of objects exposing ``unit_price`` (a decimal
    amount) and ``quantity``. Pure: same input, same output.
    """
    policy = policy or default_policy()

    items_total = sum(line_total(item.unit_price, item.quantity) for item in items)
    shipping_fee = policy.shipping_fee_for(items_total, shipping_address)
    tax = policy.tax_for(items_total)

    return PriceBreakdown(
        items_total=items_total,
        shipping_fee=shipping_fee,
        tax=tax,
        grand_total=items_total + shipping_fee + tax,
        currency=policy.currency,
    )
