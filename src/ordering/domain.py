"""Ordering bounded context — Checkout and Order Lifecycle.

Handles order placement from a submitted cart, payment confirmation and the
fulfillment status machine. The client-side cart (``ordering.cart``) and the
price calculator (``ordering.pricing``) live here too, since both the client
and the server derive prices the same way.
"""

from protean.domain import Domain

ordering = Domain(name="ordering")
