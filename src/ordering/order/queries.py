"""Read-side access to orders.

Orders are read straight from the aggregate repository; there are no
projections in this context.
"""

from protean.utils.globals import current_domain

from ordering.order.order import Order, OrderStatus
from shared.errors import Forbidden, NotFound
from shared.identity import Actor


def get_order(order_id: str, actor: Actor) -> Order:
    """Load an order visible to ``actor``: its owner, or any admin."""
    orders = current_domain.repository_for(Order)._dao.query.filter(id=order_id).all().items
    if not orders:
        raise NotFound(f"Order {order_id} does not exist", field="order_id")

    order = orders[0]
    if not actor.is_admin and str(order.user_id) != str(actor.user_id):
        raise Forbidden("Orders are only visible to their owner")
    return order


def list_orders_for_user(user_id: str) -> list[Order]:
    repo = current_domain.repository_for(Order)
    return repo._dao.query.filter(user_id=user_id).order_by("-created_at").all().items


def list_orders(actor: Actor, status: str | None = None) -> list[Order]:
    """All orders, newest first, optionally narrowed to one status. Admin only."""
    if not actor.is_admin:
        raise Forbidden("Only admins can list all orders")

    query = current_domain.repository_for(Order)._dao.query
    if status is not None:
        query = query.filter(status=OrderStatus(status).value)
    return query.order_by("-created_at").all().items
